# sphwater

A small 2D smoothed-particle hydrodynamics (SPH) simulation of water held in a
box from -1 to 1 on each side. A rock can be dropped into the water, a boat can
be set floating on it, and sinusoidal waves can be driven across the surface.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Command line

```
sphwater
```

This builds a scene, steps it for a number of frames and prints a summary: the
frame count, the elapsed time and frame rate, the number of water particles,
the simulated time, and the centre of the rock and of the boat when they are
enabled.

Options:

- `--frames N` – number of frames to simulate (default 200, must not be negative).
- `--fps-max F` – frame-rate cap, between 10 and 250 (default 60).
- `--no-fps-limit` – run as fast as possible.
- `--timer-scale S` – time-step scale, between 0.01 and 4 (default 1).
- `--rock-mass M` – mass of the rock, between 0.5 and 100 times the particle mass.
- `--rock` – drop the rock.
- `--boat` – drop the boat.
- `--wave` – drive waves across the surface.
- `--no-color` – skip computing the density field image each frame.
- `--seed N` – seed for the random jitter, for repeatable runs.

Example:

```
sphwater --frames 100 --rock --boat --no-fps-limit --seed 1
```

## Library use

```python
import random
from sphwater.scene import Scene
from sphwater.simulation import SphParameters

scene = Scene(SphParameters(), random.Random(0))
scene.gui.display_rock = True
scene.drop_rock()
for _ in range(100):
    scene.step()
print(scene.rock_center())
```

Any object with a `random()` method returning a float in [0, 1) can serve as
the random source, for example `random.Random` or a NumPy `Generator`.

The main pieces:

- `sphwater.simulation` holds the physics: `Particle`, `SphParameters`,
  `BodyFlags`, the SPH kernels (`w_density`, `w_gradient_pressure`,
  `w_laplacian_viscosity`), `density_to_pressure`, the updates
  `update_density`, `update_pressure` and `update_force`, and `simulate`,
  which advances water, rock and boat by one time step in place.
- `sphwater.scene` holds `Scene`, which owns the particles, the rock and the
  boat and moves them frame by frame with `step()`; `rock_center()` and
  `boat_center()` give the bodies' mean positions, and `drop_rock()`,
  `drop_boat()` and `restart_wave()` set the reset flags for the next step.
  `GuiParameters` holds the on/off switches, and `update_field_color` turns
  the particles into a `size x size` RGB array showing where the water is;
  `Scene.step()` stores it in `Scene.field` when `display_color` is on.
- `sphwater.cli` holds `run`, the frame loop with optional frame-rate
  limiting, and `main`, the command entry point.

The default parameters are a kernel radius `h = 0.07`, a rest density
`rho0 = 1`, a particle mass `m = rho0 * h * h`, a viscosity `nu = 0.02` and a
stiffness `stiffness = 8`.

## What it does not do

There is no window, rendering or interactive controls. The scene's switches
are plain attributes to set from code or from the command-line options, and
the density field is computed as a NumPy array but not displayed or saved.