"""Scene state for the water tank: particles, rigid bodies, GUI toggles and the density field."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from sphwater.simulation import BodyFlags, Particle, SphParameters, UniformSource, simulate

FIELD_SIZE = 30
FIELD_SPREAD = 0.1
FIELD_WEIGHT = 0.25

INITIAL_SPACING = 0.7
FRAME_DT = 0.005
FRAME_TIME_STEP = 0.01
DEFAULT_ROCK_MASS = 0.005

ROCK_POINTS = 20
ROCK_RADIUS = 0.1
ROCK_START_HEIGHT = 1.0
BOAT_COLUMNS = 5
BOAT_ROWS = 2
BOAT_COLUMN_SPACING = 0.04
BOAT_ROW_SPACING = 0.025

BACKGROUND_COLOR = (0.8, 0.8, 0.8)


@dataclass
class GuiParameters:
    """Display and body toggles normally driven by the GUI."""

    display_rock: bool = False
    display_boat: bool = False
    display_wave: bool = False
    display_color: bool = True
    display_particles: bool = True
    display_radius: bool = False


def update_field_color(particles: Sequence[Particle], size: int = FIELD_SIZE) -> np.ndarray:
    """Return a ``size x size`` RGB image shading the fluid volume under the particles.

    The image is indexed ``[x, y]`` with ``y`` flipped so that row 0 is the top of the tank.
    """
    if size < 2:
        raise ValueError(f"field size must be at least 2, got {size}")
    coords = 2.0 * (np.arange(size) / (size - 1.0) - 0.5)
    density = np.zeros((size, size))
    if particles:
        positions = np.array([q.p for q in particles], dtype=float).reshape(-1, 3)
        dx = coords[:, None, None] - positions[None, None, :, 0]
        dy = coords[None, :, None] - positions[None, None, :, 1]
        r2 = (dx**2 + dy**2 + positions[None, None, :, 2] ** 2) / FIELD_SPREAD**2
        density = FIELD_WEIGHT * np.exp(-r2).sum(axis=2)
    shade = np.clip(1.0 - density, 0.0, 1.0)[:, ::-1]
    field = np.ones((size, size, 3))
    field[..., 0] = shade
    field[..., 1] = shade
    return field


class Scene:
    """Water particles plus an optional rock and boat, advanced frame by frame."""

    def __init__(self, parameters: SphParameters | None = None, rng: UniformSource | None = None) -> None:
        self.parameters = parameters if parameters is not None else SphParameters()
        self.rng = rng if rng is not None else random.Random()
        self.gui = GuiParameters()
        self.timer_scale = 1.0
        self.t = 0.0
        self.background_color = np.array(BACKGROUND_COLOR)
        self.field = np.ones((FIELD_SIZE, FIELD_SIZE, 3))
        self.particles: list[Particle] = []
        self.rock_particles: list[Particle] = []
        self.boat_particles: list[Particle] = []
        self.flags = BodyFlags()
        self.initialize_sph()

    @property
    def rock_mass(self) -> float:
        return self.flags.rock_mass

    @rock_mass.setter
    def rock_mass(self, value: float) -> None:
        self.flags.rock_mass = value

    def initialize_sph(self) -> None:
        """Fill the right half of the tank with water and rebuild the rock and boat."""
        h = self.parameters.h
        step = INITIAL_SPACING * h
        self.particles = []
        x = h
        while x < 1.0 - h:
            y = -1.0 + h
            while y < 1.0 - h:
                px = x + h / 8.0 * self.rng.random()
                py = y + h / 8.0 * self.rng.random()
                self.particles.append(Particle(p=(px, py, 0.0)))
                y += step
            x += step

        self.flags = BodyFlags(
            rock_mass=DEFAULT_ROCK_MASS,
            boat_alive=False,
            reset_boat=True,
            rock_alive=False,
            reset_rock=True,
            wave_alive=True,
            reset_wave=True,
        )

        increment = 2.0 * math.pi / ROCK_POINTS
        self.rock_particles = [
            Particle(
                p=(ROCK_RADIUS * math.cos(i * increment), ROCK_START_HEIGHT + ROCK_RADIUS * math.sin(i * increment), 0.0),
                rho=1.0,
                pressure=1.0,
            )
            for i in range(ROCK_POINTS)
        ]

        self.boat_particles = [
            Particle(p=(BOAT_COLUMN_SPACING * i, BOAT_ROW_SPACING * j, 0.0), rho=1.0, pressure=1.0)
            for i in range(BOAT_COLUMNS)
            for j in range(BOAT_ROWS)
        ]

    def step(self) -> float:
        """Advance the simulation by one frame and return the time step used."""
        dt = FRAME_DT * self.timer_scale
        self.t += FRAME_TIME_STEP
        self.flags.rock_alive = self.gui.display_rock
        self.flags.boat_alive = self.gui.display_boat
        self.flags.wave_alive = self.gui.display_wave
        simulate(
            self.particles,
            self.rock_particles,
            self.boat_particles,
            self.flags,
            self.t,
            dt,
            self.parameters,
            self.rng,
        )
        self.flags.reset_rock = False
        self.flags.reset_boat = False
        self.flags.reset_wave = False
        if self.gui.display_color:
            self.field = update_field_color(self.particles, FIELD_SIZE)
        return dt

    def rock_center(self) -> np.ndarray:
        """Mean position of the rock particles."""
        return np.mean([q.p for q in self.rock_particles], axis=0)

    def boat_center(self) -> np.ndarray:
        """Mean position of the boat particles."""
        return np.mean([q.p for q in self.boat_particles], axis=0)

    def drop_rock(self) -> None:
        """Respawn the rock above the tank on the next step."""
        self.flags.reset_rock = True

    def drop_boat(self) -> None:
        """Respawn the boat above the tank on the next step."""
        self.flags.reset_boat = True

    def restart_wave(self) -> None:
        """Restart the wave generator on the next step."""
        self.flags.reset_wave = True