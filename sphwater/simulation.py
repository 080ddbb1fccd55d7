"""Smoothed-particle hydrodynamics of a 2D water tank with a falling rock and a floating boat."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Protocol, Sequence

import numpy as np

KERNEL_PI = 3.14159
GRAVITY = np.array([0.0, -9.81, 0.0])
DAMPING = 0.005
MAX_SPEED = 10.0
WALL_JITTER = 1e-3

WAVE_AMPLITUDE = 0.01
WAVE_LENGTH = 0.3
WAVE_SPEED = 2.0
WAVE_MIN_HEIGHT = -0.5

ROCK_RADIUS = 0.1
ROCK_SPAWN_HEIGHT = 1.0
BOAT_SPACING = 0.04
BOAT_LOW_ROW = 0.950
BOAT_HIGH_ROW = 0.975
SPAWN_SWING = 0.8


class UniformSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


def _vec(value) -> np.ndarray:
    return np.array(value, dtype=float).reshape(3)


@dataclass(eq=False)
class Particle:
    """A single SPH particle: position, velocity, force, density and pressure."""

    p: np.ndarray = field(default_factory=lambda: np.zeros(3))
    v: np.ndarray = field(default_factory=lambda: np.zeros(3))
    f: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rho: float = 0.0
    pressure: float = 0.0
    stopped: bool = False

    def __post_init__(self) -> None:
        self.p = _vec(self.p)
        self.v = _vec(self.v)
        self.f = _vec(self.f)


@dataclass
class SphParameters:
    """Physical parameters of the simulation; ``m`` defaults to ``rho0 * h * h``."""

    h: float = 0.07
    rho0: float = 1.0
    m: float | None = None
    nu: float = 0.02
    stiffness: float = 8.0

    def __post_init__(self) -> None:
        if self.m is None:
            self.m = self.rho0 * self.h * self.h


@dataclass
class BodyFlags:
    """State of the rigid bodies and of the wave generator for one step."""

    rock_mass: float = 0.005
    boat_alive: bool = False
    reset_boat: bool = False
    rock_alive: bool = False
    reset_rock: bool = False
    wave_alive: bool = False
    reset_wave: bool = False


def density_to_pressure(rho: float, rho0: float, stiffness: float) -> float:
    """Linear equation of state."""
    return stiffness * (rho - rho0)


def _viscosity_kernel(r, h):
    return 45.0 / (KERNEL_PI * h**6) * (h - r)


def _spiky_factor(r, h):
    return -45.0 / (KERNEL_PI * h**6) * (h - r) ** 2


def _density_kernel(r, h):
    return 315.0 / (64.0 * KERNEL_PI * h**9) * (h * h - r * r) ** 3


def _distance(p_i, p_j) -> tuple[np.ndarray, float]:
    diff = _vec(p_i) - _vec(p_j)
    return diff, float(np.linalg.norm(diff))


def w_laplacian_viscosity(p_i, p_j, h: float) -> float:
    """Laplacian of the viscosity kernel."""
    _, r = _distance(p_i, p_j)
    return float(_viscosity_kernel(r, h))


def w_gradient_pressure(p_i, p_j, h: float) -> np.ndarray:
    """Gradient of the spiky kernel; the points must lie within ``h`` of each other."""
    diff, r = _distance(p_i, p_j)
    if r > h:
        raise ValueError(f"distance {r} exceeds kernel radius {h}")
    with np.errstate(divide="ignore", invalid="ignore"):
        return _spiky_factor(r, h) * (diff / r)


def w_density(p_i, p_j, h: float) -> float:
    """Poly6 density kernel; the points must lie within ``h`` of each other."""
    _, r = _distance(p_i, p_j)
    if r > h:
        raise ValueError(f"distance {r} exceeds kernel radius {h}")
    return float(_density_kernel(r, h))


def _stack(particles: Sequence[Particle], attr: str) -> np.ndarray:
    return np.array([getattr(q, attr) for q in particles], dtype=float).reshape(-1, 3)


def _scalars(particles: Sequence[Particle], attr: str) -> np.ndarray:
    return np.array([getattr(q, attr) for q in particles], dtype=float)


def _pairwise(a: np.ndarray, b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    diff = a[:, None, :] - b[None, :, :]
    return diff, np.linalg.norm(diff, axis=2)


def update_density(particles: Sequence[Particle], h: float, m: float) -> None:
    """Set each particle's density from the neighbours within ``h`` (itself included)."""
    if not particles:
        return
    positions = _stack(particles, "p")
    _, r = _pairwise(positions, positions)
    contributions = np.where(r <= h, m * _density_kernel(r, h), 0.0)
    for particle, rho in zip(particles, contributions.sum(axis=1)):
        particle.rho = float(rho)


def update_pressure(particles: Sequence[Particle], rho0: float, stiffness: float) -> None:
    """Convert each particle's density to pressure."""
    for particle in particles:
        particle.pressure = density_to_pressure(particle.rho, rho0, stiffness)


def _fluid_forces(
    targets_p, targets_v, targets_pr, targets_rho, exclude, fluid_p, fluid_v, fluid_pr, fluid_rho, h, m, nu
) -> np.ndarray:
    diff, r = _pairwise(targets_p, fluid_p)
    mask = (r <= h) & ~exclude
    coeff = m * (fluid_pr[None, :] + targets_pr[:, None]) / (2.0 * fluid_rho[None, :])
    grad = _spiky_factor(r, h)[..., None] * diff / r[..., None]
    pressure = np.where(mask[..., None], coeff[..., None] * grad, 0.0).sum(axis=1)
    relative_v = (fluid_v[None, :, :] - targets_v[:, None, :]) / fluid_rho[None, :, None]
    viscous = np.where(mask[..., None], m * relative_v * _viscosity_kernel(r, h)[..., None], 0.0).sum(axis=1)
    pressure *= (-m / targets_rho)[:, None]
    viscous *= m * nu
    return pressure + viscous


def update_force(
    particles: Sequence[Particle],
    rock_particles: Sequence[Particle],
    boat_particles: Sequence[Particle],
    flags: BodyFlags,
    h: float,
    m: float,
    nu: float,
) -> None:
    """Compute gravity, pressure and viscosity forces, plus the rock's push on the water."""
    gravity = m * GRAVITY
    for particle in particles:
        particle.f = gravity.copy()
    if flags.rock_alive:
        for particle in rock_particles:
            particle.f = gravity.copy()
    if flags.boat_alive:
        for particle in boat_particles:
            particle.f = gravity.copy()

    n = len(particles)
    if n == 0:
        return
    positions = _stack(particles, "p")
    velocities = _stack(particles, "v")
    pressures = _scalars(particles, "pressure")
    densities = _scalars(particles, "rho")

    with np.errstate(divide="ignore", invalid="ignore"):
        forces = _fluid_forces(
            positions, velocities, pressures, densities, np.eye(n, dtype=bool),
            positions, velocities, pressures, densities, h, m, nu,
        )

        if flags.rock_alive and rock_particles:
            rock_p = _stack(rock_particles, "p")
            rock_v = _stack(rock_particles, "v")
            _, r = _pairwise(positions, rock_p)
            speeds = np.linalg.norm(rock_v, axis=1)
            push = (speeds[:, None] * rock_v * flags.rock_mass)[None, :, :] / r[..., None]
            forces += np.where((r <= h)[..., None], push, 0.0).sum(axis=1)

        for particle, force in zip(particles, forces):
            particle.f = particle.f + force

        if flags.boat_alive and boat_particles:
            nb = len(boat_particles)
            same_index = np.arange(nb)[:, None] == np.arange(n)[None, :]
            boat_forces = _fluid_forces(
                _stack(boat_particles, "p"), _stack(boat_particles, "v"),
                _scalars(boat_particles, "pressure"), _scalars(boat_particles, "rho"), same_index,
                positions, velocities, pressures, densities, h, m, nu,
            )
            for particle, force in zip(boat_particles, boat_forces):
                particle.f = particle.f + force


def _apply_wave(particles: Sequence[Particle], t: float) -> None:
    wave_number = 2.0 * math.pi / WAVE_LENGTH
    omega = wave_number * WAVE_SPEED
    for particle in particles:
        if particle.p[1] > WAVE_MIN_HEIGHT:
            phase = wave_number * particle.p[0] - omega * t
            particle.p[1] += WAVE_AMPLITUDE * math.sin(phase)


def _respawn_rock(rock_particles: Sequence[Particle], t: float) -> None:
    if not rock_particles:
        return
    increment = 2.0 * math.pi / len(rock_particles)
    center_x = SPAWN_SWING * math.sin(t)
    for i, particle in enumerate(rock_particles):
        angle = i * increment
        particle.p = np.array([
            center_x + ROCK_RADIUS * math.sin(angle),
            ROCK_SPAWN_HEIGHT + ROCK_RADIUS * math.cos(angle),
            0.0,
        ])
        particle.v = np.zeros(3)
        particle.stopped = False


def _respawn_boat(boat_particles: Sequence[Particle], t: float) -> None:
    half = len(boat_particles) // 2
    offset = SPAWN_SWING * math.sin(t)
    for row, height in enumerate((BOAT_LOW_ROW, BOAT_HIGH_ROW)):
        for i in range(half):
            particle = boat_particles[row * half + i]
            particle.p = np.array([offset + BOAT_SPACING * i, height, 0.0])
            particle.v = np.zeros(3)


def _rock_floor_collision(rock_particles: Sequence[Particle]) -> None:
    for particle in rock_particles:
        p, v = particle.p, particle.v
        if p[1] <= -1:
            p[1] = -1.0
            v[1] = 0.0
            for other in rock_particles:
                other.v[1] = 0.0
                other.stopped = True
        if p[0] < -1 or p[0] > 1:
            p[0] = -1.0 if p[0] < -1 else 1.0
            v[0] = 0.0
            for other in rock_particles:
                other.v[0] = 0.0


def _rigid_velocity(bodies: Sequence[Particle], dt: float, m: float) -> np.ndarray:
    total = sum(((1 - DAMPING) * q.v + dt * q.f / m for q in bodies), np.zeros(3))
    return total / len(bodies)


def _water_walls(particles: Sequence[Particle], rng: UniformSource) -> None:
    for particle in particles:
        p, v = particle.p, particle.v
        if p[1] < -1:
            p[1] = -1 + WALL_JITTER * rng.random()
            v[1] *= -0.5
        if p[0] < -1:
            p[0] = -1 + WALL_JITTER * rng.random()
            v[0] *= -0.5
        if p[0] > 1:
            p[0] = 1 - WALL_JITTER * rng.random()
            v[0] *= -0.5


def _boat_walls(boat_particles: Sequence[Particle], rng: UniformSource) -> None:
    for particle in boat_particles:
        p, v = particle.p, particle.v
        if p[1] < -1:
            p[1] = -1 + WALL_JITTER * rng.random()
            v[1] *= -0.5
        if p[0] < -1 or p[0] > 1:
            for other in boat_particles:
                other.v[0] *= -0.5
            break


def simulate(
    particles: Sequence[Particle],
    rock_particles: Sequence[Particle],
    boat_particles: Sequence[Particle],
    flags: BodyFlags,
    t: float,
    dt: float,
    parameters: SphParameters,
    rng: UniformSource | None = None,
) -> None:
    """Advance water, rock and boat particles by one time step, in place."""
    if rng is None:
        rng = random.Random()
    m = parameters.m

    if flags.wave_alive:
        _apply_wave(particles, t)
    if flags.rock_alive and flags.reset_rock:
        _respawn_rock(rock_particles, t)
    if flags.boat_alive and flags.reset_boat:
        _respawn_boat(boat_particles, t)

    update_density(particles, parameters.h, m)
    update_pressure(particles, parameters.rho0, parameters.stiffness)
    update_force(particles, rock_particles, boat_particles, flags, parameters.h, m, parameters.nu)

    if flags.rock_alive:
        _rock_floor_collision(rock_particles)

    for particle in particles:
        v = (1 - DAMPING) * particle.v + dt * particle.f / m
        speed = float(np.linalg.norm(v))
        if speed > MAX_SPEED:
            v *= MAX_SPEED / speed
        particle.v = v
        particle.p = particle.p + dt * v

    if flags.rock_alive and rock_particles:
        rock_v = _rigid_velocity(rock_particles, dt, m)
        for particle in rock_particles:
            if not particle.stopped:
                particle.v = rock_v.copy()
                particle.p = particle.p + dt * rock_v

    if flags.boat_alive and boat_particles:
        boat_v = _rigid_velocity(boat_particles, dt, m)
        for particle in boat_particles:
            particle.v = boat_v.copy()
            particle.p = particle.p + dt * boat_v

    _water_walls(particles, rng)
    _boat_walls(boat_particles, rng)