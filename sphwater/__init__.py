"""2D SPH water simulation with a rock, a boat and surface waves."""

__version__ = "0.1.0"
__all__ = ["cli", "scene", "simulation"]