"""Rigid bodies, forces, constraints solved in islands, and collision helpers."""

__version__ = "0.1.0"

__all__ = [
    "graph",
    "rigid_body",
    "forces",
    "simplex",
    "triangle_collider",
    "constraints",
    "constraint_island",
    "constraint_manager",
]