"""Keeps the constraints of a world split in independent islands and solves them."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from sphys.constraint_island import ConstraintIsland
from sphys.constraints import Constraint
from sphys.rigid_body import RigidBody, RigidBodyType, Status


class ConstraintManager:
    """Owns the constraint islands.

    Two constraints share an island when they share a non-static body.
    """

    def __init__(self, max_iterations: int, num_threads: int = 1) -> None:
        if num_threads < 1:
            raise ValueError("at least one thread is needed")
        self.max_iterations = int(max_iterations)
        self.num_threads = int(num_threads)
        self._islands: list[ConstraintIsland] = []
        self._lock = threading.Lock()

    @property
    def islands(self) -> tuple[ConstraintIsland, ...]:
        with self._lock:
            return tuple(self._islands)

    def _island_index(self, rigid_body: RigidBody) -> int | None:
        if rigid_body.properties.type is RigidBodyType.STATIC:
            return None
        return next(
            (i for i, island in enumerate(self._islands) if island.has_rigid_body(rigid_body)),
            None,
        )

    def add_constraint(self, constraint: Constraint) -> None:
        """Add the constraint, merging the islands it connects."""
        with self._lock:
            first, second = (self._island_index(body) for body in constraint.rigid_bodies)
            if first is not None and second is not None:
                target, other = min(first, second), max(first, second)
                if target != other:
                    self._islands[target].merge(self._islands[other])
                    del self._islands[other]
            elif first is not None:
                target = first
            elif second is not None:
                target = second
            else:
                self._islands.append(ConstraintIsland(self.max_iterations))
                target = len(self._islands) - 1
            self._islands[target].add_constraint(constraint)

    def has_constraints(self) -> bool:
        with self._lock:
            return bool(self._islands)

    def remove_constraint(self, constraint: Constraint) -> None:
        with self._lock:
            for index, island in enumerate(self._islands):
                if island.remove_constraint(constraint):
                    if not island.has_constraints():
                        self._islands[index] = self._islands[-1]
                        self._islands.pop()
                    break

    def remove_rigid_body(self, rigid_body: RigidBody) -> None:
        """Remove every constraint that uses the body."""
        with self._lock:
            self._islands = [
                island
                for island in self._islands
                if not (island.remove_rigid_body(rigid_body) and not island.has_constraints())
            ]

    def update(self, delta_time: float) -> None:
        """Regroup constraints of changed bodies, then solve every island."""
        with self._lock:
            changed = [
                constraint
                for island in self._islands
                for body in island.rigid_bodies
                if body.has_status(Status.PROPERTIES_CHANGED)
                for constraint in island.constraints
                if any(member is body for member in constraint.rigid_bodies)
            ]

        for constraint in changed:
            self.remove_constraint(constraint)
            self.add_constraint(constraint)

        with self._lock:
            islands = list(self._islands)
            if self.num_threads == 1:
                self._update_islands(islands, delta_time)
                return

            per_thread = len(islands) // self.num_threads
            chunks = [
                islands[
                    i * per_thread : (i + 1) * per_thread
                    if i < self.num_threads - 1
                    else len(islands)
                ]
                for i in range(self.num_threads)
            ]
            with ThreadPoolExecutor(max_workers=self.num_threads) as pool:
                futures = [pool.submit(self._update_islands, chunk, delta_time) for chunk in chunks]
                for future in futures:
                    future.result()

    @staticmethod
    def _update_islands(islands: list[ConstraintIsland], delta_time: float) -> None:
        for island in islands:
            island.update(delta_time)