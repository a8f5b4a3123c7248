"""
particles.py
----------------------------------------------------------------------
The species pipeline.

Species are solved heaviest first (A descending, then Z descending), so
that every spallation parent of a species is done before the species'
secondary and grammage-at-source terms are tabulated. The tertiary
proton channel H1_ter is appended automatically whenever H1 is present,
and is solved right after H1.
----------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from errors import DependencyError
from params import Params
from particle import Particle
from pid import H1, H1_ter, PID

logger = logging.getLogger(__name__)


class Particles:
    """
    Ordered collection of species.

    Parameters
    ----------
    particles : iterable of Particle
        Species to propagate, in any order; PIDs must be unique.
    with_tertiary : bool
        Add H1_ter (efficiency 0) when H1 is present and H1_ter is not.
    """

    def __init__(self, particles: Iterable[Particle] = (), with_tertiary: bool = True):
        items = list(particles)
        pids = [p.pid for p in items]
        if len(set(pids)) != len(pids):
            raise ValueError(f"duplicate species in {[str(p) for p in pids]}")
        if with_tertiary and H1 in pids and H1_ter not in pids:
            items.append(Particle(H1_ter, 0.0))
        self._particles: List[Particle] = sorted(items, key=lambda p: p.pid.sort_key)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._particles)

    def __len__(self) -> int:
        return len(self._particles)

    def __getitem__(self, index: int) -> Particle:
        return self._particles[index]

    @property
    def pids(self) -> List[PID]:
        return [p.pid for p in self._particles]

    def find(self, pid: PID) -> Optional[Particle]:
        return next((p for p in self._particles if p.pid == pid), None)

    # ------------------------------------------------------------------
    def build(self, particle: Particle, params: Params) -> None:
        """Build the models of one species from the species solved so far."""
        particle.build_grammage(params)
        if particle.pid.is_tertiary:
            particle.build_tertiary_source(self)
        else:
            particle.build_primary_source(params)
            particle.build_secondary_source(self, params)
            particle.build_grammage_at_source(self, params)
        particle.build_interactions(params)

    def run(self, T: Sequence[float], params: Params) -> bool:
        """
        Build and solve every species in order.

        A species whose dependencies are not done, or whose solve fails,
        is logged and left not done. Returns True when all species are done.
        """
        for particle in self._particles:
            particle.clear()
        for particle in self._particles:
            try:
                self.build(particle, params)
            except DependencyError as exc:
                logger.error("%s skipped: %s", particle.pid, exc)
                continue
            particle.run(T)
        failed = [p.pid.name for p in self._particles if not p.done]
        if failed:
            logger.warning("species not solved: %s", ", ".join(failed))
        return not failed

    def dump(self, directory: str | Path = ".") -> List[Path]:
        return [p.dump(directory) for p in self._particles if p.done]

    def clear(self) -> None:
        for particle in self._particles:
            particle.clear()
