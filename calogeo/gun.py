"""Primary particle generation from the run configuration."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional

from calogeo.runconfig import RunConfig, Vector3

KNOWN_PARTICLES = frozenset(
    {
        "e-", "e+", "mu-", "mu+", "tau-", "tau+", "gamma", "opticalphoton",
        "pi+", "pi-", "pi0", "kaon+", "kaon-", "kaon0L", "kaon0S", "kaon0",
        "proton", "anti_proton", "neutron", "anti_neutron",
        "deuteron", "triton", "He3", "alpha", "geantino", "chargedgeantino",
        "nu_e", "anti_nu_e", "nu_mu", "anti_nu_mu",
    }
)


@dataclass(frozen=True)
class PrimaryVertex:
    """One primary particle: energy in MeV, position in mm, unit direction."""

    particle: str
    energy_mev: float
    position: Vector3
    direction: Vector3


def _unit(vector: Vector3) -> Vector3:
    norm = math.sqrt(sum(c * c for c in vector))
    if norm == 0:
        return (0.0, 0.0, 0.0)
    x, y, z = (c / norm for c in vector)
    return (x, y, z)


class ParticleGun:
    """Shoots one particle per event, optionally smeared in X and Y."""

    def __init__(self, cfg: RunConfig, rng: Optional[random.Random] = None) -> None:
        if cfg.particle not in KNOWN_PARTICLES:
            raise ValueError(f"Unknown particle: {cfg.particle}")
        self.cfg = cfg
        self.direction = _unit(cfg.direction)
        if rng is None:
            rng = random.Random(cfg.seed) if cfg.seed != 0 else random.Random()
        self._rng = rng

    def generate(self) -> PrimaryVertex:
        """Return the primary vertex of the next event."""
        x, y, z = self.cfg.position_mm
        sigma = self.cfg.sigma_xy_mm
        if sigma > 0:
            x += self._rng.gauss(0.0, sigma)
            y += self._rng.gauss(0.0, sigma)
        return PrimaryVertex(self.cfg.particle, self.cfg.energy_mev, (x, y, z), self.direction)