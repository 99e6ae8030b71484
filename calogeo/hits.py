"""Hit aggregation per volume and the per-event hit table."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Sequence

from calogeo.geometry import Vector3


class VolumeType(enum.IntEnum):
    WIDE_H = 1
    WIDE_V = 2
    THIN_H = 3
    THIN_V = 4
    FIBRE_H = 5
    FIBRE_V = 6


class SectionType(enum.IntEnum):
    ECAL = 0
    HCAL = 1


HEXANT_FALLBACK = 11


@dataclass(frozen=True)
class ParsedID:
    """Identifiers decoded from a volume name; -1 where a field is absent."""

    type: int = -1
    section: int = -1
    layer: int = -1
    vol: int = -1
    hcal: int = -1
    hpl_sublayer: int = -1
    hexant: int = HEXANT_FALLBACK


_TYPE_MARKERS = (
    ("WidePVT_H_", VolumeType.WIDE_H),
    ("WidePVT_V_", VolumeType.WIDE_V),
    ("ThinPS_H_", VolumeType.THIN_H),
    ("ThinPS_V_", VolumeType.THIN_V),
    ("HPL_H", VolumeType.FIBRE_H),
    ("HPL_V", VolumeType.FIBRE_V),
)

_LAYER = re.compile(r"_SL([0-9]+)")
_BAR = re.compile(r"_B([0-9]+)")
_FIBRE = re.compile(r"_F([0-9]+)")
_SUBLAYER = re.compile(r"_S([0-9]+)")
_MODULE = re.compile(r"_MX([0-9]+)Y([0-9]+)\Z")


def _search_int(pattern: re.Pattern, name: str, default: int) -> int:
    match = pattern.search(name)
    return int(match.group(1)) if match else default


def parse_volume_name(name: str) -> ParsedID:
    """Decode type, section, layer, volume index and module from a volume name."""
    section = SectionType.HCAL if name.startswith("Hcal_") else SectionType.ECAL
    vtype = next((int(code) for marker, code in _TYPE_MARKERS if marker in name), -1)

    if "ECAL_" in name:
        hcal = 0
    elif "HCAL_" in name:
        hcal = 1
    else:
        hcal = -1

    vol = _search_int(_FIBRE, name, _search_int(_BAR, name, -1))

    module = _MODULE.search(name)
    hexant = 10 * int(module.group(1)) + int(module.group(2)) if module else HEXANT_FALLBACK

    return ParsedID(
        type=vtype,
        section=int(section),
        layer=_search_int(_LAYER, name, -1),
        vol=vol,
        hcal=hcal,
        hpl_sublayer=_search_int(_SUBLAYER, name, -1),
        hexant=hexant,
    )


_COLUMN_NAMES = {
    "edep": "edep",
    "x": "x",
    "y": "y",
    "z": "z",
    "type": "type",
    "section": "section",
    "layer": "layer",
    "vol": "vol",
    "hcal": "hcal",
    "hpl_subsection": "hpl_sublayer",
    "hexant": "hexant",
}


@dataclass
class EventStore:
    """Column-wise hit table of the current event."""

    edep: list[float] = field(default_factory=list)
    x: list[float] = field(default_factory=list)
    y: list[float] = field(default_factory=list)
    z: list[float] = field(default_factory=list)
    type: list[int] = field(default_factory=list)
    section: list[int] = field(default_factory=list)
    layer: list[int] = field(default_factory=list)
    vol: list[int] = field(default_factory=list)
    hcal: list[int] = field(default_factory=list)
    hpl_sublayer: list[int] = field(default_factory=list)
    hexant: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.edep)

    def clear(self) -> None:
        """Drop all hits, as at the start of an event."""
        for attribute in _COLUMN_NAMES.values():
            getattr(self, attribute).clear()

    def add_hit(self, parsed: ParsedID, edep: float, pos: Sequence[float]) -> None:
        """Append one hit: energy in MeV, position in mm."""
        x, y, z = pos
        self.edep.append(edep)
        self.x.append(x)
        self.y.append(y)
        self.z.append(z)
        self.type.append(parsed.type)
        self.section.append(parsed.section)
        self.layer.append(parsed.layer)
        self.vol.append(parsed.vol)
        self.hcal.append(parsed.hcal)
        self.hpl_sublayer.append(parsed.hpl_sublayer)
        self.hexant.append(parsed.hexant)

    def columns(self) -> dict[str, list]:
        """The event row: output column name to a copy of its values."""
        return {column: list(getattr(self, attribute)) for column, attribute in _COLUMN_NAMES.items()}


@dataclass
class _Aggregate:
    edep: float = 0.0
    weighted: Vector3 = (0.0, 0.0, 0.0)


class HitAggregator:
    """Sums energy deposits per volume name over one event."""

    def __init__(self) -> None:
        self._volumes: dict[str, _Aggregate] = {}

    def clear(self) -> None:
        self._volumes.clear()

    def process_step(
        self, volume_name: str, edep: float, pre: Sequence[float], post: Sequence[float]
    ) -> bool:
        """Record a step at the midpoint of ``pre`` and ``post``.

        Returns ``False`` when the step deposited nothing or has no volume.
        """
        if edep <= 0 or not volume_name:
            return False
        mid = tuple(0.5 * (a + b) for a, b in zip(pre, post))
        agg = self._volumes.setdefault(volume_name, _Aggregate())
        agg.edep += edep
        wx, wy, wz = agg.weighted
        agg.weighted = (wx + edep * mid[0], wy + edep * mid[1], wz + edep * mid[2])
        return True

    def end_of_event(self, store: EventStore) -> None:
        """Add one hit per volume at its energy-weighted mean position."""
        for name, agg in self._volumes.items():
            if agg.edep <= 0:
                continue
            pos = tuple(w / agg.edep for w in agg.weighted)
            store.add_hit(parse_volume_name(name), agg.edep, pos)