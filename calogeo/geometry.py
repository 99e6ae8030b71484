"""A small volume tree: shapes, logical and physical volumes, placements."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Sequence

from calogeo.materials import Material

Vector3 = tuple[float, float, float]
Matrix3 = tuple[Vector3, Vector3, Vector3]

_IDENTITY: Matrix3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


class BarAxis(enum.Enum):
    """Axis along which a row of bars is laid out."""

    ALONG_X = "along_x"
    ALONG_Y = "along_y"


@dataclass(frozen=True)
class Box:
    """Box given by its half lengths in millimetres."""

    half_x: float
    half_y: float
    half_z: float


@dataclass(frozen=True)
class Tube:
    """Cylinder along local Z, radii and half length in millimetres."""

    rmin: float
    rmax: float
    half_z: float


@dataclass(eq=False)
class LogVol:
    """A named shape filled with a material."""

    name: str
    shape: object
    material: Optional[Material]


@dataclass(frozen=True)
class Transform:
    """Rigid transform: rotation followed by translation (millimetres)."""

    rotation: Matrix3 = _IDENTITY
    translation: Vector3 = (0.0, 0.0, 0.0)

    @staticmethod
    def translate(x: float, y: float, z: float) -> Transform:
        return Transform(translation=(float(x), float(y), float(z)))

    @staticmethod
    def rotate_x(angle_deg: float) -> Transform:
        c, s = math.cos(math.radians(angle_deg)), math.sin(math.radians(angle_deg))
        return Transform(rotation=((1.0, 0.0, 0.0), (0.0, c, -s), (0.0, s, c)))

    @staticmethod
    def rotate_y(angle_deg: float) -> Transform:
        c, s = math.cos(math.radians(angle_deg)), math.sin(math.radians(angle_deg))
        return Transform(rotation=((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c)))

    def apply(self, point: Sequence[float]) -> Vector3:
        """Map a point from the local frame into the parent frame."""
        x, y, z = (
            sum(r * p for r, p in zip(row, point)) + t
            for row, t in zip(self.rotation, self.translation)
        )
        return (x, y, z)

    def __matmul__(self, other: Transform) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        columns = list(zip(*other.rotation))
        a, b, c = (
            tuple(sum(r * q for r, q in zip(row, column)) for column in columns)
            for row in self.rotation
        )
        return Transform(rotation=(a, b, c), translation=self.apply(other.translation))


class _Placement(NamedTuple):
    name: Optional[str]
    transform: Transform
    volume: PhysVol


class PhysVol:
    """A placed instance of a logical volume holding named, positioned children."""

    def __init__(self, logvol: LogVol) -> None:
        self.logvol = logvol
        self.children: list[_Placement] = []

    def __repr__(self) -> str:
        return f"PhysVol({self.logvol.name!r}, children={len(self.children)})"

    def add(
        self,
        child: PhysVol,
        name: Optional[str] = None,
        transform: Optional[Transform] = None,
    ) -> PhysVol:
        """Place ``child`` inside this volume and return it."""
        self.children.append(_Placement(name, transform or Transform(), child))
        return child

    def walk(self) -> Iterator[tuple[Optional[str], Transform, PhysVol]]:
        """Yield every descendant depth-first with its transform in this frame."""
        for placement in self.children:
            yield placement.name, placement.transform, placement.volume
            for name, inner, volume in placement.volume.walk():
                yield name, placement.transform @ inner, volume


def place_bars(
    mother: PhysVol,
    bar_log: LogVol,
    pitch_mm: float,
    n_bars: int,
    z_center_mm: float,
    tag_prefix: str,
    layer_index: int,
    axis: BarAxis,
    name_suffix: str = "",
) -> list[PhysVol]:
    """Place ``n_bars`` bars centred on the origin with the given pitch."""
    start = -0.5 * (n_bars - 1) * pitch_mm
    bars = []
    for i in range(n_bars):
        offset = start + i * pitch_mm
        x, y = (offset, 0.0) if axis is BarAxis.ALONG_X else (0.0, offset)
        bars.append(
            mother.add(
                PhysVol(bar_log),
                f"{tag_prefix}_L{layer_index}_B{i}{name_suffix}",
                Transform.translate(x, y, z_center_mm),
            )
        )
    return bars


def build_pvt_bar_layer(
    mother: PhysVol, bar_log: LogVol, z_center_mm: float, layer_index: int
) -> list[PhysVol]:
    """Place 36 bars of 60 mm pitch along X, as on a 2160 mm plate."""
    return place_bars(mother, bar_log, 60.0, 36, z_center_mm, "PVT", layer_index, BarAxis.ALONG_X)