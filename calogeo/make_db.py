"""Writes the calorimeter geometry to an SQLite file plus display colours as JSON."""

from __future__ import annotations

import sqlite3
import sys
from collections import deque
from pathlib import Path
from typing import Optional, Sequence, Union

from calogeo.builder import build_stack
from calogeo.config import read_config_file
from calogeo.geometry import (
    BarAxis,
    Box,
    LogVol,
    PhysVol,
    Transform,
    Tube,
    build_pvt_bar_layer,
)
from calogeo.materials import Element, Material, MaterialManager

WORLD_SIZE_MM = 3000.0
VIS_MATERIALS = ("Lead", "Iron", "PVT", "Polystyrene", "Aluminium", "Air")
VIS_JSON_NAME = "gmexMatVisAttributes.local.json"

_PLATE_XY_MM = 2160.0
_PLATE_Z_MM = 3.0
_BAR_WIDTH_MM = 60.0
_BAR_Z_MM = 10.0

_SCHEMA = """
DROP TABLE IF EXISTS placements;
DROP TABLE IF EXISTS physvols;
DROP TABLE IF EXISTS logvols;
DROP TABLE IF EXISTS shapes;
DROP TABLE IF EXISTS material_components;
DROP TABLE IF EXISTS materials;
DROP TABLE IF EXISTS elements;
CREATE TABLE elements (
    id INTEGER PRIMARY KEY, name TEXT, symbol TEXT, z REAL, molar_mass REAL
);
CREATE TABLE materials (id INTEGER PRIMARY KEY, name TEXT, density REAL);
CREATE TABLE material_components (
    material_id INTEGER, element_id INTEGER, weight REAL
);
CREATE TABLE shapes (
    id INTEGER PRIMARY KEY, type TEXT, p1 REAL, p2 REAL, p3 REAL
);
CREATE TABLE logvols (
    id INTEGER PRIMARY KEY, name TEXT, shape_id INTEGER, material_id INTEGER
);
CREATE TABLE physvols (id INTEGER PRIMARY KEY, logvol_id INTEGER);
CREATE TABLE placements (
    id INTEGER PRIMARY KEY, parent_id INTEGER, child_id INTEGER, name TEXT,
    r11 REAL, r12 REAL, r13 REAL, r21 REAL, r22 REAL, r23 REAL,
    r31 REAL, r32 REAL, r33 REAL, tx REAL, ty REAL, tz REAL
);
"""


def create_world(materials: MaterialManager) -> PhysVol:
    """An air-filled 3 m cube to hold the detector."""
    half = 0.5 * WORLD_SIZE_MM
    return PhysVol(LogVol("WorldLog", Box(half, half, half), materials.air()))


def build_lead_plate(world: PhysVol, materials: MaterialManager) -> PhysVol:
    """Place a 2160 x 2160 x 3 mm lead plate at the origin with a bar layer on top.

    Returns the plate volume.
    """
    half_plate = 0.5 * _PLATE_XY_MM
    plate_log = LogVol(
        "LeadPlateLog", Box(half_plate, half_plate, 0.5 * _PLATE_Z_MM), materials.lead()
    )
    plate = world.add(PhysVol(plate_log), "LeadPlate", Transform.translate(0.0, 0.0, 0.0))

    bar_log = LogVol(
        "PVTBarLog",
        Box(0.5 * _BAR_WIDTH_MM, half_plate, 0.5 * _BAR_Z_MM),
        materials.pvt(),
    )
    # Bars rest directly on the plate's upper face.
    z_bar_center = 0.5 * _PLATE_Z_MM + 0.5 * _BAR_Z_MM
    build_pvt_bar_layer(world, bar_log, z_bar_center, 0)
    return plate


def _format_number(value: float) -> str:
    return f"{value:f}"


def material_vis_json(materials: MaterialManager) -> str:
    """Display attributes of the detector materials as JSON text."""
    entries = []
    for name in VIS_MATERIALS:
        r, g, b, a = materials.rgba_for(name)
        diffuse = ",".join(_format_number(c) for c in (r, g, b))
        entries.append(
            f'    {{ "name": "{name}", "diffuse": [{diffuse}], '
            f'"opacity": {_format_number(a)} }}'
        )
    return "{\n" + '  "materials": [\n' + ",\n".join(entries) + "\n  ]\n}\n"


def write_material_vis_json(path: Union[str, Path], materials: MaterialManager) -> None:
    """Write :func:`material_vis_json` to ``path``."""
    Path(path).write_text(material_vis_json(materials))


class _GeometryWriter:
    """Assigns row ids to shared objects and inserts them once."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._elements: dict[Element, int] = {}
        self._materials: dict[int, int] = {}
        self._shapes: dict[object, int] = {}
        self._logvols: dict[int, int] = {}

    def _element(self, element: Element) -> int:
        if element not in self._elements:
            cursor = self._conn.execute(
                "INSERT INTO elements (name, symbol, z, molar_mass) VALUES (?, ?, ?, ?)",
                (element.name, element.symbol, element.z, element.molar_mass),
            )
            self._elements[element] = cursor.lastrowid
        return self._elements[element]

    def _material(self, material: Optional[Material]) -> Optional[int]:
        if material is None:
            return None
        key = id(material)
        if key not in self._materials:
            cursor = self._conn.execute(
                "INSERT INTO materials (name, density) VALUES (?, ?)",
                (material.name, material.density),
            )
            material_id = cursor.lastrowid
            self._materials[key] = material_id
            self._conn.executemany(
                "INSERT INTO material_components VALUES (?, ?, ?)",
                [
                    (material_id, self._element(element), weight)
                    for element, weight in material.components
                ],
            )
        return self._materials[key]

    def _shape(self, shape: object) -> int:
        if shape not in self._shapes:
            if isinstance(shape, Box):
                row = ("Box", shape.half_x, shape.half_y, shape.half_z)
            elif isinstance(shape, Tube):
                row = ("Tube", shape.rmin, shape.rmax, shape.half_z)
            else:
                raise TypeError(f"Unsupported shape: {shape!r}")
            cursor = self._conn.execute(
                "INSERT INTO shapes (type, p1, p2, p3) VALUES (?, ?, ?, ?)", row
            )
            self._shapes[shape] = cursor.lastrowid
        return self._shapes[shape]

    def _logvol(self, logvol: LogVol) -> int:
        key = id(logvol)
        if key not in self._logvols:
            cursor = self._conn.execute(
                "INSERT INTO logvols (name, shape_id, material_id) VALUES (?, ?, ?)",
                (logvol.name, self._shape(logvol.shape), self._material(logvol.material)),
            )
            self._logvols[key] = cursor.lastrowid
        return self._logvols[key]

    def _physvol(self, volume: PhysVol) -> int:
        cursor = self._conn.execute(
            "INSERT INTO physvols (logvol_id) VALUES (?)", (self._logvol(volume.logvol),)
        )
        return cursor.lastrowid

    def write(self, world: PhysVol) -> int:
        count = 1
        pending = deque([(self._physvol(world), world)])
        while pending:
            parent_id, parent = pending.popleft()
            for name, transform, child in parent.children:
                child_id = self._physvol(child)
                count += 1
                rotation = [value for row in transform.rotation for value in row]
                self._conn.execute(
                    "INSERT INTO placements (parent_id, child_id, name, "
                    "r11, r12, r13, r21, r22, r23, r31, r32, r33, tx, ty, tz) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (parent_id, child_id, name, *rotation, *transform.translation),
                )
                pending.append((child_id, child))
        return count


def write_geometry_db(world: PhysVol, path: Union[str, Path]) -> int:
    """Write the volume tree under ``world`` to an SQLite file.

    Existing geometry tables in the file are replaced. Returns the number of
    physical volumes written; raises ``OSError`` if the file cannot be opened.
    """
    try:
        conn = sqlite3.connect(str(path))
    except sqlite3.Error as exc:
        raise OSError(f"could not open DB file: {path}") from exc
    try:
        with conn:
            conn.executescript(_SCHEMA)
            return _GeometryWriter(conn).write(world)
    except sqlite3.OperationalError as exc:
        raise OSError(f"could not open DB file: {path}") from exc
    finally:
        conn.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build the calorimeter from a config file and write it to a geometry DB.

    Arguments: ``[output.db [calo.cfg]]``.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    out_file = args[0] if len(args) > 0 else "geometry.db"
    cfg_file = args[1] if len(args) > 1 else "../calo.cfg"

    cfg = read_config_file(cfg_file)
    materials = MaterialManager()
    world = create_world(materials)
    build_stack(world, materials, cfg)

    try:
        write_geometry_db(world, out_file)
    except OSError:
        print(f"ERROR: could not open DB file: {out_file}", file=sys.stderr)
        return 1

    write_material_vis_json(VIS_JSON_NAME, materials)

    print(f"Wrote GeoModel geometry to: {out_file}")
    print(f"Now run: gmex {out_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())