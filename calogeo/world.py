"""The detector world: a grid of calorimeter modules, plus volume classification."""

from __future__ import annotations

from typing import Optional

from calogeo.builder import build_stack, total_thickness_mm
from calogeo.config import CalorimeterConfig
from calogeo.geometry import Box, LogVol, PhysVol, Transform
from calogeo.materials import RGBA, MaterialManager

MARGIN_MM = 50.0

_VIS_WIDE: RGBA = (0.0, 0.7, 0.7, 1.0)
_VIS_THIN: RGBA = (1.0, 0.55, 0.0, 1.0)
_VIS_FIBRE: RGBA = (0.1, 0.2, 1.0, 1.0)
_VIS_LEAD: RGBA = (0.5, 0.5, 0.5, 1.0)
_VIS_IRON: RGBA = (0.9, 0.0, 0.0, 1.0)
_VIS_AL_CASE: RGBA = (0.8, 0.8, 0.8, 0.15)


def build_world(
    cfg: CalorimeterConfig, materials: Optional[MaterialManager] = None
) -> PhysVol:
    """Build the root volume holding ``module_nx`` x ``module_ny`` modules.

    Modules are centred on the origin in X and Y; a module pitch of zero or
    less falls back to the plate size. Grid indices in names start at 1.
    """
    if materials is None:
        materials = MaterialManager()

    nx = max(1, cfg.module_nx)
    ny = max(1, cfg.module_ny)
    half_module = 0.5 * cfg.plate_xy_mm
    pitch_x = cfg.module_pitch_x_mm if cfg.module_pitch_x_mm > 0 else cfg.plate_xy_mm
    pitch_y = cfg.module_pitch_y_mm if cfg.module_pitch_y_mm > 0 else cfg.plate_xy_mm

    half_stack = 0.5 * total_thickness_mm(cfg)
    world_box = Box(
        0.5 * (nx - 1) * pitch_x + half_module + MARGIN_MM,
        0.5 * (ny - 1) * pitch_y + half_module + MARGIN_MM,
        half_stack + MARGIN_MM,
    )
    world = PhysVol(LogVol("GMRootLog", world_box, materials.air()))

    x0 = -0.5 * (nx - 1) * pitch_x
    y0 = -0.5 * (ny - 1) * pitch_y
    module_box = Box(half_module, half_module, half_stack + MARGIN_MM)

    for ix in range(nx):
        for iy in range(ny):
            mx, my = ix + 1, iy + 1
            module = world.add(
                PhysVol(LogVol("ModuleLog", module_box, materials.air())),
                f"MODULE_MX{mx}Y{my}",
                Transform.translate(x0 + ix * pitch_x, y0 + iy * pitch_y, 0.0),
            )
            build_stack(module, materials, cfg, mx, my)
    return world


def is_sensitive(logvol_name: str) -> bool:
    """Whether a logical volume records energy deposits (scintillators, fibres)."""
    name = logvol_name
    if "Wide" in name and "PVT" in name:
        return True
    if "Thin" in name and ("PS" in name or "Poly" in name):
        return True
    return "HPL" in name and ("Fiber" in name or "Fibre" in name)


def vis_colour_for(logvol_name: str) -> Optional[RGBA]:
    """Display colour for a logical volume, or ``None`` to keep the default."""
    name = logvol_name
    if "WidePVT" in name:
        return _VIS_WIDE
    if "ThinPS" in name:
        return _VIS_THIN
    if "Fibre" in name or "F" in name:
        return _VIS_FIBRE
    if "Lead" in name or "Pb" in name:
        return _VIS_LEAD
    if "Iron" in name or "Fe" in name:
        return _VIS_IRON
    if "HPL" in name and "Al" in name:
        return _VIS_AL_CASE
    return None