"""Hexagonal-pack fibre layers: an aluminium casing filled with fibres."""

from __future__ import annotations

from calogeo.geometry import Box, LogVol, PhysVol, Transform, Tube
from calogeo.materials import Material

FIBRES_PER_SUBLAYER = 1800
SUBLAYERS = 3


def build_hp_layer(
    mother: PhysVol,
    aluminum: Material,
    fiber: Material,
    layering: str,
    z_center_mm: float,
    layer_index: int,
    casing_xy_mm: float,
    casing_z_mm: float,
    fiber_diam_mm: float,
    fibres_along_y: bool = True,
    name_suffix: str = "",
) -> PhysVol:
    """Place one fibre layer centred at ``z_center_mm`` and return its casing.

    The casing holds three sublayers of tightly stacked fibres; the middle one
    is shifted by half a fibre diameter along the packing direction.
    """
    casing_log = LogVol(
        "HPL_CasingLog",
        Box(0.5 * casing_xy_mm, 0.5 * casing_xy_mm, 0.5 * casing_z_mm),
        aluminum,
    )
    casing = mother.add(
        PhysVol(casing_log),
        f"{layering}_HPL_Casing{name_suffix}",
        Transform.translate(0.0, 0.0, z_center_mm),
    )

    fiber_log = LogVol("HPL_FiberLog", Tube(0.0, 0.5 * fiber_diam_mm, 0.5 * casing_xy_mm), fiber)
    # Turn the tube's Z axis onto Y (fibres along Y) or onto X (fibres along X).
    axis_rotation = Transform.rotate_x(90.0) if fibres_along_y else Transform.rotate_y(-90.0)
    orientation = "V_" if fibres_along_y else "H_"

    pitch = fiber_diam_mm
    start = -0.5 * (FIBRES_PER_SUBLAYER - 1) * pitch
    shifts = (0.0, 0.5 * pitch, 0.0)
    depths = (-pitch, 0.0, pitch)

    for sub, (shift, z) in enumerate(zip(shifts, depths)):
        for i in range(FIBRES_PER_SUBLAYER):
            packing = start + i * pitch + shift
            x, y = (packing, 0.0) if fibres_along_y else (0.0, packing)
            casing.add(
                PhysVol(fiber_log),
                f"{layering}_HPL_{orientation}{layer_index}_S{sub}_F{i}{name_suffix}",
                Transform.translate(x, y, z) @ axis_rotation,
            )
    return casing