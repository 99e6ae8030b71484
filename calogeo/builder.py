"""Assembly of the calorimeter layer stack into a volume tree."""

from __future__ import annotations

from typing import Optional

from calogeo.config import CalorimeterConfig
from calogeo.fibres import build_hp_layer
from calogeo.geometry import BarAxis, Box, LogVol, PhysVol, Transform, place_bars
from calogeo.materials import MaterialManager

# Layer codes used in ``layers`` and ``layers2``.
WIDE_H = 1
WIDE_V = 2
THIN_H = 3
THIN_V = 4
HPL_ALONG_Y = 5
HPL_ALONG_X = 6
ABSORBER = 7  # lead in the first section, iron in the second
AIR_GAP = 8

_WIDE_WIDTH_MM = 60.0
_THIN_WIDTH_MM = 10.0
_WIDE_BARS = 36
_THIN_BARS = 216


def _layer_thickness(cfg: CalorimeterConfig, code: int, hcal: bool) -> Optional[float]:
    """Thickness of one layer in mm, or ``None`` for an unknown code."""
    if code in (WIDE_H, WIDE_V):
        return cfg.wide_scint_thickness_mm
    if code in (THIN_H, THIN_V):
        return cfg.thin_scint_thickness_mm
    if code in (HPL_ALONG_Y, HPL_ALONG_X):
        return cfg.hpl_thickness_mm
    if code == ABSORBER:
        return cfg.iron_thickness_mm if hcal else cfg.lead_thickness_mm
    if code == AIR_GAP:
        return cfg.airgap_mm
    return None


def total_thickness_mm(cfg: CalorimeterConfig) -> float:
    """Depth of both sections plus the gap between them; unknown codes count zero."""
    ecal = sum(_layer_thickness(cfg, code, False) or 0.0 for code in cfg.layers)
    hcal = sum(_layer_thickness(cfg, code, True) or 0.0 for code in cfg.layers2)
    return ecal + hcal + cfg.gap_ecal_hcal


def _stack_depth(cfg: CalorimeterConfig) -> float:
    """Depth used for centring: both sections, without the gap between them."""
    total = 0.0
    for key, codes, hcal in (("layers", cfg.layers, False), ("layers2", cfg.layers2, True)):
        for code in codes:
            thickness = _layer_thickness(cfg, code, hcal)
            if thickness is None:
                raise ValueError(f"Unknown layer code in {key}: {code}")
            total += thickness
    return total


def build_stack(
    world: PhysVol,
    materials: MaterialManager,
    cfg: CalorimeterConfig,
    mx: int = 1,
    my: int = 1,
) -> None:
    """Place the layers of ``cfg`` into ``world`` for the module at grid ``(mx, my)``.

    Raises ``ValueError`` for a layer code that a section does not support.
    """
    mtag = f"_MX{mx}Y{my}"
    plate = cfg.plate_xy_mm
    half_plate = 0.5 * plate
    wide_z = cfg.wide_scint_thickness_mm
    thin_z = cfg.thin_scint_thickness_mm
    lead_z = cfg.lead_thickness_mm
    iron_z = cfg.iron_thickness_mm
    hpl_z = cfg.hpl_thickness_mm

    pvt = materials.pvt()
    polystyrene = materials.polystyrene()

    wide_h_log = LogVol("WidePVT_H_Log", Box(0.5 * _WIDE_WIDTH_MM, half_plate, 0.5 * wide_z), pvt)
    wide_v_log = LogVol("WidePVT_V_Log", Box(half_plate, 0.5 * _WIDE_WIDTH_MM, 0.5 * wide_z), pvt)
    thin_h_log = LogVol(
        "ThinPS_H_Log", Box(0.5 * _THIN_WIDTH_MM, half_plate, 0.5 * thin_z), polystyrene
    )
    thin_v_log = LogVol(
        "ThinPS_V_Log", Box(half_plate, 0.5 * _THIN_WIDTH_MM, 0.5 * thin_z), polystyrene
    )
    lead_log = LogVol("LeadPlateLog", Box(half_plate, half_plate, 0.5 * lead_z), materials.lead())
    iron_log = LogVol("IronPlateLog", Box(half_plate, half_plate, 0.5 * iron_z), materials.iron())

    def envelope(name: str, thickness: float, z_center: float) -> PhysVol:
        log = LogVol(f"{name}_LOG", Box(half_plate, half_plate, 0.5 * thickness), materials.air())
        return world.add(PhysVol(log), name, Transform.translate(0.0, 0.0, z_center))

    def fibre_layer(prefix: str, z_center: float, index: int, along_y: bool) -> None:
        env = envelope(f"{prefix}_HPL{mtag}", hpl_z, z_center)
        build_hp_layer(
            env,
            materials.aluminum(),
            materials.polystyrene(),
            prefix,
            0.0,
            index,
            plate,
            hpl_z,
            cfg.fiber_diameter_mm,
            along_y,
            mtag,
        )

    z = -0.5 * _stack_depth(cfg) if cfg.center_stack else 0.0

    i_wide_h = i_wide_v = i_thin_h = i_hpl = 0
    layer = sens = 0

    for code in cfg.layers:
        prefix = f"ECAL_GL{layer}_SL{sens}"
        if code == ABSORBER:
            name = f"ECAL_GL{layer}_Lead{mtag}"
            env = envelope(name, lead_z, z + 0.5 * lead_z)
            env.add(PhysVol(lead_log), name, Transform.translate(0.0, 0.0, 0.0))
            z += lead_z
            layer += 1
        elif code == AIR_GAP:
            z += cfg.airgap_mm
        elif code in (HPL_ALONG_Y, HPL_ALONG_X):
            fibre_layer(prefix, z + 0.5 * hpl_z, i_hpl, code == HPL_ALONG_Y)
            z += hpl_z
            i_hpl += 1
            layer += 1
            sens += 1
        else:
            if code == WIDE_H:
                tag, log, pitch, count, axis, depth = (
                    "_WidePVT_H", wide_h_log, 60.0, _WIDE_BARS, BarAxis.ALONG_X, wide_z
                )
                index = i_wide_h
                i_wide_h += 1
            elif code == WIDE_V:
                tag, log, pitch, count, axis, depth = (
                    "_WidePVT_V", wide_v_log, 60.0, _WIDE_BARS, BarAxis.ALONG_Y, wide_z
                )
                index = i_wide_v
                i_wide_v += 1
            elif code == THIN_H:
                tag, log, pitch, count, axis, depth = (
                    "_ThinPS_H", thin_h_log, 10.0, _THIN_BARS, BarAxis.ALONG_X, thin_z
                )
                index = i_thin_h
                i_thin_h += 1
            else:
                # Vertical thin layers share the horizontal layer counter.
                tag, log, pitch, count, axis, depth = (
                    "_ThinPS_V", thin_v_log, 10.0, _THIN_BARS, BarAxis.ALONG_Y, thin_z
                )
                index = i_thin_h
            env = envelope(f"{prefix}{tag}{mtag}", depth, z + 0.5 * depth)
            place_bars(env, log, pitch, count, 0.0, f"{prefix}{tag}", index, axis, mtag)
            z += depth
            layer += 1
            sens += 1

    z += cfg.gap_ecal_hcal

    i_iron = 0
    layer = sens = 0
    for code in cfg.layers2:
        prefix = f"HCAL_GL{layer}_SL{sens}"
        if code == ABSORBER:
            world.add(
                PhysVol(iron_log),
                f"{prefix}_Iron_{i_iron}",
                Transform.translate(0.0, 0.0, z + 0.5 * iron_z),
            )
            z += iron_z
            i_iron += 1
            layer += 1
        elif code in (HPL_ALONG_Y, HPL_ALONG_X):
            fibre_layer(prefix, z + 0.5 * hpl_z, i_hpl, code == HPL_ALONG_Y)
            z += hpl_z
            i_hpl += 1
            layer += 1
            sens += 1
        elif code in (WIDE_H, WIDE_V):
            if code == WIDE_H:
                tag, log, axis = "_WidePVT_H", wide_h_log, BarAxis.ALONG_X
            else:
                tag, log, axis = "_WidePVT_V", wide_v_log, BarAxis.ALONG_Y
            place_bars(
                world, log, 60.0, _WIDE_BARS, z + 0.5 * wide_z, f"{prefix}{tag}",
                i_wide_v, axis, mtag,
            )
            z += wide_z
            i_wide_v += 1
            layer += 1
            sens += 1
        elif code == AIR_GAP:
            z += cfg.airgap_mm
            layer += 1
        else:
            raise ValueError(f"Unsupported layer code in layers2: {code}")