"""Calorimeter stack configuration and its ``key = value`` file format."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Union

_WHITESPACE = " \t\n\v\f\r"

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|infinity|inf|nan))",
    re.IGNORECASE,
)

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})


def _parse_int(text: str) -> int:
    """Parse the leading integer of ``text``; trailing characters are ignored."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    return int(match.group(1))


def _parse_float(text: str) -> float:
    """Parse the leading floating-point number of ``text``."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid number: {text!r}")
    return float(match.group(1))


def _parse_bool(text: str) -> bool:
    return text.lower() in _TRUE_WORDS


@dataclass
class CalorimeterConfig:
    """Layer sequence and dimensions of one calorimeter module, in millimetres."""

    layers: list[int] = field(default_factory=list)

    plate_xy_mm: float = 2160.0
    lead_thickness_mm: float = 3.0
    wide_scint_thickness_mm: float = 10.0
    thin_scint_thickness_mm: float = 10.0

    center_stack: bool = True
    airgap_mm: float = 1000.0

    hpl_thickness_mm: float = 50.0
    fiber_diameter_mm: float = 1.2

    layers2: list[int] = field(default_factory=list)
    iron_thickness_mm: float = 170.0

    gap_ecal_hcal: float = 0.0

    module_nx: int = 1
    module_ny: int = 1

    module_pitch_x_mm: float = 0.0  # 0 means: use plate_xy_mm
    module_pitch_y_mm: float = 0.0  # 0 means: use plate_xy_mm


def parse_int_list(text: str) -> list[int]:
    """Parse a comma separated list of integers, skipping empty entries."""
    tokens = (token.strip(_WHITESPACE) for token in text.split(","))
    return [_parse_int(token) for token in tokens if token]


_KEYS: dict[str, Callable[[str], object]] = {
    "layers": parse_int_list,
    "plate_xy_mm": _parse_float,
    "lead_thickness_mm": _parse_float,
    "wide_scint_thickness_mm": _parse_float,
    "thin_scint_thickness_mm": _parse_float,
    "center_stack": _parse_bool,
    "hpl_thickness_mm": _parse_float,
    "fiber_diameter_mm": _parse_float,
    "airgap_mm": _parse_float,
    "layers2": parse_int_list,
    "iron_thickness_mm": _parse_float,
    "module_nx": _parse_int,
    "module_ny": _parse_int,
    "module_pitch_x_mm": _parse_float,
    "module_pitch_y_mm": _parse_float,
    "gap_ecal_hcal": _parse_float,
}


def parse_config(text: str) -> CalorimeterConfig:
    """Parse calorimeter configuration text.

    ``#`` starts a comment, lines without ``=`` and unknown keys are ignored.
    Raises ``ValueError`` when no ``layers`` are defined or a value is malformed.
    """
    values: dict[str, object] = {}
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip(_WHITESPACE)
        if not line or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip(_WHITESPACE)
        converter = _KEYS.get(key)
        if converter is not None:
            values[key] = converter(value.strip(_WHITESPACE))

    cfg = CalorimeterConfig(**values)
    if not cfg.layers:
        raise ValueError("Config must define: layers = 7,1,7,3,...")
    return cfg


def read_config_file(path: Union[str, Path]) -> CalorimeterConfig:
    """Read and parse a calorimeter configuration file."""
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise OSError(f"Could not open config file: {path}") from exc
    return parse_config(text)