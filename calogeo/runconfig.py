"""Run settings for the simulation, read from a ``key = value`` file."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Union

from calogeo.config import _WHITESPACE, _parse_float, _parse_int, _parse_bool

Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class RunConfig:
    """Primary particle, event count and run control settings."""

    n_events: int = 0

    particle: str = "e-"
    energy_mev: float = 1000.0

    position_mm: Vector3 = (0.0, 0.0, -2500.0)
    direction: Vector3 = (0.0, 0.0, 1.0)
    sigma_xy_mm: float = 0.0

    macro: str = ""
    seed: int = 0

    visualize: bool = False
    vis_macro: str = "../vis.mac"


def _parse3(text: str) -> Vector3:
    tokens = text.split()
    try:
        if len(tokens) < 3:
            raise ValueError
        x, y, z = (float(token) for token in tokens[:3])
    except ValueError:
        raise ValueError(f"Expected 3 numbers, got: {text}") from None
    return (x, y, z)


_KEYS: dict[str, tuple[str, Callable[[str], object]]] = {
    "n_events": ("n_events", _parse_int),
    "particle": ("particle", str),
    "energy_MeV": ("energy_mev", _parse_float),
    "position_mm": ("position_mm", _parse3),
    "direction": ("direction", _parse3),
    "sigma_xy_mm": ("sigma_xy_mm", _parse_float),
    "macro": ("macro", str),
    "seed": ("seed", _parse_int),
    "visualize": ("visualize", _parse_bool),
    "vis_macro": ("vis_macro", str),
}


def parse_run_config(text: str) -> RunConfig:
    """Parse run configuration text.

    Lines starting with ``#`` are comments. A line without ``=`` or an unknown
    key raises ``ValueError``.
    """
    cfg = RunConfig()
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip(_WHITESPACE)
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ValueError(f"run.cfg parse error line {number}: {line}")
        key, _, value = line.partition("=")
        key = key.strip(_WHITESPACE)
        try:
            name, converter = _KEYS[key]
        except KeyError:
            raise ValueError(f"Unknown run.cfg key: {key}") from None
        cfg = replace(cfg, **{name: converter(value.strip(_WHITESPACE))})
    return cfg


def read_run_config_file(path: Union[str, Path]) -> RunConfig:
    """Read and parse a run configuration file."""
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise OSError(f"Cannot open run.cfg: {path}") from exc
    return parse_run_config(text)