"""Elements, materials and the material catalogue used by the detector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar

RGBA = tuple[float, float, float, float]


@dataclass(frozen=True)
class Element:
    """A chemical element; ``molar_mass`` is in g/mol."""

    name: str
    symbol: str
    z: float
    molar_mass: float


class Material:
    """A material of given density (g/cm3) built from weighted elements."""

    def __init__(self, name: str, density: float) -> None:
        self.name = name
        self.density = density
        self._components: list[tuple[Element, float]] = []
        self._locked = False

    def __repr__(self) -> str:
        return f"Material({self.name!r}, density={self.density})"

    def add(self, element: Element, fraction: float) -> None:
        """Add an element with a relative weight; not allowed once locked."""
        if self._locked:
            raise RuntimeError(f"Material {self.name} is locked")
        self._components.append((element, fraction))

    def lock(self) -> None:
        """Freeze the composition."""
        self._locked = True

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def components(self) -> tuple[tuple[Element, float], ...]:
        return tuple(self._components)

    @property
    def fractions(self) -> dict[Element, float]:
        """Weights normalised to sum to one, merged per element."""
        total = sum(weight for _, weight in self._components)
        if total <= 0:
            return {}
        merged: dict[Element, float] = {}
        for element, weight in self._components:
            merged[element] = merged.get(element, 0.0) + weight / total
        return merged


def _single_element(name: str, density: float, element: Element) -> Material:
    material = Material(name, density)
    material.add(element, 1.0)
    material.lock()
    return material


def _hydrocarbon(name: str, density: float, carbon: float, hydrogen: float) -> Material:
    material = Material(name, density)
    material.add(Element("Carbon", "C", 6.0, 12.011), carbon)
    material.add(Element("Hydrogen", "H", 1.0, 1.008), hydrogen)
    material.lock()
    return material


class MaterialManager:
    """Creates materials on first use and hands out the same object afterwards.

    Air is cached per manager; the other materials are shared by all managers.
    """

    _shared: ClassVar[dict[str, Material]] = {}

    def __init__(self) -> None:
        self._materials: dict[str, Material] = {}

    @classmethod
    def _shared_material(cls, key: str, factory: Callable[[], Material]) -> Material:
        if key not in cls._shared:
            cls._shared[key] = factory()
        return cls._shared[key]

    def air(self) -> Material:
        if "Air" not in self._materials:
            self._materials["Air"] = _single_element(
                "Air", 1.2041e-3, Element("AirElement", "Air", 7.0, 14.01)
            )
        return self._materials["Air"]

    def lead(self) -> Material:
        return self._shared_material(
            "Lead",
            lambda: _single_element("Lead", 11.34, Element("LeadElement", "Pb", 82.0, 207.2)),
        )

    def iron(self) -> Material:
        return self._shared_material(
            "Iron",
            lambda: _single_element("Iron", 7.874, Element("Iron", "Fe", 26.0, 55.845)),
        )

    def pvt(self) -> Material:
        """Polyvinyltoluene, C9H10."""
        return self._shared_material("PVT", lambda: _hydrocarbon("PVT", 1.032, 9.0, 10.0))

    def polystyrene(self) -> Material:
        """Polystyrene, repeat unit C8H8."""
        return self._shared_material(
            "Polystyrene", lambda: _hydrocarbon("Polystyrene", 1.05, 8.0, 8.0)
        )

    def aluminum(self) -> Material:
        return self._shared_material(
            "Aluminium",
            lambda: _single_element("Aluminium", 2.70, Element("Aluminium", "Al", 13.0, 26.9815)),
        )

    _COLOURS: ClassVar[dict[str, RGBA]] = {
        "Lead": (0.80, 0.80, 0.80, 1.0),
        "Iron": (0.60, 0.60, 0.60, 1.0),
        "PVT": (0.00, 0.65, 0.65, 1.0),
        "Polystyrene": (0.00, 0.0, 1.0, 1.0),
        "Aluminium": (0.00, 0.0, 0.0, 1.0),
        "Air": (1.00, 1.00, 1.00, 0.02),
    }

    def rgba_for(self, material_name: str) -> RGBA:
        """Display colour of a material, white and opaque when unknown."""
        return self._COLOURS.get(material_name, (1.0, 1.0, 1.0, 1.0))