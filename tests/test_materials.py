import pytest

from calogeo.materials import Element, Material, MaterialManager


def _by_name(material):
    return {element.name: weight for element, weight in material.fractions.items()}


def test_air_properties():
    air = MaterialManager().air()
    assert air.name == "Air"
    assert air.density == pytest.approx(1.2041e-3)
    (element, weight), = air.components
    assert element.symbol == "Air"
    assert element.z == 7.0
    assert weight == 1.0
    assert air.locked


def test_air_cached_per_manager():
    manager = MaterialManager()
    first = manager.air()
    second = manager.air()
    assert second is first
    assert second.name == "Air"
    assert second.density == pytest.approx(1.2041e-3)
    assert len(second.components) == 1


def test_shared_materials_across_managers():
    first, second = MaterialManager(), MaterialManager()
    assert first.lead() is second.lead()
    assert first.iron() is second.iron()
    assert first.pvt() is second.pvt()
    assert first.polystyrene() is second.polystyrene()
    assert first.aluminum() is second.aluminum()


@pytest.mark.parametrize(
    "method, name, density, symbol",
    [
        ("lead", "Lead", 11.34, "Pb"),
        ("iron", "Iron", 7.874, "Fe"),
        ("aluminum", "Aluminium", 2.70, "Al"),
    ],
)
def test_single_element_materials(method, name, density, symbol):
    material = getattr(MaterialManager(), method)()
    assert material.name == name
    assert material.density == pytest.approx(density)
    assert [element.symbol for element, _ in material.components] == [symbol]


def test_pvt_composition():
    pvt = MaterialManager().pvt()
    fractions = _by_name(pvt)
    assert set(fractions) == {"Carbon", "Hydrogen"}
    assert sum(fractions.values()) == pytest.approx(1.0)
    assert fractions["Carbon"] / fractions["Hydrogen"] == pytest.approx(9.0 / 10.0)
    assert pvt.density == pytest.approx(1.032)


def test_polystyrene_composition():
    ps = MaterialManager().polystyrene()
    fractions = _by_name(ps)
    assert fractions["Carbon"] == pytest.approx(fractions["Hydrogen"])
    assert ps.density == pytest.approx(1.05)


def test_locked_material_refuses_additions():
    lead = MaterialManager().lead()
    with pytest.raises(RuntimeError):
        lead.add(Element("Tin", "Sn", 50.0, 118.71), 1.0)


def test_custom_material_fractions_normalised():
    a = Element("A", "A", 1.0, 1.0)
    b = Element("B", "B", 2.0, 2.0)
    mix = Material("Mix", 1.0)
    mix.add(a, 1.0)
    mix.add(b, 3.0)
    assert not mix.locked
    assert mix.fractions[b] == pytest.approx(0.75)
    mix.lock()
    assert mix.locked


def test_empty_material_has_no_fractions():
    assert Material("Vacuum", 0.0).fractions == {}


def test_rgba_for_known_and_unknown():
    manager = MaterialManager()
    assert manager.rgba_for("PVT") == (0.00, 0.65, 0.65, 1.0)
    assert manager.rgba_for("Air") == (1.00, 1.00, 1.00, 0.02)
    assert manager.rgba_for("Lead") == (0.80, 0.80, 0.80, 1.0)
    assert manager.rgba_for("Unobtainium") == (1.0, 1.0, 1.0, 1.0)