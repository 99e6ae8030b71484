import pytest

from calogeo.geometry import BarAxis, Box, LogVol, PhysVol, place_bars
from calogeo.hits import (
    EventStore,
    HitAggregator,
    ParsedID,
    SectionType,
    VolumeType,
    parse_volume_name,
)


def test_parse_bar_name():
    parsed = parse_volume_name("ECAL_GL1_SL0_WidePVT_H_L0_B3_MX2Y3")
    assert parsed.type == VolumeType.WIDE_H
    assert parsed.section == SectionType.ECAL
    assert parsed.hcal == 0
    assert parsed.layer == 0
    assert parsed.vol == 3
    assert parsed.hpl_sublayer == -1
    assert parsed.hexant == 23


def test_parse_fibre_name():
    parsed = parse_volume_name("HCAL_GL2_SL1_HPL_H_4_S2_F17_MX1Y1")
    assert parsed.type == VolumeType.FIBRE_H
    assert parsed.hcal == 1
    assert parsed.section == SectionType.ECAL
    assert parsed.layer == 1
    assert parsed.vol == 17
    assert parsed.hpl_sublayer == 2


def test_section_prefix_is_case_sensitive():
    parsed = parse_volume_name("Hcal_something")
    assert parsed.section == SectionType.HCAL
    assert parsed.hcal == -1


def test_unknown_name_uses_defaults():
    assert parse_volume_name("World") == ParsedID(section=0)


def test_module_tag_must_end_name():
    assert parse_volume_name("X_MX1Y2_tail").hexant == 11


def test_parse_names_made_by_place_bars():
    mother = PhysVol(LogVol("m", Box(1, 1, 1), None))
    bar = LogVol("ThinPS_V_Log", Box(1, 1, 1), None)
    place_bars(mother, bar, 10.0, 5, 0.0, "ECAL_GL3_SL4_ThinPS_V", 0, BarAxis.ALONG_Y, "_MX3Y2")
    parsed = [parse_volume_name(p.name) for p in mother.children]
    assert [p.vol for p in parsed] == list(range(5))
    assert {p.type for p in parsed} == {VolumeType.THIN_V}
    assert {p.layer for p in parsed} == {4}
    assert {p.hexant for p in parsed} == {32}


def test_store_add_and_columns():
    store = EventStore()
    parsed = parse_volume_name("HCAL_GL2_SL1_HPL_H_4_S2_F17_MX1Y1")
    store.add_hit(parsed, 2.5, (1.0, -2.0, 3.0))
    cols = store.columns()
    assert list(cols) == [
        "edep", "x", "y", "z", "type", "section", "layer", "vol", "hcal",
        "hpl_subsection", "hexant",
    ]
    assert cols["edep"] == [2.5]
    assert (cols["x"], cols["y"], cols["z"]) == ([1.0], [-2.0], [3.0])
    assert cols["hpl_subsection"] == [parsed.hpl_sublayer]
    assert cols["vol"] == [parsed.vol]
    assert len(store) == 1


def test_store_clear():
    store = EventStore()
    store.add_hit(ParsedID(), 1.0, (0.0, 0.0, 0.0))
    store.clear()
    assert len(store) == 0
    assert all(values == [] for values in store.columns().values())


def test_process_step_rejects_empty_steps():
    agg = HitAggregator()
    assert agg.process_step("WidePVT_H_L0_B1", 0.0, (0, 0, 0), (1, 1, 1)) is False
    assert agg.process_step("WidePVT_H_L0_B1", -1.0, (0, 0, 0), (1, 1, 1)) is False
    assert agg.process_step("", 1.0, (0, 0, 0), (1, 1, 1)) is False
    store = EventStore()
    agg.end_of_event(store)
    assert len(store) == 0


def test_steps_in_one_volume_are_summed():
    agg = HitAggregator()
    point = (5.0, 6.0, 7.0)
    assert agg.process_step("ECAL_GL0_SL0_WidePVT_V_L0_B4_MX1Y1", 1.5, point, point)
    assert agg.process_step("ECAL_GL0_SL0_WidePVT_V_L0_B4_MX1Y1", 2.5, point, point)
    store = EventStore()
    agg.end_of_event(store)
    assert store.edep == [pytest.approx(1.5 + 2.5)]
    assert (store.x[0], store.y[0], store.z[0]) == pytest.approx(point)
    assert store.vol == [4]
    assert store.type == [VolumeType.WIDE_V]


def test_position_is_between_step_midpoints():
    agg = HitAggregator()
    agg.process_step("A_B1", 1.0, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    agg.process_step("A_B1", 3.0, (10.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    store = EventStore()
    agg.end_of_event(store)
    assert 0.0 < store.x[0] < 10.0
    assert store.x[0] > 5.0


def test_one_hit_per_volume_and_clear():
    agg = HitAggregator()
    agg.process_step("A_B1", 1.0, (0, 0, 0), (0, 0, 0))
    agg.process_step("A_B2", 1.0, (0, 0, 0), (0, 0, 0))
    store = EventStore()
    agg.end_of_event(store)
    assert store.vol == [1, 2]
    agg.clear()
    store.clear()
    agg.end_of_event(store)
    assert len(store) == 0