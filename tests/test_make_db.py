import json
import sqlite3

import pytest

from calogeo.geometry import Box
from calogeo.make_db import (
    VIS_JSON_NAME,
    build_lead_plate,
    create_world,
    main,
    material_vis_json,
    write_geometry_db,
    write_material_vis_json,
)
from calogeo.materials import MaterialManager


@pytest.fixture
def materials():
    return MaterialManager()


def test_create_world_is_air_cube(materials):
    world = create_world(materials)
    assert world.logvol.name == "WorldLog"
    assert world.logvol.shape == Box(1500.0, 1500.0, 1500.0)
    assert world.logvol.material is materials.air()
    assert world.children == []


def test_build_lead_plate_places_plate_and_bars(materials):
    world = create_world(materials)
    plate = build_lead_plate(world, materials)
    names = [name for name, _, _ in world.children]
    assert names[0] == "LeadPlate"
    assert world.children[0].volume is plate
    assert plate.logvol.material is materials.lead()
    assert names[1:] == [f"PVT_L0_B{i}" for i in range(36)]


def test_lead_plate_bars_rest_on_plate(materials):
    world = create_world(materials)
    build_lead_plate(world, materials)
    bars = world.children[1:]
    assert all(p.transform.translation[2] == pytest.approx(6.5) for p in bars)
    xs = [p.transform.translation[0] for p in bars]
    assert xs[0] == pytest.approx(-xs[-1])
    assert all(b.volume.logvol.material is materials.pvt() for b in bars)


def test_material_vis_json_content(materials):
    data = json.loads(material_vis_json(materials))
    entries = data["materials"]
    assert [e["name"] for e in entries] == [
        "Lead", "Iron", "PVT", "Polystyrene", "Aluminium", "Air",
    ]
    for entry in entries:
        rgba = materials.rgba_for(entry["name"])
        assert entry["diffuse"] == pytest.approx(list(rgba[:3]))
        assert entry["opacity"] == pytest.approx(rgba[3])


def test_write_material_vis_json_round_trip(tmp_path, materials):
    path = tmp_path / "vis.json"
    write_material_vis_json(path, materials)
    assert path.read_text() == material_vis_json(materials)


def test_write_geometry_db_counts(tmp_path, materials):
    world = create_world(materials)
    build_lead_plate(world, materials)
    path = tmp_path / "g.db"
    count = write_geometry_db(world, path)
    expected = len(list(world.walk())) + 1
    assert count == expected
    with sqlite3.connect(path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM physvols").fetchone()[0] == expected
        assert conn.execute("SELECT COUNT(*) FROM placements").fetchone()[0] == expected - 1
        logvols = {row[0] for row in conn.execute("SELECT name FROM logvols")}
    assert logvols == {"WorldLog", "LeadPlateLog", "PVTBarLog"}


def test_write_geometry_db_stores_transforms_and_materials(tmp_path, materials):
    world = create_world(materials)
    build_lead_plate(world, materials)
    path = tmp_path / "g.db"
    write_geometry_db(world, path)
    with sqlite3.connect(path) as conn:
        tz = conn.execute(
            "SELECT tz FROM placements WHERE name = 'PVT_L0_B3'"
        ).fetchone()[0]
        density = conn.execute(
            "SELECT density FROM materials WHERE name = 'Lead'"
        ).fetchone()[0]
    assert tz == pytest.approx(6.5)
    assert density == pytest.approx(materials.lead().density)


def test_write_geometry_db_overwrites(tmp_path, materials):
    path = tmp_path / "g.db"
    world = create_world(materials)
    build_lead_plate(world, materials)
    write_geometry_db(world, path)
    write_geometry_db(create_world(materials), path)
    with sqlite3.connect(path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM placements").fetchone()[0] == 0
        assert conn.execute("SELECT COUNT(*) FROM physvols").fetchone()[0] == 1


def test_write_geometry_db_bad_path(tmp_path, materials):
    with pytest.raises(OSError):
        write_geometry_db(create_world(materials), tmp_path / "missing" / "g.db")


def _write_cfg(tmp_path):
    cfg = tmp_path / "calo.cfg"
    cfg.write_text("layers = 7,1\n")
    return cfg


def test_main_writes_db_and_vis(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = _write_cfg(tmp_path)
    out = tmp_path / "out.db"
    assert main([str(out), str(cfg)]) == 0
    with sqlite3.connect(out) as conn:
        names = {row[0] for row in conn.execute("SELECT name FROM placements")}
    assert "ECAL_GL0_Lead_MX1Y1" in names
    assert "ECAL_GL1_SL0_WidePVT_H_L0_B35_MX1Y1" in names
    vis = json.loads((tmp_path / VIS_JSON_NAME).read_text())
    assert len(vis["materials"]) == 6


def test_main_bad_db_returns_one(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    cfg = _write_cfg(tmp_path)
    out = tmp_path / "missing" / "out.db"
    assert main([str(out), str(cfg)]) == 1
    assert "ERROR: could not open DB file" in capsys.readouterr().err
    assert not (tmp_path / VIS_JSON_NAME).exists()


def test_main_missing_config(tmp_path):
    with pytest.raises(OSError):
        main([str(tmp_path / "out.db"), str(tmp_path / "nope.cfg")])