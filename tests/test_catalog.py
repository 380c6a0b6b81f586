import json
from dataclasses import replace

import pytest

from orrery.catalog import (
    SOLAR_SYSTEM,
    CatalogError,
    catalog_from_dict,
    list_catalogs,
    load_catalog,
    validate_catalog,
    validate_record,
)


def _body(name, **overrides):
    data = {
        "name": name,
        "texture": f"{name.lower()}.jpeg",
        "diameter": 5000,
        "rotational_velocity": 10,
        "orbital_radius": 100,
        "orbital_period": 300,
        "orbital_inclination": 1.0,
    }
    data.update(overrides)
    return data


def _catalog_dict(**overrides):
    data = {
        "name": "Test System",
        "central": _body("Star", orbital_radius=0, orbital_period=0, orbital_inclination=0),
        "orbiting": [_body("A"), _body("B"), _body("C")],
        "satellite": _body("Moonlet", orbital_radius=0.4),
    }
    data.update(overrides)
    return data


def test_builtin_catalog_is_valid():
    validate_catalog(SOLAR_SYSTEM)
    assert len(SOLAR_SYSTEM.orbiting) == 8
    assert len(SOLAR_SYSTEM) == 10
    assert SOLAR_SYSTEM.orbiting[SOLAR_SYSTEM.satellite_host_index].name == "Earth"
    assert SOLAR_SYSTEM.satellite.name == "Moon"


def test_central_body_may_have_zero_orbit():
    validate_record(SOLAR_SYSTEM.central, central=True)
    with pytest.raises(CatalogError, match="orbital_radius"):
        validate_record(SOLAR_SYSTEM.central)


@pytest.mark.parametrize("field,value", [
    ("diameter", 0),
    ("diameter", -12.0),
    ("orbital_radius", 0),
    ("orbital_period", 0),
    ("orbital_period", -1),
    ("rotational_velocity", -1),
    ("orbital_inclination", float("inf")),
])
def test_invalid_orbiting_record_is_rejected(field, value):
    bad = replace(SOLAR_SYSTEM.orbiting[0], **{field: value})
    with pytest.raises(CatalogError, match=field):
        validate_record(bad)


@pytest.mark.parametrize("radius", [10, 15.8])
def test_orbit_inside_central_body_is_rejected(radius):
    data = _catalog_dict()
    data["orbiting"][0]["orbital_radius"] = radius
    with pytest.raises(CatalogError, match="A: orbital_radius"):
        catalog_from_dict(data)


def test_small_satellite_orbit_is_accepted():
    data = _catalog_dict()
    data["satellite"]["orbital_radius"] = 0.01
    assert catalog_from_dict(data).satellite.orbital_radius == 0.01


@pytest.mark.parametrize("host_index", [3, 20, -1])
def test_host_index_out_of_range_is_rejected(host_index):
    with pytest.raises(CatalogError, match="satellite_host_index"):
        catalog_from_dict(_catalog_dict(satellite_host_index=host_index))


def test_catalog_without_orbiting_bodies_is_rejected():
    with pytest.raises(CatalogError, match="satellite_host_index"):
        catalog_from_dict(_catalog_dict(orbiting=[], satellite_host_index=0))


def test_host_index_out_of_range_in_file_is_rejected(tmp_path):
    path = tmp_path / "far_host.json"
    path.write_text(json.dumps(_catalog_dict(satellite_host_index=20)))
    with pytest.raises(CatalogError, match="out of range for 3 orbiting bodies"):
        load_catalog(path)


def test_catalog_from_dict():
    catalog = catalog_from_dict(_catalog_dict())
    assert catalog.name == "Test System"
    assert [r.name for r in catalog.orbiting] == ["A", "B", "C"]
    assert catalog.satellite.orbital_radius == 0.4
    assert catalog.satellite_host_index == 2


def test_catalog_from_dict_reads_color_and_host_index():
    data = _catalog_dict(satellite_host_index=0)
    data["orbiting"][0]["color"] = [300, 10, -4]
    catalog = catalog_from_dict(data)
    assert catalog.satellite_host_index == 0
    assert catalog.orbiting[0].color == (255, 10, 0)


def test_missing_field_is_reported():
    data = _catalog_dict()
    del data["orbiting"][1]["diameter"]
    with pytest.raises(CatalogError, match="diameter"):
        catalog_from_dict(data)


def test_missing_section_is_reported():
    data = _catalog_dict()
    del data["satellite"]
    with pytest.raises(CatalogError, match="satellite"):
        catalog_from_dict(data)


def test_zero_diameter_in_file_is_rejected(tmp_path):
    data = _catalog_dict()
    data["orbiting"][2]["diameter"] = 0
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(data))
    with pytest.raises(CatalogError, match="C: diameter"):
        load_catalog(path)


def test_invalid_json_is_reported(tmp_path):
    path = tmp_path / "garbage.json"
    path.write_text("{not json")
    with pytest.raises(CatalogError, match="not valid JSON"):
        load_catalog(path)


def test_missing_file_is_reported(tmp_path):
    with pytest.raises(CatalogError, match="cannot read"):
        load_catalog(tmp_path / "nope.json")


def test_bundled_catalog_matches_builtin():
    names = [fn for fn, _ in list_catalogs()]
    assert "solar_system.json" in names
    catalog = load_catalog("solar_system.json")
    assert catalog.central == SOLAR_SYSTEM.central
    assert catalog.orbiting == SOLAR_SYSTEM.orbiting
    assert catalog.satellite == SOLAR_SYSTEM.satellite
    assert catalog.satellite_host_index == SOLAR_SYSTEM.satellite_host_index


def test_validate_catalog_checks_host_index():
    with pytest.raises(CatalogError, match="satellite_host_index 8 out of range"):
        validate_catalog(replace(SOLAR_SYSTEM, satellite_host_index=8))
