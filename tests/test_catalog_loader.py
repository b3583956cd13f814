import json

import pytest

from placepicker.catalog.loader import load_places, validate_places
from placepicker.core.errors import CatalogError


def _record(place_id, lat=0.0, lon=0.0):
    return {
        "id": place_id,
        "name": f"Place {place_id}",
        "image_src": f"images/{place_id}.jpg",
        "coordinate": {"lat": lat, "lon": lon},
    }


def test_load_places_from_file(tmp_path):
    path = tmp_path / "places.json"
    path.write_text(json.dumps([_record("a", 1, 2), _record("b")]), encoding="utf-8")
    places = load_places(path)
    assert [p.id for p in places] == ["a", "b"]
    assert places[0].coordinate.lat == 1
    assert places[0].description == ""


def test_bundled_catalog_is_valid():
    places = load_places("data/catalogs/places.json")
    assert len(places) >= 3
    assert len({p.id for p in places}) == len(places)


def test_duplicate_ids_are_rejected():
    with pytest.raises(CatalogError, match="duplicate place id"):
        validate_places([_record("a"), _record("a")])


def test_out_of_range_coordinates_are_rejected():
    with pytest.raises(CatalogError):
        validate_places([_record("a", lat=120)])


def test_missing_file_raises_catalog_error(tmp_path):
    with pytest.raises(CatalogError, match="cannot read"):
        load_places(tmp_path / "missing.json")


def test_places_are_immutable():
    place = validate_places([_record("a")])[0]
    with pytest.raises(Exception):
        place.name = "changed"
