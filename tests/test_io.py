import tempfile
from pathlib import Path

import pytest

from tacticast_formations import NotFoundError, PositionOverride, TacticCatalog, ValidationError
from tacticast_formations.core import select_tactic
from tacticast_formations.io import (
    catalog_to_dict,
    ensure_catalog_schema,
    load_json,
    parse_catalog,
    parse_formation,
    parse_overrides,
    parse_position_indices,
    parse_relationship,
    parse_tactic,
    parse_tags,
    save_json,
)


def _formation_dict(formation):
    return catalog_to_dict(TacticCatalog(formations=[formation]))["formations"][0]


def test_parse_tags_variants():
    assert parse_tags(None) == ()
    assert parse_tags(["pressing", "youth"]) == ("pressing", "youth")
    assert parse_tags('["pressing","high-line"]') == ("pressing", "high-line")
    assert parse_tags("pressing, youth ,") == ("pressing", "youth")
    assert parse_tags("   ") == ()

    with pytest.raises(ValidationError):
        parse_tags('["pressing"')


def test_parse_position_indices_from_csv():
    assert parse_position_indices("9,10") == (9, 10)
    assert parse_position_indices(" 9 , ,10,") == (9, 10)
    assert parse_position_indices([1, "2", 3.0]) == (1, 2, 3)
    assert parse_position_indices(None) == ()
    assert parse_position_indices("") == ()


@pytest.mark.parametrize("raw", ["9,x,10", "9, 1.5", "x", [9, 2.5], [True]])
def test_parse_position_indices_rejects_bad_tokens(raw):
    with pytest.raises(ValidationError) as exc:
        parse_position_indices(raw)
    assert "principles[].positionIndices" in exc.value.errors


def test_fractional_override_row_is_rejected(formation_442):
    raw = {
        "formations": [_formation_dict(formation_442)],
        "tactics": [
            {
                "id": "t",
                "name": "T",
                "parentFormationId": "f442",
                "scope": {"type": "club", "clubId": "c"},
                "positionOverrides": [{"positionIndex": 1.9, "x": 10}],
            },
        ],
    }
    with pytest.raises(ValidationError):
        parse_catalog(raw)

    assert parse_overrides([{"positionIndex": 1.0, "x": 10}]) == {1: PositionOverride(x=10.0)}


def test_relationship_indices_must_be_integers():
    with pytest.raises(ValidationError):
        parse_relationship({"fromPositionIndex": 9.5, "toPositionIndex": 10, "type": "overlap"})
    with pytest.raises(ValidationError):
        parse_relationship({"toPositionIndex": 10, "type": "overlap"})


@pytest.mark.parametrize(
    "raw",
    [
        {"name": "T", "parentFormationId": "f442", "scope": {"type": "club", "clubId": "c"}},
        {"id": "t", "name": "T", "scope": {"type": "club", "clubId": "c"}},
        {"id": " ", "name": "T", "parentFormationId": "f442", "scope": {"type": "club", "clubId": "c"}},
    ],
)
def test_parse_tactic_requires_ids(raw):
    with pytest.raises(ValidationError):
        parse_tactic(raw, squad_size=11)


def test_parse_formation_requires_id():
    with pytest.raises(ValidationError) as exc:
        parse_formation({"name": "4-4-2", "positions": []})
    assert "id" in exc.value.errors

    with pytest.raises(ValidationError):
        parse_formation({"id": "f", "positions": [{"positionIndex": 0.5, "position": "GK"}]})


def test_parse_overrides_row_list_merges_duplicates():
    rows = [
        {"positionIndex": 3, "xCoord": 55},
        {"positionIndex": 3, "direction": "E"},
        {"positionIndex": "7", "yCoord": None, "direction": None},
    ]
    parsed = parse_overrides(rows)

    assert parsed[3] == PositionOverride(x=55.0, direction="E")
    assert parsed[7].is_empty


def test_parse_tactic_requires_squad_size_source():
    raw = {"id": "t", "name": "T", "parentFormationId": "f442", "scope": {"type": "club", "clubId": "c"}}

    with pytest.raises(ValidationError):
        parse_tactic(raw)
    assert parse_tactic(raw, squad_size=11).squad_size == 11


def test_ensure_catalog_schema():
    ensure_catalog_schema({"formations": []})
    with pytest.raises(ValueError):
        ensure_catalog_schema({"tactics": []})
    with pytest.raises(ValueError):
        ensure_catalog_schema([])


def test_unknown_formation_in_catalog():
    raw = {
        "formations": [],
        "tactics": [
            {"id": "t", "name": "T", "parentFormationId": "f442", "scope": {"type": "club", "clubId": "c"}},
        ],
    }
    with pytest.raises(NotFoundError):
        parse_catalog(raw)


def test_select_tactic():
    root = {"formations": [], "tactics": [{"id": "a"}, {"id": "b"}]}

    assert select_tactic(root, tactic_id="b") == {"id": "b"}
    assert select_tactic(root["tactics"], tactic_index=0) == {"id": "a"}

    with pytest.raises(ValueError):
        select_tactic(root, tactic_id="c")
    with pytest.raises(ValueError):
        select_tactic(root, tactic_index=5)
    with pytest.raises(ValueError):
        select_tactic({"tactics": []})


def test_catalog_export_reloads(chain_catalog):
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "out" / "catalog.json"
        save_json(catalog_to_dict(chain_catalog), str(path))
        reloaded = parse_catalog(load_json(str(path)))

    assert reloaded.resolve("blues-press") == chain_catalog.resolve("blues-press")
    assert reloaded.get_tactic("u10-press").scope == chain_catalog.get_tactic("u10-press").scope


def test_load_json_missing_file():
    with pytest.raises(FileNotFoundError):
        load_json("/nonexistent/catalog.json")
