import pytest

from tacticast_formations import Principle, PositionOverride, TeamScope, ValidationError
from tacticast_formations.core import (
    is_field_overridden,
    overridden_fields,
    positions_for_principle,
    principles_for_position,
)


def test_field_overridden_against_parent(chain_catalog):
    team = chain_catalog.get_tactic("blues-press")

    assert is_field_overridden(team, 9, "x", chain_catalog)
    assert is_field_overridden(team, 3, "direction", chain_catalog)
    # not set by the team tactic itself
    assert not is_field_overridden(team, 9, "y", chain_catalog)
    assert not is_field_overridden(team, 0, "x", chain_catalog)


def test_value_equal_to_inherited_is_not_an_override(chain_catalog):
    echo = chain_catalog.create_tactic(
        "Echo",
        "f442",
        TeamScope("club-1", "u10", "reds"),
        parent_tactic_id="u10-press",
        position_overrides={10: PositionOverride(y=85, direction="W")},
    )

    assert not is_field_overridden(echo, 10, "y", chain_catalog)
    assert is_field_overridden(echo, 10, "direction", chain_catalog)


def test_any_value_counts_without_parent(chain_catalog):
    club = chain_catalog.get_tactic("club-press")
    assert is_field_overridden(club, 6, "direction", chain_catalog)


def test_unknown_field(chain_catalog):
    with pytest.raises(ValidationError):
        is_field_overridden(chain_catalog.get_tactic("club-press"), 6, "colour", chain_catalog)


def test_overridden_fields_report_replaced_values(chain_catalog):
    infos = overridden_fields(chain_catalog.get_tactic("blues-press"), chain_catalog)

    assert [(i.position_index, i.field, i.original_value, i.overridden_value) for i in infos] == [
        (3, "direction", None, "N"),
        (9, "x", 40.0, 33),
    ]
    assert all(i.tactic_name == "blues-press" for i in infos)
    assert infos[1].label == "ST"


def test_overridden_fields_without_parent_use_formation(chain_catalog):
    infos = overridden_fields(chain_catalog.get_tactic("club-press"), chain_catalog)

    assert [(i.position_index, i.field, i.original_value) for i in infos] == [
        (6, "direction", None),
        (10, "y", 80.0),
        (10, "direction", None),
    ]


def test_principle_positions():
    everyone = Principle("Compact Shape")
    strikers = Principle("Press", position_indices=(10, 9, 42))

    assert positions_for_principle(everyone, 11) == tuple(range(11))
    assert positions_for_principle(strikers, 11) == (9, 10)


def test_principles_for_position(make_tactic):
    tactic = make_tactic(
        "t",
        TeamScope("c", "a", "t"),
        principles=(
            Principle("Compact Shape"),
            Principle("Press", position_indices=(9, 10)),
            Principle("Build Up", position_indices=(0, 2, 3)),
        ),
    )

    assert [p.title for p in principles_for_position(tactic, 9)] == ["Compact Shape", "Press"]
    assert [p.title for p in principles_for_position(tactic, 2)] == ["Compact Shape", "Build Up"]
