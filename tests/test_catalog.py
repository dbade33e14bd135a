import pytest

from tacticast_formations import (
    AgeGroupScope,
    ClubScope,
    IntegrityError,
    NotFoundError,
    PositionOverride,
    Principle,
    Relationship,
    TacticCatalog,
    TeamScope,
    ValidationError,
)


def test_create_tactic_copies_squad_size(chain_catalog):
    t = chain_catalog.create_tactic("Seven Press", "f7", ClubScope("club-1"))

    assert t.squad_size == 7
    assert t.id
    assert chain_catalog.get_tactic(t.id) == t


def test_create_tactic_cleans_overrides(chain_catalog):
    t = chain_catalog.create_tactic(
        "Wide",
        "f442",
        ClubScope("club-1"),
        position_overrides={"5": PositionOverride(x=10), 6: PositionOverride()},
    )
    assert t.position_overrides == {5: PositionOverride(x=10)}


def test_create_tactic_validation(chain_catalog):
    with pytest.raises(ValidationError) as exc:
        chain_catalog.create_tactic("  ", "f442", ClubScope("club-1"))
    assert "name" in exc.value.errors

    with pytest.raises(NotFoundError):
        chain_catalog.create_tactic("Ghost", "f999", ClubScope("club-1"))

    with pytest.raises(ValidationError):
        chain_catalog.create_tactic(
            "Too Far", "f442", ClubScope("club-1"), position_overrides={11: PositionOverride(x=1)}
        )

    with pytest.raises(ValidationError):
        chain_catalog.create_tactic("Dup", "f442", ClubScope("club-1"), tactic_id="club-press")


def test_create_tactic_checks_parent(chain_catalog):
    child = chain_catalog.create_tactic(
        "Reds", "f442", TeamScope("club-1", "u10", "reds"), parent_tactic_id="u10-press"
    )
    assert child.parent_tactic_id == "u10-press"

    with pytest.raises(IntegrityError):
        chain_catalog.create_tactic(
            "Upside Down", "f442", AgeGroupScope("club-1", "u10"), parent_tactic_id="blues-press"
        )

    with pytest.raises(IntegrityError):
        chain_catalog.create_tactic("Mixed", "f7", ClubScope("club-1"), parent_tactic_id="club-press")

    with pytest.raises(NotFoundError):
        chain_catalog.create_tactic("Lost", "f442", ClubScope("club-1"), parent_tactic_id="ghost")


def test_principles_and_relationships_are_validated(chain_catalog):
    with pytest.raises(ValidationError):
        chain_catalog.create_tactic(
            "P", "f442", ClubScope("club-1"), principles=[Principle("Press", position_indices=(11,))]
        )
    with pytest.raises(ValidationError):
        chain_catalog.create_tactic("P", "f442", ClubScope("club-1"), principles=[Principle("")])
    with pytest.raises(ValidationError):
        chain_catalog.create_tactic(
            "R", "f442", ClubScope("club-1"), relationships=[Relationship(9, 10, "telepathy")]
        )
    with pytest.raises(ValidationError):
        chain_catalog.create_tactic(
            "R", "f442", ClubScope("club-1"), relationships=[Relationship(9, 9, "overlap")]
        )


def test_update_replaces_overrides_wholesale(chain_catalog):
    updated = chain_catalog.update_tactic(
        "blues-press",
        position_overrides={1: PositionOverride(x=15)},
        principles=[Principle("Overlap", position_indices=(1, 5))],
    )

    assert updated.position_overrides == {1: PositionOverride(x=15)}
    assert [p.title for p in updated.principles] == ["Overlap"]

    resolved = chain_catalog.resolve("blues-press")
    assert resolved[1].overridden_by == ("blues-press",)
    # inherited from the age group only now
    assert resolved[9].x == 40
    assert resolved[9].overridden_by == ("u10-press",)


def test_changing_formation_resets_overrides(formation_442, formation_7):
    catalog = TacticCatalog(formations=[formation_442, formation_7])
    t = catalog.create_tactic(
        "Press",
        "f442",
        ClubScope("club-1"),
        position_overrides={9: PositionOverride(y=85)},
        relationships=[Relationship(9, 10, "combination")],
        principles=[Principle("Compact Shape")],
    )

    moved = catalog.update_tactic(t.id, parent_formation_id="f7")

    assert moved.squad_size == 7
    assert moved.position_overrides == {}
    assert moved.relationships == ()
    assert [p.title for p in moved.principles] == ["Compact Shape"]
    assert len(catalog.resolve(t.id)) == 7


def test_changing_formation_of_chained_tactic_breaks_chain(chain_catalog):
    with pytest.raises(IntegrityError):
        chain_catalog.update_tactic("blues-press", parent_formation_id="f7")

    # failed update leaves the stored tactic untouched
    assert chain_catalog.get_tactic("blues-press").parent_formation_id == "f442"


def test_available_and_split_on_catalog(chain_catalog):
    ids = {t.id for t in chain_catalog.available_for_scope("club-1", "u10", "blues")}
    assert ids == {"club-press", "u10-press", "blues-press"}

    own, inherited = chain_catalog.tactics_by_scope("club-1", "u10")
    assert [t.id for t in own] == ["u10-press"]
    assert [t.id for t in inherited] == ["club-press"]
