from typing import Dict, Optional

import pytest

from tacticast_formations import (
    AgeGroupScope,
    ClubScope,
    Formation,
    Position,
    PositionOverride,
    Tactic,
    TacticCatalog,
    TeamScope,
)


def _formation(fid: str, rows) -> Formation:
    positions = tuple(
        Position(index=i, label=label, x=float(x), y=float(y))
        for i, (label, x, y) in enumerate(rows)
    )
    return Formation(id=fid, name=fid, squad_size=len(positions), positions=positions)


@pytest.fixture
def formation_442() -> Formation:
    # index 9 is the left striker at (40, 80)
    return _formation(
        "f442",
        [
            ("GK", 50, 5),
            ("LB", 20, 25), ("CB", 40, 20), ("CB", 60, 20), ("RB", 80, 25),
            ("LM", 20, 50), ("CM", 40, 50), ("CM", 60, 50), ("RM", 80, 50),
            ("ST", 40, 80), ("ST", 60, 80),
        ],
    )


@pytest.fixture
def formation_7() -> Formation:
    return _formation(
        "f7",
        [
            ("GK", 50, 5),
            ("CB", 35, 25), ("CB", 65, 25),
            ("LM", 20, 50), ("CM", 50, 50), ("RM", 80, 50),
            ("ST", 50, 80),
        ],
    )


@pytest.fixture
def make_tactic():
    def _make(
        tactic_id: str,
        scope,
        parent: Optional[str] = None,
        overrides: Optional[Dict[int, PositionOverride]] = None,
        formation_id: str = "f442",
        squad_size: int = 11,
        name: Optional[str] = None,
        **kwargs,
    ) -> Tactic:
        return Tactic(
            id=tactic_id,
            name=name or tactic_id,
            parent_formation_id=formation_id,
            squad_size=squad_size,
            scope=scope,
            parent_tactic_id=parent,
            position_overrides=dict(overrides or {}),
            **kwargs,
        )

    return _make


@pytest.fixture
def chain_catalog(formation_442, formation_7, make_tactic) -> TacticCatalog:
    """
    club-press (club) -> u10-press (age group) -> blues-press (team), all on 4-4-2.
    """
    club = make_tactic(
        "club-press",
        ClubScope("club-1"),
        overrides={
            6: PositionOverride(direction="S"),
            10: PositionOverride(y=85, direction="N"),
        },
    )
    age_group = make_tactic(
        "u10-press",
        AgeGroupScope("club-1", "u10"),
        parent="club-press",
        overrides={
            3: PositionOverride(y=85),
            9: PositionOverride(y=85, direction="N"),
        },
    )
    team = make_tactic(
        "blues-press",
        TeamScope("club-1", "u10", "blues"),
        parent="u10-press",
        overrides={
            3: PositionOverride(direction="N"),
            9: PositionOverride(x=33),
        },
    )
    return TacticCatalog(formations=[formation_442, formation_7], tactics=[club, age_group, team])
