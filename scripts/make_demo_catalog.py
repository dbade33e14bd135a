from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

CLUB_ID = "8f4e9a2b-1c3d-4e5f-6a7b-8c9d0e1f2a3b"
AGE_GROUP_ID = "1a2b3c4d-5e6f-7a8b-9c0d-1e2f3a4b5c6d"
TEAM_ID = "c3d4e5f6-a7b8-9c0d-1e2f-3a4b5c6d7e8f"

F_442 = "f1a2b3c4-d5e6-f7a8-b9c0-d1e2f3a4b5c6"
F_4231 = "f4d5e6f7-a8b9-c0d1-e2f3-a4b5c6d7e8f9"


def _write_json(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)


def _positions(rows: List[Tuple[str, float, float]]) -> List[Dict[str, Any]]:
    return [
        {"positionIndex": i, "position": label, "x": x, "y": y, "direction": None}
        for i, (label, x, y) in enumerate(rows)
    ]


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a demo formation/tactic catalog.")
    p.add_argument("--out", required=True, help="Path of the catalog JSON to write.")
    return p.parse_args()


def build_catalog() -> Dict[str, Any]:
    # y grows towards the opponent goal; goalkeeper sits at y=5
    formations = [
        {
            "id": F_442,
            "name": "4-4-2 Classic",
            "squadSize": 11,
            "tags": ["balanced"],
            "positions": _positions([
                ("GK", 50, 5),
                ("LB", 20, 25), ("CB", 40, 20), ("CB", 60, 20), ("RB", 80, 25),
                ("LM", 20, 50), ("CM", 40, 50), ("CM", 60, 50), ("RM", 80, 50),
                ("ST", 40, 80), ("ST", 60, 80),
            ]),
        },
        {
            "id": F_4231,
            "name": "4-2-3-1",
            "squadSize": 11,
            "tags": ["compact"],
            "positions": _positions([
                ("GK", 50, 5),
                ("LB", 20, 25), ("CB", 40, 20), ("CB", 60, 20), ("RB", 80, 25),
                ("CDM", 40, 40), ("CDM", 60, 40),
                ("LM", 20, 65), ("CAM", 50, 65), ("RM", 80, 65),
                ("ST", 50, 85),
            ]),
        },
    ]

    club_press = {
        "id": "t1a2b3c4-d5e6-f7a8-b9c0-d1e2f3a4b5c6",
        "name": "High Press 4-4-2",
        "parentFormationId": F_442,
        "scope": {"type": "club", "clubId": CLUB_ID},
        "positionOverrides": {
            "6": {"direction": "S", "roleDescription": "Defensive Midfielder",
                  "keyResponsibilities": ["Press opposition midfield", "Quick transitions"]},
            "7": {"direction": "S", "roleDescription": "Box-to-Box Midfielder",
                  "keyResponsibilities": ["Press opposition midfield", "Support attacks"]},
            "10": {"y": 85, "direction": "N", "roleDescription": "Target Man",
                   "keyResponsibilities": ["Press center backs", "Hold-up play"]},
        },
        "principles": [
            {"title": "Aggressive Pressing", "description": "Strikers initiate the press.",
             "positionIndices": [9, 10]},
            {"title": "Compact Shape", "description": "Stay tight as a unit.", "positionIndices": []},
        ],
        "relationships": [
            {"fromPositionIndex": 6, "toPositionIndex": 7, "type": "passing-lane",
             "description": "Central midfield partnership"},
            {"fromPositionIndex": 9, "toPositionIndex": 10, "type": "combination",
             "description": "Striker partnership"},
        ],
        "summary": "Win the ball back quickly in the opponent's half.",
        "style": "High Press",
        "tags": ["pressing", "attacking", "4-4-2"],
    }

    age_group_press = {
        "id": "t4e5f6a7-b8c9-d0e1-f2a3-b4c5d6e7f8a9",
        "name": "2014s High Press",
        "parentFormationId": F_442,
        "parentTacticId": club_press["id"],
        "scope": {"type": "ageGroup", "clubId": CLUB_ID, "ageGroupId": AGE_GROUP_ID},
        "positionOverrides": {
            "9": {"y": 85, "direction": "N", "roleDescription": "Advanced Striker",
                  "keyResponsibilities": ["Press center backs", "Force play wide"]},
        },
        "principles": [],
        "relationships": [],
        "summary": "Age group variant with a higher left striker.",
        "style": "High Press",
        "tags": "pressing,youth",
    }

    team_press = {
        "id": "t2b3c4d5-e6f7-a8b9-c0d1-e2f3a4b5c6d7",
        "name": "2015 Blues High Press",
        "parentFormationId": F_442,
        "parentTacticId": age_group_press["id"],
        "scope": {"type": "team", "clubId": CLUB_ID, "ageGroupId": AGE_GROUP_ID, "teamId": TEAM_ID},
        "positionOverrides": {
            "5": {"x": 18, "direction": "N", "keyResponsibilities": ["Cut passing lanes"]},
            "8": {"x": 82, "direction": "N", "keyResponsibilities": ["Cut passing lanes"]},
            "9": {"x": 33, "keyResponsibilities": ["Use pace to run in behind"]},
            "10": {"x": 67},
        },
        "principles": [
            {"title": "Striker Combinations", "description": "Runner and target man.",
             "positionIndices": "9,10"},
        ],
        "relationships": [
            {"fromPositionIndex": 9, "toPositionIndex": 10, "type": "combination",
             "description": "Left striker runs in behind, right striker holds up"},
            {"fromPositionIndex": 5, "toPositionIndex": 9, "type": "overlap",
             "description": "Winger supports striker runs"},
        ],
        "summary": "Team adaptation for the Blues squad.",
        "style": "High Press",
        "tags": ["pressing", "youth", "4-4-2"],
    }

    club_compact = {
        "id": "t3c4d5e6-f7a8-b9c0-d1e2-f3a4b5c6d7e8",
        "name": "Compact 4-2-3-1",
        "parentFormationId": F_4231,
        "scope": {"type": "club", "clubId": CLUB_ID},
        "positionOverrides": {
            "5": {"direction": "S", "roleDescription": "Holding Midfielder"},
            "6": {"direction": "S", "roleDescription": "Holding Midfielder"},
            "7": {"y": 55, "direction": "S", "roleDescription": "Defensive Winger"},
            "9": {"y": 55, "direction": "S", "roleDescription": "Defensive Winger"},
        },
        "principles": [
            {"title": "Double Pivot", "description": "Two holding midfielders protect the defence.",
             "positionIndices": [5, 6]},
        ],
        "relationships": [
            {"fromPositionIndex": 5, "toPositionIndex": 6, "type": "cover",
             "description": "Double pivot - cover each other"},
        ],
        "summary": "Solid defensive block.",
        "style": "Defensive",
        "tags": '["defensive", "compact", "4-2-3-1"]',
    }

    return {
        "formations": formations,
        "tactics": [club_press, age_group_press, team_press, club_compact],
    }


def main() -> None:
    args = _parse_args()
    out = Path(args.out)
    _write_json(out, build_catalog())
    print(f"Demo catalog written to: {out.resolve()}")


if __name__ == "__main__":
    main()
