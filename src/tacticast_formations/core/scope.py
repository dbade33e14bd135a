from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from tacticast_formations.errors import IntegrityError, ValidationError
from tacticast_formations.types import (
    SCOPE_ORDER,
    AgeGroupScope,
    ClubScope,
    Scope,
    Tactic,
    TeamScope,
)


# -----------------------
# Parsing
# -----------------------

_SCOPE_TYPES = {"club": "club", "agegroup": "ageGroup", "age_group": "ageGroup", "team": "team"}


def parse_scope(obj: Dict[str, Any]) -> Scope:
    """
    Build a Scope from a dict like {"type": "team", "clubId": ..., "ageGroupId": ..., "teamId": ...}.

    Type is case-insensitive; snake_case id keys are accepted too.
    """
    if not isinstance(obj, dict):
        raise ValidationError("scope", "Scope must be a dict.")

    raw_type = str(obj.get("type", "") or "").strip().lower()
    scope_type = _SCOPE_TYPES.get(raw_type)
    if scope_type is None:
        raise ValidationError("scope.type", "Scope type must be 'club', 'ageGroup', or 'team'.")

    club_id = _id(obj, "clubId", "club_id")
    age_group_id = _id(obj, "ageGroupId", "age_group_id")
    team_id = _id(obj, "teamId", "team_id")

    if not club_id:
        raise ValidationError("scope.clubId", "ClubId is required for all scope types.")

    if scope_type == "club":
        return ClubScope(club_id=club_id)

    if not age_group_id:
        raise ValidationError("scope.ageGroupId", f"AgeGroupId is required for {scope_type} scope.")

    if scope_type == "ageGroup":
        return AgeGroupScope(club_id=club_id, age_group_id=age_group_id)

    if not team_id:
        raise ValidationError("scope.teamId", "TeamId is required for team scope.")
    return TeamScope(club_id=club_id, age_group_id=age_group_id, team_id=team_id)


def scope_to_dict(scope: Scope) -> Dict[str, Optional[str]]:
    return {
        "type": scope.level,
        "clubId": scope.club_id,
        "ageGroupId": getattr(scope, "age_group_id", None),
        "teamId": getattr(scope, "team_id", None),
    }


def _id(obj: Dict[str, Any], *keys: str) -> str:
    for k in keys:
        v = obj.get(k)
        if v is not None and str(v).strip():
            return str(v).strip()
    return ""


# -----------------------
# Hierarchy
# -----------------------

def scope_rank(scope: Scope) -> int:
    """0 = club (broadest), 2 = team (narrowest)."""
    return SCOPE_ORDER.index(scope.level)


def scope_contains(outer: Scope, inner: Scope) -> bool:
    """
    True if inner is at or narrower than outer and lies inside it.

    A team scope is inside its club and age group; an age group is inside its club.
    """
    if scope_rank(inner) < scope_rank(outer):
        return False
    if inner.club_id != outer.club_id:
        return False
    if isinstance(outer, (AgeGroupScope, TeamScope)):
        if getattr(inner, "age_group_id", None) != outer.age_group_id:
            return False
    if isinstance(outer, TeamScope):
        if getattr(inner, "team_id", None) != outer.team_id:
            return False
    return True


def check_parent_scope(child: Tactic, parent: Tactic) -> None:
    """A tactic may only inherit from a tactic at the same or a broader, enclosing scope."""
    if not scope_contains(parent.scope, child.scope):
        raise IntegrityError(
            f"{child.scope.level}-scoped tactic cannot inherit from "
            f"{parent.scope.level}-scoped tactic outside its scope",
            {"tactic_id": child.id, "parent_tactic_id": parent.id},
        )


# -----------------------
# Listing by scope
# -----------------------

def query_scope(club_id: str, age_group_id: Optional[str] = None, team_id: Optional[str] = None) -> Scope:
    """Narrowest scope described by a set of ids."""
    if team_id:
        if not age_group_id:
            raise ValidationError("ageGroupId", "AgeGroupId is required when TeamId is given.")
        return TeamScope(club_id=club_id, age_group_id=age_group_id, team_id=team_id)
    if age_group_id:
        return AgeGroupScope(club_id=club_id, age_group_id=age_group_id)
    return ClubScope(club_id=club_id)


def tactics_available_for_scope(
    tactics: Iterable[Tactic],
    club_id: str,
    age_group_id: Optional[str] = None,
    team_id: Optional[str] = None,
) -> List[Tactic]:
    """
    All tactics visible at a scope: its own plus those of every enclosing scope.

    Club tactics are visible to the club and all its age groups and teams; age
    group tactics to that age group and its teams; team tactics only to the team.
    """
    target = query_scope(club_id, age_group_id, team_id)
    return [t for t in tactics if scope_contains(t.scope, target)]


def split_by_scope(
    tactics: Iterable[Tactic],
    club_id: str,
    age_group_id: Optional[str] = None,
    team_id: Optional[str] = None,
) -> Tuple[List[Tactic], List[Tactic]]:
    """
    Returns:
      scope_tactics: tactics defined exactly at the requested scope
      inherited_tactics: tactics inherited from broader scopes
    Both sorted by name.
    """
    target = query_scope(club_id, age_group_id, team_id)
    own: List[Tactic] = []
    inherited: List[Tactic] = []
    for t in tactics_available_for_scope(tactics, club_id, age_group_id, team_id):
        if t.scope.level == target.level:
            own.append(t)
        else:
            inherited.append(t)

    own.sort(key=lambda t: t.name)
    inherited.sort(key=lambda t: t.name)
    return own, inherited


def tactics_for_club(tactics: Iterable[Tactic], club_id: str) -> List[Tactic]:
    """Every tactic belonging to a club, at any scope level."""
    return [t for t in tactics if t.scope.club_id == club_id]


def tactics_for_age_group(tactics: Iterable[Tactic], age_group_id: str) -> List[Tactic]:
    return [
        t for t in tactics
        if isinstance(t.scope, AgeGroupScope) and t.scope.age_group_id == age_group_id
    ]


def tactics_for_team(tactics: Iterable[Tactic], team_id: str) -> List[Tactic]:
    return [t for t in tactics if isinstance(t.scope, TeamScope) and t.scope.team_id == team_id]
