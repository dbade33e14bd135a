from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Tuple, Union


# -----------------------
# Basic domain primitives
# -----------------------

Vec2 = Tuple[float, float]

ScopeLevel = Literal["club", "ageGroup", "team"]

RELATIONSHIP_KINDS: Tuple[str, ...] = (
    "passing-lane",
    "overlap",
    "press-trigger",
    "support",
    "cover",
    "combination",
)

OverrideField = Literal["x", "y", "direction", "role_description", "key_responsibilities"]

OVERRIDE_FIELDS: Tuple[str, ...] = (
    "x",
    "y",
    "direction",
    "role_description",
    "key_responsibilities",
)

# broadest first
SCOPE_ORDER: Tuple[str, ...] = ("club", "ageGroup", "team")


@dataclass(frozen=True)
class Position:
    """One squad slot of a formation. x/y are percentages of pitch width/length."""
    index: int
    label: str  # e.g., GK, CB, ST
    x: float
    y: float
    direction: Optional[str] = None


@dataclass(frozen=True)
class Formation:
    id: str
    name: str
    squad_size: int
    positions: Tuple[Position, ...]
    summary: str = ""
    tags: Tuple[str, ...] = ()


# -----------------------
# Scope (tagged union)
# -----------------------

@dataclass(frozen=True)
class ClubScope:
    club_id: str

    @property
    def level(self) -> ScopeLevel:
        return "club"


@dataclass(frozen=True)
class AgeGroupScope:
    club_id: str
    age_group_id: str

    @property
    def level(self) -> ScopeLevel:
        return "ageGroup"


@dataclass(frozen=True)
class TeamScope:
    club_id: str
    age_group_id: str
    team_id: str

    @property
    def level(self) -> ScopeLevel:
        return "team"


Scope = Union[ClubScope, AgeGroupScope, TeamScope]


# -----------------------
# Tactic and its parts
# -----------------------

@dataclass(frozen=True)
class PositionOverride:
    """
    Partial override for one position index.

    A field left as None inherits from the layer below. An override with every
    field None is equivalent to no override at all.
    """
    x: Optional[float] = None
    y: Optional[float] = None
    direction: Optional[str] = None
    role_description: Optional[str] = None
    key_responsibilities: Optional[Tuple[str, ...]] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f) is None for f in OVERRIDE_FIELDS)

    def present_fields(self) -> Tuple[str, ...]:
        return tuple(f for f in OVERRIDE_FIELDS if getattr(self, f) is not None)


@dataclass(frozen=True)
class Principle:
    title: str
    description: str = ""
    position_indices: Tuple[int, ...] = ()  # empty = all positions


@dataclass(frozen=True)
class Relationship:
    from_index: int
    to_index: int
    kind: str
    description: str = ""


@dataclass(frozen=True)
class Tactic:
    """
    A scoped customization of a formation, optionally chained to a parent tactic.

    squad_size is copied from the base formation when the tactic is created.
    """
    id: str
    name: str
    parent_formation_id: str
    squad_size: int
    scope: Scope
    parent_tactic_id: Optional[str] = None
    position_overrides: Dict[int, PositionOverride] = field(default_factory=dict)
    principles: Tuple[Principle, ...] = ()
    relationships: Tuple[Relationship, ...] = ()
    summary: str = ""
    style: Optional[str] = None
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OverrideLayer:
    """One override map plus the label reported as provenance (usually a tactic id)."""
    label: str
    overrides: Dict[int, PositionOverride]


# -----------------------
# Final output
# -----------------------

@dataclass(frozen=True)
class ResolvedPosition:
    index: int
    label: str
    x: float
    y: float
    direction: Optional[str]
    source_formation_id: str
    overridden_by: Tuple[str, ...] = ()
    role_description: Optional[str] = None
    key_responsibilities: Tuple[str, ...] = ()

    @property
    def xy(self) -> Vec2:
        return (self.x, self.y)


@dataclass(frozen=True)
class OverrideInfo:
    """One overridden field of a tactic, with the value it replaced."""
    position_index: int
    label: str
    field: str
    original_value: Any
    overridden_value: Any
    tactic_id: str
    tactic_name: str
