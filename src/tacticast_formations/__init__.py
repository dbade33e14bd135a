from tacticast_formations.api import resolve_formation_positions, resolve_tactic_positions
from tacticast_formations.catalog import TacticCatalog
from tacticast_formations.config import ResolverConfig
from tacticast_formations.errors import IntegrityError, NotFoundError, TacticError, ValidationError
from tacticast_formations.types import (
    AgeGroupScope,
    ClubScope,
    Formation,
    OverrideLayer,
    Position,
    PositionOverride,
    Principle,
    Relationship,
    ResolvedPosition,
    Tactic,
    TeamScope,
)

__all__ = [
    "AgeGroupScope",
    "ClubScope",
    "Formation",
    "IntegrityError",
    "NotFoundError",
    "OverrideLayer",
    "Position",
    "PositionOverride",
    "Principle",
    "Relationship",
    "ResolvedPosition",
    "ResolverConfig",
    "Tactic",
    "TacticCatalog",
    "TacticError",
    "TeamScope",
    "ValidationError",
    "resolve_formation_positions",
    "resolve_tactic_positions",
]
