from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from tacticast_formations.config import ResolverConfig
from tacticast_formations.core.chain import resolve_tactic
from tacticast_formations.core.overrides import check_index
from tacticast_formations.core.resolve import base_positions
from tacticast_formations.errors import ValidationError
from tacticast_formations.types import (
    OVERRIDE_FIELDS,
    OverrideInfo,
    Principle,
    ResolvedPosition,
    Tactic,
)

if TYPE_CHECKING:
    from tacticast_formations.catalog import TacticCatalog


# -----------------------
# Override inspection
# -----------------------

def inherited_positions(
    tactic: Tactic,
    catalog: "TacticCatalog",
    cfg: Optional[ResolverConfig] = None,
) -> List[ResolvedPosition]:
    """What the tactic starts from: its parent's resolution, or the bare formation."""
    if tactic.parent_tactic_id:
        parent = catalog.get_tactic(tactic.parent_tactic_id)
        return resolve_tactic(parent, catalog, cfg)
    return base_positions(catalog.get_formation(tactic.parent_formation_id))


def is_field_overridden(
    tactic: Tactic,
    position_index: int,
    field: str,
    catalog: "TacticCatalog",
    cfg: Optional[ResolverConfig] = None,
) -> bool:
    """
    True if the tactic sets `field` for this position to something other than
    what it inherits. Without a parent tactic any value set counts.
    """
    _check_field(field)
    ov = tactic.position_overrides.get(position_index)
    if ov is None or getattr(ov, field) is None:
        return False

    if not tactic.parent_tactic_id:
        return True

    inherited = inherited_positions(tactic, catalog, cfg)
    if not 0 <= position_index < len(inherited):
        return True

    own = _normalize(field, getattr(ov, field))
    parent_value = _normalize(field, getattr(inherited[position_index], field))
    return own != parent_value


def overridden_fields(
    tactic: Tactic,
    catalog: "TacticCatalog",
    cfg: Optional[ResolverConfig] = None,
) -> List[OverrideInfo]:
    """
    Flat list of every field the tactic overrides, with the value it replaces.

    Ordered by position index, then field order (x, y, direction, role, responsibilities).
    """
    if cfg is None:
        cfg = ResolverConfig()

    inherited = inherited_positions(tactic, catalog, cfg)

    out: List[OverrideInfo] = []
    for key in sorted(tactic.position_overrides.keys()):
        idx = check_index(key, len(inherited), cfg, label=tactic.id)
        if idx is None:
            continue
        ov = tactic.position_overrides[key]
        pos = inherited[idx]
        for f in ov.present_fields():
            out.append(
                OverrideInfo(
                    position_index=idx,
                    label=pos.label,
                    field=f,
                    original_value=getattr(pos, f),
                    overridden_value=getattr(ov, f),
                    tactic_id=tactic.id,
                    tactic_name=tactic.name,
                )
            )
    return out


def _check_field(field: str) -> None:
    if field not in OVERRIDE_FIELDS:
        raise ValidationError("field", f"Unknown override field '{field}'.")


def _normalize(field: str, value: Any) -> Any:
    if value is None:
        return None
    if field in ("x", "y"):
        return float(value)
    if field == "key_responsibilities":
        return tuple(value)
    return value


# -----------------------
# Principles
# -----------------------

def positions_for_principle(principle: Principle, squad_size: int) -> Tuple[int, ...]:
    """Indices a principle highlights; an empty index set means every position."""
    if not principle.position_indices:
        return tuple(range(squad_size))
    return tuple(sorted(i for i in set(principle.position_indices) if 0 <= i < squad_size))


def principles_for_position(tactic: Tactic, position_index: int) -> List[Principle]:
    return [
        p for p in tactic.principles
        if not p.position_indices or position_index in p.position_indices
    ]

