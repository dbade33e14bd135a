from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from tacticast_formations.config import ResolverConfig
from tacticast_formations.errors import ValidationError
from tacticast_formations.types import PositionOverride

logger = logging.getLogger(__name__)


# -----------------------
# Single override records
# -----------------------

def merge_override(base: PositionOverride, top: PositionOverride) -> PositionOverride:
    """Field-level merge: fields set on top win, everything else comes from base."""
    return PositionOverride(
        x=top.x if top.x is not None else base.x,
        y=top.y if top.y is not None else base.y,
        direction=top.direction if top.direction is not None else base.direction,
        role_description=(
            top.role_description if top.role_description is not None else base.role_description
        ),
        key_responsibilities=(
            top.key_responsibilities
            if top.key_responsibilities is not None
            else base.key_responsibilities
        ),
    )


def validate_override(
    index: int,
    override: PositionOverride,
    cfg: ResolverConfig,
) -> None:
    """Check coordinate range and direction vocabulary of one override."""
    for name in ("x", "y"):
        value = getattr(override, name)
        if value is None:
            continue
        if not (cfg.coord_min <= float(value) <= cfg.coord_max):
            raise ValidationError(
                f"positionOverrides[{index}].{name}",
                f"{name} must be within [{cfg.coord_min}, {cfg.coord_max}], got {value}.",
                position_index=index,
            )

    if override.direction is not None and cfg.allowed_directions is not None:
        if override.direction not in cfg.allowed_directions:
            raise ValidationError(
                f"positionOverrides[{index}].direction",
                f"Unknown direction '{override.direction}'.",
                position_index=index,
            )


# -----------------------
# Override maps
# -----------------------

def prune_overrides(overrides: Mapping[int, PositionOverride]) -> Dict[int, PositionOverride]:
    """Drop entries with no fields set; they are indistinguishable from absence."""
    return {idx: ov for idx, ov in overrides.items() if not ov.is_empty}


def as_index(key: Any) -> Optional[int]:
    """
    Strict position-index coercion: ints (not bools), integral floats and
    digit strings. Anything else returns None.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, float):
        return int(key) if key.is_integer() else None
    if isinstance(key, str):
        text = key.strip()
        digits = text[1:] if text.startswith("-") else text
        return int(text) if digits.isdecimal() else None
    return None


def check_index(index: Any, squad_size: int, cfg: ResolverConfig, label: str = "") -> Optional[int]:
    """
    Coerce an override key to int and check it against [0, squad_size).

    Returns None when the entry should be skipped (cfg.invalid_index_policy == "ignore").
    """
    idx = as_index(index)
    if idx is not None and 0 <= idx < squad_size:
        return idx

    if cfg.invalid_index_policy == "ignore":
        logger.warning(
            "Ignoring override for position index %r in layer %r (squad size %d)",
            index, label, squad_size,
        )
        return None

    raise ValidationError(
        f"positionOverrides[{index}]",
        f"Position index must be an integer in [0, {squad_size}).",
        layer=label,
        squad_size=squad_size,
    )


def normalize_overrides(
    overrides: Mapping[Any, PositionOverride],
    squad_size: int,
    cfg: Optional[ResolverConfig] = None,
    *,
    label: str = "",
) -> Dict[int, PositionOverride]:
    """
    Validate and clean an override map.

    - keys coerced to int (JSON object keys arrive as strings)
    - out-of-range keys rejected (or skipped, per cfg.invalid_index_policy)
    - empty overrides pruned
    - coordinates and directions validated
    """
    if cfg is None:
        cfg = ResolverConfig()

    out: Dict[int, PositionOverride] = {}
    for key, ov in overrides.items():
        idx = check_index(key, squad_size, cfg, label=label)
        if idx is None or ov.is_empty:
            continue
        validate_override(idx, ov, cfg)
        out[idx] = ov
    return out
