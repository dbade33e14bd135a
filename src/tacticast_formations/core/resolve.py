from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from tacticast_formations.config import ResolverConfig
from tacticast_formations.core.overrides import normalize_overrides
from tacticast_formations.errors import ValidationError
from tacticast_formations.types import Formation, OverrideLayer, PositionOverride, ResolvedPosition


# -----------------------
# Formation checks
# -----------------------

def check_formation(formation: Formation) -> None:
    """
    Enforced invariants:
    - one position per squad slot
    - indices unique and contiguous 0..squad_size-1, in order
    """
    if formation.squad_size <= 0:
        raise ValidationError(
            "squadSize",
            f"Squad size must be positive, got {formation.squad_size}.",
            formation_id=formation.id,
        )

    if len(formation.positions) != formation.squad_size:
        raise ValidationError(
            "positions",
            f"Formation has {len(formation.positions)} positions for squad size {formation.squad_size}.",
            formation_id=formation.id,
        )

    for expected, pos in enumerate(formation.positions):
        if pos.index != expected:
            raise ValidationError(
                "positions",
                f"Position indices must be contiguous from 0; found {pos.index} at slot {expected}.",
                formation_id=formation.id,
            )


def check_squad_size(squad_size: int, formation: Formation, tactic_id: str = "") -> None:
    if squad_size != formation.squad_size:
        raise ValidationError(
            "squadSize",
            f"Squad size {squad_size} does not match formation squad size {formation.squad_size}.",
            tactic_id=tactic_id,
            formation_id=formation.id,
        )


# -----------------------
# Resolution
# -----------------------

def base_positions(formation: Formation) -> List[ResolvedPosition]:
    """Resolved view of a bare formation: defaults only, no provenance."""
    check_formation(formation)
    return [
        ResolvedPosition(
            index=p.index,
            label=p.label,
            x=float(p.x),
            y=float(p.y),
            direction=p.direction,
            source_formation_id=formation.id,
        )
        for p in formation.positions
    ]


def apply_layer(
    positions: Sequence[ResolvedPosition],
    layer: OverrideLayer,
    cfg: Optional[ResolverConfig] = None,
) -> List[ResolvedPosition]:
    """
    Apply one override layer on top of already-resolved positions.

    Only fields present in an override are replaced (partial merge). The layer
    label is appended to overridden_by for every position it actually changed.
    Returns NEW ResolvedPosition objects (ResolvedPosition is frozen).
    """
    if cfg is None:
        cfg = ResolverConfig()

    overrides = normalize_overrides(layer.overrides, len(positions), cfg, label=layer.label)

    out: List[ResolvedPosition] = []
    for pos in positions:
        ov = overrides.get(pos.index)
        if ov is None:
            out.append(pos)
            continue
        out.append(_apply_one(pos, ov, layer.label, cfg))
    return out


def resolve_positions(
    formation: Formation,
    layers: Sequence[OverrideLayer] = (),
    cfg: Optional[ResolverConfig] = None,
) -> List[ResolvedPosition]:
    """
    Fold ordered override layers (broadest first) over a base formation.

    For each field of each position the narrowest layer that defines it wins;
    otherwise the formation default is kept. source_formation_id is always the
    base formation id.
    """
    if cfg is None:
        cfg = ResolverConfig()

    positions = base_positions(formation)
    for layer in layers:
        positions = apply_layer(positions, layer, cfg)
    return positions


def _apply_one(
    pos: ResolvedPosition,
    ov: PositionOverride,
    label: str,
    cfg: ResolverConfig,
) -> ResolvedPosition:
    responsibilities: Tuple[str, ...] = pos.key_responsibilities
    if ov.key_responsibilities is not None:
        if cfg.append_key_responsibilities:
            responsibilities = _append_unique(responsibilities, ov.key_responsibilities)
        else:
            responsibilities = tuple(ov.key_responsibilities)

    overridden_by = pos.overridden_by
    if label not in overridden_by:
        overridden_by = overridden_by + (label,)

    return replace(
        pos,
        x=float(ov.x) if ov.x is not None else pos.x,
        y=float(ov.y) if ov.y is not None else pos.y,
        direction=ov.direction if ov.direction is not None else pos.direction,
        role_description=(
            ov.role_description if ov.role_description is not None else pos.role_description
        ),
        key_responsibilities=responsibilities,
        overridden_by=overridden_by,
    )


def _append_unique(existing: Sequence[str], extra: Sequence[str]) -> Tuple[str, ...]:
    out = list(existing)
    for item in extra:
        if item not in out:
            out.append(item)
    return tuple(out)
