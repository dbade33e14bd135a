from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from tacticast_formations.config import ResolverConfig
from tacticast_formations.core.resolve import apply_layer, base_positions, check_squad_size
from tacticast_formations.core.scope import check_parent_scope
from tacticast_formations.errors import IntegrityError
from tacticast_formations.types import Formation, OverrideLayer, Relationship, ResolvedPosition, Tactic

if TYPE_CHECKING:
    from tacticast_formations.catalog import TacticCatalog

logger = logging.getLogger(__name__)


# -----------------------
# Chain construction
# -----------------------

def build_chain(
    tactic: Tactic,
    catalog: "TacticCatalog",
    cfg: Optional[ResolverConfig] = None,
) -> List[Tactic]:
    """
    Walk parent_tactic_id links from tactic up to its root.

    Returns tactics ordered root -> tactic (broadest first, the order layers
    are applied in).

    Enforced invariants:
    - every parent exists (NotFoundError)
    - no cycles, at most cfg.max_chain_depth ancestors (IntegrityError)
    - parent shares the child's base formation (IntegrityError)
    - parent scope encloses the child scope (IntegrityError)
    """
    if cfg is None:
        cfg = ResolverConfig()

    chain: List[Tactic] = [tactic]
    seen = {tactic.id}
    cur = tactic

    while cur.parent_tactic_id:
        if len(chain) > cfg.max_chain_depth:
            raise IntegrityError(
                f"Tactic chain deeper than {cfg.max_chain_depth} levels",
                {"tactic_id": tactic.id},
            )

        parent = catalog.get_tactic(cur.parent_tactic_id)
        if parent.id in seen:
            raise IntegrityError(
                "Tactic chain contains a cycle",
                {"tactic_id": tactic.id, "repeated_id": parent.id},
            )
        if parent.parent_formation_id != cur.parent_formation_id:
            raise IntegrityError(
                "Parent tactic is built on a different base formation",
                {
                    "tactic_id": cur.id,
                    "parent_tactic_id": parent.id,
                    "formation_id": cur.parent_formation_id,
                    "parent_formation_id": parent.parent_formation_id,
                },
            )
        check_parent_scope(cur, parent)

        chain.append(parent)
        seen.add(parent.id)
        cur = parent

    chain.reverse()
    logger.debug("Tactic chain for %s: %s", tactic.id, [t.id for t in chain])
    return chain


def chain_layers(chain: Sequence[Tactic]) -> List[OverrideLayer]:
    """One provenance-labelled layer per tactic, in application order."""
    return [OverrideLayer(label=t.id, overrides=dict(t.position_overrides)) for t in chain]


# -----------------------
# Resolution
# -----------------------

def resolve_tactic(
    tactic: Tactic,
    catalog: "TacticCatalog",
    cfg: Optional[ResolverConfig] = None,
) -> List[ResolvedPosition]:
    """
    Resolve a tactic through its whole inheritance chain.

    The parent tactic is resolved fully first, then this tactic's own overrides
    are applied on top. A tactic with no parent resolves against its base formation.
    """
    if cfg is None:
        cfg = ResolverConfig()

    formation = catalog.get_formation(tactic.parent_formation_id)
    chain = build_chain(tactic, catalog, cfg)
    return _resolve_chain(chain, formation, cfg)


def _resolve_chain(
    chain: Sequence[Tactic],
    formation: Formation,
    cfg: ResolverConfig,
) -> List[ResolvedPosition]:
    head = chain[-1]
    check_squad_size(head.squad_size, formation, tactic_id=head.id)

    if len(chain) == 1:
        below = base_positions(formation)
    else:
        below = _resolve_chain(chain[:-1], formation, cfg)

    layer = OverrideLayer(label=head.id, overrides=dict(head.position_overrides))
    return apply_layer(below, layer, cfg)


def resolve_relationships(chain: Sequence[Tactic]) -> List[Relationship]:
    """
    Relationships visible on the last tactic of a chain.

    Broader tactics contribute first; a narrower tactic redefining the same
    (from, to, kind) link replaces the inherited description in place.
    """
    merged: Dict[Tuple[int, int, str], Relationship] = {}
    for t in chain:
        for rel in t.relationships:
            merged[(rel.from_index, rel.to_index, rel.kind)] = rel
    return list(merged.values())
