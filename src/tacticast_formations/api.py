from __future__ import annotations

from typing import Any, List, Optional, Sequence

from tacticast_formations.catalog import TacticCatalog
from tacticast_formations.config import ResolverConfig
from tacticast_formations.core.chain import resolve_tactic
from tacticast_formations.core.resolve import resolve_positions
from tacticast_formations.io import parse_catalog
from tacticast_formations.types import OverrideLayer, ResolvedPosition


def resolve_tactic_positions(
    catalog_data: Any,
    tactic_id: str,
    cfg: Optional[ResolverConfig] = None,
) -> List[ResolvedPosition]:
    """
    Public API: resolve one tactic through its inheritance chain.

    Inputs:
      catalog_data:
        - a TacticCatalog, or
        - a catalog export dict {"formations": [...], "tactics": [...]}

    Output:
      list[ResolvedPosition], one per position index of the base formation, in order.

    Guarantees:
      - the narrowest layer defining a field wins, per field
      - overridden_by lists contributing tactic ids, broadest first
      - fails with NotFoundError / ValidationError / IntegrityError, never partially
    """
    catalog = _as_catalog(catalog_data, cfg)
    return resolve_tactic(catalog.get_tactic(tactic_id), catalog, cfg or catalog.cfg)


def resolve_formation_positions(
    catalog_data: Any,
    formation_id: str,
    layers: Sequence[OverrideLayer] = (),
    cfg: Optional[ResolverConfig] = None,
) -> List[ResolvedPosition]:
    """
    Public API: resolve a bare formation with caller-supplied override layers
    (ordered broadest first). With no layers the formation defaults come back.
    """
    catalog = _as_catalog(catalog_data, cfg)
    return resolve_positions(catalog.get_formation(formation_id), layers, cfg or catalog.cfg)


def _as_catalog(catalog_data: Any, cfg: Optional[ResolverConfig]) -> TacticCatalog:
    # caller-owned catalogs are never modified
    if isinstance(catalog_data, TacticCatalog):
        return catalog_data
    return parse_catalog(catalog_data, cfg)
