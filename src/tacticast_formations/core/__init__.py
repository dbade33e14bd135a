from tacticast_formations.core.chain import build_chain, chain_layers, resolve_relationships, resolve_tactic
from tacticast_formations.core.inspect import (
    is_field_overridden,
    overridden_fields,
    positions_for_principle,
    principles_for_position,
)
from tacticast_formations.core.overrides import merge_override, normalize_overrides, prune_overrides
from tacticast_formations.core.resolve import apply_layer, base_positions, resolve_positions
from tacticast_formations.core.scope import (
    parse_scope,
    scope_contains,
    split_by_scope,
    tactics_available_for_scope,
)
from tacticast_formations.core.select import select_tactic
