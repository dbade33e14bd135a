from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Tuple

IndexPolicy = Literal["raise", "ignore"]


@dataclass
class ResolverConfig:
    """
    Configuration for the formation/tactic resolver.

    Design goals:
    - Strict by default (bad override data fails loudly)
    - Explicit limits that match the stored data model
    - One place to relax validation for legacy imports
    """

    # -----------------------
    # Pitch coordinates
    # -----------------------

    # x/y are percentages of pitch width/length
    coord_min: float = 0.0
    coord_max: float = 100.0

    # -----------------------
    # Directions
    # -----------------------

    # None disables the check (free-text directions)
    allowed_directions: Optional[Tuple[str, ...]] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

    # -----------------------
    # Override validation
    # -----------------------

    # "raise" -> ValidationError on out-of-range position index
    # "ignore" -> skip the entry and log a warning
    invalid_index_policy: IndexPolicy = "raise"

    # -----------------------
    # Inheritance
    # -----------------------

    # Longest parent-tactic chain followed before failing
    max_chain_depth: int = 10

    # Narrower layers add to inherited key responsibilities instead of replacing them
    append_key_responsibilities: bool = True

    def as_dict(self) -> Dict[str, Any]:
        """Convenience for logging."""
        return self.__dict__.copy()
