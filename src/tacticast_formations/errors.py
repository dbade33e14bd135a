"""
Error hierarchy for formation and tactic resolution.

    TacticError (base, a ValueError)
    ├── NotFoundError     referenced formation or tactic is missing
    ├── ValidationError   bad input values (index range, squad size, scope ids)
    └── IntegrityError    stored graph breaks an invariant (scope order, cycles)

Resolution is pure, so nothing here is retried; callers translate these into
status codes or user-facing messages.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class TacticError(ValueError):
    """
    Base exception for resolver errors.

    Attributes:
        message: Human-readable error message
        error_code: Stable code for programmatic handling
        context_dict: Identifiers involved (tactic_id, position_index, ...)
    """

    error_code = "TACTIC_000"

    def __init__(self, message: str, context_dict: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context_dict = context_dict or {}
        super().__init__(self._build_error_message())

    def _build_error_message(self) -> str:
        if not self.context_dict:
            return f"[{self.error_code}] {self.message}"
        ctx = ", ".join(f"{k}={v}" for k, v in self.context_dict.items())
        return f"[{self.error_code}] {self.message} ({ctx})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": dict(self.context_dict),
        }


class NotFoundError(TacticError):
    """Raised when a base formation or parent tactic is not in the supplied data."""

    error_code = "TACTIC_NOT_FOUND"

    def __init__(self, entity: str, entity_id: str, **context: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} '{entity_id}' not found",
            {"entity": entity, "id": entity_id, **context},
        )


class ValidationError(TacticError):
    """
    Raised when input values are invalid.

    errors maps a field path (e.g. "positionOverrides[11]") to its messages.
    """

    error_code = "TACTIC_VALIDATION"

    def __init__(self, field: str, error: str, **context: Any):
        self.errors: Dict[str, List[str]] = {field: [error]}
        super().__init__(f"{field}: {error}", context)


class IntegrityError(TacticError):
    """
    Raised when the tactic graph breaks a structural invariant.

    Examples:
    - club-scoped tactic declaring a team-scoped parent
    - parent chain that loops back on itself
    - parent tactic built on a different base formation
    """

    error_code = "TACTIC_INTEGRITY"
