from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from tacticast_formations.config import ResolverConfig
from tacticast_formations.core.chain import resolve_tactic
from tacticast_formations.core.overrides import normalize_overrides
from tacticast_formations.core.resolve import check_formation, check_squad_size, resolve_positions
from tacticast_formations.core.scope import check_parent_scope, split_by_scope, tactics_available_for_scope
from tacticast_formations.errors import IntegrityError, NotFoundError, ValidationError
from tacticast_formations.types import (
    RELATIONSHIP_KINDS,
    Formation,
    OverrideLayer,
    PositionOverride,
    Principle,
    Relationship,
    ResolvedPosition,
    Scope,
    Tactic,
)

logger = logging.getLogger(__name__)


class TacticCatalog:
    """
    In-memory store of formations and tactics.

    Supplies the resolver with base formations and parent tactics by id, and
    applies the create/update rules for tactics. Resolution is computed on
    read and never stored.
    """

    def __init__(
        self,
        formations: Iterable[Formation] = (),
        tactics: Iterable[Tactic] = (),
        cfg: Optional[ResolverConfig] = None,
    ):
        self.cfg = cfg or ResolverConfig()
        self._formations: Dict[str, Formation] = {}
        self._tactics: Dict[str, Tactic] = {}

        for f in formations:
            self.add_formation(f)
        for t in tactics:
            self.add_tactic(t)

    # -----------------------
    # Lookup
    # -----------------------

    @property
    def formations(self) -> List[Formation]:
        return list(self._formations.values())

    @property
    def tactics(self) -> List[Tactic]:
        return list(self._tactics.values())

    def get_formation(self, formation_id: str) -> Formation:
        f = self._formations.get(formation_id)
        if f is None:
            raise NotFoundError("Formation", formation_id)
        return f

    def get_tactic(self, tactic_id: str) -> Tactic:
        t = self._tactics.get(tactic_id)
        if t is None:
            raise NotFoundError("Tactic", tactic_id)
        return t

    # -----------------------
    # Loading
    # -----------------------

    def add_formation(self, formation: Formation) -> None:
        check_formation(formation)
        self._formations[formation.id] = formation

    def add_tactic(self, tactic: Tactic) -> None:
        """
        Store an already-built tactic (e.g. parsed from an export).

        Only checks that need the base formation run here; parent links are
        checked when the tactic is resolved, so tactics may be added in any order.
        """
        formation = self.get_formation(tactic.parent_formation_id)
        self._tactics[tactic.id] = self._validated(tactic, formation)

    # -----------------------
    # Create / update
    # -----------------------

    def create_tactic(
        self,
        name: str,
        parent_formation_id: str,
        scope: Scope,
        *,
        parent_tactic_id: Optional[str] = None,
        position_overrides: Optional[Mapping[int, PositionOverride]] = None,
        principles: Sequence[Principle] = (),
        relationships: Sequence[Relationship] = (),
        summary: str = "",
        style: Optional[str] = None,
        tags: Sequence[str] = (),
        tactic_id: Optional[str] = None,
    ) -> Tactic:
        """
        Create a tactic scoped to a club, age group, or team.

        squad_size is copied from the base formation. When a parent tactic is
        given it must exist, share the base formation and enclose the new scope.
        """
        formation = self.get_formation(parent_formation_id)

        tactic = Tactic(
            id=tactic_id or str(uuid.uuid4()),
            name=name,
            parent_formation_id=formation.id,
            squad_size=formation.squad_size,
            scope=scope,
            parent_tactic_id=parent_tactic_id,
            position_overrides=dict(position_overrides or {}),
            principles=tuple(principles),
            relationships=tuple(relationships),
            summary=summary,
            style=style,
            tags=tuple(tags),
        )
        if tactic.id in self._tactics:
            raise ValidationError("id", f"Tactic '{tactic.id}' already exists.")

        tactic = self._validated(tactic, formation)
        self._check_parent(tactic)

        self._tactics[tactic.id] = tactic
        logger.info("Created %s-scoped tactic %s (%s)", scope.level, tactic.id, tactic.name)
        return tactic

    def update_tactic(
        self,
        tactic_id: str,
        *,
        name: Optional[str] = None,
        parent_formation_id: Optional[str] = None,
        position_overrides: Optional[Mapping[int, PositionOverride]] = None,
        principles: Optional[Sequence[Principle]] = None,
        relationships: Optional[Sequence[Relationship]] = None,
        summary: Optional[str] = None,
        style: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> Tactic:
        """
        Edit a tactic in place. Overrides, principles and relationships are
        replaced wholesale when given.

        Moving the tactic to another base formation resets its overrides and
        relationships (indices no longer mean the same slots) unless new ones
        are supplied in the same call.
        """
        current = self.get_tactic(tactic_id)
        changes: Dict[str, object] = {}

        formation = self.get_formation(current.parent_formation_id)
        if parent_formation_id is not None and parent_formation_id != current.parent_formation_id:
            formation = self.get_formation(parent_formation_id)
            changes["parent_formation_id"] = formation.id
            changes["squad_size"] = formation.squad_size
            if position_overrides is None:
                changes["position_overrides"] = {}
            if relationships is None:
                changes["relationships"] = ()
            logger.info(
                "Tactic %s moved to formation %s; dropped %d overrides, %d relationships",
                tactic_id,
                formation.id,
                0 if position_overrides is not None else len(current.position_overrides),
                0 if relationships is not None else len(current.relationships),
            )

        if name is not None:
            changes["name"] = name
        if position_overrides is not None:
            changes["position_overrides"] = dict(position_overrides)
        if principles is not None:
            changes["principles"] = tuple(principles)
        if relationships is not None:
            changes["relationships"] = tuple(relationships)
        if summary is not None:
            changes["summary"] = summary
        if style is not None:
            changes["style"] = style
        if tags is not None:
            changes["tags"] = tuple(tags)

        updated = self._validated(replace(current, **changes), formation)
        self._check_parent(updated)

        self._tactics[tactic_id] = updated
        return updated

    # -----------------------
    # Resolution
    # -----------------------

    def resolve(self, tactic_id: str) -> List[ResolvedPosition]:
        return resolve_tactic(self.get_tactic(tactic_id), self, self.cfg)

    def resolve_formation(
        self,
        formation_id: str,
        layers: Sequence[OverrideLayer] = (),
    ) -> List[ResolvedPosition]:
        return resolve_positions(self.get_formation(formation_id), layers, self.cfg)

    def available_for_scope(
        self,
        club_id: str,
        age_group_id: Optional[str] = None,
        team_id: Optional[str] = None,
    ) -> List[Tactic]:
        return tactics_available_for_scope(self.tactics, club_id, age_group_id, team_id)

    def tactics_by_scope(
        self,
        club_id: str,
        age_group_id: Optional[str] = None,
        team_id: Optional[str] = None,
    ) -> Tuple[List[Tactic], List[Tactic]]:
        return split_by_scope(self.tactics, club_id, age_group_id, team_id)

    # -----------------------
    # Validation
    # -----------------------

    def _validated(self, tactic: Tactic, formation: Formation) -> Tactic:
        if not tactic.name or not tactic.name.strip():
            raise ValidationError("name", "Name is required.", tactic_id=tactic.id)

        check_squad_size(tactic.squad_size, formation, tactic_id=tactic.id)

        overrides = normalize_overrides(
            tactic.position_overrides, formation.squad_size, self.cfg, label=tactic.id
        )
        _check_principles(tactic.principles, formation.squad_size)
        _check_relationships(tactic.relationships, formation.squad_size)

        return replace(tactic, position_overrides=overrides)

    def _check_parent(self, tactic: Tactic) -> None:
        if not tactic.parent_tactic_id:
            return
        if tactic.parent_tactic_id == tactic.id:
            raise IntegrityError("Tactic cannot inherit from itself", {"tactic_id": tactic.id})

        parent = self.get_tactic(tactic.parent_tactic_id)
        if parent.parent_formation_id != tactic.parent_formation_id:
            raise IntegrityError(
                "Parent tactic is built on a different base formation",
                {"tactic_id": tactic.id, "parent_tactic_id": parent.id},
            )
        check_parent_scope(tactic, parent)


def _check_principles(principles: Sequence[Principle], squad_size: int) -> None:
    for i, p in enumerate(principles):
        if not p.title or not p.title.strip():
            raise ValidationError(f"principles[{i}].title", "Title is required.")
        for idx in p.position_indices:
            if not 0 <= idx < squad_size:
                raise ValidationError(
                    f"principles[{i}].positionIndices",
                    f"Position index {idx} outside [0, {squad_size}).",
                )


def _check_relationships(relationships: Sequence[Relationship], squad_size: int) -> None:
    for i, rel in enumerate(relationships):
        for name, idx in (("fromPositionIndex", rel.from_index), ("toPositionIndex", rel.to_index)):
            if not 0 <= idx < squad_size:
                raise ValidationError(
                    f"relationships[{i}].{name}",
                    f"Position index {idx} outside [0, {squad_size}).",
                )
        if rel.from_index == rel.to_index:
            raise ValidationError(f"relationships[{i}]", "A relationship needs two different positions.")
        if rel.kind not in RELATIONSHIP_KINDS:
            raise ValidationError(f"relationships[{i}].type", f"Unknown relationship type '{rel.kind}'.")
