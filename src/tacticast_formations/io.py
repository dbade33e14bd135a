from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tacticast_formations.catalog import TacticCatalog
from tacticast_formations.config import ResolverConfig
from tacticast_formations.core.overrides import as_index, merge_override
from tacticast_formations.core.scope import parse_scope, scope_to_dict
from tacticast_formations.errors import ValidationError
from tacticast_formations.types import (
    Formation,
    Position,
    PositionOverride,
    Principle,
    Relationship,
    ResolvedPosition,
    Tactic,
)


def load_json(path: str) -> Any:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"JSON file not found: {path}")
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def save_json(obj: Any, path: str, indent: int = 2) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=indent)


def ensure_catalog_schema(catalog: Dict[str, Any]) -> None:
    """
    Light schema validation for a catalog export.
    Raises ValueError if required keys are missing.
    """
    if not isinstance(catalog, dict):
        raise ValueError("Catalog must be a dict.")

    if "formations" not in catalog or not isinstance(catalog["formations"], list):
        raise ValueError("Catalog missing 'formations' list.")

    if "tactics" in catalog and not isinstance(catalog["tactics"], list):
        raise ValueError("Catalog 'tactics' must be a list.")


# -----------------------
# Parsing
# -----------------------

def parse_formation(obj: Dict[str, Any]) -> Formation:
    """
    Positions are ordered by "positionIndex" when present, else by list order.
    """
    raw_positions = list(obj.get("positions", []) or [])
    if any("positionIndex" in p for p in raw_positions):
        raw_positions.sort(key=lambda p: _index_field(p, "positionIndex"))

    positions = tuple(
        Position(
            index=_index_field(p, "positionIndex") if "positionIndex" in p else i,
            label=str(p.get("position", "") or ""),
            x=float(p.get("x", p.get("xCoord", 0.0)) or 0.0),
            y=float(p.get("y", p.get("yCoord", 0.0)) or 0.0),
            direction=p.get("direction"),
        )
        for i, p in enumerate(raw_positions)
    )

    return Formation(
        id=_required(obj, "id", "Formation"),
        name=str(obj.get("name", "") or ""),
        squad_size=int(obj.get("squadSize", len(positions))),
        positions=positions,
        summary=str(obj.get("summary", "") or ""),
        tags=parse_tags(obj.get("tags")),
    )


def parse_override(obj: Dict[str, Any]) -> PositionOverride:
    responsibilities = obj.get("keyResponsibilities")
    x = obj.get("x", obj.get("xCoord"))
    y = obj.get("y", obj.get("yCoord"))
    direction = obj.get("direction")
    role = obj.get("roleDescription")
    return PositionOverride(
        x=float(x) if x is not None else None,
        y=float(y) if y is not None else None,
        # blank strings mean "not set" in stored rows
        direction=direction if direction else None,
        role_description=role if role else None,
        key_responsibilities=tuple(responsibilities) if responsibilities is not None else None,
    )


def parse_overrides(raw: Any) -> Dict[Any, PositionOverride]:
    """
    Accepts either a map {"9": {...}} or a row list [{"positionIndex": 9, ...}].

    Keys are coerced to int where possible; anything else is kept so that
    validation can report it.
    """
    if raw is None:
        return {}

    if isinstance(raw, dict):
        items: Iterable[Tuple[Any, Dict[str, Any]]] = raw.items()
    elif isinstance(raw, list):
        items = ((row.get("positionIndex"), row) for row in raw)
    else:
        raise ValidationError("positionOverrides", "Must be a dict or a list.")

    out: Dict[Any, PositionOverride] = {}
    for key, body in items:
        idx = _int_or_raw(key)
        ov = parse_override(body or {})
        out[idx] = merge_override(out[idx], ov) if idx in out else ov
    return out


def parse_principle(obj: Dict[str, Any]) -> Principle:
    return Principle(
        title=str(obj.get("title", "") or ""),
        description=str(obj.get("description", "") or ""),
        position_indices=parse_position_indices(obj.get("positionIndices")),
    )


def parse_relationship(obj: Dict[str, Any]) -> Relationship:
    return Relationship(
        from_index=_index_field(obj, "fromPositionIndex"),
        to_index=_index_field(obj, "toPositionIndex"),
        kind=str(obj.get("type", "") or ""),
        description=str(obj.get("description", "") or ""),
    )


def parse_tactic(obj: Dict[str, Any], squad_size: Optional[int] = None) -> Tactic:
    """
    squad_size is used when the record does not carry "squadSize"
    (it is normally copied from the base formation).
    """
    if "squadSize" in obj:
        squad_size = int(obj["squadSize"])
    if squad_size is None:
        raise ValidationError("squadSize", "Squad size missing and no base formation to copy it from.")

    return Tactic(
        id=_required(obj, "id", "Tactic"),
        name=str(obj.get("name", "") or ""),
        parent_formation_id=_required(obj, "parentFormationId", "Tactic"),
        squad_size=squad_size,
        scope=parse_scope(obj.get("scope") or {}),
        parent_tactic_id=obj.get("parentTacticId") or None,
        position_overrides=parse_overrides(obj.get("positionOverrides")),
        principles=tuple(parse_principle(p) for p in obj.get("principles", []) or []),
        relationships=tuple(parse_relationship(r) for r in obj.get("relationships", []) or []),
        summary=str(obj.get("summary", "") or ""),
        style=obj.get("style") or None,
        tags=parse_tags(obj.get("tags")),
    )


def parse_catalog(obj: Dict[str, Any], cfg: Optional[ResolverConfig] = None) -> TacticCatalog:
    ensure_catalog_schema(obj)

    catalog = TacticCatalog(cfg=cfg)
    for f in obj["formations"]:
        catalog.add_formation(parse_formation(f))

    for t in obj.get("tactics", []) or []:
        default_size = None
        fid = t.get("parentFormationId")
        if fid is not None:
            default_size = catalog.get_formation(str(fid)).squad_size
        catalog.add_tactic(parse_tactic(t, squad_size=default_size))

    return catalog


def parse_position_indices(raw: Any) -> Tuple[int, ...]:
    """List of ints, or a CSV string like "9,10" (stored form)."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        # empty tokens ("9,,10", trailing comma) are skipped
        values = [s.strip() for s in raw.split(",") if s.strip()]
    else:
        values = list(raw)

    out = []
    for v in values:
        idx = as_index(v)
        if idx is None:
            raise ValidationError("principles[].positionIndices", f"Not a position index: {v!r}.")
        out.append(idx)
    return tuple(out)


def parse_tags(raw: Any) -> Tuple[str, ...]:
    """List of strings, a JSON array string, or a CSV string."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return ()
        if text.startswith("["):
            try:
                values = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValidationError("tags", f"Malformed tag list: {exc}") from exc
            return tuple(str(v) for v in values)
        return tuple(s.strip() for s in text.split(",") if s.strip())
    return tuple(str(v) for v in raw)


def _required(obj: Dict[str, Any], key: str, entity: str) -> str:
    value = obj.get(key)
    if value is None or not str(value).strip():
        raise ValidationError(key, f"{entity} {key} is required.")
    return str(value)


def _index_field(obj: Dict[str, Any], key: str) -> int:
    idx = as_index(obj.get(key))
    if idx is None:
        raise ValidationError(key, f"Not a position index: {obj.get(key)!r}.")
    return idx


def _int_or_raw(key: Any) -> Any:
    idx = as_index(key)
    return key if idx is None else idx


# -----------------------
# Output
# -----------------------

def resolved_to_dict(positions: List[ResolvedPosition]) -> List[Dict[str, Any]]:
    """JSON-friendly view for the presentation layer."""
    return [
        {
            "positionIndex": p.index,
            "position": p.label,
            "x": p.x,
            "y": p.y,
            "direction": p.direction,
            "roleDescription": p.role_description,
            "keyResponsibilities": list(p.key_responsibilities),
            "sourceFormationId": p.source_formation_id,
            "overriddenBy": list(p.overridden_by),
        }
        for p in positions
    ]


def catalog_to_dict(catalog: TacticCatalog) -> Dict[str, Any]:
    """Inverse of parse_catalog (normalized form)."""
    return {
        "formations": [_formation_to_dict(f) for f in catalog.formations],
        "tactics": [_tactic_to_dict(t) for t in catalog.tactics],
    }


def _formation_to_dict(f: Formation) -> Dict[str, Any]:
    return {
        "id": f.id,
        "name": f.name,
        "squadSize": f.squad_size,
        "summary": f.summary,
        "tags": list(f.tags),
        "positions": [
            {"positionIndex": p.index, "position": p.label, "x": p.x, "y": p.y, "direction": p.direction}
            for p in f.positions
        ],
    }


def _tactic_to_dict(t: Tactic) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for idx, ov in sorted(t.position_overrides.items()):
        body: Dict[str, Any] = {}
        if ov.x is not None:
            body["x"] = ov.x
        if ov.y is not None:
            body["y"] = ov.y
        if ov.direction is not None:
            body["direction"] = ov.direction
        if ov.role_description is not None:
            body["roleDescription"] = ov.role_description
        if ov.key_responsibilities is not None:
            body["keyResponsibilities"] = list(ov.key_responsibilities)
        overrides[str(idx)] = body

    return {
        "id": t.id,
        "name": t.name,
        "parentFormationId": t.parent_formation_id,
        "parentTacticId": t.parent_tactic_id,
        "squadSize": t.squad_size,
        "scope": scope_to_dict(t.scope),
        "positionOverrides": overrides,
        "principles": [
            {"title": p.title, "description": p.description, "positionIndices": list(p.position_indices)}
            for p in t.principles
        ],
        "relationships": [
            {
                "fromPositionIndex": r.from_index,
                "toPositionIndex": r.to_index,
                "type": r.kind,
                "description": r.description,
            }
            for r in t.relationships
        ],
        "summary": t.summary,
        "style": t.style,
        "tags": list(t.tags),
    }
