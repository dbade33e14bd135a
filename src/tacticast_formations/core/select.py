from __future__ import annotations

from typing import Any, Dict, List, Optional


def tactic_records(obj: Any) -> List[Any]:
    """
    Tactic records from either:
      - a catalog export: {"formations": [...], "tactics": [...]}, or
      - a bare list of tactic objects.
    """
    if isinstance(obj, dict):
        tactics = obj.get("tactics", [])
        if not isinstance(tactics, list):
            raise ValueError("Catalog 'tactics' must be a list.")
        return tactics

    if isinstance(obj, list):
        return obj

    raise ValueError("Tactic JSON must be a catalog dict or a list of tactics.")


def select_tactic(
    obj: Any,
    tactic_id: Optional[str] = None,
    tactic_index: int = 0,
) -> Dict[str, Any]:
    """
    Select a single raw tactic dict from a catalog export or tactic list.

    Selection rules:
      - if tactic_id is provided, select first tactic whose id matches
      - else select tactic_index (default 0)
    """
    tactics = tactic_records(obj)
    if not tactics:
        raise ValueError("Tactic JSON contains no tactics.")

    if tactic_id is not None:
        tid = str(tactic_id)
        for t in tactics:
            if isinstance(t, dict) and str(t.get("id", "")) == tid:
                return t
        raise ValueError(f"tactic_id '{tactic_id}' not found in tactic list.")

    idx = int(tactic_index)
    if idx < 0 or idx >= len(tactics):
        raise ValueError(f"tactic_index {idx} out of range (len={len(tactics)}).")

    t = tactics[idx]
    if not isinstance(t, dict):
        raise ValueError(f"tactics[{idx}] is not a dict.")
    return t
