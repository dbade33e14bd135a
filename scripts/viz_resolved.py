from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from tacticast_formations import ResolverConfig, resolve_tactic_positions
from tacticast_formations.core import positions_for_principle, select_tactic
from tacticast_formations.io import load_json, parse_catalog
from tacticast_formations.types import ResolvedPosition

# unit vectors on the percentage pitch (y grows towards the opponent goal)
_DIRECTION_VECTORS: Dict[str, Tuple[float, float]] = {
    "N": (0.0, 1.0),
    "NE": (0.7071, 0.7071),
    "E": (1.0, 0.0),
    "SE": (0.7071, -0.7071),
    "S": (0.0, -1.0),
    "SW": (-0.7071, -0.7071),
    "W": (-1.0, 0.0),
    "NW": (-0.7071, 0.7071),
}


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Render a resolved tactic on a pitch.")
    p.add_argument("--catalog", required=True, help="Path to catalog JSON (formations + tactics).")
    p.add_argument("--tactic_id", default=None, help="Select tactic by id.")
    p.add_argument("--tactic_index", type=int, default=0, help="Select tactic by index if no id is given.")
    p.add_argument("--out", required=True, help="Output PNG path.")
    p.add_argument("--principle", type=int, default=None,
                   help="Highlight the positions of this principle (index into the tactic's principles).")
    p.add_argument("--lenient", action="store_true",
                   help="Skip out-of-range override indices instead of failing.")
    return p.parse_args()


def _draw_pitch(ax) -> None:
    # Pitch outline (percent units)
    ax.plot([0, 100, 100, 0, 0], [0, 0, 100, 100, 0], linewidth=1)

    # Halfway line
    ax.plot([0, 100], [50, 50], linewidth=1)

    # Center circle (approx)
    r = 9.0
    theta = [i * 0.1 for i in range(0, 63)]
    xs = [50 + r * math.cos(t) for t in theta]
    ys = [50 + r * math.sin(t) for t in theta]
    ax.plot(xs, ys, linewidth=1)

    ax.set_aspect("equal", adjustable="box")
    ax.set_xlim(-4, 104)
    ax.set_ylim(-4, 104)
    ax.set_xlabel("x (% width)")
    ax.set_ylabel("y (% length)")


def _direction_arrow(pos: ResolvedPosition, length: float = 6.0) -> Optional[Tuple[List[float], List[float]]]:
    vec = _DIRECTION_VECTORS.get(pos.direction or "")
    if vec is None:
        return None
    return [pos.x, pos.x + vec[0] * length], [pos.y, pos.y + vec[1] * length]


def main() -> None:
    args = _parse_args()
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)

    cfg = ResolverConfig(invalid_index_policy="ignore" if args.lenient else "raise")

    root = load_json(args.catalog)
    raw = select_tactic(root, tactic_id=args.tactic_id, tactic_index=args.tactic_index)
    catalog = parse_catalog(root, cfg)
    tactic = catalog.get_tactic(str(raw["id"]))

    resolved = resolve_tactic_positions(catalog, tactic.id, cfg)

    highlighted = set()
    if args.principle is not None:
        principle = tactic.principles[args.principle]
        highlighted = set(positions_for_principle(principle, tactic.squad_size))

    fig, ax = plt.subplots(figsize=(7, 9))
    _draw_pitch(ax)

    for pos in resolved:
        # filled = inherited defaults, square = customized somewhere in the chain
        marker = "s" if pos.overridden_by else "o"
        size = 110 if pos.index in highlighted else 60
        ax.scatter([pos.x], [pos.y], marker=marker, s=size)
        ax.text(pos.x + 1.5, pos.y + 1.5, f"{pos.index}:{pos.label}", fontsize=8)

        if tactic.id in pos.overridden_by:
            ax.text(pos.x + 1.5, pos.y - 3.5, tactic.scope.level, fontsize=6)

        arrow = _direction_arrow(pos)
        if arrow is not None:
            ax.plot(arrow[0], arrow[1], linewidth=1.25)

    ax.set_title(f"{tactic.name} | scope={tactic.scope.level} | squad={tactic.squad_size}")

    fig.tight_layout()
    fig.savefig(out, dpi=160)
    plt.close(fig)

    n_custom = sum(1 for p in resolved if p.overridden_by)
    print(f"Saved {len(resolved)} positions ({n_custom} customized) to: {out.resolve()}")


if __name__ == "__main__":
    main()
