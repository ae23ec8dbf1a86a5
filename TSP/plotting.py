"""
Figures for finished runs: convergence of the best tour length and the route
of the best tour.
"""

from pathlib import Path
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from Core.search_algorithm import ProgressRecord
from TSP.tour import Tour

_PHASE_STYLES = {
    "ant_system": ("tab:blue", "Ant System round"),
    "genetic_algorithm": ("tab:orange", "GA generation"),
}


def plot_convergence(history: Sequence[ProgressRecord], save_path: Path | str,
                     title: str = "Best Tour Length") -> Optional[Path]:
    """Plot best-so-far against recorded step; returns None for an empty history."""
    if not history:
        return None
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)

    steps = np.arange(1, len(history) + 1)
    best = [rec.best_so_far for rec in history]

    plt.figure(figsize=(12, 6))
    plt.plot(steps, best, 'k-', alpha=0.6, label='Best so far')
    for phase, (color, label) in _PHASE_STYLES.items():
        idx = [i for i, rec in enumerate(history) if rec.phase == phase]
        if idx:
            plt.plot(steps[idx], [history[i].round_best for i in idx], 'o', color=color,
                     alpha=0.5, markersize=3, label=label)
    plt.title(title)
    plt.xlabel('Recorded step')
    plt.ylabel('Tour length')
    plt.grid(True, linestyle="--", alpha=0.4)
    plt.legend()
    plt.tight_layout()
    plt.savefig(save_path, dpi=150)
    plt.close()
    return save_path


def plot_route(coords: Sequence[Sequence[float]], tour: Tour, save_path: Path | str,
               length: Optional[float] = None) -> Path:
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    points = np.asarray(coords, dtype=float)
    route = points[tour.order]
    closed = np.vstack([route, route[0]])

    plt.figure(figsize=(6, 6))
    plt.plot(closed[:, 0], closed[:, 1], "-o", markersize=4)
    if len(points) <= 100:
        for city, (x, y) in zip(tour.order.tolist(), route):
            plt.text(x, y, str(city), fontsize=8, ha="right", va="bottom")
    plt.title("TSP Route" if length is None else f"TSP Route - Distance: {length:.2f}")
    plt.grid(True, linestyle="--", alpha=0.4)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150)
    plt.close()
    return save_path
