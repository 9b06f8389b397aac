# evoql/sim/visualize.py
from __future__ import annotations
import matplotlib.pyplot as plt

from .world import World

def _rgba(color):
    return tuple(ch / 255.0 for ch in color)

def snapshot(world: World, title: str = "", show: bool = True, path: str | None = None):
    fig, ax = plt.subplots(figsize=(8, 6))
    ax.set_xlim(0, world.width)
    ax.set_ylim(world.height, 0)  # screen coordinates: y grows downward
    ax.set_aspect("equal")
    ax.set_facecolor((220 / 255, 220 / 255, 220 / 255))

    plants = world.plants()
    if plants:
        ax.scatter([p.x for p in plants], [p.y for p in plants],
                   c=[_rgba(p.color) for p in plants], s=40, label="Plants")
    pop = world.creatures()
    if pop:
        ax.scatter([c.x for c in pop], [c.y for c in pop],
                   c=[_rgba(c.color) for c in pop], s=90,
                   edgecolors="black", linewidths=0.5, label="Creatures")
    ax.set_title(title or f"Frame {world.frame}")
    if plants or pop:
        ax.legend(loc="upper right")
    plt.tight_layout()
    if path:
        fig.savefig(path, dpi=120)
    if show:
        plt.show()
    return fig
