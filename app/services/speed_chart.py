"""Bar chart of animal top speeds, coloured by diet (matplotlib, Agg backend)."""

import math
from io import BytesIO
from typing import List, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from app.utils.animal_speed import AnimalSpeed

DIET_COLORS = {
    'herbivore': '#22c55e',
    'omnivore': '#eab308',
    'carnivore': '#f97316',
}
UNKNOWN_DIET_COLOR = '#888888'
LEGEND_ORDER = ('Herbivore', 'Omnivore', 'Carnivore')

DEFAULT_Y_MAX = 120
MAX_X_LABELS = 25
BAR_PADDING = 0.2


def y_axis_max(data: Sequence[AnimalSpeed]) -> int:
    """Round the fastest speed up to the next multiple of ten."""
    top = max((d.speed for d in data), default=0)
    if top <= 0:
        return DEFAULT_Y_MAX
    return int(math.ceil(top / 10) * 10)


def tick_step(count: int) -> int:
    """Show every n-th animal name so at most ~25 labels are drawn."""
    return max(1, count // MAX_X_LABELS)


def bar_color(diet: str) -> str:
    return DIET_COLORS.get(diet, UNKNOWN_DIET_COLOR)


def render_speed_chart(data: List[AnimalSpeed], width_px: int = 800, height_px: int = 500, dpi: int = 100) -> bytes:
    """Render the chart to PNG bytes."""
    fig = plt.figure(figsize=(width_px / dpi, height_px / dpi), dpi=dpi)
    try:
        ax = fig.add_subplot(111)
        positions = list(range(len(data)))
        ax.bar(
            positions,
            [d.speed for d in data],
            width=1 - BAR_PADDING,
            color=[bar_color(d.diet) for d in data],
        )
        ax.set_xlim(-0.5 - BAR_PADDING / 2, len(data) - 0.5 + BAR_PADDING / 2)
        ax.set_ylim(0, y_axis_max(data))

        step = tick_step(len(data))
        shown = positions[::step]
        ax.set_xticks(shown)
        ax.set_xticklabels([data[i].name for i in shown], rotation=45, ha='right')

        ax.set_title('How Fast Are Animals?', fontsize=16, fontweight='bold')
        ax.set_ylabel('Speed (km/h)')
        ax.set_xlabel('Animal')
        ax.legend(
            handles=[Patch(color=DIET_COLORS[label.lower()], label=label) for label in LEGEND_ORDER],
            loc='upper right',
            fontsize=9,
        )
        fig.tight_layout()

        buf = BytesIO()
        fig.savefig(buf, format='png')
        return buf.getvalue()
    finally:
        plt.close(fig)
