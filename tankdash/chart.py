"""
Tank level history chart

The chart is never updated in place: every reading with history destroys
the previous chart and builds a new one.
"""
import io
import math

# Matplotlib imports for chart generation
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt

from tankdash.config import CHART_MIN, CHART_MAX

def _chart_value(level):
    """Level as a float, NaN (a gap in the line) if it isn't a number"""
    if isinstance(level, bool):
        return math.nan
    try:
        return float(level)
    except (TypeError, ValueError, OverflowError):
        return math.nan

def build_series(history):
    """
    Turn a newest-first history list into chronological (labels, values).
    """
    from tankdash.render import format_short_time

    labels = []
    values = []
    for entry in reversed(history):
        if not isinstance(entry, dict):
            entry = {}
        labels.append(format_short_time(entry.get('timestamp')))
        values.append(_chart_value(entry.get('level')))
    return labels, values

class ChartWidget:
    """A line chart of water level (%) over time, owning one matplotlib figure"""

    def __init__(self, labels, values):
        self.labels = list(labels)
        self.values = list(values)
        self.fig = None
        self._draw()

    def _draw(self):
        # Dark theme matching the dashboard page
        with plt.style.context('dark_background'):
            fig, ax = plt.subplots(figsize=(10, 4), dpi=100)
        fig.patch.set_facecolor('#1a1a1a')
        ax.set_facecolor('#1a1a1a')

        positions = list(range(len(self.values)))
        ax.plot(positions, self.values, color='#2196F3', linewidth=2,
                marker='o', markersize=3, zorder=2)
        ax.fill_between(positions, self.values, alpha=0.2, color='#2196F3', zorder=1)

        ax.set_ylim(CHART_MIN, CHART_MAX)
        ax.set_title('Water Level History', color='#e0e0e0', fontsize=14)
        ax.set_ylabel('Level (%)', color='#888', fontsize=11)
        ax.set_xticks(positions)
        ax.set_xticklabels(self.labels, rotation=45, ha='right')
        ax.tick_params(colors='#888', labelsize=9)
        ax.grid(True, alpha=0.2, color='#333', linewidth=0.8)

        for spine in ax.spines.values():
            spine.set_color('#444')

        fig.tight_layout()
        self.fig = fig

    def to_png(self):
        """Render the chart as PNG bytes"""
        if self.fig is None:
            raise RuntimeError("Chart has been destroyed")
        buf = io.BytesIO()
        self.fig.savefig(buf, format='png', facecolor='#1a1a1a', edgecolor='none',
                         bbox_inches='tight', dpi=100)
        return buf.getvalue()

    def destroy(self):
        """Release the figure"""
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None

    @property
    def destroyed(self):
        return self.fig is None

def replace_chart(state, history):
    """
    Replace state.chart with a chart of the given history.
    Empty history leaves the current chart alone.
    """
    if not history:
        return state.chart

    labels, values = build_series(history)
    old_chart = state.chart
    if old_chart is not None:
        old_chart.destroy()
    state.chart = ChartWidget(labels, values)
    return state.chart
