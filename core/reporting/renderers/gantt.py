from datetime import timedelta
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from matplotlib.dates import date2num
from matplotlib import ticker
from matplotlib.patches import Patch

from core.reporting.contexts import ScheduleBar

_CRITICAL = "#ffcccc"
_NORMAL = "#d0d0ff"
_SLACK = "#eeeeee"


class ScheduleGanttRenderer:
    """Early-start Gantt chart; slack drawn as a hatched tail up to the late finish."""

    def render(self, bars: List[ScheduleBar], output_path: Path) -> Path:
        if not bars:
            raise ValueError("No tasks with dates available for Gantt chart")

        bars = sorted(bars, key=lambda b: (b.start, b.end, b.task_id))

        fig, ax = plt.subplots(figsize=(12, max(3.0, 0.45 * len(bars) + 1.5)))

        for row, bar in enumerate(bars):
            if bar.is_milestone:
                ax.plot(date2num(bar.start), row, marker="D", markersize=8,
                        color="#cc0000" if bar.is_critical else "#333399")
                continue

            left = date2num(bar.start)
            # bars cover the whole finish day
            width = (bar.end - bar.start).days + 1
            ax.barh(row, width, left=left, height=0.4,
                    color=_CRITICAL if bar.is_critical else _NORMAL,
                    edgecolor="black", linewidth=0.6)

            if bar.late_end is not None and bar.late_end > bar.end:
                tail_start = bar.end + timedelta(days=1)
                ax.barh(row, (bar.late_end - tail_start).days + 1, left=date2num(tail_start),
                        height=0.2, color=_SLACK, edgecolor="grey", hatch="//", linewidth=0.4)

        ax.set_yticks(range(len(bars)))
        ax.set_yticklabels([b.name for b in bars], fontsize=9)
        ax.invert_yaxis()

        locator = mdates.AutoDateLocator(minticks=4, maxticks=10)
        ax.xaxis.set_major_locator(locator)
        ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
        ax.xaxis.set_minor_locator(ticker.NullLocator())

        ax.legend(
            handles=[
                Patch(facecolor=_CRITICAL, edgecolor="black", label="Critical"),
                Patch(facecolor=_NORMAL, edgecolor="black", label="Non-critical"),
                Patch(facecolor=_SLACK, edgecolor="grey", hatch="//", label="Slack"),
            ],
            loc="lower right",
            fontsize=8,
        )
        ax.set_title("Project Schedule")
        ax.grid(True, axis="x", linestyle=":", linewidth=0.5)

        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
        plt.close(fig)

        return output_path
