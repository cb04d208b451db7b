"""Reporting API wrappers around renderer classes."""

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from core.models import PERTEstimate
from core.reporting.contexts import ScheduleReportContext, build_schedule_bars
from core.reporting.renderers.excel import ScheduleExcelRenderer
from core.reporting.renderers.gantt import ScheduleGanttRenderer
from core.services.resource.models import ResourceConflict
from core.services.scheduling.models import ScheduleResult

logger = logging.getLogger(__name__)


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def generate_schedule_excel(
    schedule: ScheduleResult,
    output_path: str | Path,
    task_names: Optional[Mapping[str, str]] = None,
    conflicts: Iterable[ResourceConflict] = (),
    estimates: Optional[Mapping[str, PERTEstimate]] = None,
) -> Path:
    ctx = ScheduleReportContext(
        schedule=schedule,
        task_names=dict(task_names or {}),
        conflicts=list(conflicts),
        estimates=estimates,
    )
    path = ScheduleExcelRenderer().render(ctx, _ensure_parent(Path(output_path)))
    logger.info("Schedule workbook written to %s", path)
    return path


def generate_schedule_gantt_png(
    schedule: ScheduleResult,
    output_path: str | Path,
    task_names: Optional[Mapping[str, str]] = None,
) -> Path:
    ctx = ScheduleReportContext(schedule=schedule, task_names=dict(task_names or {}))
    bars = build_schedule_bars(ctx)
    path = ScheduleGanttRenderer().render(bars, _ensure_parent(Path(output_path)))
    logger.info("Schedule Gantt chart written to %s", path)
    return path


__all__ = ["generate_schedule_excel", "generate_schedule_gantt_png"]
