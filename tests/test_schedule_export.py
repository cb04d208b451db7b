from __future__ import annotations

from datetime import date

import pytest
from openpyxl import load_workbook

from core.models import PERTEstimate, Resource, ResourceAllocation
from core.reporting import api as reporting_api
from core.reporting.contexts import ScheduleReportContext, build_schedule_bars
from core.services.resource import detect_resource_conflicts


def _dated_diamond(services, diamond):
    tasks, deps = diamond
    return services["scheduling_engine"].calculate(tasks, deps, date(2024, 1, 1))


def test_schedule_bars_follow_topological_order(services, diamond):
    schedule = _dated_diamond(services, diamond)
    bars = build_schedule_bars(ScheduleReportContext(schedule=schedule, task_names={"S": "Kickoff"}))

    assert [b.task_id for b in bars] == ["S", "X", "Y", "Z", "E"]
    assert bars[0].name == "Kickoff"
    assert bars[1].name == "X"
    by_id = {b.task_id: b for b in bars}
    assert (by_id["X"].start, by_id["X"].end) == (date(2024, 1, 2), date(2024, 1, 3))
    assert by_id["E"].start == date(2024, 1, 4)
    assert by_id["Z"].is_critical is False
    assert by_id["Z"].late_end == date(2024, 1, 3)
    assert by_id["E"].late_end == by_id["E"].end
    assert by_id["E"].is_critical is True


def test_undated_schedule_has_no_bars(services, diamond):
    tasks, deps = diamond
    schedule = services["scheduling_engine"].calculate(tasks, deps)
    assert build_schedule_bars(ScheduleReportContext(schedule=schedule)) == []


def test_excel_export_contains_schedule_conflicts_and_pert(services, diamond, tmp_path):
    schedule = _dated_diamond(services, diamond)
    conflicts = detect_resource_conflicts(
        [Resource("R1")],
        [
            ResourceAllocation("R1", "X", date(2024, 1, 2), date(2024, 1, 3), 5),
            ResourceAllocation("R1", "Y", date(2024, 1, 2), date(2024, 1, 3), 5),
        ],
    )
    estimates = {
        "X": PERTEstimate(1, 2, 3),
        "Y": PERTEstimate(1, 2, 9),
    }

    out = reporting_api.generate_schedule_excel(
        schedule,
        tmp_path / "exports" / "schedule.xlsx",
        task_names={"X": "Build"},
        conflicts=conflicts,
        estimates=estimates,
    )

    assert out.exists()
    wb = load_workbook(out)
    assert wb.sheetnames == ["Schedule", "Critical Path", "Resource Conflicts", "PERT"]

    ws = wb["Schedule"]
    assert ws["A1"].value == "Task ID"
    assert ws["I1"].value == "Early start date"
    rows = {row[0]: row for row in ws.iter_rows(min_row=2, values_only=True)}
    assert rows["X"][1] == "Build"
    assert rows["Z"][6] == pytest.approx(1.0)
    assert rows["Z"][7] == "No"
    assert rows["E"][8] == "2024-01-04"

    ws_cp = wb["Critical Path"]
    assert ws_cp["A1"].value.startswith("Project finish: 4")
    chains = {ws_cp.cell(r, 2).value for r in range(3, 5)}
    assert chains == {"S -> Build -> E", "S -> Y -> E"}

    ws_res = wb["Resource Conflicts"]
    assert [c.value for c in ws_res[2]] == ["R1", "2024-01-02", 10, 8, "Build, Y"]
    assert ws_res.max_row == 3

    ws_pert = wb["PERT"]
    assert ws_pert["A4"].value == "Total"
    assert ws_pert["E4"].value == pytest.approx(5.0)


def test_excel_export_without_start_date_skips_calendar_columns(services, diamond, tmp_path):
    tasks, deps = diamond
    schedule = services["scheduling_engine"].calculate(tasks, deps)

    out = reporting_api.generate_schedule_excel(schedule, tmp_path / "plain.xlsx")

    wb = load_workbook(out)
    assert wb.sheetnames == ["Schedule", "Critical Path", "Resource Conflicts"]
    assert wb["Schedule"]["I1"].value is None


def test_gantt_png_export(services, diamond, tmp_path):
    schedule = _dated_diamond(services, diamond)
    out = reporting_api.generate_schedule_gantt_png(schedule, tmp_path / "gantt.png", {"E": "Handover"})
    assert out.exists()
    assert out.stat().st_size > 0


def test_gantt_png_export_requires_dates(services, diamond, tmp_path):
    tasks, deps = diamond
    schedule = services["scheduling_engine"].calculate(tasks, deps)
    with pytest.raises(ValueError, match="No tasks with dates"):
        reporting_api.generate_schedule_gantt_png(schedule, tmp_path / "gantt.png")


def test_gantt_png_export_with_milestone(services, make_task, make_dep, tmp_path):
    schedule = services["scheduling_engine"].calculate(
        [make_task("Build", 3), make_task("Review", 1), make_task("Release", 0)],
        [make_dep("Build", "Release"), make_dep("Review", "Release")],
        date(2024, 1, 1),
    )
    bars = build_schedule_bars(ScheduleReportContext(schedule=schedule))
    assert [b.task_id for b in bars if b.is_milestone] == ["Release"]

    out = reporting_api.generate_schedule_gantt_png(schedule, tmp_path / "milestone.png")
    assert out.stat().st_size > 0
