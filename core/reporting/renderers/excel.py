from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from core.reporting.contexts import ScheduleReportContext
from core.services.estimation.pert import aggregate_pert, calculate_pert


class ScheduleExcelRenderer:
    def render(self, ctx: ScheduleReportContext, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()

        self._header_font = Font(bold=True)
        self._title_font = Font(bold=True, size=14)
        self._center = Alignment(horizontal="center")
        self._thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        self._header_fill = PatternFill("solid", fgColor="DDDDDD")
        self._critical_fill = PatternFill("solid", fgColor="FFCCCC")

        schedule = ctx.schedule

        # ---------------- Schedule ----------------
        ws = wb.active
        ws.title = "Schedule"
        dated = schedule.project_start is not None
        headers = ["Task ID", "Name", "ES", "EF", "LS", "LF", "Slack", "Critical"]
        if dated:
            headers += ["Early start date", "Early finish date"]
        self._write_headers(ws, headers)

        for row_index, task_id in enumerate(schedule.topo_order, start=2):
            info = schedule[task_id]
            values = [
                task_id,
                ctx.name_of(task_id),
                info.earliest_start,
                info.earliest_finish,
                info.latest_start,
                info.latest_finish,
                round(info.slack, 6),
                "Yes" if info.is_critical else "No",
            ]
            if dated:
                dates = schedule.task_dates(task_id)
                values += [dates.early_start.isoformat(), dates.early_finish.isoformat()]
            for col_index, value in enumerate(values, start=1):
                cell = ws.cell(row=row_index, column=col_index, value=value)
                cell.border = self._thin_border
                if info.is_critical:
                    cell.fill = self._critical_fill

        ws.column_dimensions["A"].width = 36
        ws.column_dimensions["B"].width = 30

        # ---------------- Critical path ----------------
        ws_cp = wb.create_sheet("Critical Path")
        ws_cp["A1"] = f"Project finish: {schedule.project_finish}"
        ws_cp["A1"].font = self._title_font
        row = 3
        for chain_index, chain in enumerate(schedule.critical_chains, start=1):
            ws_cp.cell(row=row, column=1, value=f"Chain {chain_index}").font = self._header_font
            ws_cp.cell(row=row, column=2, value=" -> ".join(ctx.name_of(t) for t in chain))
            row += 1
        ws_cp.column_dimensions["A"].width = 14
        ws_cp.column_dimensions["B"].width = 80

        # ---------------- Resource conflicts ----------------
        ws_res = wb.create_sheet("Resource Conflicts")
        self._write_headers(ws_res, ["Resource ID", "Date", "Allocated (h)", "Available (h)", "Tasks"])
        for r, conflict in enumerate(ctx.conflicts, start=2):
            values = [
                conflict.resource_id,
                conflict.conflict_date.isoformat(),
                conflict.allocated_hours,
                conflict.available_hours,
                ", ".join(ctx.name_of(t) for t in conflict.task_ids),
            ]
            for c, v in enumerate(values, 1):
                ws_res.cell(r, c, v).border = self._thin_border
        ws_res.column_dimensions["A"].width = 30
        ws_res.column_dimensions["E"].width = 60

        # ---------------- PERT ----------------
        if ctx.estimates:
            ws_pert = wb.create_sheet("PERT")
            self._write_headers(
                ws_pert,
                ["Task ID", "O", "M", "P", "Expected", "Std dev", "68% low", "68% high", "95% low", "95% high"],
            )
            results = []
            r = 2
            for task_id, estimate in ctx.estimates.items():
                result = calculate_pert(estimate)
                results.append(result)
                self._write_pert_row(ws_pert, r, ctx.name_of(task_id), estimate, result)
                r += 1
            total = aggregate_pert(results)
            self._write_pert_row(ws_pert, r, "Total", None, total)
            ws_pert.cell(r, 1).font = self._header_font
            ws_pert.column_dimensions["A"].width = 30

        wb.save(output_path)
        return output_path

    def _write_headers(self, ws, headers) -> None:
        for col_index, h in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col_index, value=h)
            cell.font = self._header_font
            cell.alignment = self._center
            cell.fill = self._header_fill
            cell.border = self._thin_border

    def _write_pert_row(self, ws, row, label, estimate, result) -> None:
        values = [
            label,
            estimate.optimistic if estimate else None,
            estimate.most_likely if estimate else None,
            estimate.pessimistic if estimate else None,
            round(result.expected, 4),
            round(result.std_dev, 4),
            round(result.confidence_68.low, 4),
            round(result.confidence_68.high, 4),
            round(result.confidence_95.low, 4),
            round(result.confidence_95.high, 4),
        ]
        for c, v in enumerate(values, 1):
            ws.cell(row, c, v).border = self._thin_border
