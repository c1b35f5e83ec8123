#!/usr/bin/env python3
"""
Excel Exporter
Creates a multi-tab Excel workbook (with charts) from a channel summary.

Usage:
    python3 -m tools.export_to_excel path/to/feed.json path/to/analysis.json [output.xlsx]
"""

import json
import sys
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.chart import BarChart, LineChart, Reference
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter


TITLE_FILL = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
HEADER_FILL = PatternFill(start_color="D9D9D9", end_color="D9D9D9", fill_type="solid")
SECTION_FILL = PatternFill(start_color="EEF3F8", end_color="EEF3F8", fill_type="solid")


def autosize_columns(worksheet, max_width=80):
    """Size columns to their widest value, capped."""
    widths = {}
    for row in worksheet.iter_rows():
        for cell in row:
            if cell.value is None:
                continue
            widths[cell.column] = max(widths.get(cell.column, 0), len(str(cell.value)))

    for col_idx, width in widths.items():
        worksheet.column_dimensions[get_column_letter(col_idx)].width = min(max(width + 2, 10), max_width)


def style_title_row(worksheet, end_column):
    worksheet.merge_cells(start_row=1, start_column=1, end_row=1, end_column=end_column)
    cell = worksheet.cell(row=1, column=1)
    cell.fill = TITLE_FILL
    cell.font = Font(bold=True, color="FFFFFF", size=13)
    cell.alignment = Alignment(horizontal="center", vertical="center")


def style_header_row(worksheet, row_idx, end_column):
    for col in range(1, end_column + 1):
        cell = worksheet.cell(row=row_idx, column=col)
        cell.fill = HEADER_FILL
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)


def style_section_row(worksheet, row_idx, end_column):
    for col in range(1, end_column + 1):
        cell = worksheet.cell(row=row_idx, column=col)
        cell.fill = SECTION_FILL
        cell.font = Font(bold=True)


class SummaryExcelExporter:
    def __init__(self, channel, analysis):
        self.channel = channel or {}
        self.summary = analysis.get("summary", {})
        self.timeseries = analysis.get("timeseries", [])
        self.recommendations = analysis.get("recommendations", [])

    def create_summary_tab(self, workbook):
        ws = workbook.create_sheet("Summary")
        cpm_low, cpm_high = self.summary.get("estCpmUsd", [0, 0])
        revenue_low, revenue_high = self.summary.get("estRevenuePerVideoUsd", [0, 0])

        rows = [
            ["CHANNEL PULSE - SUMMARY"],
            [""],
            ["Channel", ""],
            ["Channel Name", self.channel.get("title", "")],
            ["Channel URL", self.channel.get("url", "")],
            ["Subscriber Estimate", self.channel.get("subscriberEstimate") or "N/A"],
            ["Uploads Analyzed", len(self.timeseries)],
            [""],
            ["Metrics", ""],
            ["Avg Uploads / Week", round(self.summary.get("avgUploadsPerWeek", 0.0), 2)],
            ["Median Views", self.summary.get("medianViews", 0)],
            ["Est CPM (USD)", f"${cpm_low:g} - ${cpm_high:g}"],
            ["Est Revenue / Video (USD)", f"${revenue_low:,.2f} - ${revenue_high:,.2f}"],
        ]
        for row in rows:
            ws.append(row)

        style_title_row(ws, 2)
        style_section_row(ws, 3, 2)
        style_section_row(ws, 9, 2)
        ws.freeze_panes = "A4"
        autosize_columns(ws)

    def create_timeseries_tab(self, workbook):
        ws = workbook.create_sheet("Timeseries")
        ws.append(["Date", "Views", "Title"])
        style_header_row(ws, 1, 3)
        for point in self.timeseries:
            ws.append([point.get("date", ""), point.get("views", 0), point.get("title", "")])

        if self.timeseries:
            chart = LineChart()
            chart.title = "Views per upload"
            chart.y_axis.title = "Views"
            chart.x_axis.title = "Publish date"
            data = Reference(ws, min_col=2, min_row=1, max_row=len(self.timeseries) + 1)
            categories = Reference(ws, min_col=1, min_row=2, max_row=len(self.timeseries) + 1)
            chart.add_data(data, titles_from_data=True)
            chart.set_categories(categories)
            ws.add_chart(chart, "E2")

        ws.freeze_panes = "A2"
        autosize_columns(ws)

    def create_posting_days_tab(self, workbook):
        ws = workbook.create_sheet("Posting Days")
        heatmap = self.summary.get("postDaysHeatmap", {})
        ws.append(["Weekday", "Uploads"])
        style_header_row(ws, 1, 2)
        for day, count in heatmap.items():
            ws.append([day, count])

        chart = BarChart()
        chart.title = "Uploads by weekday (UTC)"
        chart.y_axis.title = "Uploads"
        data = Reference(ws, min_col=2, min_row=1, max_row=len(heatmap) + 1)
        categories = Reference(ws, min_col=1, min_row=2, max_row=len(heatmap) + 1)
        chart.add_data(data, titles_from_data=True)
        chart.set_categories(categories)
        ws.add_chart(chart, "D2")
        autosize_columns(ws)

    def create_keywords_tab(self, workbook):
        ws = workbook.create_sheet("Keywords")
        ws.append(["Rank", "Keyword", "Score"])
        style_header_row(ws, 1, 3)
        for idx, keyword in enumerate(self.summary.get("topKeywords", []), 1):
            ws.append([idx, keyword.get("keyword", ""), round(keyword.get("score", 0.0), 4)])
        autosize_columns(ws)

    def create_playbook_tab(self, workbook):
        ws = workbook.create_sheet("Playbook")
        ws.append(["#", "Recommendation"])
        style_header_row(ws, 1, 2)
        for idx, line in enumerate(self.recommendations, 1):
            ws.append([idx, line])
        autosize_columns(ws, max_width=120)

    def export(self, output_path):
        output_path = Path(output_path)
        workbook = Workbook()
        workbook.remove(workbook.active)

        self.create_summary_tab(workbook)
        self.create_timeseries_tab(workbook)
        self.create_posting_days_tab(workbook)
        self.create_keywords_tab(workbook)
        self.create_playbook_tab(workbook)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(output_path)
        return output_path


def main():
    if len(sys.argv) < 3 or len(sys.argv) > 4:
        print("Error: Missing required files")
        print("\nUsage:")
        print("  python3 -m tools.export_to_excel path/to/feed.json path/to/analysis.json [output.xlsx]")
        sys.exit(1)

    feed_file = Path(sys.argv[1])
    analysis_file = Path(sys.argv[2])
    output_file = Path(sys.argv[3]) if len(sys.argv) == 4 else feed_file.parent / "channel_pulse.xlsx"

    try:
        print("Loading data files...")
        with feed_file.open("r", encoding="utf-8") as f:
            feed = json.load(f)
        with analysis_file.open("r", encoding="utf-8") as f:
            analysis = json.load(f)

        print("Exporting to Excel workbook...")
        print("=" * 50)

        saved_path = SummaryExcelExporter(feed.get("channel", {}), analysis).export(output_file)

        print("\n" + "=" * 50)
        print("SUCCESS")
        print(f"\nExcel file saved at:\n{saved_path}")
        print(f"\nGenerated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    except FileNotFoundError as exc:
        print(f"Error: File not found: {exc}")
        sys.exit(1)
    except json.JSONDecodeError as exc:
        print(f"Error: Invalid JSON file: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
