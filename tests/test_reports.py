import tempfile
import unittest
from pathlib import Path

from openpyxl import load_workbook

from tools.channel_stats import generate_analysis
from tools.export_to_excel import SummaryExcelExporter
from tools.generate_markdown_report import SummaryReportGenerator


CHANNEL = {
    "id": "UCtest",
    "title": "Report Channel",
    "url": "https://www.youtube.com/channel/UCtest",
    "subscriberEstimate": "12.3K subscribers",
}

ITEMS = [
    {"title": "Asyncio tutorial | part one", "publishedAt": "2025-01-06T10:00:00Z", "views": 1000, "url": "u1"},
    {"title": "Pytest tutorial", "publishedAt": "2025-01-08T10:00:00Z", "views": 3000, "url": "u2"},
    {"title": "Asyncio deep dive", "publishedAt": "2025-01-13T10:00:00Z", "views": 2000, "url": "u3"},
]


class ExcelExportTests(unittest.TestCase):
    def test_workbook_tabs_and_values(self):
        analysis = generate_analysis(ITEMS)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = SummaryExcelExporter(CHANNEL, analysis).export(Path(tmpdir) / "nested" / "pulse.xlsx")
            workbook = load_workbook(path)

            self.assertEqual(workbook.sheetnames, ["Summary", "Timeseries", "Posting Days", "Keywords", "Playbook"])

            summary = workbook["Summary"]
            self.assertEqual(summary["B4"].value, "Report Channel")
            self.assertEqual(summary["B11"].value, 2000)
            self.assertEqual(summary["B12"].value, "$2 - $12")

            timeseries = workbook["Timeseries"]
            self.assertEqual(timeseries["A2"].value, "2025-01-06")
            self.assertEqual(timeseries["B4"].value, 2000)

            days = workbook["Posting Days"]
            self.assertEqual([days.cell(row=r, column=1).value for r in range(2, 9)][:2], ["Monday", "Tuesday"])
            self.assertEqual(days["B2"].value, 2)

            keywords = workbook["Keywords"]
            self.assertEqual(keywords["B2"].value, "tutorial")
            self.assertEqual(keywords["B3"].value, "asyncio")

            playbook = workbook["Playbook"]
            self.assertEqual(playbook.max_row, 5)


class MarkdownReportTests(unittest.TestCase):
    def test_report_sections(self):
        report = SummaryReportGenerator(CHANNEL, generate_analysis(ITEMS)).generate()

        for header in (
            "# Channel Pulse Report",
            "## Key Metrics",
            "## Posting Days (UTC)",
            "## Top Keywords",
            "## Recent Uploads",
            "## Actionable Playbook",
        ):
            self.assertIn(header, report)
        self.assertIn("**Channel:** Report Channel", report)
        self.assertIn("**Top days:** Monday, Wednesday, Tuesday", report)
        self.assertIn("Asyncio tutorial \\| part one", report)
        self.assertIn("- 👀 Median views: 2,000", report)

    def test_empty_analysis_still_renders(self):
        report = SummaryReportGenerator({}, generate_analysis([])).generate()
        self.assertIn("_No keywords found in titles._", report)
        self.assertIn("**Channel:** Unknown", report)


if __name__ == "__main__":
    unittest.main()
