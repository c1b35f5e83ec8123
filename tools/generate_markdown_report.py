#!/usr/bin/env python3
"""
Markdown Report Generator
Renders a channel summary as a markdown report

Usage:
    python3 -m tools.generate_markdown_report path/to/feed.json path/to/analysis.json
"""

import sys
import json
from pathlib import Path
from datetime import datetime

from tools.channel_stats import top_days


class SummaryReportGenerator:
    def __init__(self, channel, analysis):
        """Initialize generator with data"""
        self.channel = channel or {}
        self.summary = analysis.get("summary", {})
        self.timeseries = analysis.get("timeseries", [])
        self.recommendations = analysis.get("recommendations", [])

    def generate_header(self):
        date_str = datetime.now().strftime('%B %d, %Y')
        subscribers = self.channel.get("subscriberEstimate") or "N/A"

        return f"""# Channel Pulse Report
**Channel:** {self.channel.get('title', 'Unknown')}
**Subscribers:** {subscribers}
**Date:** {date_str}
**Uploads Analyzed:** {len(self.timeseries)}

---

"""

    def generate_key_metrics(self):
        cpm_low, cpm_high = self.summary.get("estCpmUsd", [0, 0])
        revenue_low, revenue_high = self.summary.get("estRevenuePerVideoUsd", [0, 0])

        return f"""## Key Metrics

- 📅 Avg uploads/week: {self.summary.get('avgUploadsPerWeek', 0.0):.2f}
- 👀 Median views: {self.summary.get('medianViews', 0):,.0f}
- 💵 Est CPM: ${cpm_low:g}–${cpm_high:g}
- 💰 Est revenue/video: ${revenue_low:,.0f}–${revenue_high:,.0f}

---

"""

    def generate_posting_days(self):
        heatmap = self.summary.get("postDaysHeatmap", {})
        text = "## Posting Days (UTC)\n\n| Weekday | Uploads |\n|---|---|\n"
        for day, count in heatmap.items():
            text += f"| {day} | {count} |\n"
        if heatmap:
            text += f"\n**Top days:** {', '.join(top_days(heatmap))}\n"
        return text + "\n---\n\n"

    def generate_keywords(self):
        keywords = self.summary.get("topKeywords", [])
        text = "## Top Keywords\n\n"
        if not keywords:
            return text + "_No keywords found in titles._\n\n---\n\n"
        for keyword in keywords[:10]:
            text += f"- `{keyword['keyword']}` (score {keyword['score']:.2f})\n"
        return text + "\n---\n\n"

    def generate_recent_uploads(self):
        text = "## Recent Uploads\n\n| Date | Views | Title |\n|---|---|---|\n"
        for point in reversed(self.timeseries[-10:]):
            title = point.get("title", "").replace("|", "\\|")
            text += f"| {point.get('date', '')} | {point.get('views', 0):,} | {title} |\n"
        return text + "\n---\n\n"

    def generate_playbook(self):
        text = "## Actionable Playbook\n\n"
        for idx, line in enumerate(self.recommendations, 1):
            text += f"{idx}. {line}\n"
        return text + "\n"

    def generate_footer(self):
        return ("---\n\n*CPM and revenue figures are heuristic estimates, "
                "not derived from ad-auction data.*\n")

    def generate(self):
        """Generate complete markdown report"""
        return (
            self.generate_header()
            + self.generate_key_metrics()
            + self.generate_posting_days()
            + self.generate_keywords()
            + self.generate_recent_uploads()
            + self.generate_playbook()
            + self.generate_footer()
        )


def main():
    """Main execution function"""
    if len(sys.argv) != 3:
        print("❌ Error: Missing required files")
        print("\nUsage:")
        print("  python3 -m tools.generate_markdown_report path/to/feed.json path/to/analysis.json")
        sys.exit(1)

    feed_file = sys.argv[1]
    analysis_file = sys.argv[2]

    try:
        with open(feed_file, 'r', encoding='utf-8') as f:
            feed = json.load(f)
        with open(analysis_file, 'r', encoding='utf-8') as f:
            analysis = json.load(f)

        print("\n🚀 Generating Markdown Report")
        print("=" * 50)

        report = SummaryReportGenerator(feed.get("channel", {}), analysis).generate()

        output_path = Path(feed_file).parent / 'report.md'
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(report)

        print("✅ SUCCESS!")
        print(f"📁 Report saved to: {output_path}")

    except FileNotFoundError as e:
        print(f"❌ Error: File not found: {e}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"❌ Error: Invalid JSON file: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
