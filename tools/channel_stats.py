#!/usr/bin/env python3
"""
Channel Stats Aggregator
Turns a channel's upload feed into a compact analytics summary

Computes:
1. Posting cadence (uploads per week)
2. Median views
3. Weekday heatmap (UTC)
4. Keyword salience (view-weighted)
5. CPM and revenue-per-video estimates

Usage:
    python3 -m tools.channel_stats path/to/feed.json
"""

import json
import re
import sys
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from dateutil import parser as dateparser


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
SECONDS_PER_WEEK = 7 * 24 * 3600
# Two distinct fill-in dates for dateutil; partial timestamps resolve differently under each.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))
MAX_KEYWORDS = 20

# Heuristic band, not derived from ad-auction data.
DEFAULT_CPM_BAND_USD = (2.0, 12.0)

TOKEN_PATTERN = re.compile(r"[^\W_]+(?:'[^\W_]+)*")
STOP_WORDS = frozenset({
    'the', 'and', 'for', 'with', 'you', 'how', 'this', 'that', 'from', 'are', 'was', 'but',
    'not', 'all', 'any', 'can', 'has', 'have', 'had', 'his', 'her', 'its', 'our', 'out',
    'your', 'yours', 'they', 'them', 'their', 'what', 'when', 'where', 'who', 'why', 'which',
    'will', 'just', 'into', 'onto', 'than', 'then', 'there', 'these', 'those', 'about',
    'after', 'before', 'over', 'under', 'off', 'too', 'very', 'get', 'got', 'one',
    'did', 'does', 'doing', 'been', 'being', 'were', 'also', 'more', 'most', 'some', 'such',
    'only', 'own', 'same', 'each', 'few', 'both', 'i\'m', 'it\'s', 'don\'t', 'you\'re',
    'vs', 'via', 'new',
})


class InvalidInputError(ValueError):
    """Raised when the aggregator receives input it cannot interpret at all."""


@dataclass(frozen=True)
class UploadItem:
    title: str
    published_at: Any = None
    views: Any = None
    url: str = ""

    @classmethod
    def from_dict(cls, record: Mapping) -> "UploadItem":
        published = record.get("publishedAt", record.get("published_at"))
        return cls(
            title=record.get("title") or "",
            published_at=published,
            views=record.get("views"),
            url=record.get("url") or "",
        )


@dataclass(frozen=True)
class KeywordScore:
    keyword: str
    score: float
    frequency: int = field(default=0, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"keyword": self.keyword, "score": self.score}


@dataclass(frozen=True)
class TimeseriesPoint:
    date: str
    views: int
    title: str

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "views": self.views, "title": self.title}


@dataclass(frozen=True)
class Summary:
    avg_uploads_per_week: float
    median_views: float
    est_cpm_usd: Tuple[float, float]
    est_revenue_per_video_usd: Tuple[float, float]
    post_days_heatmap: Mapping[str, int]
    top_keywords: Tuple[KeywordScore, ...]
    timeseries: Tuple[TimeseriesPoint, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avgUploadsPerWeek": self.avg_uploads_per_week,
            "medianViews": self.median_views,
            "estCpmUsd": list(self.est_cpm_usd),
            "estRevenuePerVideoUsd": list(self.est_revenue_per_video_usd),
            "postDaysHeatmap": dict(self.post_days_heatmap),
            "topKeywords": [keyword.to_dict() for keyword in self.top_keywords],
            "timeseries": [point.to_dict() for point in self.timeseries],
        }


@dataclass(frozen=True)
class _Entry:
    title: str
    published: Optional[datetime]
    views: Optional[int]


def parse_published_at(raw_value) -> Optional[datetime]:
    """Parse a publish timestamp to an aware UTC datetime, or None when unusable."""
    if isinstance(raw_value, datetime):
        parsed = raw_value
    elif isinstance(raw_value, str) and raw_value.strip():
        try:
            parsed = dateparser.parse(raw_value, default=_FILL_DEFAULTS[0])
            # Fields missing from the text come from the default; a complete date ignores it.
            if parsed != dateparser.parse(raw_value, default=_FILL_DEFAULTS[1]):
                return None
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_views(raw_value) -> Optional[int]:
    """Return a non-negative integer view count, or None when missing or malformed."""
    if raw_value is None or isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return raw_value if raw_value >= 0 else None
    if isinstance(raw_value, float):
        if raw_value.is_integer() and raw_value >= 0:
            return int(raw_value)
        return None
    if isinstance(raw_value, str):
        cleaned = raw_value.strip().replace(",", "")
        if cleaned.isdigit():
            return int(cleaned)
    return None


def _normalize(items: Iterable) -> List[_Entry]:
    if items is None:
        raise InvalidInputError("items must be a sequence of upload records, got None")

    entries = []
    for index, item in enumerate(items):
        if isinstance(item, Mapping):
            item = UploadItem.from_dict(item)
        elif not isinstance(item, UploadItem):
            raise InvalidInputError(f"Item {index} is not an upload record: {type(item).__name__}")

        entries.append(_Entry(
            title=str(item.title or ""),
            published=parse_published_at(item.published_at),
            views=parse_views(item.views),
        ))
    return entries


def uploads_per_week(published: Sequence[datetime]) -> float:
    """Uploads per week over the observed span, with a one-week floor on the span."""
    if not published:
        return 0.0
    span_seconds = (max(published) - min(published)).total_seconds()
    span_weeks = max(1.0, span_seconds / SECONDS_PER_WEEK)
    return len(published) / span_weeks


def median_views(views: Sequence[int]) -> float:
    if not views:
        return 0.0
    return float(np.median(views))


def weekday_heatmap(published: Iterable[datetime]) -> Dict[str, int]:
    heatmap = {day: 0 for day in WEEKDAYS}
    for moment in published:
        heatmap[WEEKDAYS[moment.weekday()]] += 1
    return heatmap


def tokenize_title(title: str) -> List[str]:
    """Lowercase word tokens from a title, minus stop words, short tokens and numbers."""
    tokens = []
    for token in TOKEN_PATTERN.findall(title.lower()):
        if len(token) < 3 or token.isdigit() or token in STOP_WORDS:
            continue
        tokens.append(token)
    return tokens


def keyword_salience(entries: Sequence[_Entry], limit: int = MAX_KEYWORDS) -> List[KeywordScore]:
    """
    Score title keywords by the share of view weight carried by titles using them.

    Each title weighs 1 + views, so zero-view titles still count once.
    score(token) = sum(weight of titles containing token) / sum(weight of all titles)
    """
    weights = Counter()
    frequency = Counter()
    total_weight = 0

    for entry in entries:
        weight = 1 + (entry.views or 0)
        total_weight += weight
        for token in set(tokenize_title(entry.title)):
            weights[token] += weight
            frequency[token] += 1

    if not weights:
        return []

    scored = [
        KeywordScore(keyword=token, score=weights[token] / total_weight, frequency=frequency[token])
        for token in weights
    ]
    scored.sort(key=lambda keyword: (-keyword.score, -keyword.frequency, keyword.keyword))
    return scored[:limit]


def _cpm_band(cpm_band) -> Tuple[float, float]:
    try:
        low, high = (float(value) for value in cpm_band)
    except (TypeError, ValueError):
        raise InvalidInputError(f"CPM band must be a (low, high) pair of numbers, got {cpm_band!r}")
    if low < 0 or high < low:
        raise InvalidInputError(f"CPM band must satisfy 0 <= low <= high, got ({low}, {high})")
    return low, high


def revenue_per_video(median: float, cpm_band: Tuple[float, float]) -> Tuple[float, float]:
    """Revenue per video from median views and a CPM (per 1,000 views) band."""
    low, high = cpm_band
    return median * low / 1000, median * high / 1000


def build_timeseries(entries: Sequence[_Entry]) -> List[TimeseriesPoint]:
    dated = [entry for entry in entries if entry.published is not None]
    dated.sort(key=lambda entry: entry.published)
    return [
        TimeseriesPoint(
            date=entry.published.strftime("%Y-%m-%d"),
            views=entry.views or 0,
            title=entry.title,
        )
        for entry in dated
    ]


def compute_stats(items: Iterable, cpm_band=DEFAULT_CPM_BAND_USD) -> Summary:
    """
    Aggregate upload records into a Summary.

    Items with a missing or unparseable publish date are left out of cadence,
    heatmap and timeseries. Items with a missing or invalid view count are left
    out of the median and count as zero views elsewhere.
    """
    band = _cpm_band(cpm_band)
    entries = _normalize(items)

    published = [entry.published for entry in entries if entry.published is not None]
    views = [entry.views for entry in entries if entry.views is not None]
    median = median_views(views)

    return Summary(
        avg_uploads_per_week=uploads_per_week(published),
        median_views=median,
        est_cpm_usd=band,
        est_revenue_per_video_usd=revenue_per_video(median, band),
        post_days_heatmap=MappingProxyType(weekday_heatmap(published)),
        top_keywords=tuple(keyword_salience(entries)),
        timeseries=tuple(build_timeseries(entries)),
    )


def top_days(heatmap: Mapping[str, int], limit: int = 3) -> List[str]:
    """Busiest posting days, ties kept in calendar order."""
    order = {day: idx for idx, day in enumerate(WEEKDAYS)}
    ranked = sorted(heatmap.items(), key=lambda pair: (-pair[1], order.get(pair[0], len(order))))
    return [day for day, _ in ranked[:limit]]


def build_recommendations(summary: Summary) -> List[str]:
    """Playbook lines derived from the summary numbers."""
    low, high = summary.est_cpm_usd
    recommendations = [
        f"Post ~{summary.avg_uploads_per_week:.1f}/week on top days: "
        f"{', '.join(top_days(summary.post_days_heatmap))}",
        f"Target median views ≥ {max(1, round(summary.median_views)):,}",
    ]
    if summary.top_keywords:
        keywords = ", ".join(keyword.keyword for keyword in summary.top_keywords[:5])
        recommendations.append(f"Aim titles around top keywords: {keywords}")
    recommendations.append(f"Optimize RPM with longer retention; CPM range ${low:g}–${high:g}")
    return recommendations


def generate_analysis(items: Iterable, cpm_band=DEFAULT_CPM_BAND_USD) -> Dict[str, Any]:
    """Summary plus recommendations in wire form."""
    summary = compute_stats(items, cpm_band)
    payload = summary.to_dict()
    timeseries = payload.pop("timeseries")
    return {
        "summary": payload,
        "timeseries": timeseries,
        "recommendations": build_recommendations(summary),
    }


def main():
    """Main execution function"""
    if len(sys.argv) != 2:
        print("❌ Error: Missing feed file path")
        print("\nUsage:")
        print("  python3 -m tools.channel_stats path/to/feed.json")
        sys.exit(1)

    data_path = Path(sys.argv[1])
    if not data_path.exists():
        print(f"❌ Error: File not found: {data_path}")
        sys.exit(1)

    try:
        print(f"📂 Loading feed from: {data_path}")
        with data_path.open("r", encoding="utf-8") as f:
            data = json.load(f)

        items = data.get("items", [])
        analysis = generate_analysis(items)
        summary = analysis["summary"]

        print("\n✅ Stats complete!")
        print(f"📦 Items: {len(items)}")
        print(f"📅 Uploads per week: {summary['avgUploadsPerWeek']:.2f}")
        print(f"👀 Median views: {summary['medianViews']:,.0f}")
        for line in analysis["recommendations"]:
            print(f"   - {line}")

        output_file = data_path.parent / "analysis.json"
        with output_file.open("w", encoding="utf-8") as f:
            json.dump(analysis, f, indent=2, ensure_ascii=False)

        print(f"\n📁 Analysis saved to: {output_file}")

    except json.JSONDecodeError as e:
        print(f"❌ Error: Invalid JSON file: {e}")
        sys.exit(1)
    except InvalidInputError as e:
        print(f"❌ Validation Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
