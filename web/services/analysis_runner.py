"""Analysis runner wrapping feed retrieval and the stats aggregator."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from tools.channel_stats import DEFAULT_CPM_BAND_USD, build_recommendations, compute_stats
from tools.youtube_fetch_channel_feed import DEFAULT_MAX_ITEMS, YouTubeFeedFetcher, extract_video_id

YOUTUBE_CHANNEL_PATTERNS = [
    re.compile(r"^https://(www\.|m\.)?youtube\.com/@[\w.-]+$", re.IGNORECASE),
    re.compile(r"^https://(www\.|m\.)?youtube\.com/channel/UC[\w-]+$", re.IGNORECASE),
    re.compile(r"^https://(www\.|m\.)?youtube\.com/c/[\w-]+$", re.IGNORECASE),
    re.compile(r"^https://(www\.|m\.)?youtube\.com/user/[\w-]+$", re.IGNORECASE),
]
YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com", "youtu.be"}


class MissingApiKeyError(RuntimeError):
    """Raised when no YouTube Data API key is configured."""


class UrlProblem(str, Enum):
    EMPTY = "empty"
    NOT_A_URL = "not_a_url"
    UNSUPPORTED_HOST = "unsupported_host"
    UNSUPPORTED_PATH = "unsupported_path"


@dataclass(frozen=True)
class UrlCheck:
    url: Optional[str] = None
    problem: Optional[UrlProblem] = None

    @property
    def ok(self) -> bool:
        return self.problem is None


def normalize_channel_url(channel_url: str) -> str:
    normalized = channel_url.strip()
    if normalized.startswith("http://"):
        normalized = "https://" + normalized[len("http://") :]
    return normalized.rstrip("/")


def check_channel_url(channel_url: Optional[str]) -> UrlCheck:
    """Validate a channel or video URL before any feed lookup happens."""
    if not channel_url or not channel_url.strip():
        return UrlCheck(problem=UrlProblem.EMPTY)

    normalized = normalize_channel_url(channel_url)
    match = re.match(r"^https://([^/?#]+)", normalized, re.IGNORECASE)
    if not match:
        return UrlCheck(problem=UrlProblem.NOT_A_URL)
    if match.group(1).lower() not in YOUTUBE_HOSTS:
        return UrlCheck(problem=UrlProblem.UNSUPPORTED_HOST)

    if extract_video_id(normalized) or any(pattern.match(normalized) for pattern in YOUTUBE_CHANNEL_PATTERNS):
        return UrlCheck(url=normalized)
    return UrlCheck(problem=UrlProblem.UNSUPPORTED_PATH)


def _emit(logger: Optional[Callable[[str], None]], message: str) -> None:
    if logger:
        logger(message)


def run_analysis(
    channel_url: str,
    api_key: str,
    max_items: int = DEFAULT_MAX_ITEMS,
    cpm_band: Tuple[float, float] = DEFAULT_CPM_BAND_USD,
    logger: Optional[Callable[[str], None]] = None,
) -> Dict:
    """Fetch the channel feed and return channel, summary, timeseries and recommendations."""
    if not api_key:
        raise MissingApiKeyError("YOUTUBE_API_KEY is missing")

    check = check_channel_url(channel_url)
    if not check.ok:
        raise ValueError(
            "Invalid channel URL format. Supported: https://youtube.com/@name, /channel/UC..., "
            "/c/name, /user/name, or a video URL"
        )

    _emit(logger, f"Running analysis for: {check.url}")
    _emit(logger, "[Fetch Feed] starting...")
    fetcher = YouTubeFeedFetcher(api_key, log=lambda message: _emit(logger, message.strip()))
    channel, items = fetcher.fetch_channel_feed(check.url, max_items)
    _emit(logger, "[Fetch Feed] complete")
    _emit(logger, f"Fetched {len(items)} uploads for {channel.get('title', '')} (quota ~{fetcher.quota_used})")

    stats = compute_stats(items, cpm_band)
    summary = stats.to_dict()
    timeseries = summary.pop("timeseries")
    _emit(logger, f"Median views {stats.median_views:,.0f}, {stats.avg_uploads_per_week:.2f} uploads/week")

    return {
        "channel": channel,
        "summary": summary,
        "timeseries": timeseries,
        "recommendations": build_recommendations(stats),
    }
