"""HTML page routes for the channel pulse app."""

from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from web.services.analysis_runner import check_channel_url, run_analysis

pages_bp = Blueprint("pages", __name__)


@pages_bp.get("/")
def index():
    return render_template("index.html", url=request.args.get("url", ""))


@pages_bp.get("/analyze")
def analyze():
    url = request.args.get("url", "")
    check = check_channel_url(url)
    if not check.ok:
        flash("Enter a valid channel or video URL.", "error")
        return redirect(url_for("pages.index", url=url.strip()))

    try:
        result = run_analysis(
            channel_url=check.url,
            api_key=current_app.config.get("YOUTUBE_API_KEY", ""),
            max_items=int(current_app.config.get("MAX_FEED_ITEMS", 15)),
            cpm_band=current_app.config.get("CPM_BAND_USD", (2.0, 12.0)),
            logger=current_app.logger.info,
        )
    except Exception as exc:  # pylint: disable=broad-except
        current_app.logger.exception("Analysis failed for %s", check.url)
        flash(f"Failed to analyze: {exc}", "error")
        return redirect(url_for("pages.index", url=check.url))

    return render_template("analysis.html", url=check.url, data=result)
