"""JSON API route for channel analysis."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from web.services.analysis_runner import MissingApiKeyError, check_channel_url, run_analysis

api_bp = Blueprint("api", __name__)


@api_bp.get("/api/analyze")
def analyze():
    url = request.args.get("url", "").strip()
    if not url:
        return jsonify({"error": "Missing url"}), 400

    check = check_channel_url(url)
    if not check.ok:
        return jsonify({"error": "Enter a valid channel or video URL.", "reason": check.problem.value}), 400

    try:
        result = run_analysis(
            channel_url=check.url,
            api_key=current_app.config.get("YOUTUBE_API_KEY", ""),
            max_items=int(current_app.config.get("MAX_FEED_ITEMS", 15)),
            cpm_band=current_app.config.get("CPM_BAND_USD", (2.0, 12.0)),
            logger=current_app.logger.info,
        )
    except MissingApiKeyError as exc:
        return jsonify({"error": str(exc)}), 503
    except Exception as exc:  # pylint: disable=broad-except
        current_app.logger.exception("Analysis failed for %s", check.url)
        return jsonify({"error": str(exc) or "Failed"}), 500

    response = jsonify(result)
    response.cache_control.public = True
    response.cache_control.max_age = int(current_app.config.get("CACHE_MAX_AGE_SECONDS", 3600))
    return response
