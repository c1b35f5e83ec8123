import os
import unittest
from unittest import mock

from web.app import create_app


ENV_KEYS = [
    "YOUTUBE_API_KEY",
    "SECRET_KEY",
    "CACHE_MAX_AGE_SECONDS",
    "MAX_FEED_ITEMS",
]

CHANNEL = {
    "id": "UCtest",
    "title": "Route Test Channel",
    "url": "https://www.youtube.com/channel/UCtest",
    "subscriberEstimate": None,
}

ITEMS = [
    {"title": "Tutorial one", "publishedAt": "2025-01-06T10:00:00Z", "views": 100, "url": "u1"},
    {"title": "Tutorial two", "publishedAt": "2025-01-08T10:00:00Z", "views": 300, "url": "u2"},
]


class FakeFetcher:
    calls = []

    def __init__(self, api_key, log=print):
        self.quota_used = 3

    def fetch_channel_feed(self, url, max_items=15):
        FakeFetcher.calls.append((url, max_items))
        return dict(CHANNEL), list(ITEMS)


class BrokenFetcher(FakeFetcher):
    def fetch_channel_feed(self, url, max_items=15):
        raise Exception("YouTube API quota exceeded. Wait until midnight PT or use a different API key.")


class RouteTestCase(unittest.TestCase):
    api_key = "test-key"

    def setUp(self):
        self.previous_env = {key: os.environ.get(key) for key in ENV_KEYS}
        os.environ["YOUTUBE_API_KEY"] = self.api_key
        os.environ["SECRET_KEY"] = "test-secret"
        os.environ["CACHE_MAX_AGE_SECONDS"] = "3600"
        os.environ["MAX_FEED_ITEMS"] = "15"
        FakeFetcher.calls = []

        self.app = create_app()
        self.client = self.app.test_client()

    def tearDown(self):
        for key, value in self.previous_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value


class AnalyzeApiTests(RouteTestCase):
    def test_missing_url(self):
        response = self.client.get("/api/analyze")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "Missing url"})

    def test_invalid_url_reports_reason(self):
        response = self.client.get("/api/analyze", query_string={"url": "https://example.com/channel"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["reason"], "unsupported_host")

    @mock.patch("web.services.analysis_runner.YouTubeFeedFetcher", FakeFetcher)
    def test_successful_analysis(self):
        response = self.client.get("/api/analyze", query_string={"url": "http://youtube.com/@creator/"})

        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(set(payload), {"channel", "summary", "timeseries", "recommendations"})
        self.assertEqual(payload["channel"]["title"], "Route Test Channel")
        self.assertEqual(payload["summary"]["medianViews"], 200.0)
        self.assertEqual(
            list(payload["summary"]["postDaysHeatmap"]),
            ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
        )
        self.assertEqual(payload["summary"]["topKeywords"][0]["keyword"], "tutorial")
        self.assertEqual(len(payload["timeseries"]), 2)
        self.assertEqual(FakeFetcher.calls, [("https://youtube.com/@creator", 15)])

        self.assertTrue(response.cache_control.public)
        self.assertEqual(response.cache_control.max_age, 3600)

    @mock.patch("web.services.analysis_runner.YouTubeFeedFetcher", BrokenFetcher)
    def test_feed_failure_maps_to_500(self):
        response = self.client.get("/api/analyze", query_string={"url": "https://youtube.com/@creator"})
        self.assertEqual(response.status_code, 500)
        self.assertIn("quota exceeded", response.get_json()["error"])

    def test_healthz(self):
        response = self.client.get("/healthz")
        self.assertEqual(response.get_json(), {"status": "ok"})


class MissingKeyApiTests(RouteTestCase):
    api_key = ""

    def test_missing_api_key_maps_to_503(self):
        response = self.client.get("/api/analyze", query_string={"url": "https://youtube.com/@creator"})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.get_json(), {"error": "YOUTUBE_API_KEY is missing"})


class PageTests(RouteTestCase):
    def test_index_renders_form(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Paste YouTube channel or video URL", response.data)

    def test_invalid_url_redirects_with_message(self):
        response = self.client.get("/analyze", query_string={"url": "not a url"}, follow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Enter a valid channel or video URL.", response.data)

    @mock.patch("web.services.analysis_runner.YouTubeFeedFetcher", FakeFetcher)
    def test_analysis_page_renders_summary(self):
        response = self.client.get("/analyze", query_string={"url": "https://youtube.com/@creator"})

        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Route Test Channel", response.data)
        self.assertIn(b"Actionable playbook", response.data)
        self.assertIn(b"views-chart", response.data)
        self.assertIn(b'const heatmap = {"Monday": 1, "Tuesday": 0, "Wednesday": 1', response.data)
        self.assertIn("Target median views ≥ 200".encode("utf-8"), response.data)

    @mock.patch("web.services.analysis_runner.YouTubeFeedFetcher", BrokenFetcher)
    def test_feed_failure_redirects_with_message(self):
        response = self.client.get("/analyze", query_string={"url": "https://youtube.com/@creator"}, follow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertIn(b"Failed to analyze", response.data)


if __name__ == "__main__":
    unittest.main()
