import unittest
from unittest import mock

from tools.youtube_fetch_channel_feed import (
    YouTubeFeedFetcher,
    extract_video_id,
    format_subscriber_estimate,
)


class FeedHelperTests(unittest.TestCase):
    def test_extract_video_id_formats(self):
        self.assertEqual(extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42"), "dQw4w9WgXcQ")
        self.assertEqual(extract_video_id("https://youtu.be/dQw4w9WgXcQ"), "dQw4w9WgXcQ")
        self.assertEqual(extract_video_id("https://youtube.com/shorts/dQw4w9WgXcQ"), "dQw4w9WgXcQ")
        self.assertIsNone(extract_video_id("https://youtube.com/@somechannel"))
        self.assertIsNone(extract_video_id("https://example.com/watch?v=dQw4w9WgXcQ"))
        self.assertIsNone(extract_video_id("https://www.youtube.com/watch?v=short"))

    def test_format_subscriber_estimate(self):
        self.assertIsNone(format_subscriber_estimate(None))
        self.assertEqual(format_subscriber_estimate(950), "950 subscribers")
        self.assertEqual(format_subscriber_estimate(12_300), "12.3K subscribers")
        self.assertEqual(format_subscriber_estimate(2_000_000), "2M subscribers")
        self.assertEqual(format_subscriber_estimate(1_250_000_000), "1.2B subscribers")


class YouTubeFeedFetcherTests(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch("tools.youtube_fetch_channel_feed.build")
        self.build = patcher.start()
        self.addCleanup(patcher.stop)
        self.youtube = self.build.return_value
        self.fetcher = YouTubeFeedFetcher("test-key")

    def test_channel_url_needs_no_api_call(self):
        channel_id = self.fetcher.extract_channel_id("https://youtube.com/channel/UCabcdefghijk/")
        self.assertEqual(channel_id, "UCabcdefghijk")
        self.assertEqual(self.fetcher.quota_used, 0)

    def test_handle_is_resolved(self):
        self.youtube.channels.return_value.list.return_value.execute.return_value = {"items": [{"id": "UChandle"}]}

        self.assertEqual(self.fetcher.extract_channel_id("https://youtube.com/@creator"), "UChandle")
        self.youtube.channels.return_value.list.assert_called_with(part="id", forHandle="creator")
        self.assertEqual(self.fetcher.quota_used, 1)

    def test_video_url_resolves_owning_channel(self):
        self.youtube.videos.return_value.list.return_value.execute.return_value = {
            "items": [{"snippet": {"channelId": "UCowner"}}]
        }
        self.assertEqual(self.fetcher.extract_channel_id("https://youtu.be/dQw4w9WgXcQ"), "UCowner")

    def test_unknown_url_raises(self):
        with self.assertRaises(ValueError):
            self.fetcher.extract_channel_id("https://youtube.com/playlist?list=abc")

    def test_fetch_channel_info_hides_subscribers_when_requested(self):
        self.youtube.channels.return_value.list.return_value.execute.return_value = {
            "items": [{
                "id": "UCx",
                "snippet": {"title": "Creator"},
                "statistics": {"hiddenSubscriberCount": True, "subscriberCount": "0"},
                "contentDetails": {"relatedPlaylists": {"uploads": "UUx"}},
            }]
        }
        info = self.fetcher.fetch_channel_info("UCx")

        self.assertEqual(info["title"], "Creator")
        self.assertEqual(info["url"], "https://www.youtube.com/channel/UCx")
        self.assertIsNone(info["subscriberEstimate"])
        self.assertEqual(info["uploadsPlaylistId"], "UUx")

    def test_fetch_uploads_builds_feed_items(self):
        self.youtube.playlistItems.return_value.list.return_value.execute.return_value = {
            "items": [{"contentDetails": {"videoId": "vid00000001"}}, {"contentDetails": {"videoId": "vid00000002"}}]
        }
        self.youtube.videos.return_value.list.return_value.execute.return_value = {
            "items": [
                {
                    "id": "vid00000001",
                    "snippet": {"title": "Newest", "publishedAt": "2025-01-08T10:00:00Z"},
                    "statistics": {"viewCount": "1200"},
                },
                {
                    "id": "vid00000002",
                    "snippet": {"title": "Premiere", "publishedAt": "2025-01-09T10:00:00Z"},
                    "statistics": {},
                },
            ]
        }

        messages = []
        self.fetcher.log = messages.append
        items = self.fetcher.fetch_uploads("UUx", max_items=15)

        self.assertEqual(items[0], {
            "title": "Newest",
            "publishedAt": "2025-01-08T10:00:00Z",
            "views": 1200,
            "url": "https://www.youtube.com/watch?v=vid00000001",
        })
        self.assertIsNone(items[1]["views"])
        self.assertEqual(self.fetcher.quota_used, 2)
        self.assertEqual(messages, ["   Found 2 uploads"])

    def test_fetch_uploads_requires_playlist(self):
        with self.assertRaises(Exception):
            self.fetcher.fetch_uploads("", max_items=15)


if __name__ == "__main__":
    unittest.main()
