#!/usr/bin/env python3
"""
YouTube Channel Feed Fetcher
Resolves a channel from a channel or video URL and fetches its latest uploads
from YouTube Data API v3

Usage:
    python3 -m tools.youtube_fetch_channel_feed "https://youtube.com/@channelname"
"""

import sys
import os
import json
import re
import time
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# The public channel feed carries the 15 most recent uploads
DEFAULT_MAX_ITEMS = 15

VIDEO_ID_PATTERN = re.compile(r'^[\w-]{11}$')


def format_subscriber_estimate(count):
    """Compact, human-readable subscriber string (e.g. '1.2M subscribers')."""
    if count is None:
        return None
    for threshold, suffix in ((1_000_000_000, 'B'), (1_000_000, 'M'), (1_000, 'K')):
        if count >= threshold:
            value = f"{count / threshold:.1f}".rstrip('0').rstrip('.')
            return f"{value}{suffix} subscribers"
    return f"{count} subscribers"


def extract_video_id(url):
    """Return the video ID of a watch, youtu.be or shorts URL, or None."""
    parsed = urlparse(url.strip())
    host = (parsed.hostname or '').lower()

    if host == 'youtu.be':
        candidate = parsed.path.strip('/').split('/')[0]
    elif host.endswith('youtube.com'):
        if parsed.path.rstrip('/') == '/watch':
            candidate = parse_qs(parsed.query).get('v', [''])[0]
        elif parsed.path.startswith('/shorts/'):
            candidate = parsed.path[len('/shorts/'):].strip('/').split('/')[0]
        else:
            return None
    else:
        return None

    return candidate if VIDEO_ID_PATTERN.match(candidate or '') else None


class YouTubeFeedFetcher:
    def __init__(self, api_key, log=print):
        """Initialize YouTube API client; progress lines go to log"""
        self.youtube = build('youtube', 'v3', developerKey=api_key)
        self.quota_used = 0
        self.log = log

    def extract_channel_id(self, url):
        """
        Extract channel ID from channel or video URLs

        Supported formats:
        - https://youtube.com/@username
        - https://youtube.com/channel/UCxxxxxxxx
        - https://youtube.com/c/channelname
        - https://youtube.com/user/username
        - https://youtube.com/watch?v=VIDEOID, https://youtu.be/VIDEOID, https://youtube.com/shorts/VIDEOID
        """
        url = url.strip().rstrip('/')

        video_id = extract_video_id(url)
        if video_id:
            return self.get_channel_id_from_video(video_id)

        match = re.search(r'youtube\.com/@([\w.-]+)', url)
        if match:
            return self.get_channel_id_from_username(match.group(1))

        match = re.search(r'youtube\.com/channel/(UC[\w-]+)', url)
        if match:
            return match.group(1)

        match = re.search(r'youtube\.com/c/([\w-]+)', url)
        if match:
            return self.get_channel_id_from_custom_url(match.group(1))

        match = re.search(r'youtube\.com/user/([\w-]+)', url)
        if match:
            return self.get_channel_id_from_username(match.group(1))

        raise ValueError(
            f"Invalid YouTube URL format: {url}\n"
            "Supported formats:\n"
            "  - https://youtube.com/@username\n"
            "  - https://youtube.com/channel/UCxxxxxxxx\n"
            "  - https://youtube.com/c/channelname\n"
            "  - https://youtube.com/user/username\n"
            "  - https://youtube.com/watch?v=VIDEOID"
        )

    def get_channel_id_from_video(self, video_id):
        """Get the owning channel ID of a video"""
        try:
            response = self.youtube.videos().list(part='snippet', id=video_id).execute()
            self.quota_used += 1

            if response.get('items'):
                return response['items'][0]['snippet']['channelId']

            raise ValueError(f"Video not found: {video_id}")

        except HttpError as e:
            if e.resp.status == 404:
                raise ValueError(f"Video not found: {video_id}")
            raise

    def get_channel_id_from_username(self, username):
        """Get channel ID from @handle or legacy username"""
        try:
            handle = username.lstrip('@')

            response = self.youtube.channels().list(part='id', forHandle=handle).execute()
            self.quota_used += 1
            if response.get('items'):
                return response['items'][0]['id']

            # Legacy usernames predate handles
            response = self.youtube.channels().list(part='id', forUsername=handle).execute()
            self.quota_used += 1
            if response.get('items'):
                return response['items'][0]['id']

            raise ValueError(f"Channel not found: {username}")

        except HttpError as e:
            if e.resp.status == 404:
                raise ValueError(f"Channel not found: {username}")
            raise

    def get_channel_id_from_custom_url(self, custom_url):
        """Get channel ID from custom URL (/c/channelname)"""
        try:
            response = self.youtube.search().list(
                part='snippet',
                q=custom_url,
                type='channel',
                maxResults=1
            ).execute()
            self.quota_used += 100  # Search is expensive

            if response.get('items'):
                return response['items'][0]['snippet']['channelId']

            raise ValueError(f"Channel not found with custom URL: {custom_url}")

        except HttpError as e:
            if e.resp.status == 404:
                raise ValueError(f"Channel not found: {custom_url}")
            raise

    def fetch_channel_info(self, channel_id):
        """Fetch channel identity and a best-effort subscriber estimate"""
        try:
            response = self.youtube.channels().list(
                part='snippet,statistics,contentDetails',
                id=channel_id
            ).execute()
            self.quota_used += 1

            if not response.get('items'):
                raise ValueError(f"Channel not found: {channel_id}")

            channel = response['items'][0]
            statistics = channel.get('statistics', {})
            subscriber_count = None
            if not statistics.get('hiddenSubscriberCount') and 'subscriberCount' in statistics:
                subscriber_count = int(statistics['subscriberCount'])

            return {
                'id': channel['id'],
                'title': channel['snippet']['title'],
                'url': f"https://www.youtube.com/channel/{channel['id']}",
                'subscriberEstimate': format_subscriber_estimate(subscriber_count),
                'uploadsPlaylistId': channel['contentDetails']['relatedPlaylists'].get('uploads', '')
            }

        except HttpError as e:
            if e.resp.status == 403:
                raise Exception("YouTube API quota exceeded. Wait until midnight PT or use a different API key.")
            elif e.resp.status == 404:
                raise ValueError(f"Channel not found: {channel_id}")
            else:
                raise Exception(f"YouTube API error: {e}")

    def fetch_uploads(self, uploads_playlist_id, max_items=DEFAULT_MAX_ITEMS):
        """
        Fetch the newest uploads as feed items.

        Each item is {title, publishedAt, views, url}. views is None when the
        API withholds the count (e.g. premieres or very fresh uploads).
        """
        if not uploads_playlist_id:
            raise Exception("Could not find uploads playlist for this channel")

        max_items = max_items if max_items and max_items > 0 else DEFAULT_MAX_ITEMS
        video_ids = []
        next_page_token = None

        try:
            while len(video_ids) < max_items:
                response = self.youtube.playlistItems().list(
                    part='contentDetails',
                    playlistId=uploads_playlist_id,
                    maxResults=min(50, max_items - len(video_ids)),
                    pageToken=next_page_token
                ).execute()
                self.quota_used += 1

                video_ids.extend([
                    item['contentDetails']['videoId']
                    for item in response.get('items', [])
                ])

                next_page_token = response.get('nextPageToken')
                if not next_page_token:
                    break

            video_ids = video_ids[:max_items]
            self.log(f"   Found {len(video_ids)} uploads")

            items = []
            for i in range(0, len(video_ids), 50):
                batch_ids = video_ids[i:i + 50]
                response = self.youtube.videos().list(
                    part='snippet,statistics',
                    id=','.join(batch_ids)
                ).execute()
                self.quota_used += 1

                for video in response.get('items', []):
                    raw_views = video.get('statistics', {}).get('viewCount')
                    items.append({
                        'title': video['snippet']['title'],
                        'publishedAt': video['snippet']['publishedAt'],
                        'views': int(raw_views) if raw_views is not None else None,
                        'url': f"https://www.youtube.com/watch?v={video['id']}",
                    })

            return items

        except HttpError as e:
            if e.resp.status == 403:
                raise Exception("YouTube API quota exceeded. Wait until midnight PT or use a different API key.")
            else:
                raise Exception(f"YouTube API error: {e}")

    def fetch_channel_feed(self, url, max_items=DEFAULT_MAX_ITEMS):
        """Resolve a channel or video URL into (channel, items)"""
        channel_id = self.extract_channel_id(url)
        channel_info = self.fetch_channel_info(channel_id)
        items = self.fetch_uploads(channel_info['uploadsPlaylistId'], max_items)
        channel = {
            'id': channel_info['id'],
            'title': channel_info['title'],
            'url': channel_info['url'],
            'subscriberEstimate': channel_info['subscriberEstimate'],
        }
        return channel, items

    def save_data(self, channel, items, output_dir):
        """Save fetched feed to JSON file"""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        data = {
            'channel': channel,
            'items': items,
            'metadata': {
                'fetchedAt': time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime()),
                'itemCount': len(items),
                'quotaUsed': self.quota_used
            }
        }

        output_file = output_path / 'feed.json'
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return str(output_file)


def main():
    """Main execution function"""
    if len(sys.argv) != 2:
        print("❌ Error: Missing channel URL")
        print("\nUsage:")
        print("  python3 -m tools.youtube_fetch_channel_feed \"CHANNEL_OR_VIDEO_URL\"")
        print("\nExample:")
        print("  python3 -m tools.youtube_fetch_channel_feed \"https://youtube.com/@mkbhd\"")
        sys.exit(1)

    channel_url = sys.argv[1]

    api_key = os.getenv('YOUTUBE_API_KEY')
    max_items = int(os.getenv('MAX_FEED_ITEMS', DEFAULT_MAX_ITEMS))
    output_folder = os.getenv('OUTPUT_FOLDER', '.tmp/channel_pulse')

    if not api_key:
        print("❌ Error: YOUTUBE_API_KEY not found in .env file")
        sys.exit(1)

    try:
        print("🚀 YouTube Channel Feed Fetcher")
        print("=" * 50)
        print(f"URL: {channel_url}")
        print(f"Max uploads: {max_items}")
        print()

        fetcher = YouTubeFeedFetcher(api_key)

        print("🔍 Extracting channel ID...")
        channel_id = fetcher.extract_channel_id(channel_url)
        print(f"   Channel ID: {channel_id}")
        print()

        print("📊 Fetching channel information...")
        channel_info = fetcher.fetch_channel_info(channel_id)
        print(f"   Channel: {channel_info['title']}")
        print(f"   Subscribers: {channel_info['subscriberEstimate'] or 'hidden'}")
        print()

        print("📹 Fetching latest uploads...")
        items = fetcher.fetch_uploads(channel_info['uploadsPlaylistId'], max_items)
        print()

        channel = {key: channel_info[key] for key in ('id', 'title', 'url', 'subscriberEstimate')}
        output_file = fetcher.save_data(channel, items, f"{output_folder}/{channel_id}")

        print("=" * 50)
        print("✅ SUCCESS!")
        print(f"📁 Feed saved to: {output_file}")
        print(f"📊 Uploads fetched: {len(items)}")
        print(f"💰 API quota used: ~{fetcher.quota_used} units")
        print()
        print("Next step:")
        print(f"  python3 -m tools.channel_stats {output_file}")

    except ValueError as e:
        print(f"❌ Validation Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
