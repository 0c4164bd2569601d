"""RSS 2.0 rendering of recent posts."""

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List
from xml.etree import ElementTree as ET

from core.models import PostOverview
from core.runtime_config import RuntimeConfig
from services.query.search import recent_posts_feed

SQLITE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _pub_date(uploaded_at: str) -> str:
    try:
        moment = datetime.strptime(uploaded_at, SQLITE_TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        return uploaded_at or ""
    return format_datetime(moment.replace(tzinfo=timezone.utc))


def render_feed(posts: List[PostOverview], settings: RuntimeConfig) -> str:
    base_url = settings.base_url.rstrip('/')

    rss = ET.Element('rss', version='2.0')
    channel = ET.SubElement(rss, 'channel')
    ET.SubElement(channel, 'title').text = settings.application_name
    ET.SubElement(channel, 'link').text = base_url
    ET.SubElement(channel, 'description').text = f"Recent posts on {settings.application_name}"

    for post in posts:
        item = ET.SubElement(channel, 'item')
        ET.SubElement(item, 'title').text = post.tags or post.title or f"Post #{post.id}"
        ET.SubElement(item, 'link').text = f"{base_url}/post/{post.id}"
        ET.SubElement(item, 'guid').text = f"{base_url}/post/{post.id}"
        ET.SubElement(item, 'pubDate').text = _pub_date(post.uploaded_at)
        if post.description:
            ET.SubElement(item, 'description').text = post.description

    return ET.tostring(rss, encoding='unicode', xml_declaration=True)


def posts_feed(query_text: str, settings: RuntimeConfig) -> str:
    """Feed of the newest public posts matching query_text."""
    return render_feed(recent_posts_feed(query_text), settings)
