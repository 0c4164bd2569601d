"""
Tests for services/feed_service.py
"""
import pytest
from xml.etree import ElementTree as ET

from core.models import PostOverview
from core.runtime_config import RuntimeConfig
from services.feed_service import render_feed


def overview(post_id, tags=None, title=None, description=None):
    return PostOverview(
        id=post_id, thumbnail='t.png', media='m.png', title=title, description=description,
        uploaded_at='2024-03-01 12:30:00', tags=tags, media_type='image', rating='s',
    )


@pytest.mark.unit
class TestRenderFeed:

    def test_channel_uses_runtime_settings(self):
        settings = RuntimeConfig(application_name='Board', base_url='https://b.example/')
        root = ET.fromstring(render_feed([], settings))
        assert root.tag == 'rss'
        assert root.find('./channel/title').text == 'Board'
        assert root.find('./channel/link').text == 'https://b.example'
        assert root.findall('./channel/item') == []

    def test_item_fields(self):
        settings = RuntimeConfig(base_url='https://b.example')
        posts = [overview(2, tags='cat dog', description='Two pets'), overview(1, title='Untagged')]
        items = ET.fromstring(render_feed(posts, settings)).findall('./channel/item')

        assert items[0].find('title').text == 'cat dog'
        assert items[0].find('link').text == 'https://b.example/post/2'
        assert items[0].find('description').text == 'Two pets'
        assert items[0].find('pubDate').text == 'Fri, 01 Mar 2024 12:30:00 +0000'
        assert items[1].find('title').text == 'Untagged'
        assert items[1].find('description') is None

    def test_falls_back_to_post_number(self):
        item = ET.fromstring(render_feed([overview(9)], RuntimeConfig())).find('./channel/item')
        assert item.find('title').text == 'Post #9'
