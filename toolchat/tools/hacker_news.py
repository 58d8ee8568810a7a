"""
Hacker News Top Stories Tool

Fetches the current front-page stories via the public Algolia search API.
"""

import logging

import requests

from ..config import config
from .clock import utc_timestamp
from .registry import tool_error

logger = logging.getLogger(__name__)

ITEM_URL = "https://news.ycombinator.com/item?id={object_id}"


def _format_story(hit: dict) -> dict:
    """Turn an Algolia hit into a story with ready-made markdown and HTML links."""
    link = hit.get("url") or ITEM_URL.format(object_id=hit.get("objectID"))
    label = hit.get("title") or "Read More"
    return {
        "title": hit.get("title") or "Untitled",
        "link": link,
        "points": hit.get("points") or 0,
        "comments": hit.get("num_comments") or 0,
        "formatted_link": f"[{label}]({link})",
        "html_link": f'<a href="{link}" target="_blank">{label}</a>',
    }


def get_top_stories(count: int | None = None) -> dict:
    """
    Fetch the top front-page stories from Hacker News.

    Args:
        count: Number of stories to request (defaults to config)

    Returns:
        Dictionary with the stories and a capture timestamp, or an error
        payload when the fetch or the response parsing fails
    """
    params = {
        "tags": "front_page",
        "hitsPerPage": count or config.tools.hn_story_count,
    }

    try:
        response = requests.get(
            config.tools.hn_search_url,
            params=params,
            timeout=config.tools.hn_timeout,
        )
        response.raise_for_status()
        data = response.json()
        stories = [_format_story(hit) for hit in data["hits"]]
    except (requests.exceptions.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.error(f"Error fetching Hacker News stories: {type(e).__name__}: {e}")
        return tool_error("Failed to fetch Hacker News stories", str(e))

    logger.debug(f"Extracted {len(stories)} top stories")
    return {
        "stories": stories,
        "timestamp": utc_timestamp(),
    }


def _register():
    from .registry import ToolRegistry

    ToolRegistry.register(
        name="get_hacker_news_top_stories",
        description=(
            "When asked about top stories, tech news, or what is trending on "
            "Hacker News, use this tool. It fetches the current top 3 front-page "
            "stories with their links, points, and comment counts."
        ),
        parameters={},
        handler=lambda params: get_top_stories(),
    )


_register()
