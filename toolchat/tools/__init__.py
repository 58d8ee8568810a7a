"""
toolchat Tools Package

Available tools:
- analyze_sentiment: keyword-list sentiment scoring
- count_words: whitespace word count
- get_current_datetime: current server date and time
- get_hacker_news_top_stories: Hacker News front page via Algolia
"""

from .registry import ToolRegistry, ToolDefinition, tool_error, is_tool_error
from .text_analysis import analyze_sentiment, count_words
from .clock import get_current_datetime
from .hacker_news import get_top_stories

__all__ = [
    "ToolRegistry",
    "ToolDefinition",
    "tool_error",
    "is_tool_error",
    "analyze_sentiment",
    "count_words",
    "get_current_datetime",
    "get_top_stories",
]
