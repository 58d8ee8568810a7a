"""
Text Analysis Tools

Keyword-based sentiment scoring and whitespace word counting.
"""

import re

POSITIVE_WORDS = frozenset({
    "good", "great", "awesome", "excellent", "happy", "love",
    "wonderful", "fantastic", "joyful", "delighted", "pleased",
})
NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "sad", "hate", "poor",
    "horrible", "miserable", "angry", "upset", "disappointed",
})

_PUNCTUATION_RE = re.compile(r"[.,!?]")
_WHITESPACE_RE = re.compile(r"\s+")


def analyze_sentiment(text: str) -> dict:
    """
    Score the sentiment of text against fixed positive and negative word lists.

    Args:
        text: The text to analyze

    Returns:
        Dictionary with sentiment label, score, matched words and an explanation
    """
    words = _WHITESPACE_RE.split(_PUNCTUATION_RE.sub("", text.lower()))
    score = 0
    matches: list[str] = []

    for word in words:
        if word in POSITIVE_WORDS:
            score += 1
            matches.append(f"'{word}' (positive)")
        if word in NEGATIVE_WORDS:
            score -= 1
            matches.append(f"'{word}' (negative)")

    if score > 0:
        sentiment = "Positive"
    elif score < 0:
        sentiment = "Negative"
    else:
        sentiment = "Neutral"

    return {
        "sentiment": sentiment,
        "score": score,
        "matches": matches,
        "explanation": (
            f"Found {', '.join(matches)}" if matches else "No clear sentiment words found"
        ),
    }


def count_words(text: str) -> int:
    """
    Count whitespace-separated words.

    Splitting an empty string still yields one empty token, so empty or
    all-whitespace input counts as 1. Clients rely on this, keep it.
    """
    return len(_WHITESPACE_RE.split(text.strip()))


# Register tools with the registry
def _register():
    from .registry import ToolRegistry

    ToolRegistry.register(
        name="analyze_sentiment",
        description=(
            "When asked to analyze sentiment, check sentiment, or determine if text "
            "is positive/negative, use this tool. It analyzes the sentiment of text "
            "and returns whether it has a positive, negative, or neutral emotional tone."
        ),
        parameters={
            "text": (
                "The text to analyze for sentiment. Can be any length of text, "
                "from a single sentence to multiple paragraphs."
            ),
        },
        handler=lambda params: analyze_sentiment(params["text"]),
    )
    ToolRegistry.register(
        name="count_words",
        description=(
            "When asked about word count, number of words, or how many words, use "
            "this tool. It counts the total number of words in a text by splitting "
            "on whitespace."
        ),
        parameters={
            "text": (
                "The text to count words from. Can be any length of text, "
                "from a single word to multiple paragraphs."
            ),
        },
        handler=lambda params: count_words(params["text"]),
    )


_register()
