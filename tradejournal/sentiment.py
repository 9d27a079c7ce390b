"""
News sentiment scoring.

Text is scored with the VADER lexicon and mapped to a Bullish / Bearish /
Neutral label. Financial headlines get an extra pass that nudges the score
by counting domain keywords.
"""
import re
from collections import Counter
from typing import Dict, Iterable, List

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from tradejournal.types import NewsArticle, SentimentResult

__all__ = [
    "POSITIVE_THRESHOLD",
    "NEGATIVE_THRESHOLD",
    "KEYWORD_WEIGHT",
    "BULLISH_KEYWORDS",
    "BEARISH_KEYWORDS",
    "clean_text",
    "classify",
    "score_text",
    "score_financial_text",
    "format_score",
    "icon_for",
    "score_articles",
    "summarize_sentiment",
]

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05
KEYWORD_WEIGHT = 0.1

BULLISH_KEYWORDS = (
    "profit", "gain", "rise", "surge", "rally", "bull", "bullish", "growth",
    "increase", "up", "positive", "strong", "beat", "exceed", "outperform",
    "breakthrough", "success", "record", "high", "soar", "climb",
)

BEARISH_KEYWORDS = (
    "loss", "fall", "drop", "crash", "bear", "bearish", "decline", "decrease",
    "down", "negative", "weak", "miss", "underperform", "concern", "worry",
    "risk", "threat", "low", "plunge", "tumble", "slide",
)

_ICONS = {"positive": "↗", "negative": "↘", "neutral": "➖"}

_DISALLOWED_CHARS = re.compile(r"[^\w\s.,!?-]")
_WHITESPACE = re.compile(r"\s+")

# polarity_scores keeps no state between calls, so one instance is shared.
_analyzer = SentimentIntensityAnalyzer()


def clean_text(text: str) -> str:
    """Replaces anything but word characters and basic punctuation, then squeezes whitespace."""
    text = _DISALLOWED_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def classify(compound: float) -> SentimentResult:
    """Labels a compound score. Proportions are left at zero."""
    if compound >= POSITIVE_THRESHOLD:
        label, color = "Bullish", "positive"
    elif compound <= NEGATIVE_THRESHOLD:
        label, color = "Bearish", "negative"
    else:
        label, color = "Neutral", "neutral"
    return SentimentResult(compound=compound, label=label, color=color)


def score_text(text: str) -> SentimentResult:
    """
    Scores free text with the VADER lexicon.

    Empty input, or input with nothing left after cleaning, scores 0 and is
    labelled Neutral.
    """
    scores = _analyzer.polarity_scores(clean_text(text))
    labelled = classify(scores["compound"])
    return labelled.model_copy(
        update={"positive": scores["pos"], "negative": scores["neg"], "neutral": scores["neu"]}
    )


def _keyword_boost(text: str) -> float:
    """
    Net keyword adjustment for `text`.

    Occurrences are counted as substrings, so "bull" also matches inside
    "bullish" and "up" inside "update".
    """
    lowered = text.lower()
    bullish = sum(lowered.count(word) for word in BULLISH_KEYWORDS)
    bearish = sum(lowered.count(word) for word in BEARISH_KEYWORDS)
    return KEYWORD_WEIGHT * bullish - KEYWORD_WEIGHT * bearish


def score_financial_text(title: str, summary: str) -> SentimentResult:
    """
    Scores a headline and its summary, weighting the title twice.

    The keyword boost only moves `compound` (clamped to [-1, 1]) and the
    label; the lexicon proportions are reported as the baseline scorer
    produced them.
    """
    combined = f"{title} {title} {summary}"
    baseline = score_text(combined)

    compound = max(-1.0, min(1.0, baseline.compound + _keyword_boost(combined)))
    labelled = classify(compound)
    return baseline.model_copy(
        update={"compound": compound, "label": labelled.label, "color": labelled.color}
    )


def format_score(compound: float) -> str:
    """Formats a compound score as a signed percentage, e.g. "+50.0%"."""
    sign = "+" if compound >= 0 else "-"
    return f"{sign}{abs(compound) * 100:.1f}%"


def icon_for(result: SentimentResult) -> str:
    return _ICONS[result.color]


def score_articles(articles: Iterable[NewsArticle]) -> List[NewsArticle]:
    """Attaches a financial sentiment score to every article."""
    return [
        article.model_copy(update={"sentiment": score_financial_text(article.title, article.summary)})
        for article in articles
    ]


def summarize_sentiment(articles: Iterable[NewsArticle]) -> Dict[str, int]:
    """Counts scored articles per label. Unscored articles are ignored."""
    counts = Counter(a.sentiment.label for a in articles if a.sentiment is not None)
    return {label: counts.get(label, 0) for label in ("Bullish", "Bearish", "Neutral")}
