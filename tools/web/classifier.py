"""
Host-based result classification and text cleanup.

Classification is a static, ordered rule table: the first matching rule wins,
and anything unmatched is a plain link.
"""

import html
import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

from models.lookout import ResultType

MAX_DESCRIPTION_CHARS = 200
MAX_TITLE_CHARS = 60
TITLE_DELIMITER = " - "

YOUTUBE_THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/mqdefault.jpg"

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
_YOUTUBE_HOST_KEYWORDS = ("youtube.com", "youtu.be", "youtube-nocookie.com")


@dataclass(frozen=True)
class ClassificationRule:
    """``pattern`` is searched in the url host, path or candidate text, per ``target``."""

    name: str
    target: str  # "host" | "path" | "text"
    pattern: re.Pattern
    result_type: ResultType


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    # Video platforms
    ClassificationRule("youtube", "host", re.compile(r"(^|\.)youtube\.com$"), ResultType.VIDEO),
    ClassificationRule("youtube-short-link", "host", re.compile(r"(^|\.)youtu\.be$"), ResultType.VIDEO),
    ClassificationRule(
        "youtube-nocookie", "host", re.compile(r"(^|\.)youtube-nocookie\.com$"), ResultType.VIDEO
    ),
    ClassificationRule("vimeo", "host", re.compile(r"(^|\.)vimeo\.com$"), ResultType.VIDEO),
    ClassificationRule(
        "dailymotion", "host", re.compile(r"(^|\.)(dailymotion\.com|dai\.ly)$"), ResultType.VIDEO
    ),
    ClassificationRule("twitch", "host", re.compile(r"(^|\.)twitch\.tv$"), ResultType.VIDEO),
    # Long-form and reference sites
    ClassificationRule("wikipedia", "host", re.compile(r"(^|\.)wikipedia\.org$"), ResultType.ARTICLE),
    ClassificationRule("academic", "host", re.compile(r"\.edu(\.[a-z]{2})?$"), ResultType.ARTICLE),
    ClassificationRule(
        "qa-technical",
        "host",
        re.compile(r"(^|\.)(stackoverflow\.com|stackexchange\.com|superuser\.com|quora\.com)$"),
        ResultType.ARTICLE,
    ),
    ClassificationRule(
        "publishing",
        "host",
        re.compile(r"(^|\.)(medium\.com|britannica\.com|arxiv\.org|developer\.mozilla\.org)$"),
        ResultType.ARTICLE,
    ),
    ClassificationRule("article-path", "path", re.compile(r"blog|article|news"), ResultType.ARTICLE),
    ClassificationRule("prose", "text", re.compile(r"\b(article|explanation)\b"), ResultType.ARTICLE),
)


def get_host(url: str) -> str:
    """Literal lowercase host of ``url`` ("" when it cannot be parsed)."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_absolute_url(url: str) -> bool:
    try:
        parsed = urlparse((url or "").strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def matching_rule(url: str, text: str = "") -> ClassificationRule | None:
    """First rule in CLASSIFICATION_RULES matching ``url``/``text``, if any."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    fields = {
        "host": (parsed.hostname or "").lower(),
        "path": parsed.path.lower(),
        "text": (text or "").lower(),
    }
    return next(
        (rule for rule in CLASSIFICATION_RULES if rule.pattern.search(fields[rule.target])), None
    )


def classify(url: str, text: str = "") -> ResultType:
    rule = matching_rule(url, text)
    return rule.result_type if rule else ResultType.LINK


def is_youtube_url(url: str) -> bool:
    host = get_host(url)
    return any(keyword in host for keyword in _YOUTUBE_HOST_KEYWORDS)


def extract_youtube_video_id(url: str) -> str | None:
    """
    Extract a YouTube video id from watch, short-link, shorts and embed URLs.
    """
    if not url or not is_youtube_url(url):
        return None

    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()
    path = parsed.path.strip("/")

    if "youtu.be" in host:
        candidate = path.split("/")[0] if path else ""
        return candidate if _VIDEO_ID_PATTERN.match(candidate) else None

    if path == "watch":
        candidates = parse_qs(parsed.query).get("v") or []
        if candidates and _VIDEO_ID_PATTERN.match(candidates[0]):
            return candidates[0]
        return None

    parts = path.split("/")
    if len(parts) > 1 and parts[0] in {"shorts", "live", "embed", "v"}:
        if _VIDEO_ID_PATTERN.match(parts[1]):
            return parts[1]
    return None


def youtube_thumbnail(url: str) -> str | None:
    video_id = extract_youtube_video_id(url)
    if not video_id:
        return None
    return YOUTUBE_THUMBNAIL_URL.format(video_id=video_id)


def clean_text(text: str, limit: int | None = MAX_DESCRIPTION_CHARS) -> str:
    """Strip HTML tags, unescape entities, collapse whitespace and truncate."""
    cleaned = _TAG_PATTERN.sub("", html.unescape(text or ""))
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned).strip()
    if limit is not None and len(cleaned) > limit:
        cleaned = cleaned[:limit].rstrip()
    return cleaned


def split_title(text: str) -> tuple[str, str]:
    """
    Split candidate text into (title, description).

    "Title - rest" splits on the first delimiter. Without a delimiter the
    description is the whole text. Titles are cut to MAX_TITLE_CHARS.
    """
    full = clean_text(text, limit=None)
    head, sep, tail = full.partition(TITLE_DELIMITER)
    title = head.strip()
    description = tail.strip() if sep else ""

    if not title:
        title = full
    if len(title) > MAX_TITLE_CHARS:
        title = title[: MAX_TITLE_CHARS - 3].rstrip() + "..."
    if not description:
        description = full

    return title, clean_text(description)
