import pytest

from models.lookout import ResultType
from tools.web.classifier import (
    CLASSIFICATION_RULES,
    classify,
    clean_text,
    extract_youtube_video_id,
    get_host,
    is_absolute_url,
    matching_rule,
    split_title,
    youtube_thumbnail,
)


@pytest.mark.parametrize(
    "url, text, rule_name, expected",
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "", "youtube", ResultType.VIDEO),
        ("https://youtu.be/dQw4w9WgXcQ", "", "youtube-short-link", ResultType.VIDEO),
        ("https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ", "", "youtube-nocookie", ResultType.VIDEO),
        ("https://vimeo.com/12345", "", "vimeo", ResultType.VIDEO),
        ("https://www.dailymotion.com/video/x7", "", "dailymotion", ResultType.VIDEO),
        ("https://www.twitch.tv/videos/1", "", "twitch", ResultType.VIDEO),
        ("https://en.wikipedia.org/wiki/Entropy", "", "wikipedia", ResultType.ARTICLE),
        ("https://ocw.mit.edu/courses/physics", "", "academic", ResultType.ARTICLE),
        ("https://www.ox.edu.uk/research", "", "academic", ResultType.ARTICLE),
        ("https://stackoverflow.com/questions/1", "", "qa-technical", ResultType.ARTICLE),
        ("https://medium.com/@a/post", "", "publishing", ResultType.ARTICLE),
        ("https://example.com/blog/post-1", "", "article-path", ResultType.ARTICLE),
        ("https://example.com/page", "A detailed explanation of gravity", "prose", ResultType.ARTICLE),
    ],
)
def test_rule_table(url, text, rule_name, expected):
    rule = matching_rule(url, text)
    assert rule is not None and rule.name == rule_name
    assert classify(url, text) == expected


def test_unmatched_is_link():
    assert matching_rule("https://example.com/shop", "buy things") is None
    assert classify("https://example.com/shop", "buy things") == ResultType.LINK


def test_first_matching_rule_wins():
    # a video host beats article keywords in the text
    assert classify("https://vimeo.com/1", "an article about cats") == ResultType.VIDEO


def test_host_rules_do_not_match_lookalike_hosts():
    assert classify("https://notyoutube.com.evil.example/watch?v=x", "") == ResultType.LINK


def test_rule_names_are_unique():
    names = [rule.name for rule in CLASSIFICATION_RULES]
    assert len(names) == len(set(names))


class TestYouTube:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://www.youtube.com/shorts/dQw4w9WgXcQ",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
        ],
    )
    def test_video_id_forms(self, url):
        assert extract_youtube_video_id(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize(
        "url",
        ["https://www.youtube.com/results?search_query=x", "https://vimeo.com/123", "https://youtu.be/short"],
    )
    def test_no_video_id(self, url):
        assert extract_youtube_video_id(url) is None
        assert youtube_thumbnail(url) is None

    def test_thumbnail_url(self):
        assert (
            youtube_thumbnail("https://youtu.be/dQw4w9WgXcQ")
            == "https://img.youtube.com/vi/dQw4w9WgXcQ/mqdefault.jpg"
        )


class TestText:
    def test_clean_text_strips_tags_and_whitespace(self):
        assert clean_text("<b>Bold</b>\n\n  and   <a href='x'>link</a>") == "Bold and link"

    def test_clean_text_unescapes_before_stripping_tags(self):
        assert clean_text("a &lt;b&gt;tag&lt;/b&gt; &amp; more") == "a tag & more"

    def test_clean_text_truncates(self):
        assert len(clean_text("x" * 500)) == 200

    def test_split_on_first_delimiter(self):
        assert split_title("Title - rest - more") == ("Title", "rest - more")

    def test_split_without_delimiter(self):
        text = "word " * 30
        title, description = split_title(text)
        assert len(title) <= 60
        assert title.endswith("...")
        assert description == clean_text(text)

    def test_short_text_without_delimiter(self):
        assert split_title("Photosynthesis") == ("Photosynthesis", "Photosynthesis")


class TestUrls:
    def test_host_is_literal(self):
        assert get_host("https://www.Example.com/path") == "www.example.com"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://example.com", True),
            ("http://example.com/a", True),
            ("/relative/path", False),
            ("ftp://example.com/file", False),
            ("not a url", False),
            ("", False),
        ],
    )
    def test_absolute_url(self, url, expected):
        assert is_absolute_url(url) is expected
