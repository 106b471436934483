"""Tests for text helpers."""
from app.tools.web_utils import extract_json_array, is_valid_url, strip_code_fences, strip_tags, truncate


class TestWebUtils:
    def test_valid_urls(self):
        assert is_valid_url("https://example.com") is True
        assert is_valid_url("http://example.com/path") is True

    def test_invalid_urls(self):
        assert is_valid_url("not-a-url") is False
        assert is_valid_url("ftp://example.com") is False
        assert is_valid_url("") is False

    def test_strip_tags(self):
        assert strip_tags("<h1>Hello</h1>\n<p>big   world</p>") == "Hello big world"

    def test_truncate(self):
        assert truncate("abc", 10) == "abc"
        assert truncate("abcdef", 3, marker="...") == "abc..."


class TestStripCodeFences:
    def test_strips_html_fence(self):
        assert strip_code_fences("```html\n<p>Hi</p>\n```") == "<p>Hi</p>"

    def test_strips_bare_fence(self):
        assert strip_code_fences("```\n<p>Hi</p>\n```\n") == "<p>Hi</p>"

    def test_leaves_unfenced_text_alone(self):
        assert strip_code_fences("  <p>a - b</p>  ") == "<p>a - b</p>"

    def test_keeps_inline_content_between_fences(self):
        assert strip_code_fences('```json\n["a", "b"]```') == '["a", "b"]'


class TestExtractJsonArray:
    def test_finds_array_inside_prose(self):
        assert extract_json_array('Here you go: ["q1", "q2"] enjoy') == '["q1", "q2"]'

    def test_fenced_array(self):
        assert extract_json_array('```json\n["q1"]\n```') == '["q1"]'

    def test_no_array_returns_cleaned_text(self):
        assert extract_json_array("nothing here") == "nothing here"
