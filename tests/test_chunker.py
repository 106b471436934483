"""Tests for heading-aligned chunking."""
import pytest

from app.services.chunker import split_content, split_on_headings


def section(level: int, name: str, body_len: int) -> str:
    return f"<h{level}>{name}</h{level}><p>{'x' * body_len}</p>\n"


class TestSplitOnHeadings:
    def test_keeps_heading_tags_at_piece_start(self):
        html = "<p>intro</p><h2>A</h2><p>a</p><H3 class='t'>B</H3><p>b</p>"
        pieces = split_on_headings(html)
        assert pieces == ["<p>intro</p>", "<h2>A</h2><p>a</p>", "<H3 class='t'>B</H3><p>b</p>"]

    def test_ignores_h4_and_hr(self):
        html = "<p>a</p><h4>x</h4><hr><p>b</p>"
        assert split_on_headings(html) == [html]

    def test_leading_heading_creates_no_empty_piece(self):
        html = "<h1>Title</h1><p>a</p><h2>Next</h2>"
        assert split_on_headings(html) == ["<h1>Title</h1><p>a</p>", "<h2>Next</h2>"]


class TestSplitContent:
    def test_no_headings_returns_whole_input(self):
        text = "plain " * 5000
        assert split_content(text, 100) == [text]

    def test_empty_input(self):
        assert split_content("", 100) == [""]

    def test_packs_pieces_greedily(self):
        html = section(2, "A", 40) + section(2, "B", 40) + section(2, "C", 40)
        piece_len = len(section(2, "A", 40))
        chunks = split_content(html, piece_len * 2)
        assert len(chunks) == 2
        assert chunks[0] == section(2, "A", 40) + section(2, "B", 40)
        assert chunks[1] == section(2, "C", 40)

    def test_oversized_piece_is_kept_whole(self):
        big = section(2, "Big", 500)
        html = section(2, "A", 10) + big + section(3, "C", 10)
        chunks = split_content(html, 100)
        assert big in chunks
        assert "".join(chunks) == html

    @pytest.mark.parametrize("max_size", [1, 50, 120, 400, 10_000])
    def test_concatenation_reproduces_input(self, max_size):
        html = (
            "<p>lead in</p>\n"
            + section(1, "One", 30)
            + section(2, "Two", 250)
            + "<ul><li>x</li></ul>"
            + section(3, "Three", 5)
            + section(2, "Four", 90)
        )
        chunks = split_content(html, max_size)
        assert "".join(chunks) == html

    @pytest.mark.parametrize("max_size", [60, 150, 300])
    def test_only_single_oversized_pieces_exceed_limit(self, max_size):
        html = "".join(section(2, f"S{i}", (i * 37) % 200) for i in range(12))
        pieces = split_on_headings(html)
        for chunk in split_content(html, max_size):
            if len(chunk) > max_size:
                assert chunk in pieces

    def test_is_deterministic(self):
        html = "".join(section(2, f"S{i}", 300) for i in range(10))
        assert split_content(html, 1000) == split_content(html, 1000)

    def test_non_positive_limit_does_not_raise(self):
        html = section(2, "A", 5) + section(2, "B", 5)
        assert split_content(html, 0) == [section(2, "A", 5), section(2, "B", 5)]
