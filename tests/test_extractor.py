import logging

import pytest

from image_scraper.extractor import LinkExtractor, SourceReadError, filename_from_url, parse_link


@pytest.fixture
def extractor():
    return LinkExtractor()


class TestParseLink:
    @pytest.mark.parametrize(
        "raw",
        [
            "http://example.com/a.jpg",
            "https://cdn.example.com:8443/img/cat%20photo.png",
            "https://example.com/path/to/pic.webp",
            "http://[::1]/local.gif",
            "https://example.com/фото.jpg",
            "https://例え.jp/画像.png?サイズ=大",
        ],
    )
    def test_valid(self, raw):
        assert parse_link(raw) == raw

    @pytest.mark.parametrize(
        "raw",
        [
            "http://example.com/bad|name.jpg",
            "http://example.com/100%zz.png",
            "http://example.com:99999/a.png",
            "http:///nohost.jpg",
            "http://host.jpg",
            "http://example.com/{id}.png",
            "ftp://example.com/a.jpg",
            "http://example.com/a[1].jpg",
            "http://example.com/a^b.jpg",
            "http://example.com/a`b.jpg",
            "http://example.com/a\\b.jpg",
        ],
    )
    def test_invalid(self, raw):
        assert parse_link(raw) is None


class TestFilenameFromUrl:
    def test_last_segment(self):
        assert filename_from_url("https://example.com/a/b/c.png") == "c.png"

    def test_percent_decoded(self):
        assert filename_from_url("https://example.com/a/cat%20photo.jpg") == "cat photo.jpg"

    def test_query_is_ignored(self):
        assert filename_from_url("https://example.com/a/x.gif?size=2") == "x.gif"


class TestScanLine:
    def test_multiple_matches_per_line(self, extractor):
        line = 'see http://a.com/x.jpg and "https://b.com/y.PNG", then <https://c.com/z.gif>'

        links, invalid = extractor.scan_line(line)

        assert links == ["http://a.com/x.jpg", "https://b.com/y.PNG", "https://c.com/z.gif"]
        assert invalid == 0

    def test_non_greedy_stops_at_first_extension(self, extractor):
        links, _ = extractor.scan_line("http://a.com/x.jpg,http://b.com/y.png")

        assert links == ["http://a.com/x.jpg", "http://b.com/y.png"]

    def test_trailing_query_and_punctuation_not_consumed(self, extractor):
        links, _ = extractor.scan_line("look: https://a.com/pic.jpeg?w=200).")

        assert links == ["https://a.com/pic.jpeg"]

    def test_extension_must_end_at_boundary(self, extractor):
        links, _ = extractor.scan_line("http://images.bmpsite.com/cover.png")

        assert links == ["http://images.bmpsite.com/cover.png"]

    def test_non_image_urls_ignored(self, extractor):
        links, invalid = extractor.scan_line("https://example.com/index.html http://example.com/doc.pdf")

        assert links == []
        assert invalid == 0

    def test_invalid_match_is_logged_and_skipped(self, extractor, caplog):
        caplog.set_level(logging.WARNING, logger="image_scraper")

        links, invalid = extractor.scan_line("http://a.com/bad|x.jpg http://a.com/good.jpg")

        assert links == ["http://a.com/good.jpg"]
        assert invalid == 1
        assert "Invalid URL skipped: http://a.com/bad|x.jpg" in caplog.text


class TestExtract:
    def test_order_and_duplicates_preserved(self, extractor, write_source):
        path = write_source(
            "links.txt",
            "first http://a.com/1.jpg\n"
            "noise https://a.com/page.html text\n"
            "http://a.com/2.png http://a.com/1.jpg\n"
            "\n"
            "last https://b.org/3.bmp\n",
        )

        links, invalid = extractor.extract(path)

        assert links == [
            "http://a.com/1.jpg",
            "http://a.com/2.png",
            "http://a.com/1.jpg",
            "https://b.org/3.bmp",
        ]
        assert invalid == 0

    def test_empty_file(self, extractor, write_source):
        assert extractor.extract(write_source("empty.txt", "")) == ([], 0)

    def test_file_without_matches(self, extractor, write_source):
        path = write_source("plain.log", "nothing to see here\nhttp://example.com/\n")

        assert extractor.extract(path) == ([], 0)

    def test_undecodable_bytes_do_not_fail(self, extractor, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(b"caf\xe9 http://a.com/menu.jpg\n")

        links, _ = extractor.extract(path)

        assert links == ["http://a.com/menu.jpg"]

    def test_missing_file_raises_read_error(self, extractor, tmp_path):
        with pytest.raises(SourceReadError) as exc_info:
            extractor.extract(tmp_path / "gone.txt")

        assert exc_info.value.path == tmp_path / "gone.txt"
        assert isinstance(exc_info.value.cause, OSError)

    def test_extract_from_text(self, extractor):
        text = "a http://x.io/a.gif\nb https://x.io/b.webp"

        assert extractor.extract_from_text(text) == ["http://x.io/a.gif", "https://x.io/b.webp"]

    def test_custom_image_extensions(self):
        extractor = LinkExtractor(image_extensions=["svg"])

        assert extractor.extract_from_text("http://x.io/a.svg http://x.io/b.png") == ["http://x.io/a.svg"]

    def test_non_ascii_link_is_kept(self, extractor, caplog):
        links = extractor.extract_from_text("see https://example.com/фото.jpg here")

        assert links == ["https://example.com/фото.jpg"]
        assert "Invalid URL skipped" not in caplog.text
        assert filename_from_url(links[0]) == "фото.jpg"
