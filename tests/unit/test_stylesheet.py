"""
Unit tests for the stylesheet cache
"""
from mathsnap.stylesheet import StylesheetCache, get_stylesheet


class TestStylesheetCache:

    def test_reads_once(self, tmp_path):
        css = tmp_path / "katex.min.css"
        css.write_text(".katex{font:normal 1.21em KaTeX_Main}", encoding="utf-8")
        cache = StylesheetCache(css)

        first = cache.get()
        css.write_text("changed", encoding="utf-8")

        assert first == ".katex{font:normal 1.21em KaTeX_Main}"
        assert cache.get() == first

    def test_missing_file_gives_empty_text(self, tmp_path):
        assert StylesheetCache(tmp_path / "missing.css").get() == ""

    def test_no_path(self):
        assert StylesheetCache(None).get() == ""

    def test_module_level_cache_shared(self, tmp_path):
        css = tmp_path / "shared.css"
        css.write_text("a{}", encoding="utf-8")

        assert get_stylesheet(css) == "a{}"
        css.write_text("b{}", encoding="utf-8")
        assert get_stylesheet(str(css)) == "a{}"

    def test_module_level_none(self):
        assert get_stylesheet(None) == ""
