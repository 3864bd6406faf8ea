"""Tests for the reference scanner and the shared tree walk."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from todoctx.context.references import ReferenceScanner, find_files_referencing, word_pattern
from todoctx.context.walk import iter_source_files
from todoctx.errors import SearchRootNotFoundError
from todoctx.languages import JavaScriptSupport
from todoctx.schemas.context import FileMatch, ScanOutcome, SourceFile, TargetSymbol


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def tree(tmp_path):
    """Foo referenced by bracket notation, by plain identifier, and inside a vendor dir."""
    _write(tmp_path / "Sources" / "List.swift", "let items: [Foo] = []\n")
    _write(tmp_path / "web" / "app.js", "const f = new Foo();\n")
    _write(tmp_path / "Pods" / "Vendored.swift", "let f = Foo()\n")
    _write(tmp_path / "Sources" / "Other.swift", "let b = FooBar()\n")
    _write(tmp_path / "notes.txt", "Foo\n")
    return tmp_path


class TestWalk:
    def test_prunes_vendor_dirs_and_filters_extensions(self, tree):
        found = {p.relative_to(tree).as_posix() for p in iter_source_files(tree)}
        assert found == {"Sources/List.swift", "Sources/Other.swift", "web/app.js"}

    def test_custom_vendor_dirs(self, tree):
        found = {p.relative_to(tree).as_posix() for p in iter_source_files(tree, ("web",))}
        assert "Pods/Vendored.swift" in found
        assert "web/app.js" not in found


class TestReferenceScanner:
    def test_bracket_and_plain_references_found(self, tree):
        candidates = ReferenceScanner().scan("Foo", tree)
        assert candidates.paths == sorted(
            [str(tree / "Sources" / "List.swift"), str(tree / "web" / "app.js")]
        )

    def test_vendor_occurrence_excluded(self, tree):
        candidates = ReferenceScanner().scan("Foo", tree)
        assert all("Pods" not in p for p in candidates.paths)
        assert candidates.outcome_for(str(tree / "Pods" / "Vendored.swift")) is None

    def test_prefix_is_not_a_reference(self, tree):
        candidates = ReferenceScanner().scan("Foo", tree)
        other = str(tree / "Sources" / "Other.swift")
        assert other not in candidates.paths
        assert candidates.outcome_for(other) is not None

    def test_accepts_target_symbol(self, tree):
        symbol = TargetSymbol(name="Foo", source_path="x.swift")
        assert len(ReferenceScanner().scan(symbol, tree)) == 2

    def test_no_duplicates(self, tree):
        candidates = ReferenceScanner().scan("Foo", tree)
        paths = [d.path for d in candidates.decisions]
        assert len(paths) == len(set(paths))

    def test_missing_root(self, tmp_path):
        with pytest.raises(SearchRootNotFoundError):
            ReferenceScanner().scan("Foo", tmp_path / "nope")

    def test_find_files_referencing(self, tree):
        assert len(find_files_referencing("Foo", tree)) == 2


class TestScanOutcome:
    def test_javascript_is_structural(self, tmp_path):
        js = _write(tmp_path / "a.js", "const f = new Foo();\n")
        match = ReferenceScanner().classify(js, "Foo")
        assert match == FileMatch(path=str(js), outcome=ScanOutcome.STRUCTURAL, referenced=True)

    def test_structural_ignores_strings(self, tmp_path):
        js = _write(tmp_path / "a.js", "const s = 'Foo';\n")
        match = ReferenceScanner().classify(js, "Foo")
        assert match.outcome is ScanOutcome.STRUCTURAL
        assert match.referenced is False

    def test_parse_failure_falls_back(self, tmp_path):
        js = _write(tmp_path / "broken.js", "const = = Foo {{{\n")
        match = ReferenceScanner().classify(js, "Foo")
        assert match.outcome is ScanOutcome.FALLBACK
        assert match.referenced is True

    def test_no_grammar_falls_back(self, tmp_path):
        m = _write(tmp_path / "a.m", "[Foo alloc];\n")
        match = ReferenceScanner().classify(m, "Foo")
        assert match.outcome is ScanOutcome.FALLBACK
        assert match.referenced is True

    def test_missing_grammar_module_falls_back(self, tmp_path):
        js = _write(tmp_path / "a.js", "const f = new Foo();\n")
        with patch.object(JavaScriptSupport, "load_language", return_value=None):
            match = ReferenceScanner().classify(js, "Foo")
        assert match.outcome is ScanOutcome.FALLBACK
        assert match.referenced is True

    def test_fallback_uses_word_boundaries(self, tmp_path):
        m = _write(tmp_path / "a.m", "[FooBar alloc]; [BarFoo alloc];\n")
        match = ReferenceScanner().classify(m, "Foo")
        assert match.outcome is ScanOutcome.FALLBACK
        assert match.referenced is False

    def test_unreadable_file_is_skipped(self, tmp_path):
        bad = tmp_path / "bad.swift"
        bad.write_bytes(b"\xff\xfe\x00Foo")
        match = ReferenceScanner().classify(bad, "Foo")
        assert match.outcome is ScanOutcome.SKIPPED
        assert match.referenced is False

    def test_skipped_file_does_not_abort_scan(self, tmp_path):
        (tmp_path / "bad.swift").write_bytes(b"\xff\xfe\x00Foo")
        _write(tmp_path / "good.m", "Foo *f;\n")
        candidates = ReferenceScanner().scan("Foo", tmp_path)
        assert candidates.paths == [str(tmp_path / "good.m")]
        assert candidates.outcome_for(str(tmp_path / "bad.swift")) is ScanOutcome.SKIPPED

    def test_fallback_treats_dollar_as_identifier_character(self, tmp_path):
        js = _write(tmp_path / "a.js", "const x = $Foo + Foo$;\n")
        with patch.object(JavaScriptSupport, "load_language", return_value=None):
            match = ReferenceScanner().classify(js, "Foo")
        assert match.outcome is ScanOutcome.FALLBACK
        assert match.referenced is False


class TestWordPattern:
    @pytest.mark.parametrize("text", ["Foo", "[Foo]", "(Foo)", "x.Foo()", "Foo<T>"])
    def test_matches_whole_identifier(self, text):
        assert word_pattern("Foo").search(text)

    @pytest.mark.parametrize("text", ["FooBar", "BarFoo", "$Foo", "Foo$", "_Foo", "Foo1"])
    def test_rejects_longer_identifier(self, text):
        assert word_pattern("Foo").search(text) is None


class TestSourceFile:
    def test_read(self, tmp_path):
        path = _write(tmp_path / "View.SWIFT", "struct View {}\n")
        source = SourceFile.read(path)
        assert source.path == str(path)
        assert source.extension == "swift"
        assert source.content == "struct View {}\n"

    def test_read_undecodable(self, tmp_path):
        bad = tmp_path / "bad.js"
        bad.write_bytes(b"var s = '\xe9';\n")
        with pytest.raises(UnicodeDecodeError):
            SourceFile.read(bad)
