"""Unit tests for core/parse.py"""

import pytest

from mdnotion.core.models import ParsedDoc
from mdnotion.core.parse import discover_files, md_glob_pattern, parse_file, parse_text
from mdnotion.errors import DocumentIOError


def test_md_glob_pattern_directory():
    assert md_glob_pattern("docs/") == "docs/**/*.md"


def test_md_glob_pattern_single_file():
    assert md_glob_pattern("docs/a.md") == "docs/a.md"


def test_discover_files_single(tmp_path):
    """discover_files returns a list with one file when given a file path."""
    f = tmp_path / "doc.md"
    f.write_text("# Hello")
    assert discover_files(f) == [f]


def test_discover_files_non_md_skipped(tmp_path):
    """discover_files ignores non-.md files."""
    (tmp_path / "notes.txt").write_text("text")
    (tmp_path / "page.mdx").write_text("text")
    assert discover_files(tmp_path) == []


def test_discover_files_recursive_and_sorted(tmp_path):
    """discover_files finds .md files at every depth, in sorted order."""
    (tmp_path / "b.md").write_text("b")
    sub = tmp_path / "a" / "deep"
    sub.mkdir(parents=True)
    (sub / "c.md").write_text("c")
    files = discover_files(tmp_path)
    assert files == sorted(files)
    assert {f.name for f in files} == {"b.md", "c.md"}


def test_discover_files_special_characters_in_root(tmp_path):
    """Glob metacharacters in the source directory name are taken literally."""
    root = tmp_path / "docs [draft]"
    root.mkdir()
    (root / "a.md").write_text("a")
    assert discover_files(root) == [root / "a.md"]


def test_discover_files_missing_source(tmp_path):
    with pytest.raises(DocumentIOError, match="no such file"):
        discover_files(tmp_path / "missing")


def test_parse_file_builds_parsed_doc(tmp_path):
    f = tmp_path / "plain.md"
    f.write_text("# Hello\n\nWorld.\n")
    doc = parse_file(f)
    assert isinstance(doc, ParsedDoc)
    assert doc.file_name == "plain"
    assert [c.type for c in doc.tree.children] == ["heading", "paragraph"]
    assert doc.page_title() == "plain"


def test_parse_file_title_from_directive(tmp_path):
    f = tmp_path / "plain.md"
    f.write_text("--title Overview\n\nBody\n")
    assert parse_file(f).page_title() == "Overview"


def test_parse_file_invalid_utf8(tmp_path):
    f = tmp_path / "bad.md"
    f.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(DocumentIOError, match="bad.md"):
        parse_file(f)


def test_parse_text_supports_tables_and_math():
    tree = parse_text("| a |\n|---|\n| 1 |\n\nInline $x^2$ math\n")
    assert [c.type for c in tree.children] == ["table", "paragraph"]
    inline = tree.children[1].children[0]
    assert "math_inline" in [c.type for c in inline.children]


def test_parse_file_skips_byte_order_mark(tmp_path):
    """A UTF-8 BOM does not hide the leading directive."""
    f = tmp_path / "bom.md"
    f.write_bytes('\ufeff--title "Bom Page" -e 📄\n\nBody\n'.encode("utf-8"))
    doc = parse_file(f)
    metadata = doc.metadata()
    assert metadata.title == "Bom Page"
    assert metadata.emoji == "📄"
    assert "\ufeff" not in doc.tree.children[0].children[0].children[0].content


def test_dollar_amounts_are_not_math():
    tree = parse_text("It costs $5 and $10 total.\n")
    inline = tree.children[0].children[0]
    assert [(c.type, c.content) for c in inline.children] == [("text", "It costs $5 and $10 total.")]
