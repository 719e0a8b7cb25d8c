"""File discovery and markdown-it parsing into syntax trees"""

import glob
from pathlib import Path

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin

from mdnotion.core.models import ParsedDoc
from mdnotion.errors import DocumentIOError


MD_EXTENSION = '.md'


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name, with inline/block math."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    # digits next to a dollar sign are prices, not math: $5 and $10
    dollarmath_plugin(md, allow_digits=False)
    return md


def parse_text(text: str, preset: str = 'gfm-like') -> SyntaxTreeNode:
    """Parse markdown text into the root node of its syntax tree."""
    return SyntaxTreeNode(make_parser(preset).parse(text))


def md_glob_pattern(src: str) -> str:
    """Return src itself for a single .md file, else a recursive *.md pattern under it."""
    if src.endswith(MD_EXTENSION):
        return src
    return f"{src.rstrip('/')}/**/*{MD_EXTENSION}"


def discover_files(src: str | Path) -> list[Path]:
    """Return the sorted markdown files matched by src (a directory or one .md file)."""
    src = str(src)
    if not Path(src).exists():
        raise DocumentIOError(src, "no such file or directory")
    pattern = md_glob_pattern(glob.escape(src))
    return sorted(Path(p) for p in glob.glob(pattern, recursive=True) if Path(p).is_file())


def parse_file(path: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Read and parse a single markdown file into a ParsedDoc."""
    try:
        raw = path.read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentIOError(str(path), str(e)) from e
    return ParsedDoc(path=path, file_name=path.stem, tree=parse_text(raw, parser_config))
