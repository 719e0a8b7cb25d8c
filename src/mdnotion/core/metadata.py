"""Per-document title/emoji overrides read from a leading directive line.

A document may open with a line such as::

    --title "Getting Started" --emoji 🚀

The line is split shell-style (double quotes group words) and parsed against a
fixed option schema. It names the destination page and is never published as
content.
"""

import logging
from typing import Iterator, Optional

from markdown_it.tree import SyntaxTreeNode
from pydantic import BaseModel

from mdnotion.errors import ArgParseError


logger = logging.getLogger(__name__)

DIRECTIVE_MARKER = '--'

OPTIONS: dict[str, str] = {
    '--title': 'title',
    '-t':      'title',
    '--emoji': 'emoji',
    '-e':      'emoji',
}


class DocumentMetadata(BaseModel):
    """Per-document overrides read from the leading directive line."""
    title: Optional[str] = None
    emoji: Optional[str] = None


def split_args(text: str) -> list[str]:
    """Split text on whitespace, keeping double-quoted segments together.

    >>> split_args('--title "Hello, world!"')
    ['--title', 'Hello, world!']
    """
    args: list[str] = []
    chars = iter(text)
    current: Optional[str] = None
    for c in chars:
        if c.isspace():
            if current is not None:
                args.append(current)
                current = None
        elif c == '"' and current is None:
            quoted = ''
            for q in chars:
                if q == '"':
                    break
                quoted += q
            args.append(quoted)
        else:
            current = (current or '') + c
    if current is not None:
        args.append(current)
    return args


def parse_directive(text: str, document: str) -> DocumentMetadata:
    """Parse a directive string into DocumentMetadata, raising ArgParseError on bad input."""
    tokens = split_args(text)
    values: dict[str, str] = {}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        name, sep, inline_value = token.partition('=') if token.startswith('--') else (token, '', '')
        field = OPTIONS.get(name)
        if field is None:
            raise ArgParseError(document, f"unexpected argument '{token}' found")
        if field in values:
            raise ArgParseError(document, f"the argument '{name}' cannot be used multiple times")
        if sep:
            value = inline_value
        elif i + 1 < len(tokens):
            i += 1
            value = tokens[i]
        else:
            raise ArgParseError(document, f"a value is required for '{name}' but none was supplied")
        values[field] = value
        i += 1
    return DocumentMetadata(**values)


def inline_children(node: SyntaxTreeNode) -> Iterator[SyntaxTreeNode]:
    """Yield the inline nodes of a block node (paragraph, heading, table cell)."""
    for child in node.children:
        if child.type == 'inline':
            yield from child.children


def is_directive(paragraph: SyntaxTreeNode, text: str) -> bool:
    """True if text is a directive marker run on the document's first source line."""
    return (
        text.startswith(DIRECTIVE_MARKER)
        and paragraph.map is not None
        and paragraph.map[0] == 0
    )


def first_text_run(tree: SyntaxTreeNode) -> Optional[str]:
    """Return the first non-empty text run of the document's leading paragraph, if any."""
    if not tree.children or tree.children[0].type != 'paragraph':
        return None
    for node in inline_children(tree.children[0]):
        if node.type == 'text' and node.content.strip():
            return node.content
    return None


def extract_metadata(tree: SyntaxTreeNode, document: str) -> DocumentMetadata:
    """Return the document's title/emoji overrides; empty metadata when it has no leading text."""
    text = first_text_run(tree)
    if text is None:
        return DocumentMetadata()
    metadata = parse_directive(text, document)
    logger.debug(f"Metadata for {document}: {metadata}")
    return metadata
