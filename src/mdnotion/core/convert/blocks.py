"""Syntax tree to destination block conversion"""

import logging
from typing import Callable

from markdown_it.tree import SyntaxTreeNode

from mdnotion.core.convert.code import build_code
from mdnotion.core.convert.inline import InlineConverter, span_groups
from mdnotion.core.links import DEFAULT_HOST
from mdnotion.core.metadata import inline_children
from mdnotion.core.models import PageMap, ParsedDoc
from mdnotion.notion.models import BlockChild, BlockRequest, BlockType, RichText


logger = logging.getLogger(__name__)


def _heading_level(node: SyntaxTreeNode) -> int:
    """Return the heading level from an hN tag."""
    return int(node.tag[1:])


def _cell_spans(cell: SyntaxTreeNode) -> list[RichText]:
    """A table cell keeps only its direct text children, as a single span."""
    text = ''.join(c.content for c in inline_children(cell) if c.type == 'text')
    return [RichText.new(text.replace('\n', ' '))] if text else []


class BlockConverter:
    """Converts one document's syntax tree into an ordered BlockRequest.

    Example:
        >>> converter = BlockConverter("docs/a.md", page_id, page_map, "A")
        >>> request = converter.convert(tree)
    """

    def __init__(
        self,
        document: str,
        page_id: str,
        page_map: PageMap,
        page_title: str,
        host: str = DEFAULT_HOST,
        ):
        self.document = document
        self.inline = InlineConverter(document, page_id, page_map, page_title, host)
        self._handlers: dict[str, Callable[[SyntaxTreeNode], list[BlockChild]]] = {
            'heading':      self._heading,
            'paragraph':    self._paragraph,
            'bullet_list':  self._list,
            'ordered_list': self._list,
            'fence':        self._code,
            'code_block':   self._code,
            'table':        self._table,
        }

    def convert(self, tree: SyntaxTreeNode) -> BlockRequest:
        """Walk the root's children depth-first; the first error aborts the whole document."""
        request = BlockRequest()
        for node in tree.children:
            request.extend(self.convert_node(node))
        return request

    def convert_node(self, node: SyntaxTreeNode) -> list[BlockChild]:
        handler = self._handlers.get(node.type)
        if handler is None:
            logger.debug(f"Skipping unsupported block node '{node.type}' in {self.document}")
            return []
        return handler(node)

    def _heading(self, node: SyntaxTreeNode) -> list[BlockChild]:
        depth = _heading_level(node)
        return self.inline.blocks(node, lambda spans: BlockChild.heading(depth, spans))

    def _paragraph(self, node: SyntaxTreeNode) -> list[BlockChild]:
        return self.inline.blocks(
            node, lambda spans: BlockChild.rich(BlockType.paragraph, spans), skip_directive=True,
        )

    def _list(self, node: SyntaxTreeNode) -> list[BlockChild]:
        """One list item block per item, built from the item's direct paragraphs only."""
        kind = BlockType.numbered_list_item if node.type == 'ordered_list' else BlockType.bulleted_list_item
        blocks: list[BlockChild] = []
        for item in node.children:
            if item.type != 'list_item':
                continue
            spans: list[RichText] = []
            images: list[BlockChild] = []
            for child in item.children:
                if child.type != 'paragraph':
                    logger.debug(f"Dropping nested '{child.type}' inside a list item in {self.document}")
                    continue
                for block in self.inline.blocks(child, lambda s: BlockChild.rich(kind, s)):
                    if block.type == BlockType.image:
                        images.append(block)
                        continue
                    if spans:
                        spans.append(RichText.new(' '))
                    spans.extend(block.rich_text())
            blocks.extend(BlockChild.rich(kind, group) for group in span_groups(spans))
            blocks.extend(images)
        return blocks

    def _code(self, node: SyntaxTreeNode) -> list[BlockChild]:
        return build_code(node.content, node.info if node.type == 'fence' else None)

    def _table(self, node: SyntaxTreeNode) -> list[BlockChild]:
        rows: list[list[list[RichText]]] = []
        for section in node.children:
            for tr in section.children:
                if tr.type == 'tr':
                    rows.append([_cell_spans(cell) for cell in tr.children])
        width = max((len(r) for r in rows), default=0)
        row_blocks = [
            BlockChild.table_row_block(cells + [[] for _ in range(width - len(cells))])
            for cells in rows
        ]
        return [BlockChild.table_block(width, row_blocks, has_column_header=True, has_row_header=True)]


def convert(
    tree: SyntaxTreeNode,
    document_path: str,
    page_id: str,
    page_map: PageMap,
    page_title: str,
    host: str = DEFAULT_HOST,
    ) -> BlockRequest:
    """Convert a parsed document into the BlockRequest pushed under its page."""
    return BlockConverter(document_path, page_id, page_map, page_title, host).convert(tree)


def convert_doc(doc: ParsedDoc, page_id: str, page_map: PageMap, host: str = DEFAULT_HOST) -> BlockRequest:
    """Convert a ParsedDoc, titling its links from the document's own metadata."""
    return convert(doc.tree, str(doc.path), page_id, page_map, doc.page_title(), host)
