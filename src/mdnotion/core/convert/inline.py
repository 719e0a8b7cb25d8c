"""Inline node conversion: accumulating rich text spans into sealed blocks"""

import logging
from typing import Callable, Iterable

from markdown_it.tree import SyntaxTreeNode

from mdnotion.core.links import DEFAULT_HOST, resolve_link, validate_image_url
from mdnotion.core.metadata import inline_children, is_directive
from mdnotion.core.models import PageMap
from mdnotion.notion.models import Annotations, BlockChild, MAX_NESTED_ITEMS, RichText


logger = logging.getLogger(__name__)

# inline container nodes that add an annotation to everything inside them
MARKS: dict[str, str] = {
    'strong': 'bold',
    'em':     'italic',
    's':      'strikethrough',
}

# inline leaf nodes rendered as code-annotated text; math has no annotation of its own
CODE_LIKE = frozenset({'code_inline', 'math_inline'})

BREAKS = frozenset({'softbreak', 'hardbreak'})


def merge_spans(spans: Iterable[RichText]) -> list[RichText]:
    """Join adjacent spans sharing link and annotations; newlines become single spaces."""
    merged: list[RichText] = []
    for span in spans:
        prev = merged[-1] if merged else None
        if prev is not None and prev.href == span.href and prev.annotations == span.annotations:
            prev.text.content += span.content
        else:
            merged.append(span.model_copy(deep=True))
    for span in merged:
        span.text.content = span.content.replace('\n', ' ')
    return merged


def span_groups(spans: list[RichText], size: int = MAX_NESTED_ITEMS) -> list[list[RichText]]:
    """Cut a run into consecutive groups a single block can carry."""
    return [spans[i:i + size] for i in range(0, len(spans), size)]


def plain_text(node: SyntaxTreeNode) -> str:
    """Concatenate the text content below node (used for link anchors)."""
    if node.type == 'text' or node.type in CODE_LIKE:
        return node.content
    if node.type in BREAKS:
        return '\n'
    return ''.join(plain_text(c) for c in node.children)


class InlineConverter:
    """Turns the inline children of one block node into rich text spans.

    Links are resolved against the page map of the run; an unresolvable link
    or malformed image URL raises and aborts the document.
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
        self.page_id = page_id
        self.page_map = page_map
        self.page_title = page_title
        self.host = host

    def blocks(
        self,
        container: SyntaxTreeNode,
        seal: Callable[[list[RichText]], BlockChild],
        skip_directive: bool = False,
        ) -> list[BlockChild]:
        """Convert container's inline content into blocks built by `seal`.

        Images end the current run: spans collected so far are sealed into a
        block and the image becomes a block of its own. Leading blank text is
        skipped, and with skip_directive a metadata directive on the
        document's first line is dropped up to the end of that line.
        """
        blocks: list[BlockChild] = []
        spans: list[RichText] = []
        started = False
        dropping = False

        def flush() -> None:
            if spans:
                blocks.extend(seal(group) for group in span_groups(merge_spans(spans)))
                spans.clear()

        for index, node in enumerate(inline_children(container)):
            if dropping:
                dropping = node.type not in BREAKS
                continue
            if node.type == 'image':
                flush()
                url = validate_image_url(node.attrs.get('src', ''), self.document)
                blocks.append(BlockChild.external_image(url))
                started = True
                continue
            if not started:
                if node.type in BREAKS:
                    continue
                if node.type == 'text':
                    if skip_directive and index == 0 and is_directive(container, node.content):
                        logger.debug(f"Dropping metadata directive from {self.document}")
                        dropping = True
                        continue
                    if not node.content.strip():
                        continue
                started = True
            spans.extend(self.spans(node, Annotations()))

        flush()
        return blocks

    def spans(self, node: SyntaxTreeNode, annotations: Annotations) -> list[RichText]:
        """Return the spans for one inline node, carrying inherited annotations."""
        if node.type == 'text':
            return [RichText.new(node.content, annotations=annotations)]
        if node.type in BREAKS:
            return [RichText.new('\n', annotations=annotations)]
        if node.type in CODE_LIKE:
            return [RichText.new(node.content, annotations=annotations.model_copy(update={'code': True}))]
        if node.type in MARKS:
            marked = annotations.model_copy(update={MARKS[node.type]: True})
            return [s for child in node.children for s in self.spans(child, marked)]
        if node.type == 'link':
            return [self.link(node, annotations)]
        logger.debug(f"Skipping unsupported inline node '{node.type}' in {self.document}")
        return []

    def link(self, node: SyntaxTreeNode, annotations: Annotations) -> RichText:
        href = str(node.attrs.get('href', ''))
        url = resolve_link(href, self.document, self.page_id, self.page_map, self.page_title, self.host)
        content = plain_text(node) or href
        return RichText.new(content, link=url, annotations=annotations)
