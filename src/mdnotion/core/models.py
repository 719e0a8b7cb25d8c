"""Intermediate data models for the parse, convert and sync pipeline"""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from markdown_it.tree import SyntaxTreeNode

from mdnotion.core.metadata import DocumentMetadata, extract_metadata


@dataclass(frozen=True)
class PageRef:
    """Destination page recorded for a source path during page creation."""
    page_id: str
    title: str


# normalized source path -> destination page; read-only once content push starts
PageMap = Mapping[str, PageRef]


@dataclass
class ParsedDoc:
    """Internal parse result carrying the markdown-it syntax tree; not persisted."""
    path:      Path
    file_name: str             # path stem, the fallback page title
    tree:      SyntaxTreeNode  # root node

    def metadata(self) -> DocumentMetadata:
        return extract_metadata(self.tree, str(self.path))

    def page_title(self, metadata: Optional[DocumentMetadata] = None) -> str:
        """Return the metadata title override, or the file name."""
        metadata = metadata or self.metadata()
        return metadata.title or self.file_name
