"""Two-phase publishing of a markdown directory tree into a page hierarchy.

Phase 1 walks every discovered document and creates the destination pages
(directories first, memoized per directory), recording each page in a path
keyed map. Phase 2 only starts once that map is complete: it freezes the map,
re-parses every document, converts it and pushes the blocks under the
document's page. Links between documents therefore resolve regardless of
which one is visited first.

No failure is retried or rolled back: pages created or pushed before an
error stay on the remote side.
"""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Protocol

from mdnotion.core.convert.blocks import convert_doc
from mdnotion.core.links import DEFAULT_HOST, normalize_path
from mdnotion.core.metadata import DocumentMetadata
from mdnotion.core.models import PageMap, PageRef
from mdnotion.core.parse import discover_files, parse_file
from mdnotion.notion.models import BlockRequest


logger = logging.getLogger(__name__)

INTRO_FILENAME = 'intro'


class RemoteWorkspace(Protocol):
    """The remote operations the synchronizer needs; NotionClient satisfies it."""

    def create_page(self, parent_id: str, title: str, emoji: Optional[str] = None) -> str: ...

    def append_blocks(self, target_id: str, request: BlockRequest) -> None: ...


@dataclass
class SyncReport:
    documents:     int = 0
    pages_created: int = 0
    blocks_pushed: int = 0
    page_map:      dict[str, PageRef] = field(default_factory=dict)


def is_intro(path: Path) -> bool:
    return path.stem.lower() == INTRO_FILENAME


class HierarchySynchronizer:
    """Publishes a source tree below a root page.

    Example:
        >>> sync = HierarchySynchronizer(client, root_id)
        >>> report = sync.ship("docs")
        >>> report.pages_created
        7
    """

    def __init__(
        self,
        workspace: Optional[RemoteWorkspace],
        root_page_id: str,
        *,
        simulate: bool = False,
        host: str = DEFAULT_HOST,
        parser_config: str = 'gfm-like',
        ):
        if workspace is None and not simulate:
            raise ValueError("a remote workspace is required unless simulating")
        self.workspace = workspace
        self.root_page_id = root_page_id
        self.simulate = simulate
        self.host = host
        self.parser_config = parser_config
        self.pages_created = 0

    def _new_page(self, parent_id: str, title: str, emoji: Optional[str]) -> str:
        if self.simulate:
            page_id = str(uuid.uuid4())
            logger.debug(f"Simulated page '{title}' ({page_id}) under {parent_id}")
            return page_id
        page_id = self.workspace.create_page(parent_id, title, emoji)
        self.pages_created += 1
        return page_id

    def _directory_metadata(self, intro: Optional[Path]) -> DocumentMetadata:
        # simulated runs never read intro files
        if self.simulate or intro is None:
            return DocumentMetadata()
        return parse_file(intro, self.parser_config).metadata()

    def create_pages(self, src: str | Path, files: Optional[list[Path]] = None) -> dict[str, PageRef]:
        """Phase 1: create a page per directory and per document; return the path map.

        Directory pages are keyed by their normalized full path, document pages
        by the normalized path of the file. The source root itself is the root
        page and gets no page of its own.
        """
        root = Path(src)
        if root.is_file():
            root = root.parent
        files = discover_files(src) if files is None else files
        intros = {normalize_path(f.parent): f for f in files if is_intro(f)}
        root_ref = PageRef(self.root_page_id, '')

        page_map: dict[str, PageRef] = {}
        directories: dict[str, PageRef] = {}

        for path in files:
            parent_ref = root_ref
            current = root
            for part in path.parent.relative_to(root).parts:
                current = current / part
                key = normalize_path(current)
                if key not in directories:
                    metadata = self._directory_metadata(intros.get(key))
                    title = metadata.title or part
                    page_id = self._new_page(parent_ref.page_id, title, metadata.emoji)
                    directories[key] = PageRef(page_id, title)
                    page_map[key] = directories[key]
                    logger.info(f"Directory {key} -> page '{title}'")
                parent_ref = directories[key]

            doc = parse_file(path, self.parser_config)
            metadata = doc.metadata()
            if is_intro(path):
                ref = parent_ref
            else:
                title = doc.page_title(metadata)
                ref = PageRef(self._new_page(parent_ref.page_id, title, metadata.emoji), title)
            page_map[normalize_path(path)] = ref
            logger.info(f"Document {path} -> page '{ref.title or ref.page_id}'")

        return page_map

    def push_content(self, files: list[Path], page_map: PageMap) -> int:
        """Phase 2: convert every document against the completed map and push it.

        Returns the number of top-level blocks pushed (converted, when simulating).
        """
        frozen = MappingProxyType(dict(page_map))
        blocks = 0
        for path in files:
            ref = frozen[normalize_path(path)]
            doc = parse_file(path, self.parser_config)
            request = convert_doc(doc, ref.page_id, frozen, self.host)
            blocks += len(request)
            if self.simulate:
                logger.debug(f"Converted {path} into {len(request)} block(s), not pushed")
                continue
            if len(request):
                self.workspace.append_blocks(ref.page_id, request)
            logger.info(f"Pushed {len(request)} block(s) from {path}")
        return blocks

    def ship(self, src: str | Path) -> SyncReport:
        """Discover the markdown files under src and run both phases."""
        files = discover_files(src)
        logger.info(f"Discovered {len(files)} document(s) under {src}")
        page_map = self.create_pages(src, files)
        blocks = self.push_content(files, page_map)
        return SyncReport(
            documents=len(files),
            pages_created=self.pages_created,
            blocks_pushed=blocks,
            page_map=page_map,
        )
