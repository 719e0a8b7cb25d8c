"""Relative path normalization and link/image URL resolution"""

import logging
import re
from pathlib import PurePath, PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlsplit

from mdnotion.core.models import PageMap
from mdnotion.core.utils.slug import compact_id, page_slug
from mdnotion.errors import UnresolvedLinkError, ValidationError


logger = logging.getLogger(__name__)

DEFAULT_HOST = 'www.notion.so'

_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*$')
_QUOTES = '"\''


def normalize_path(path: str | PurePath) -> str:
    """Return a canonical POSIX path string used as a page map key.

    `.` segments are dropped and `..` removes the preceding segment; names are
    kept exactly as on disk. A leading root is kept so absolute and relative
    trees never collide.
    """
    posix = PurePosixPath(PurePath(path).as_posix())
    parts: list[str] = []
    for part in posix.parts:
        if part == posix.anchor and posix.anchor:
            continue
        if part == '..':
            if parts:
                parts.pop()
            continue
        if part == '.':
            continue
        parts.append(part)
    return posix.anchor + '/'.join(parts) if parts else (posix.anchor or '.')


def link_segments(target: str) -> list[str]:
    """Split a relative link target into file name segments.

    Each segment is percent-decoded and stripped of surrounding quotes, so
    `./my%20doc.md` names the file `my doc.md`.
    """
    segments = (unquote(s).strip(_QUOTES) for s in target.split('/'))
    return [s for s in segments if s]


def validate_url(url: str, document: str, original: Optional[str] = None) -> str:
    """Return url if it is a well-formed absolute URL, else raise ValidationError."""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ValidationError(document, original or url, str(e)) from e
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        raise ValidationError(document, original or url, "relative URL without a base")
    if not (parts.netloc or parts.path):
        raise ValidationError(document, original or url, "empty host")
    return url


def validate_image_url(url: str, document: str) -> str:
    """Images must already be hosted externally; no relative resolution."""
    return validate_url(url, document)


def page_url(ref_title: str, page_id: str, host: str = DEFAULT_HOST) -> str:
    """Compose the address of a page from its title and identifier."""
    return f"https://{host}/{page_slug(ref_title)}-{compact_id(page_id)}"


def resolve_link(
    url: str,
    document: str,
    page_id: str,
    page_map: PageMap,
    page_title: str,
    host: str = DEFAULT_HOST,
    ) -> str:
    """Map a link target found in `document` to an absolute destination URL.

    - `#fragment` links point at the current page.
    - `./` and `../` links are looked up in the page map; a miss raises
      UnresolvedLinkError. Fragments on relative links are discarded.
    - anything else must already be an absolute URL.
    """
    if url.startswith('#'):
        resolved = f"https://{host}/{page_id}"
    elif url.startswith('.'):
        target = url.split('#', 1)[0]
        parent = PurePosixPath(PurePath(document).as_posix()).parent
        full_path = normalize_path(parent.joinpath(*link_segments(target)))
        ref = page_map.get(full_path)
        if ref is None:
            raise UnresolvedLinkError(document, url)
        resolved = page_url(ref.title or page_title, ref.page_id, host)
        logger.debug(f"Resolved {url} in {document} to {resolved}")
    else:
        resolved = url
    return validate_url(resolved, document, url)
