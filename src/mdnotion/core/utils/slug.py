"""Slug generation for page addresses"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def page_slug(title: str) -> str:
    """Return the title segment of a page address: spaces become dashes, case is kept."""
    return title.replace(' ', '-')


def compact_id(page_id: str) -> str:
    """Strip the dashes from a page identifier as they appear in page addresses."""
    return page_id.replace('-', '')
