"""Shared fixtures for core unit tests"""

import pytest

from mdnotion.core.parse import parse_text


SAMPLE_MD = """\
--title "Sample Page" --emoji 🧪

# Heading 1

A paragraph with **bold** text
across two lines.

## Heading 2

- item one
- item two

```python
print("hello")
```

| name | value |
|------|-------|
| a    | 1     |
"""


@pytest.fixture(name="parse")
def parse_fixture():
    """Return a callable turning markdown text into a syntax tree root."""
    return parse_text


@pytest.fixture(name="sample_tree")
def sample_tree_fixture():
    return parse_text(SAMPLE_MD)
