"""Code block segmentation and language mapping"""

from typing import Optional

from mdnotion.notion.models import BlockChild, CodeLanguage, MAX_NESTED_ITEMS


# per-span content ceiling of the destination API, in bytes
MAX_CODE_LENGTH = 2000


def split_code(text: str, limit: int = MAX_CODE_LENGTH) -> list[str]:
    """Split text into chunks of at most `limit` UTF-8 bytes.

    Chunks are cut on byte boundaries, backing off to the start of a
    multi-byte character so no character is ever split. Joining the chunks
    gives back the original text.
    """
    if limit < 4:
        raise ValueError(f"limit must leave room for a 4-byte character, got {limit}")
    data = text.encode('utf-8')
    chunks = []
    start = 0
    while start < len(data):
        end = min(start + limit, len(data))
        # 0b10xxxxxx is a continuation byte: move back to the character start
        while end < len(data) and (data[end] & 0xC0) == 0x80:
            end -= 1
        chunks.append(data[start:end].decode('utf-8'))
        start = end
    return chunks


def code_language(info: Optional[str]) -> CodeLanguage:
    """Map a fence info string (e.g. 'python title=x') to a destination language."""
    if not info or not info.strip():
        return CodeLanguage.plain_text
    # multi-word names such as 'visual basic' match whole, otherwise the first word
    language = CodeLanguage.from_name(info)
    if language is CodeLanguage.plain_text:
        language = CodeLanguage.from_name(info.split(maxsplit=1)[0])
    return language


def build_code(content: str, info: Optional[str]) -> list[BlockChild]:
    """Build code blocks from raw fence content, dropping the fence's trailing newline.

    Content longer than one block can carry continues in further code blocks
    of the same language.
    """
    if content.endswith('\n'):
        content = content[:-1]
    language = code_language(info)
    chunks = split_code(content)
    if not chunks:
        return [BlockChild.code_block([], language)]
    return [
        BlockChild.code_block(chunks[i:i + MAX_NESTED_ITEMS], language)
        for i in range(0, len(chunks), MAX_NESTED_ITEMS)
    ]
