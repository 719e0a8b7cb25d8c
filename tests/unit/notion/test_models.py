"""Unit tests for notion/models.py and notion/pages.py"""

import pytest

from mdnotion.notion.models import (
    Annotations,
    BlockChild,
    BlockRequest,
    BlockType,
    CodeLanguage,
    RichText,
)
from mdnotion.notion.pages import CreatePageRequest, PageContent, PageContentType, SearchResultItem, search_request


def test_rich_text_plain_annotations_are_omitted():
    span = RichText.new("x", annotations=Annotations())
    assert span.annotations is None
    assert span.model_dump(mode="json", exclude_none=True) == {"type": "text", "text": {"content": "x"}}


def test_rich_text_link_payload():
    span = RichText.new("docs", link="https://example.com")
    assert span.href == "https://example.com"
    assert span.model_dump(mode="json", exclude_none=True)["text"] == {
        "content": "docs", "link": {"url": "https://example.com"},
    }


def test_rich_block_rejects_non_text_types():
    with pytest.raises(ValueError):
        BlockChild.rich(BlockType.image, [])


@pytest.mark.parametrize("depth, expected", [(1, "heading_1"), (2, "heading_2"), (3, "heading_3"), (6, "heading_3")])
def test_heading_levels(depth, expected):
    assert BlockChild.heading(depth, [RichText.new("h")]).type.value == expected


def test_code_language_lookup():
    assert CodeLanguage.from_name("JSON") is CodeLanguage.json
    assert CodeLanguage.from_name("plain text") is CodeLanguage.plain_text
    assert CodeLanguage.from_name("unknown-lang") is CodeLanguage.plain_text
    assert CodeLanguage.from_name(None) is CodeLanguage.plain_text


def test_image_and_table_have_no_rich_text():
    image = BlockChild.external_image("https://e.com/a.png")
    assert image.rich_text() is None
    assert image.plain_text() == ""
    assert image.to_payload() == {
        "object": "block",
        "type": "image",
        "image": {"type": "external", "external": {"url": "https://e.com/a.png"}},
    }


def test_table_payload_nests_rows():
    row = BlockChild.table_row_block([[RichText.new("a")], []])
    payload = BlockChild.table_block(2, [row]).to_payload()
    assert payload["table"]["table_width"] == 2
    assert payload["table"]["has_column_header"] is True
    assert payload["table"]["children"][0]["table_row"]["cells"] == [
        [{"type": "text", "text": {"content": "a"}}], [],
    ]


def test_block_request_batches_keep_order():
    request = BlockRequest()
    request.extend([BlockChild.rich(BlockType.paragraph, [RichText.new(str(i))]) for i in range(5)])
    batches = list(request.batches(2))
    assert [len(b) for b in batches] == [2, 2, 1]
    assert [c.plain_text() for b in batches for c in b.children] == ["0", "1", "2", "3", "4"]


def test_create_page_request_payload():
    payload = CreatePageRequest.new("parent", "Title").to_payload()
    assert payload["parent"] == {"page_id": "parent"}
    assert "icon" not in payload


def test_search_request_cursor():
    assert search_request("Docs", "abc")["start_cursor"] == "abc"
    assert "start_cursor" not in search_request("Docs")


def test_search_result_item_without_title():
    item = SearchResultItem.from_api({"id": "x", "properties": {}})
    assert item.title == ""
    assert item.parent_id is None


def test_page_content_unknown_type():
    assert PageContent.from_api({"id": "x", "type": "callout"}).content_type is PageContentType.unknown


def test_split_rows_keeps_short_tables_whole():
    table = BlockChild.table_block(1, [BlockChild.table_row_block([[]]) for _ in range(100)])
    head, rest = table.split_rows()
    assert head is table
    assert rest == []


def test_split_rows_on_long_table():
    rows = [BlockChild.table_row_block([[RichText.new(str(i))]]) for i in range(230)]
    head, rest = BlockChild.table_block(1, rows).split_rows()
    assert len(head.table.children) == 100
    assert head.table.table_width == 1
    assert [r.table_row.cells[0][0].content for r in rest[:2]] == ["100", "101"]
    assert len(rest) == 130


def test_split_rows_ignores_other_blocks():
    block = BlockChild.rich(BlockType.paragraph, [RichText.new("x")])
    assert block.split_rows() == (block, [])
