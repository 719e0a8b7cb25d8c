"""Integration test: shipping a realistic documentation tree end to end"""

from mdnotion.core.sync import HierarchySynchronizer
from mdnotion.notion.models import BlockType


DOCS = {
    "intro.md": "# Welcome\n\nStart with the [guide](./guide/setup.md#install).\n",
    "guide/intro.md": '--title "User Guide" --emoji 📘\n\nEverything about using the tool.\n',
    "guide/setup.md": (
        "--title Setup\n\n"
        "## Install\n\n"
        "```bash\npip install mdnotion\n```\n\n"
        "1. Configure the token\n"
        "2. Run `mdnotion ship docs`\n\n"
        "Back to [the guide](./intro.md) or [home](../intro.md).\n"
    ),
    "guide/reference/options.md": (
        "# Options\n\n"
        "| option | meaning |\n|---|---|\n| `--simulate` | dry run |\n\n"
        "![diagram](https://example.com/diagram.png)\n\n"
        "See [setup](../setup.md).\n"
    ),
}


def test_ship_tree(write_tree, workspace):
    src = write_tree(DOCS)
    report = HierarchySynchronizer(workspace, "root-id").ship(src)

    assert report.documents == 4
    # User Guide, Setup, reference, options
    assert report.pages_created == 4
    guide = workspace.page_id("User Guide")
    setup = workspace.page_id("Setup")
    reference = workspace.page_id("reference")
    options = workspace.page_id("options")
    assert workspace.pages[guide] == ("root-id", "User Guide", "📘")
    assert workspace.pages[setup][0] == guide
    assert workspace.pages[reference][0] == guide
    assert workspace.pages[options][0] == reference

    # the root intro is pushed onto the root page itself
    home = workspace.pushed["root-id"]
    assert home[1].rich_text()[1].href == f"https://www.notion.so/Setup-{setup.replace('-', '')}"

    setup_blocks = workspace.pushed[setup]
    assert [b.type for b in setup_blocks] == [
        BlockType.heading_2,
        BlockType.code,
        BlockType.numbered_list_item,
        BlockType.numbered_list_item,
        BlockType.paragraph,
    ]
    links = [s.href for s in setup_blocks[-1].rich_text() if s.href]
    assert links == [
        f"https://www.notion.so/User-Guide-{guide.replace('-', '')}",
        # the root page has no recorded title, so the linking page title stands in
        "https://www.notion.so/Setup-rootid",
    ]

    option_blocks = workspace.pushed[options]
    assert [b.type for b in option_blocks] == [
        BlockType.heading_1, BlockType.table, BlockType.image, BlockType.paragraph,
    ]
    assert report.blocks_pushed == sum(len(blocks) for blocks in workspace.pushed.values())
