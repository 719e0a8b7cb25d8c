"""Block request wire models for the Notion blocks API"""

from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, Field


# the API caps every array in a request body at 100 items: children per
# append call, rows nested under a table, spans in one rich_text list
MAX_BLOCKS_PER_REQUEST = 100
MAX_NESTED_ITEMS = 100


class BlockType(str, Enum):
    """Destination block kinds produced by the converter"""
    paragraph = "paragraph"
    heading_1 = "heading_1"
    heading_2 = "heading_2"
    heading_3 = "heading_3"
    code = "code"
    bulleted_list_item = "bulleted_list_item"
    numbered_list_item = "numbered_list_item"
    image = "image"
    table = "table"
    table_row = "table_row"


RICH_TEXT_TYPES = frozenset({
    BlockType.paragraph,
    BlockType.heading_1,
    BlockType.heading_2,
    BlockType.heading_3,
    BlockType.code,
    BlockType.bulleted_list_item,
    BlockType.numbered_list_item,
})


class CodeLanguage(str, Enum):
    """Languages the destination accepts on code blocks"""
    abap = "abap"
    arduino = "arduino"
    bash = "bash"
    basic = "basic"
    c = "c"
    clojure = "clojure"
    coffeescript = "coffeescript"
    cpp = "c++"
    csharp = "c#"
    css = "css"
    dart = "dart"
    diff = "diff"
    docker = "docker"
    elixir = "elixir"
    elm = "elm"
    erlang = "erlang"
    flow = "flow"
    fortran = "fortran"
    fsharp = "f#"
    gherkin = "gherkin"
    glsl = "glsl"
    go = "go"
    graphql = "graphql"
    groovy = "groovy"
    haskell = "haskell"
    html = "html"
    java = "java"
    javascript = "javascript"
    json = "json"
    julia = "julia"
    kotlin = "kotlin"
    latex = "latex"
    less = "less"
    lisp = "lisp"
    livescript = "livescript"
    lua = "lua"
    makefile = "makefile"
    markdown = "markdown"
    markup = "markup"
    matlab = "matlab"
    mermaid = "mermaid"
    nix = "nix"
    objective_c = "objective-c"
    ocaml = "ocaml"
    pascal = "pascal"
    perl = "perl"
    php = "php"
    plain_text = "plain text"
    powershell = "powershell"
    prolog = "prolog"
    protobuf = "protobuf"
    python = "python"
    r = "r"
    reason = "reason"
    ruby = "ruby"
    rust = "rust"
    sass = "sass"
    scala = "scala"
    scheme = "scheme"
    scss = "scss"
    shell = "shell"
    sql = "sql"
    swift = "swift"
    typescript = "typescript"
    vb_net = "vb.net"
    verilog = "verilog"
    vhdl = "vhdl"
    visual_basic = "visual basic"
    webassembly = "webassembly"
    xml = "xml"
    yaml = "yaml"
    java_c_cpp_csharp = "java/c/c++/c#"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "CodeLanguage":
        """Case-insensitive lookup by destination name; unknown or empty names are plain text."""
        if not name:
            return cls.plain_text
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.plain_text


class Annotations(BaseModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"

    def is_plain(self) -> bool:
        return self == Annotations()


class Link(BaseModel):
    url: str


class TextContent(BaseModel):
    content: str
    link: Optional[Link] = None


class RichText(BaseModel):
    """One styled/linked run of inline text."""
    type: str = "text"
    text: TextContent
    annotations: Optional[Annotations] = None

    @classmethod
    def new(cls, content: str, link: Optional[str] = None,
            annotations: Optional[Annotations] = None) -> "RichText":
        return cls(
            text=TextContent(content=content, link=Link(url=link) if link else None),
            annotations=None if annotations is None or annotations.is_plain() else annotations,
        )

    @property
    def content(self) -> str:
        return self.text.content

    @property
    def href(self) -> Optional[str]:
        return self.text.link.url if self.text.link else None


class RichTextBody(BaseModel):
    rich_text: list[RichText]
    language: Optional[str] = None


class ExternalFile(BaseModel):
    url: str


class ImageBody(BaseModel):
    type: str = "external"
    external: ExternalFile


class TableBody(BaseModel):
    table_width: int
    has_column_header: bool
    has_row_header: bool
    children: list["BlockChild"]


class TableRowBody(BaseModel):
    cells: list[list[RichText]]


class BlockChild(BaseModel):
    """A single destination block; exactly one payload field matching `type` is set."""
    object: str = "block"
    type: BlockType
    paragraph: Optional[RichTextBody] = None
    heading_1: Optional[RichTextBody] = None
    heading_2: Optional[RichTextBody] = None
    heading_3: Optional[RichTextBody] = None
    code: Optional[RichTextBody] = None
    bulleted_list_item: Optional[RichTextBody] = None
    numbered_list_item: Optional[RichTextBody] = None
    image: Optional[ImageBody] = None
    table: Optional[TableBody] = None
    table_row: Optional[TableRowBody] = None

    @classmethod
    def rich(cls, block_type: BlockType, spans: list[RichText]) -> "BlockChild":
        if block_type not in RICH_TEXT_TYPES:
            raise ValueError(f"{block_type.value} blocks do not carry rich text")
        return cls(type=block_type, **{block_type.value: RichTextBody(rich_text=spans)})

    @classmethod
    def heading(cls, depth: int, spans: list[RichText]) -> "BlockChild":
        """Build a heading block; the destination only has three levels, deeper ones clamp to 3."""
        level = min(max(depth, 1), 3)
        return cls.rich(BlockType(f"heading_{level}"), spans)

    @classmethod
    def code_block(cls, chunks: list[str], language: CodeLanguage) -> "BlockChild":
        spans = [RichText.new(c) for c in chunks]
        return cls(type=BlockType.code, code=RichTextBody(rich_text=spans, language=language.value))

    @classmethod
    def external_image(cls, url: str) -> "BlockChild":
        return cls(type=BlockType.image, image=ImageBody(external=ExternalFile(url=url)))

    @classmethod
    def table_block(cls, width: int, rows: list["BlockChild"],
                    has_column_header: bool = True, has_row_header: bool = True) -> "BlockChild":
        return cls(type=BlockType.table, table=TableBody(
            table_width=width,
            has_column_header=has_column_header,
            has_row_header=has_row_header,
            children=rows,
        ))

    @classmethod
    def table_row_block(cls, cells: list[list[RichText]]) -> "BlockChild":
        return cls(type=BlockType.table_row, table_row=TableRowBody(cells=cells))

    def rich_text(self) -> Optional[list[RichText]]:
        """Return this block's spans, or None for image/table/table_row blocks."""
        if self.type not in RICH_TEXT_TYPES:
            return None
        return getattr(self, self.type.value).rich_text

    def plain_text(self) -> str:
        return ''.join(s.content for s in self.rich_text() or [])

    def split_rows(self, limit: int = MAX_NESTED_ITEMS) -> tuple["BlockChild", list["BlockChild"]]:
        """Return a copy of this table keeping its first `limit` rows, and the rest.

        The rest must be appended under the created table block afterwards.
        """
        if self.type != BlockType.table or len(self.table.children) <= limit:
            return self, []
        head = self.model_copy(update={"table": self.table.model_copy(update={"children": self.table.children[:limit]})})
        return head, self.table.children[limit:]

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


TableBody.model_rebuild()
BlockChild.model_rebuild()


class BlockRequest(BaseModel):
    """Ordered children appended under one page or block; order is never changed."""
    children: list[BlockChild] = Field(default_factory=list)

    def append(self, child: BlockChild) -> None:
        self.children.append(child)

    def extend(self, children: list[BlockChild]) -> None:
        self.children.extend(children)

    def __len__(self) -> int:
        return len(self.children)

    def batches(self, size: int = MAX_BLOCKS_PER_REQUEST) -> Iterator["BlockRequest"]:
        """Yield consecutive sub-requests of at most `size` children, in order."""
        for start in range(0, len(self.children), size):
            yield BlockRequest(children=self.children[start:start + size])

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
