# themepreview/core/templating/tags.py
"""
Storefront control tags as python-liquid tags.

Each tag is its own class so the engine can register exactly the set it is
constructed with. Tags that reference other theme files (`render`, `section`,
`sections`) only leave a placeholder comment; the referenced files are never
loaded in preview.
"""
import re
from enum import Enum
from typing import Dict, Optional, TextIO, Type

from liquid import Environment
from liquid.ast import BlockNode, Node
from liquid.context import Context
from liquid.parse import expect, get_parser
from liquid.stream import TokenStream
from liquid.tag import Tag as LiquidTag
from liquid.token import TOKEN_EOF, TOKEN_EXPRESSION, TOKEN_TAG, Token
from markupsafe import escape


class Tag(Enum):
    SCHEMA = "schema"
    STYLE = "style"
    JAVASCRIPT = "javascript"
    RENDER = "render"
    SECTION = "section"
    SECTIONS = "sections"
    FORM = "form"
    PAGINATE = "paginate"
    LAYOUT = "layout"


_QUOTES_RE = re.compile(r"['\"]")


def first_argument(expression: str) -> str:
    """First tag argument with quotes removed: `'card', product: p` -> `card`."""
    head = _QUOTES_RE.sub("", expression).split(",", 1)[0].strip()
    return head.split()[0] if head else ""


def _read_expression(stream: TokenStream) -> str:
    # leaves the stream on the expression token when the tag has one
    if stream.peek.type == TOKEN_EXPRESSION:
        stream.next_token()
        return stream.current.value
    return ""


class TextNode(Node):
    """Writes fixed text; used by tags whose preview output never varies."""

    def __init__(self, tok: Token, text: str = ""):
        self.tok = tok
        self.text = text

    def __str__(self) -> str:
        return self.text

    def render_to_output(self, context: Context, buffer: TextIO) -> Optional[bool]:
        buffer.write(self.text)
        return True


class WrappedBlockNode(Node):
    def __init__(self, tok: Token, block: BlockNode, opening: str = "", closing: str = ""):
        self.tok = tok
        self.block = block
        self.opening = opening
        self.closing = closing

    def __str__(self) -> str:
        return f"{self.opening}{self.block}{self.closing}"

    def render_to_output(self, context: Context, buffer: TextIO) -> Optional[bool]:
        buffer.write(self.opening)
        self.block.render(context, buffer)
        buffer.write(self.closing)
        return True


class SchemaTag(LiquidTag):
    # {% schema %} json {% endschema %}: editor metadata. The body is skipped
    # token by token and never parsed, so braces in the JSON are inert.
    name = Tag.SCHEMA.value
    end = "endschema"

    def parse(self, stream: TokenStream) -> Node:
        expect(stream, TOKEN_TAG, value=self.name)
        tok = stream.current
        stream.next_token()
        while stream.current.type != TOKEN_EOF:
            if stream.current.type == TOKEN_TAG and stream.current.value == self.end:
                break
            stream.next_token()
        expect(stream, TOKEN_TAG, value=self.end)
        return TextNode(tok)


class _WrappingTag(LiquidTag):
    end = ""
    opening = ""
    closing = ""

    def __init__(self, env: Environment):
        super().__init__(env)
        self.parser = get_parser(self.env)

    def open_with(self, expression: str) -> str:
        return self.opening

    def parse(self, stream: TokenStream) -> Node:
        expect(stream, TOKEN_TAG, value=self.name)
        tok = stream.current
        opening = self.open_with(_read_expression(stream))
        stream.next_token()
        block = self.parser.parse_block(stream, (self.end, TOKEN_EOF))
        expect(stream, TOKEN_TAG, value=self.end)
        return WrappedBlockNode(tok, block, opening, self.closing)


class StyleTag(_WrappingTag):
    name = Tag.STYLE.value
    end = "endstyle"
    opening = "<style>"
    closing = "</style>"


class JavascriptTag(_WrappingTag):
    # deferred by the storefront, inline in preview
    name = Tag.JAVASCRIPT.value
    end = "endjavascript"
    opening = "<script>"
    closing = "</script>"


class FormTag(_WrappingTag):
    name = Tag.FORM.value
    end = "endform"
    closing = "</form>"

    def open_with(self, expression: str) -> str:
        return f'<form class="shopify-form" data-form-type="{escape(first_argument(expression))}">'


class PaginateTag(_WrappingTag):
    # pagination is not modeled: the body renders as-is.
    name = Tag.PAGINATE.value
    end = "endpaginate"


class _PlaceholderTag(LiquidTag):
    block = False
    label = ""

    def parse(self, stream: TokenStream) -> Node:
        expect(stream, TOKEN_TAG, value=self.name)
        tok = stream.current
        return TextNode(tok, f"<!-- {self.label}: {first_argument(_read_expression(stream))} -->")


class RenderTag(_PlaceholderTag):
    name = Tag.RENDER.value
    label = "snippet"


class SectionTag(_PlaceholderTag):
    name = Tag.SECTION.value
    label = "section"


class SectionsTag(_PlaceholderTag):
    name = Tag.SECTIONS.value
    label = "sections group"


class LayoutTag(LiquidTag):
    name = Tag.LAYOUT.value
    block = False

    def parse(self, stream: TokenStream) -> Node:
        expect(stream, TOKEN_TAG, value=self.name)
        tok = stream.current
        _read_expression(stream)
        return TextNode(tok)


TAG_CLASSES: Dict[Tag, Type[LiquidTag]] = {
    Tag.SCHEMA: SchemaTag,
    Tag.STYLE: StyleTag,
    Tag.JAVASCRIPT: JavascriptTag,
    Tag.RENDER: RenderTag,
    Tag.SECTION: SectionTag,
    Tag.SECTIONS: SectionsTag,
    Tag.FORM: FormTag,
    Tag.PAGINATE: PaginateTag,
    Tag.LAYOUT: LayoutTag,
}
