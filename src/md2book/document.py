"""Block-level document tree built from markdown-it tokens.

The parser's flat token stream is grouped into top-level block nodes. Every
node carries an explicit ``kind``; headings and paragraphs own their inline
runs as an ordered ``children`` list so they can be edited in place. Blocks
the transformations never look inside (lists, quotes, tables) keep the
parser's tokens as-is and are emitted verbatim by :meth:`Document.to_tokens`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from markdown_it import MarkdownIt
from markdown_it.token import Token

MARKDOWN = MarkdownIt("commonmark")


class NodeKind(str, Enum):
    """Discriminant for document nodes."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE_BLOCK = "code_block"
    HTML_BLOCK = "html_block"
    LIST = "list"
    BLOCK_QUOTE = "block_quote"
    TABLE = "table"
    THEMATIC_BREAK = "thematic_break"
    BLOCK = "block"
    TEXT = "text"
    INLINE = "inline"


_OPENING_KINDS = {
    "heading_open": NodeKind.HEADING,
    "paragraph_open": NodeKind.PARAGRAPH,
    "bullet_list_open": NodeKind.LIST,
    "ordered_list_open": NodeKind.LIST,
    "blockquote_open": NodeKind.BLOCK_QUOTE,
    "table_open": NodeKind.TABLE,
}

_LEAF_KINDS = {
    "fence": NodeKind.CODE_BLOCK,
    "code_block": NodeKind.CODE_BLOCK,
    "html_block": NodeKind.HTML_BLOCK,
    "hr": NodeKind.THEMATIC_BREAK,
}


@dataclass
class Node:
    """A document node.

    Attributes:
        kind: Node variant.
        children: Inline runs of a heading or paragraph.
        level: Heading rank (1-6) for headings.
        literal: Text of a text run, code block, or raw HTML block.
        info: Info string (language) of a code block.
        tokens: Source tokens for blocks emitted verbatim.
    """

    kind: NodeKind
    children: list[Node] = field(default_factory=list)
    level: int | None = None
    literal: str | None = None
    info: str = ""
    tokens: list[Token] = field(default_factory=list, repr=False)


@dataclass
class Document:
    """Ordered sequence of top-level block nodes."""

    children: list[Node] = field(default_factory=list)

    def append(self, node: Node) -> None:
        self.children.append(node)

    def prepend(self, node: Node) -> None:
        self.children.insert(0, node)

    def to_tokens(self) -> list[Token]:
        """Flatten the tree back into a renderer token stream."""
        tokens: list[Token] = []
        for node in self.children:
            tokens.extend(_block_tokens(node))
        return tokens


def text(literal: str) -> Node:
    return Node(kind=NodeKind.TEXT, literal=literal)


def heading(level: int, *runs: Node) -> Node:
    if not 1 <= level <= 6:
        raise ValueError(f"Heading level must be 1-6, got {level}")
    return Node(kind=NodeKind.HEADING, level=level, children=list(runs))


def paragraph(*runs: Node) -> Node:
    return Node(kind=NodeKind.PARAGRAPH, children=list(runs))


def html_block(literal: str) -> Node:
    return Node(kind=NodeKind.HTML_BLOCK, literal=literal)


def code_block(literal: str, info: str = "") -> Node:
    return Node(kind=NodeKind.CODE_BLOCK, literal=literal, info=info)


def parse_markdown(source: str) -> Document:
    """Parse CommonMark text into a :class:`Document`."""
    return Document(children=[_to_node(group) for group in _group_blocks(MARKDOWN.parse(source))])


def _group_blocks(tokens: list[Token]) -> list[list[Token]]:
    """Split a token stream into one token list per top-level block."""
    groups: list[list[Token]] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        end = index
        if token.nesting == 1:
            end += 1
            while not (tokens[end].nesting == -1 and tokens[end].level == token.level):
                end += 1
        groups.append(tokens[index : end + 1])
        index = end + 1
    return groups


def _to_node(group: list[Token]) -> Node:
    first = group[0]
    if first.nesting == 0:
        kind = _LEAF_KINDS.get(first.type, NodeKind.BLOCK)
        if kind is NodeKind.CODE_BLOCK:
            return code_block(first.content, first.info.strip())
        if kind is NodeKind.HTML_BLOCK:
            return html_block(first.content)
        return Node(kind=kind, tokens=group)

    kind = _OPENING_KINDS.get(first.type, NodeKind.BLOCK)
    if kind is NodeKind.HEADING:
        return heading(int(first.tag[1]), *_inline_runs(group))
    if kind is NodeKind.PARAGRAPH:
        return Node(kind=kind, children=_inline_runs(group), tokens=group)
    return Node(kind=kind, tokens=group)


def _inline_runs(group: list[Token]) -> list[Node]:
    runs: list[Node] = []
    for token in group:
        if token.type != "inline":
            continue
        for child in token.children or []:
            if child.type == "text":
                runs.append(text(child.content))
            else:
                runs.append(Node(kind=NodeKind.INLINE, tokens=[child]))
    return runs


def _block_tokens(node: Node) -> list[Token]:
    if node.kind is NodeKind.HEADING:
        tag = f"h{node.level}"
        markup = "#" * (node.level or 1)
        return [
            Token("heading_open", tag, 1, markup=markup, block=True),
            _inline_token(node.children),
            Token("heading_close", tag, -1, markup=markup, block=True),
        ]
    if node.kind is NodeKind.PARAGRAPH:
        if node.tokens:
            opening, closing = node.tokens[0], node.tokens[-1]
        else:
            opening = Token("paragraph_open", "p", 1, block=True)
            closing = Token("paragraph_close", "p", -1, block=True)
        return [opening, _inline_token(node.children), closing]
    if node.kind is NodeKind.CODE_BLOCK:
        return [
            Token("fence", "code", 0, content=node.literal or "", info=node.info, markup="```", block=True)
        ]
    if node.kind is NodeKind.HTML_BLOCK:
        literal = node.literal or ""
        if not literal.endswith("\n"):
            literal += "\n"
        return [Token("html_block", "", 0, content=literal, block=True)]
    return list(node.tokens)


def _inline_token(runs: list[Node]) -> Token:
    children: list[Token] = []
    for run in runs:
        if run.kind is NodeKind.TEXT:
            children.append(Token("text", "", 0, content=run.literal or ""))
        else:
            children.extend(run.tokens)
    content = "".join(child.content for child in children)
    return Token("inline", "", 0, content=content, children=children, level=1)
