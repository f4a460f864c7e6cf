"""Read-only view over a parsed file: text, lines and the token stream."""

from bisect import bisect_left, bisect_right
from functools import cached_property
from typing import Callable, List, Optional, Union

from tree_sitter import Node, Tree

from .models import Token
from . import node_types as nt

Locatable = Union[Node, Token]
TokenPredicate = Callable[[Token], bool]

_OPENERS = ("(", "[")
_CLOSERS = (")", "]")


class SourceView:
    """Answers the questions layout rules ask about the source text.

    All offsets are tree-sitter byte offsets; rows are 0-based.
    """

    def __init__(self, source: str, tree: Tree):
        self.source = source
        self.data = source.encode("utf-8")
        self.tree = tree
        self.lines = source.split("\n")

    @property
    def root(self) -> Node:
        return self.tree.root_node

    # -- text ---------------------------------------------------------------

    def slice(self, start_byte: int, end_byte: int) -> str:
        return self.data[start_byte:end_byte].decode("utf-8")

    def text(self, item: Locatable) -> str:
        return self.slice(item.start_byte, item.end_byte)

    def line_indent(self, row: int) -> str:
        """Leading whitespace of a line"""
        if row < 0 or row >= len(self.lines):
            return ""
        line = self.lines[row]
        return line[:len(line) - len(line.lstrip())]

    def line_prefix(self, item: Locatable) -> str:
        """Text between the start of the item's line and the item"""
        line_start = self.data.rfind(b"\n", 0, item.start_byte) + 1
        return self.slice(line_start, item.start_byte)

    # -- tokens -------------------------------------------------------------

    @cached_property
    def _streams(self):
        tokens: List[Token] = []
        comments: List[Token] = []

        def visit(node: Node):
            if node.start_byte == node.end_byte:
                return
            if node.type in nt.COMMENT_TYPES:
                comments.append(self._token(node))
                return
            if node.child_count == 0 or node.type in nt.ATOMIC_TYPES:
                tokens.append(self._token(node))
                return
            for child in node.children:
                visit(child)

        visit(self.tree.root_node)
        return tokens, comments

    def _token(self, node: Node) -> Token:
        return Token(
            type=node.type,
            text=self.text(node),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_point=tuple(node.start_point),
            end_point=tuple(node.end_point),
        )

    @property
    def tokens(self) -> List[Token]:
        return self._streams[0]

    @property
    def comments(self) -> List[Token]:
        return self._streams[1]

    @cached_property
    def _token_starts(self) -> List[int]:
        return [t.start_byte for t in self.tokens]

    @cached_property
    def _token_ends(self) -> List[int]:
        return [t.end_byte for t in self.tokens]

    def token_before(self, item: Locatable, predicate: Optional[TokenPredicate] = None) -> Optional[Token]:
        """Closest token ending at or before the item's start, optionally the closest one matching `predicate`"""
        index = bisect_right(self._token_ends, item.start_byte) - 1
        while index >= 0:
            token = self.tokens[index]
            if predicate is None or predicate(token):
                return token
            index -= 1
        return None

    def token_after(self, item: Locatable, predicate: Optional[TokenPredicate] = None) -> Optional[Token]:
        """Closest token starting at or after the item's end, optionally the closest one matching `predicate`"""
        index = bisect_left(self._token_starts, item.end_byte)
        while index < len(self.tokens):
            token = self.tokens[index]
            if predicate is None or predicate(token):
                return token
            index += 1
        return None

    def tokens_between(self, start_byte: int, end_byte: int) -> List[Token]:
        lo = bisect_left(self._token_starts, start_byte)
        hi = bisect_left(self._token_starts, end_byte)
        return [t for t in self.tokens[lo:hi] if t.end_byte <= end_byte]

    def has_comment(self, start_byte: int, end_byte: int) -> bool:
        return any(start_byte <= c.start_byte < end_byte for c in self.comments)

    def squash(self, item: Locatable) -> str:
        """Text of the item on one line.

        Every whitespace run between tokens becomes one space, except right
        inside `(` `[` and before `)` `]` where it is dropped.
        """
        parts = []
        previous = None
        for token in self.tokens_between(item.start_byte, item.end_byte):
            if previous is not None and token.start_byte > previous.end_byte:
                if previous.type not in _OPENERS and token.type not in _CLOSERS:
                    parts.append(" ")
            parts.append(token.text)
            previous = token
        return "".join(parts)
