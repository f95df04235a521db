import re
from bisect import bisect_left, bisect_right
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from tree_sitter import Node

_DIRECTIVE = re.compile(r"^(?:line |extern |export |[a-z0-9]+:[a-z0-9])")
_BETWEEN_NODE_AND_TRAILER = frozenset(b" \t;,")


class Spanned(Protocol):
    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...


@dataclass(frozen=True)
class CommentGroup:
    start_byte: int
    end_byte: int
    start_row: int
    end_row: int
    comments: tuple[str, ...]
    trailing: bool = False

    def text(self) -> str:
        """Return the comment text without markers, normalized the way godoc reads it."""
        lines: list[str] = []
        for raw in self.comments:
            if raw.startswith("//"):
                body = raw[2:]
                if _DIRECTIVE.match(body):
                    continue
                if body.startswith(" "):
                    body = body[1:]
                lines.append(body)
            else:
                lines.extend(raw[2:-2].split("\n"))

        cleaned: list[str] = []
        for line in (ln.rstrip(" \t\r\n") for ln in lines):
            if not line and (not cleaned or not cleaned[-1]):
                continue
            cleaned.append(line)
        while cleaned and not cleaned[-1]:
            cleaned.pop()
        if not cleaned:
            return ""
        return "\n".join(cleaned) + "\n"


def join_comments(groups: list[CommentGroup]) -> str:
    return "\n".join(text for text in (g.text() for g in groups) if text)


def _iter_comment_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            yield node
            continue
        stack.extend(reversed(node.children))


class Printer:
    """Maps syntax nodes back to the exact bytes of the file they came from.

    Comment groups are collected once, when the printer is built, and looked
    up by position afterwards.
    """

    def __init__(self, source: bytes, root: Node | None = None) -> None:
        self.source = source
        self._line_starts = [0] + [m.end() for m in re.finditer(rb"\n", source)]
        self._groups = self._build_groups(root) if root is not None else []
        self._group_starts = [g.start_byte for g in self._groups]
        self._group_ends = [g.end_byte for g in self._groups]
        self._comment_cache: dict[tuple[int, int], list[CommentGroup]] = {}

    @property
    def comment_groups(self) -> list[CommentGroup]:
        return list(self._groups)

    def render(self, node: Spanned | None) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def row(self, offset: int) -> int:
        return bisect_right(self._line_starts, offset) - 1

    def comments(self, node: Spanned | None) -> list[CommentGroup]:
        """Return the leading and trailing comment groups bound to ``node``."""
        if node is None:
            return []
        key = (node.start_byte, node.end_byte)
        if key not in self._comment_cache:
            found = [g for g in (self._leading(node), self._trailing(node)) if g is not None]
            self._comment_cache[key] = found
        return self._comment_cache[key]

    def comment_text(self, node: Spanned | None) -> str:
        return join_comments(self.comments(node))

    def _only_whitespace(self, start: int, end: int, allowed: frozenset[int] = frozenset(b" \t\r\n")) -> bool:
        return all(b in allowed for b in self.source[start:end])

    def _leading(self, node: Spanned) -> CommentGroup | None:
        idx = bisect_right(self._group_ends, node.start_byte) - 1
        if idx < 0:
            return None
        group = self._groups[idx]
        if group.trailing:
            return None
        if self.row(node.start_byte) - group.end_row > 1:
            return None
        if not self._only_whitespace(group.end_byte, node.start_byte):
            return None
        return group

    def _trailing(self, node: Spanned) -> CommentGroup | None:
        idx = bisect_left(self._group_starts, node.end_byte)
        if idx >= len(self._groups):
            return None
        group = self._groups[idx]
        last_byte = max(node.start_byte, node.end_byte - 1)
        if group.start_row != self.row(last_byte):
            return None
        if not self._only_whitespace(node.end_byte, group.start_byte, _BETWEEN_NODE_AND_TRAILER):
            return None
        return group

    def _build_groups(self, root: Node) -> list[CommentGroup]:
        groups: list[CommentGroup] = []
        current: list[Node] = []

        def flush(trailing: bool = False) -> None:
            if not current:
                return
            first, last = current[0], current[-1]
            groups.append(
                CommentGroup(
                    start_byte=first.start_byte,
                    end_byte=last.end_byte,
                    start_row=self.row(first.start_byte),
                    end_row=self.row(max(last.start_byte, last.end_byte - 1)),
                    comments=tuple(self.render(c) for c in current),
                    trailing=trailing,
                )
            )
            current.clear()

        for comment in sorted(_iter_comment_nodes(root), key=lambda n: n.start_byte):
            line_start = self._line_starts[self.row(comment.start_byte)]
            if not self._only_whitespace(line_start, comment.start_byte):
                flush()
                current.append(comment)
                flush(trailing=True)
                continue
            if current:
                prev = current[-1]
                adjacent = self.row(comment.start_byte) - self.row(max(prev.start_byte, prev.end_byte - 1)) <= 1
                if not (adjacent and self._only_whitespace(prev.end_byte, comment.start_byte)):
                    flush()
            current.append(comment)
        flush()
        return groups
