"""Read-only DOM wrapper and the sibling run-grouping extractor."""

from typing import Callable

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

MarkerFn = Callable[["DocumentTree"], bool]

HTML_PARSER = "html.parser"


class ExtractionRun:
    """Pending text fragments collected since the last marker.

    Lives for one grouping call only.
    """

    def __init__(self):
        self.pending: list[str] = []
        self.started = False

    def push(self, text: str) -> None:
        if text:
            self.pending.append(text)

    def flush(self) -> list[str]:
        group, self.pending = self.pending, []
        return group


def text_marker(label: str) -> MarkerFn:
    """Marker predicate: node text contains `label`."""
    return lambda node: label in node.text()


class DocumentTree:
    """Queryable view over a parsed HTML document or one of its elements.

    Every value handed out is a plain str; callers never receive bs4 objects.
    """

    def __init__(self, node: Tag):
        self._node = node

    @classmethod
    def from_html(cls, html: str) -> "DocumentTree":
        return cls(BeautifulSoup(html, HTML_PARSER))

    def __repr__(self) -> str:
        return f"DocumentTree(<{self._node.name}>)"

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select(self, selector: str) -> list["DocumentTree"]:
        """All matches in document order. Supports soupsieve pseudo-classes."""
        return [DocumentTree(tag) for tag in self._node.select(selector)]

    def select_one(self, selector: str) -> "DocumentTree | None":
        tag = self._node.select_one(selector)
        return DocumentTree(tag) if tag is not None else None

    def children(self) -> list["DocumentTree"]:
        """Element children, skipping text nodes."""
        return [DocumentTree(child) for child in self._node.children if isinstance(child, Tag)]

    def next_sibling(self) -> "DocumentTree | None":
        sibling = self._node.find_next_sibling()
        return DocumentTree(sibling) if sibling is not None else None

    def siblings(self) -> list["DocumentTree"]:
        """Element siblings before and after this node, in document order."""
        before = reversed(self._node.find_previous_siblings())
        after = self._node.find_next_siblings()
        return [DocumentTree(tag) for tag in (*before, *after)]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def tag_name(self) -> str:
        return self._node.name or ""

    def text(self) -> str:
        return self._node.get_text().strip()

    def own_text(self) -> str:
        """Text of direct text-node children only, nested elements excluded."""
        parts = [
            str(child)
            for child in self._node.children
            if isinstance(child, NavigableString) and not isinstance(child, Comment)
        ]
        return "".join(parts).strip()

    def attr(self, name: str, default: str = "") -> str:
        value = self._node.get(name)
        if value is None:
            return default
        if isinstance(value, list):  # class, rel, ...
            return " ".join(value)
        return str(value)

    def has_class(self, name: str) -> bool:
        return name in (self._node.get("class") or [])

    # ------------------------------------------------------------------
    # Extractors
    # ------------------------------------------------------------------

    def select_text(self, selector: str) -> list[str]:
        """Stripped text of every match, in document order."""
        return [node.text() for node in self.select(selector)]

    def select_attr(self, selector: str, attr_name: str) -> list[str]:
        """`attr_name` of every match; "" where the attribute is missing."""
        return [node.attr(attr_name) for node in self.select(selector)]

    def group_by_sibling_marker(
        self,
        container_selector: str,
        is_marker: MarkerFn | str,
        marker_leads: bool = False,
    ) -> list[list[str]]:
        """
        Group a flat run of sibling elements into lists delimited by markers.

        The element children of every container matched by
        `container_selector`, in document order, form one sibling run.

        By default a marker terminates the group before it and trailing
        fragments with no closing marker are dropped:
        [A, m, B, C, m, D] -> [[A], [B, C]].

        With `marker_leads=True` a marker opens a group instead; fragments
        before the first marker are dropped and the last group is kept:
        [m, A, B, m, C] -> [[A, B], [C]].
        """
        if isinstance(is_marker, str):
            is_marker = text_marker(is_marker)

        run = ExtractionRun()
        groups: list[list[str]] = []
        for container in self.select(container_selector):
            for sibling in container.children():
                if not is_marker(sibling):
                    run.push(sibling.text())
                    continue
                if marker_leads:
                    if run.started:
                        groups.append(run.flush())
                    else:
                        run.flush()
                    run.started = True
                else:
                    groups.append(run.flush())

        if marker_leads and run.started:
            groups.append(run.flush())
        return groups
