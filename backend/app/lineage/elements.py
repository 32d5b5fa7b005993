"""Helpers for navigating workflow document elements."""
from __future__ import annotations

from collections.abc import Iterator
from xml.etree.ElementTree import Element

NODE_TAG = "Node"


def iter_nodes(root: Element) -> Iterator[Element]:
    """Yield every tool node in document order, nested container nodes included."""

    yield from root.iter(NODE_TAG)


def iter_own(node: Element) -> Iterator[Element]:
    """Yield descendants of ``node`` without entering nested tool nodes."""

    stack = [iter(node)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        if child.tag == NODE_TAG:
            continue
        yield child
        stack.append(iter(child))


def find_own(node: Element, tag: str) -> Element | None:
    """Return the first descendant with ``tag`` that belongs to ``node`` itself."""

    for element in iter_own(node):
        if element.tag == tag:
            return element
    return None


def select(node: Element, anchor: str, *path: str) -> Element | None:
    """Return the first ``anchor/path...`` element owned by ``node``.

    Every owned ``anchor`` element is tried in document order and the child
    ``path`` is followed from it, mirroring a ``anchor > a > b`` selector.
    """

    for element in iter_own(node):
        if element.tag != anchor:
            continue
        current: Element | None = element
        for tag in path:
            current = current.find(tag) if current is not None else None
        if current is not None:
            return current
    return None


def text_of(element: Element | None) -> str:
    """Return the full text content of ``element``, or an empty string."""

    if element is None:
        return ""
    return "".join(element.itertext())
