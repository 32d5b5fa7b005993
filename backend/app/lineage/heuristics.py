"""Heuristic extraction rules keyed on plugin markers and configuration fields."""
from __future__ import annotations

from collections.abc import Callable
from xml.etree.ElementTree import Element

from .elements import find_own, select, text_of
from .items import DATABASE, FILE, ConnectionItem, Contribution

DATABASE_PREFIXES = ("odbc:", "aka:")
QUERY_SEPARATOR = "|||"
INPUT_DATA_SELECTOR_MACRO = "Input Data Selector.yxmc"
DYNAMIC_PREFIX = "(Dynamic) "

Rule = Callable[[Element], Contribution | None]


def plugin_name(node: Element) -> str:
    settings = find_own(node, "GuiSettings")
    if settings is None:
        return ""
    return settings.get("Plugin") or ""


def classify_path(path: str) -> str:
    """Return the connection kind implied by a configured path."""

    return DATABASE if path.startswith(DATABASE_PREFIXES) else FILE


def split_connection(node: Element, path: str, kind: str) -> tuple[str, str]:
    """Split a configured path into the connection identifier and its query."""

    if kind == DATABASE and QUERY_SEPARATOR in path:
        segments = path.split(QUERY_SEPARATOR)
        return segments[0], segments[1]

    query = select(node, "Properties", "Configuration", "Query")
    if query is not None:
        return path, text_of(query).strip()
    return path, ""


def plugin_io_rule(node: Element) -> Contribution | None:
    """Input and output tools configured with a file or connection path."""

    plugin = plugin_name(node)
    is_input = "Input" in plugin
    if not is_input and "Output" not in plugin:
        return None

    file_element = select(node, "Properties", "Configuration", "File")
    if file_element is None:
        return None

    raw_path = text_of(file_element)
    kind = classify_path(raw_path)
    path, query = split_connection(node, raw_path, kind)
    item = ConnectionItem(kind, path, query)
    if is_input:
        return Contribution(inputs=(item,))
    return Contribution(outputs=(item,))


def dynamic_input_rule(node: Element) -> Contribution | None:
    """Dynamic Input tools read files matching a template path."""

    if "DynamicInput" not in plugin_name(node):
        return None

    template = select(
        node, "Properties", "Configuration", "InputConfiguration", "Configuration", "File"
    )
    if template is None:
        return None
    return Contribution(inputs=(ConnectionItem(FILE, DYNAMIC_PREFIX + text_of(template)),))


def input_data_selector_rule(node: Element) -> Contribution | None:
    """Nodes running the Input Data Selector macro read the configured value."""

    engine = find_own(node, "EngineSettings")
    if engine is None or INPUT_DATA_SELECTOR_MACRO not in (engine.get("Macro") or ""):
        return None

    value = select(node, "Properties", "Configuration", "Value")
    if value is None:
        return None
    return Contribution(inputs=(ConnectionItem(FILE, text_of(value)),))


HEURISTIC_RULES: tuple[Rule, ...] = (
    plugin_io_rule,
    dynamic_input_rule,
    input_data_selector_rule,
)
