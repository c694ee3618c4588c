"""Extract compact pattern tables from raw CLDR-JSON ``numbers`` trees.

CLDR-JSON encodes attributes in node names as dash-separated pairs after the
node id: ``decimalFormats-numberSystem-latn`` or ``1000-count-one-alt-variant``.
Only the compact decimal (long and short) and compact currency (short) nodes
are kept; everything else in the tree is ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from ..errors import MalformedCldrTableError
from ..models.locale_data import CompactPatternTable, CompactStyles, NumberFormatLocaleData

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FormatSelector:
    """Where one format type lives in a CLDR ``numbers`` tree."""

    type: str
    node_id: str
    format_node_id: str
    style_node_ids: tuple[str, ...]


FORMAT_SELECTORS: tuple[FormatSelector, ...] = (
    FormatSelector(
        type="decimal",
        node_id="decimalFormats",
        format_node_id="decimalFormat",
        style_node_ids=("long", "short"),
    ),
    FormatSelector(
        type="currency",
        node_id="currencyFormats",
        format_node_id="standard",
        style_node_ids=("short",),
    ),
)

_SELECTORS_BY_NODE = {selector.node_id: selector for selector in FORMAT_SELECTORS}


def decode_node_name(name: str) -> tuple[str, dict[str, str]]:
    """Split ``"1000-count-one"`` into ``("1000", {"count": "one"})``.

    A trailing attribute name without a value is dropped.
    """
    node_id, *rest = name.split("-")
    attrs = {rest[i]: rest[i + 1] for i in range(0, len(rest) - 1, 2)}
    return node_id, attrs


def process_formats_node(formats_node: Any, selector: FormatSelector) -> dict[str, CompactPatternTable]:
    """Build ``style -> category -> magnitude -> pattern`` for one format node.

    Raises:
        MalformedCldrTableError: a style sub-node or its format root is
            missing, or a pattern is not a string.
    """
    if not isinstance(formats_node, dict):
        raise MalformedCldrTableError(f'Formats node "{selector.node_id}" is not an object')

    styles: dict[str, CompactPatternTable] = {}
    for style_id in selector.style_node_ids:
        style_node = formats_node.get(style_id)
        if not isinstance(style_node, dict):
            raise MalformedCldrTableError(
                f'Formats node "{selector.node_id}" is missing styles node "{style_id}"'
            )
        format_node = style_node.get(selector.format_node_id)
        if not isinstance(format_node, dict):
            raise MalformedCldrTableError(
                f'Formats node "{selector.node_id}" is missing format nodes root '
                f'"{selector.format_node_id}" in styles node "{style_id}"'
            )

        table: CompactPatternTable = {}
        for encoded_name, pattern in format_node.items():
            magnitude, attrs = decode_node_name(encoded_name)
            count = attrs.get("count")
            if count is None or "alt" in attrs:
                continue
            if not isinstance(pattern, str):
                raise MalformedCldrTableError(
                    f'Format node "{encoded_name}" in styles node "{style_id}" of '
                    f'formats node "{selector.node_id}" is not a pattern string'
                )
            table.setdefault(count, {}).setdefault(magnitude, pattern)

        styles[style_id] = table

    return styles


def extract_formats(numbers_node: dict[str, Any], locale: str) -> dict[str, dict[str, CompactStyles]]:
    """Return ``format type -> numbering system -> styles`` for a locale.

    A malformed ``(format node, numbering system)`` pair is logged and skipped.
    """
    formats: dict[str, dict[str, CompactStyles]] = {}

    for encoded_name, node in numbers_node.items():
        node_id, attrs = decode_node_name(encoded_name)
        selector = _SELECTORS_BY_NODE.get(node_id)
        if selector is None:
            continue

        numbering_system = attrs.get("numberSystem")
        try:
            if numbering_system is None:
                raise MalformedCldrTableError(f'"{encoded_name}" is missing numberSystem attribute')
            styles = process_formats_node(node, selector)
        except MalformedCldrTableError as e:
            logger.warning(
                "cldr_table_skipped",
                locale=locale,
                node=node_id,
                numbering_system=numbering_system,
                error=e.message,
            )
            continue

        formats.setdefault(selector.type, {})[numbering_system] = CompactStyles(**styles)

    return formats


def extract_locale_data(locale: str, document: dict[str, Any]) -> NumberFormatLocaleData:
    """Extract the compact tables for *locale* from its ``numbers.json`` document.

    Raises:
        MalformedCldrTableError: the document has no ``main.<locale>.numbers``.
    """
    root = (document.get("main") or {}).get(locale)
    if not isinstance(root, dict):
        raise MalformedCldrTableError(f'Root node is missing for locale "{locale}"')
    numbers = root.get("numbers")
    if not isinstance(numbers, dict):
        raise MalformedCldrTableError(f'Numbers node is missing for locale "{locale}"')

    formats = extract_formats(numbers, locale)

    numbering_systems: list[str] = []
    for by_system in formats.values():
        for system in by_system:
            if system not in numbering_systems:
                numbering_systems.append(system)

    default_system = numbers.get("defaultNumberingSystem")
    if default_system in numbering_systems:
        numbering_systems.remove(default_system)
        numbering_systems.insert(0, default_system)

    return NumberFormatLocaleData(
        numbering_systems=numbering_systems,
        decimal=formats.get("decimal", {}),
        currency=formats.get("currency", {}),
    )


def write_locale_data(out_dir: Path, locale: str, data: NumberFormatLocaleData) -> tuple[Path, int]:
    """Write ``<out_dir>/<locale>.json`` and return its path and size in bytes."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{locale}.json"
    path.write_text(data.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    size = path.stat().st_size
    logger.info("locale_data_written", locale=locale, path=str(path), size=size)
    return path, size


def generate_locale_data(
    source_dir: Path,
    out_dir: Path,
    locales: list[str] | None = None,
) -> list[tuple[Path, int]]:
    """Extract every locale under *source_dir* and write one JSON file each.

    *source_dir* is a CLDR-JSON ``main`` directory holding
    ``<locale>/numbers.json``. Locales that cannot be read or lack a
    ``numbers`` node are logged and skipped.
    """
    if locales is None:
        locales = sorted(p.name for p in source_dir.iterdir() if (p / "numbers.json").is_file())

    written: list[tuple[Path, int]] = []
    for locale in locales:
        source = source_dir / locale / "numbers.json"
        try:
            document = json.loads(source.read_text(encoding="utf-8"))
            data = extract_locale_data(locale, document)
        except (OSError, json.JSONDecodeError, MalformedCldrTableError) as e:
            logger.warning("cldr_locale_skipped", locale=locale, path=str(source), error=str(e))
            continue
        written.append(write_locale_data(out_dir, locale, data))

    logger.info("locale_data_generated", locales=len(written), out_dir=str(out_dir))
    return written
