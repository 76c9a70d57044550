"""Feed parsing, category selection and serialisation helpers."""

from __future__ import annotations

import copy
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from lxml import etree

from .errors import ReadError, WriteError
from .models import FilterResult

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_ENTRY_PATH = "//item"
DEFAULT_CATEGORY_PATH = "category"
NEW_FILE_MODE = 0o644


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        strip_cdata=False,
        remove_blank_text=False,
        resolve_entities=False,
        no_network=True,
    )


def read_feed(path: PathLike) -> etree._ElementTree:
    """Parse the feed document stored at ``path``."""
    location = Path(path)
    logger.info("Reading feed from %s", location)

    try:
        if not location.exists():
            raise ReadError(location, "file does not exist")
        if not location.is_file():
            raise ReadError(location, "not a regular file")
        with location.open("rb") as handle:
            tree = etree.parse(handle, _make_parser(), base_url=str(location))
    except OSError as exc:
        raise ReadError(location, exc.strerror or str(exc)) from exc
    except etree.XMLSyntaxError as exc:
        raise ReadError(location, f"malformed XML ({exc})") from exc

    return tree


def _select(node: etree._Element, path: str) -> list:
    """Evaluate ``path`` against ``node`` and insist on a node-set result."""
    try:
        result = node.xpath(path)
    except etree.XPathError as exc:
        raise ValueError(f"Invalid XPath expression {path!r}: {exc}") from exc
    if not isinstance(result, list):
        raise ValueError(f"XPath expression {path!r} must select nodes.")
    return result


def find_entries(
    tree: etree._ElementTree, entry_path: str = DEFAULT_ENTRY_PATH
) -> List[etree._Element]:
    """Return the outermost entry elements of ``tree`` in document order.

    An entry nested inside another selected entry is part of that entry's
    content and is not considered on its own.
    """
    nodes = [
        node
        for node in _select(tree.getroot(), entry_path)
        if isinstance(node, etree._Element)
    ]
    selected = set(nodes)
    return [
        node
        for node in nodes
        if not any(ancestor in selected for ancestor in node.iterancestors())
    ]


def entry_categories(
    entry: etree._Element, category_path: str = DEFAULT_CATEGORY_PATH
) -> List[str]:
    """Return the category labels attached to ``entry``."""
    labels: List[str] = []
    for node in _select(entry, category_path):
        if isinstance(node, str):
            # Attribute and text() selections already yield strings.
            labels.append(str(node))
        else:
            labels.append(str(node.xpath("string()")))
    return labels


def entry_matches(
    entry: etree._Element,
    target_category: str,
    category_path: str = DEFAULT_CATEGORY_PATH,
) -> bool:
    """Whether any category label of ``entry`` equals ``target_category`` exactly."""
    return any(
        label == target_category for label in entry_categories(entry, category_path)
    )


def _entry_title(entry: etree._Element) -> str:
    return entry.findtext("title") or ""


def _detach(node: etree._Element) -> None:
    """Remove ``node`` from its parent without disturbing the closing indentation."""
    parent = node.getparent()
    if parent is None:
        raise ValueError("Cannot remove the root element of a feed.")

    if node.getnext() is None and node.tail is not None:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = node.tail
        else:
            parent.text = node.tail
    parent.remove(node)


def require_category(target_category: str) -> None:
    if not isinstance(target_category, str) or not target_category:
        raise ValueError("Target category must be a non-empty string.")


def filter_document(
    tree: etree._ElementTree,
    target_category: str,
    *,
    entry_path: str = DEFAULT_ENTRY_PATH,
    category_path: str = DEFAULT_CATEGORY_PATH,
) -> etree._ElementTree:
    """Return a copy of ``tree`` keeping only entries tagged ``target_category``.

    The input tree is left untouched. Matching entries keep their position
    relative to each other and to the rest of the document; everything that
    is not an entry is carried over as is.
    """
    require_category(target_category)
    filtered = copy.deepcopy(tree)

    for entry in find_entries(filtered, entry_path):
        if entry_matches(entry, target_category, category_path):
            logger.debug("Keeping entry '%s'", _entry_title(entry))
            continue
        logger.debug(
            "Dropping entry '%s' (categories=%s)",
            _entry_title(entry),
            entry_categories(entry, category_path),
        )
        _detach(entry)

    return filtered


def _apply_mode(temp_path: Path, destination: Path) -> None:
    if destination.exists():
        shutil.copymode(destination, temp_path)
    else:
        os.chmod(temp_path, NEW_FILE_MODE)


def write_feed(tree: etree._ElementTree, path: PathLike) -> None:
    """Atomically serialise ``tree`` to ``path``.

    The document is written to a temporary file next to the destination and
    then moved into place, so a failed write never leaves a truncated feed
    behind.
    """
    location = Path(path)
    directory = location.parent

    docinfo = tree.docinfo
    options = {"encoding": docinfo.encoding or "UTF-8", "xml_declaration": True}
    if docinfo.standalone:
        options["standalone"] = True
    temp_path: Optional[Path] = None

    try:
        if not directory.is_dir():
            raise WriteError(location, f"directory {directory} does not exist")
        with tempfile.NamedTemporaryFile(
            dir=directory,
            prefix=f".{location.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            tree.write(handle, **options)
            handle.flush()
            os.fsync(handle.fileno())

        _apply_mode(temp_path, location)
        temp_path.replace(location)
        temp_path = None
    except (OSError, LookupError, etree.LxmlError) as exc:
        raise WriteError(location, str(exc)) from exc
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)

    logger.info("Wrote feed to %s", location)


def build_result(
    source: etree._ElementTree,
    filtered: etree._ElementTree,
    *,
    input_path: PathLike,
    output_path: Optional[PathLike],
    target_category: str,
    entry_path: str = DEFAULT_ENTRY_PATH,
) -> FilterResult:
    """Summarise a filtering pass over ``source``."""
    kept = find_entries(filtered, entry_path)
    return FilterResult(
        input_path=str(input_path),
        output_path=str(output_path) if output_path is not None else None,
        category=target_category,
        total_entries=len(find_entries(source, entry_path)),
        kept_entries=len(kept),
        kept_titles=[_entry_title(entry) for entry in kept],
    )


def filter_feed(
    input_path: PathLike,
    output_path: PathLike,
    target_category: str,
    *,
    entry_path: str = DEFAULT_ENTRY_PATH,
    category_path: str = DEFAULT_CATEGORY_PATH,
) -> FilterResult:
    """Write the entries of ``input_path`` tagged ``target_category`` to ``output_path``."""
    require_category(target_category)

    source = read_feed(input_path)
    filtered = filter_document(
        source,
        target_category,
        entry_path=entry_path,
        category_path=category_path,
    )
    result = build_result(
        source,
        filtered,
        input_path=input_path,
        output_path=output_path,
        target_category=target_category,
        entry_path=entry_path,
    )

    write_feed(filtered, output_path)
    return result
