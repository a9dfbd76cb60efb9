"""File exchange: export the navigation document and import a replacement.

Import only parses and checks the document shape. Persisting the result is
the caller's job (see ``CatalogWriter.replace``); an import that fails at any
step applies nothing.
"""

from __future__ import annotations

import json
from pathlib import Path

from agentnav.catalog.validation import collection_issues, is_valid_collection
from agentnav.core.logging import get_logger
from agentnav.errors import InvalidSchema, MalformedFile
from agentnav.models.record import Collection

logger = get_logger(__name__)

EXPORT_FILE_NAME = "navigation.json"


def export_collection(collection: Collection) -> bytes:
    """Serialize the whole collection as pretty-printed UTF-8 JSON."""
    return json.dumps(collection.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")


def write_export(collection: Collection, directory: str | Path = ".") -> Path:
    """Write the export to ``<directory>/navigation.json`` and return the path."""
    target = Path(directory) / EXPORT_FILE_NAME
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(export_collection(collection))
    logger.info("collection_exported", path=str(target), items=len(collection.items))
    return target


def import_collection(data: bytes | str) -> Collection:
    """Parse an uploaded document into a collection.

    Raises:
        MalformedFile: if the bytes are not UTF-8 JSON.
        InvalidSchema: if the JSON is not ``{items: [...], lastUpdated: str}``.
    """
    try:
        text = data.decode("utf-8-sig") if isinstance(data, bytes) else data
        parsed = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("import_malformed", error=str(exc))
        raise MalformedFile(f"Error parsing uploaded JSON file: {exc}") from exc

    if not is_valid_collection(parsed):
        issues = collection_issues(parsed)
        logger.warning("import_invalid_schema", issues=issues)
        raise InvalidSchema(
            "Invalid navigation data structure in uploaded file: " + "; ".join(issues)
        )

    collection = Collection.from_dict(parsed)
    logger.info("import_parsed", items=len(collection.items))
    return collection


def read_import(path: str | Path) -> Collection:
    """Read a file from disk and parse it with :func:`import_collection`."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise MalformedFile(f"Error reading uploaded file {path}: {exc}") from exc
    return import_collection(raw)
