"""Source reader: decide which navigation document is authoritative.

The local overlay wins whenever it exists and has the right shape. Otherwise
the bundled dataset is loaded from a file path or an http(s) URL. There is no
merging between the two.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import httpx

from agentnav.catalog.validation import is_valid_collection
from agentnav.core.logging import get_logger
from agentnav.errors import DataUnavailable
from agentnav.models.record import Collection
from agentnav.storage.overlay import OverlayStore

logger = get_logger(__name__)


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class SourceReader:
    """Resolves the authoritative collection for a session."""

    def __init__(
        self,
        overlay: OverlayStore,
        bundled_source: str | Path,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.overlay = overlay
        self.bundled_source = str(bundled_source)
        self._http_client = http_client

    def resolve_collection(self) -> Collection:
        """Return the overlay if usable, else the bundled dataset.

        Raises:
            DataUnavailable: if neither source yields a valid document.
        """
        local = self.overlay.read()
        if local is not None:
            logger.debug("collection_from_overlay", items=len(local.items))
            return local
        return self.load_bundled()

    def load_bundled(self) -> Collection:
        """Load the read-only seed dataset, ignoring the overlay."""
        if is_remote(self.bundled_source):
            data = self._fetch_remote(self.bundled_source)
        else:
            data = self._read_file(Path(self.bundled_source))

        if not is_valid_collection(data):
            raise DataUnavailable(
                f"Invalid navigation data structure in {self.bundled_source}"
            )

        collection = Collection.from_dict(data)
        logger.info(
            "collection_from_bundled",
            source=self.bundled_source,
            items=len(collection.items),
        )
        return collection

    def _read_file(self, path: Path) -> object:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DataUnavailable(f"Failed to read navigation data from {path}: {exc}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataUnavailable(f"Navigation data in {path} is not valid JSON: {exc}") from exc

    def _fetch_remote(self, url: str) -> object:
        client = self._http_client or httpx.Client(timeout=15.0)
        try:
            response = client.get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise DataUnavailable(
                f"Failed to fetch navigation data: {exc.response.status_code} "
                f"{exc.response.reason_phrase}"
            ) from exc
        except httpx.RequestError as exc:
            raise DataUnavailable(f"Failed to fetch navigation data from {url}: {exc}") from exc
        except ValueError as exc:
            raise DataUnavailable(f"Navigation data at {url} is not valid JSON: {exc}") from exc
        finally:
            if self._http_client is None:
                client.close()
