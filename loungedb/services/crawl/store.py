from __future__ import annotations

import contextlib
import json
import logging
import os
import posixpath
import urllib.parse
from typing import Any, BinaryIO, Iterator, List, Tuple

from ..errors import RecordParseError

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"
TEMP_SUFFIX = ".part"
_RESERVED_CHARS = set('<>:"/\\|?*')


class InvalidEntityId(ValueError):
    pass


def entity_id_from_url(url: str) -> str:
    """Return the last path segment of ``url`` with a trailing ``.json`` removed.

    ``https://host/api/airport/JFK`` -> ``JFK``
    """
    path = urllib.parse.urlsplit(url).path
    name = urllib.parse.unquote(posixpath.basename(path.rstrip("/")))
    if name.endswith(RECORD_SUFFIX):
        name = name[: -len(RECORD_SUFFIX)]
    return name


def validate_entity_id(entity_id: str) -> str:
    if not entity_id or entity_id in (".", ".."):
        raise InvalidEntityId(f"Invalid entity id: {entity_id!r}")
    bad = [c for c in entity_id if c in _RESERVED_CHARS or ord(c) < 32]
    if bad:
        raise InvalidEntityId(f"Entity id {entity_id!r} contains reserved characters {bad!r}")
    return entity_id


class FileStore:
    """One JSON document per entity id under a single directory.

    Writes go to ``<id>.json.part`` and are moved into place with
    ``os.replace``, so readers never observe a partially written record.
    """

    def __init__(self, root: str) -> None:
        self.root = os.path.abspath(root)

    def __repr__(self) -> str:
        return f"FileStore({self.root!r})"

    def ensure(self) -> None:
        os.makedirs(self.root, exist_ok=True)
        # Leftovers from a process killed mid-write
        for name in os.listdir(self.root):
            if name.endswith(TEMP_SUFFIX):
                with contextlib.suppress(FileNotFoundError):
                    os.remove(os.path.join(self.root, name))
                logger.info("Removed stale temp file %s", name)

    def path_for(self, entity_id: str) -> str:
        validate_entity_id(entity_id)
        return os.path.join(self.root, f"{entity_id}{RECORD_SUFFIX}")

    def exists(self, entity_id: str) -> bool:
        return os.path.isfile(self.path_for(entity_id))

    def read(self, entity_id: str) -> bytes:
        with open(self.path_for(entity_id), "rb") as f:
            return f.read()

    def read_json(self, entity_id: str) -> Any:
        """Parse the stored record. FileNotFoundError if absent, RecordParseError if malformed."""
        raw = self.read(entity_id)
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise RecordParseError(self.path_for(entity_id), exc) from exc

    @contextlib.contextmanager
    def writer(self, entity_id: str) -> Iterator[BinaryIO]:
        """Yield a binary file handle; the record is committed only if the block succeeds."""
        final_path = self.path_for(entity_id)
        tmp_path = final_path + TEMP_SUFFIX
        f = open(tmp_path, "wb")
        try:
            yield f
            f.flush()
            os.fsync(f.fileno())
            f.close()
            os.replace(tmp_path, final_path)
        except BaseException:
            f.close()
            with contextlib.suppress(FileNotFoundError):
                os.remove(tmp_path)
            raise

    def save(self, entity_id: str, data: bytes) -> str:
        with self.writer(entity_id) as f:
            f.write(data)
        return self.path_for(entity_id)

    def ids(self) -> List[str]:
        """Stored entity ids in sorted filename order."""
        if not os.path.isdir(self.root):
            return []
        out: List[str] = []
        for name in sorted(os.listdir(self.root)):
            if name.endswith(RECORD_SUFFIX) and os.path.isfile(os.path.join(self.root, name)):
                out.append(name[: -len(RECORD_SUFFIX)])
        return out

    def iter_records(self) -> Iterator[Tuple[str, bytes]]:
        for entity_id in self.ids():
            try:
                yield entity_id, self.read(entity_id)
            except FileNotFoundError:
                # Deleted between listing and reading
                continue


class StoreLayout:
    """Store root split into the airport and lounge namespaces."""

    AIRPORTS_DIR = "iata"
    LOUNGES_DIR = "lounges"

    def __init__(self, root: str) -> None:
        self.root = os.path.abspath(root)
        self.airports = FileStore(os.path.join(self.root, self.AIRPORTS_DIR))
        self.lounges = FileStore(os.path.join(self.root, self.LOUNGES_DIR))
