from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from .store import FileStore

logger = logging.getLogger(__name__)

Record = Tuple[str, Union[bytes, str, dict]]


@dataclass(frozen=True)
class LoungeRef:
    id: str
    slug_path: Optional[str] = None


def _lounge_ref(entry: Any) -> Optional[LoungeRef]:
    if not isinstance(entry, dict):
        return None
    lounge_id = entry.get("id")
    if not lounge_id:
        return None
    slug = entry.get("slugPath") or entry.get("slug")
    return LoungeRef(id=str(lounge_id), slug_path=str(slug) if slug else None)


def extract_lounge_refs(records: Iterable[Record], *, dedupe: bool = False) -> List[LoungeRef]:
    """Collect lounge refs from a snapshot of airport records.

    ``records`` yields ``(source_id, payload)`` where payload is raw JSON or an
    already decoded document. Undecodable payloads are logged and skipped.
    Order is record order, then position within each ``lounges`` array.
    """
    refs: List[LoungeRef] = []
    seen: set = set()
    for source_id, payload in records:
        if isinstance(payload, (bytes, str)):
            try:
                doc = json.loads(payload)
            except ValueError as exc:
                logger.warning("Error reading or parsing %s: %s", source_id, exc)
                continue
        else:
            doc = payload
        if not isinstance(doc, dict):
            continue
        lounges = doc.get("lounges")
        if not isinstance(lounges, list):
            continue
        for entry in lounges:
            ref = _lounge_ref(entry)
            if ref is None:
                continue
            if dedupe:
                if ref.id in seen:
                    continue
                seen.add(ref.id)
            refs.append(ref)
    return refs


def discover_lounge_work(source: Union[FileStore, str], *, dedupe: bool = False) -> List[LoungeRef]:
    """Re-read the persisted airport records and derive the lounge work list.

    An empty or missing airport directory yields an empty list.
    """
    store = source if isinstance(source, FileStore) else FileStore(source)
    refs = extract_lounge_refs(store.iter_records(), dedupe=dedupe)
    logger.info("Discovered %d lounge(s) in %s", len(refs), store.root)
    return refs
