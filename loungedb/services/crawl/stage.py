from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import FetchError
from .fetcher import Fetcher
from .store import FileStore, InvalidEntityId, entity_id_from_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkItem:
    url: str
    entity_id: Optional[str] = None

    @property
    def key(self) -> str:
        return self.entity_id or entity_id_from_url(self.url)


@dataclass
class StageFailure:
    item: WorkItem
    cause: BaseException

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.item.url, "entity_id": self.item.key, "error": str(self.cause)}


@dataclass
class StageReport:
    name: str = "stage"
    processed: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: List[StageFailure] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.name,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": [f.to_dict() for f in self.failed],
        }


def run_stage(
    items: Sequence[WorkItem],
    store: FileStore,
    fetcher: Fetcher,
    *,
    delay: float,
    skip_existing: bool = True,
    sleep: Callable[[float], None] = time.sleep,
    name: str = "stage",
) -> StageReport:
    """Download every item into ``store``, one request at a time.

    A failing item is recorded in the report and the stage moves on. After
    every issued request (success or failure) the runner sleeps ``delay``
    seconds; skipped items issue no request and do not sleep.
    """
    report = StageReport(name=name)
    for item in items:
        report.processed += 1
        try:
            entity_id = item.key
            if skip_existing and store.exists(entity_id):
                logger.debug("Skipping download: %s.json already exists", entity_id)
                report.skipped += 1
                continue
        except InvalidEntityId as exc:
            logger.warning("Error processing %s: %s", item.url, exc)
            report.failed.append(StageFailure(item, exc))
            continue

        try:
            with store.writer(entity_id) as sink:
                fetcher.fetch(item.url, sink)
        except (FetchError, OSError) as exc:
            logger.warning("Error processing %s: %s", item.url, exc)
            report.failed.append(StageFailure(item, exc))
        else:
            logger.info("Downloaded and saved: %s.json", entity_id)
            report.succeeded += 1
        if delay > 0:
            sleep(delay)

    logger.info(
        "%s finished: processed=%d succeeded=%d skipped=%d failed=%d",
        name, report.processed, report.succeeded, report.skipped, len(report.failed),
    )
    return report
