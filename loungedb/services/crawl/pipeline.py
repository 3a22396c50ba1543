from __future__ import annotations

import logging
import urllib.parse
from typing import Iterable, List, Optional

from .discovery import LoungeRef, discover_lounge_work
from .fetcher import Fetcher
from .stage import StageReport, WorkItem, run_stage
from .store import StoreLayout

logger = logging.getLogger(__name__)


def airport_url(base_url: str, code: str) -> str:
    return f"{base_url.rstrip('/')}/api/airport/{urllib.parse.quote(code, safe='')}"


def lounge_url(base_url: str, lounge_id: str) -> str:
    return f"{base_url.rstrip('/')}/api/lounge/{urllib.parse.quote(lounge_id, safe='')}"


def airport_work_items(codes: Iterable[str], base_url: str) -> List[WorkItem]:
    return [WorkItem(url=airport_url(base_url, c), entity_id=c) for c in codes]


def lounge_work_items(refs: Iterable[LoungeRef], base_url: str) -> List[WorkItem]:
    return [WorkItem(url=lounge_url(base_url, r.id), entity_id=r.id) for r in refs]


def run_airports_stage(
    codes: Iterable[str],
    layout: StoreLayout,
    fetcher: Fetcher,
    *,
    base_url: str,
    delay: float,
    skip_existing: bool = True,
    limit: Optional[int] = None,
    **kwargs,
) -> StageReport:
    """Stage one: one airport record per directory code."""
    layout.airports.ensure()
    items = airport_work_items(codes, base_url)
    if limit is not None:
        items = items[:limit]
    logger.info("Airport stage: %d item(s) into %s", len(items), layout.airports.root)
    return run_stage(
        items, layout.airports, fetcher,
        delay=delay, skip_existing=skip_existing, name="airports", **kwargs,
    )


def run_lounges_stage(
    layout: StoreLayout,
    fetcher: Fetcher,
    *,
    base_url: str,
    delay: float,
    skip_existing: bool = True,
    dedupe: bool = False,
    limit: Optional[int] = None,
    **kwargs,
) -> StageReport:
    """Stage two: lounges listed in the airport records already on disk.

    With no airport records present this completes with zero work.
    """
    layout.lounges.ensure()
    refs = discover_lounge_work(layout.airports, dedupe=dedupe)
    items = lounge_work_items(refs, base_url)
    if limit is not None:
        items = items[:limit]
    logger.info("Lounge stage: %d item(s) into %s", len(items), layout.lounges.root)
    return run_stage(
        items, layout.lounges, fetcher,
        delay=delay, skip_existing=skip_existing, name="lounges", **kwargs,
    )
