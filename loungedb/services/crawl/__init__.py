"""Two-stage crawl of the upstream lounge API.

Structure:
- fetcher.py: single GET streamed into a sink
- store.py: one JSON file per entity, atomic writes
- stage.py: sequential stage runner with per-item failure isolation
- discovery.py: derive the lounge work list from stored airport records
- pipeline.py: stage one (airports) and stage two (lounges)
- runner.py: CLI entrypoint for manual runs

Stage two never receives its work list from stage one in memory; it re-reads
whatever airport records are on disk, so either stage can be re-run at any
time and already-stored records are skipped.
"""

from .discovery import LoungeRef, discover_lounge_work, extract_lounge_refs
from .fetcher import Fetcher
from .pipeline import run_airports_stage, run_lounges_stage
from .stage import StageFailure, StageReport, WorkItem, run_stage
from .store import FileStore, InvalidEntityId, StoreLayout, entity_id_from_url

__all__ = [
    "Fetcher",
    "FileStore",
    "InvalidEntityId",
    "LoungeRef",
    "StageFailure",
    "StageReport",
    "StoreLayout",
    "WorkItem",
    "discover_lounge_work",
    "entity_id_from_url",
    "extract_lounge_refs",
    "run_airports_stage",
    "run_lounges_stage",
    "run_stage",
]
