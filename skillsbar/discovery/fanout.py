"""Concurrent fan-out/fan-in over blocking scanners.

Each scanner runs in a worker thread via ``asyncio.to_thread``; all of them
are joined with ``asyncio.gather`` before anything is merged. A scanner that
raises or times out contributes nothing, so a coordinator never raises.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import structlog

from skillsbar.models.ids import record_sort_key

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScannerTask:
    """One unit of blocking discovery work."""

    name: str
    run: Callable[[], List[Any]]


async def _run_scanner(task: ScannerTask, timeout: Optional[float]) -> List[Any]:
    try:
        work = asyncio.to_thread(task.run)
        if timeout is None:
            return await work
        return await asyncio.wait_for(work, timeout)
    except asyncio.TimeoutError:
        # The worker thread cannot be interrupted; its result is discarded
        logger.warning("Scanner timed out", scanner=task.name, timeout=timeout)
        return []
    except Exception:
        logger.exception("Scanner failed", scanner=task.name)
        return []


def merge_records(records: Iterable[Any], kind: str = "record") -> List[Any]:
    """Drop duplicate ids (first occurrence wins) and apply the total order."""
    unique: Dict[str, Any] = {}
    for record in records:
        existing = unique.get(record.id)
        if existing is not None:
            logger.warning(
                "Duplicate record id",
                kind=kind,
                id=record.id,
                kept=str(existing.path),
                dropped=str(record.path),
            )
            continue
        unique[record.id] = record
    return sorted(unique.values(), key=record_sort_key)


async def fan_out(
    tasks: Sequence[ScannerTask],
    *,
    timeout: Optional[float] = None,
    kind: str = "record",
) -> List[Any]:
    """Run scanners concurrently, then merge and sort their results.

    Args:
        tasks: Scanners to run
        timeout: Per-scanner timeout in seconds (None waits indefinitely)
        kind: Record kind, for log context

    Returns:
        Deduplicated records in total order
    """
    if not tasks:
        return []

    partials = await asyncio.gather(*(_run_scanner(task, timeout) for task in tasks))

    # gather preserves task order, so duplicate resolution is deterministic
    merged = [record for partial in partials for record in partial]
    return merge_records(merged, kind)
