"""Bounded backward pagination over a block-range limited log source.

Nodes cap the block span of a single ``eth_getLogs`` query, so recent logs
are collected by walking fixed-size windows back from the latest block until
enough records are found or the window budget runs out.
"""

from __future__ import annotations

import logging

from techsignal.core.models import LogFilter, LogRecord
from techsignal.core.protocol import LogSource

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_LIMIT = 5
DEFAULT_MAX_CHUNKS = 60


async def get_recent_logs_chunked(
    source: LogSource,
    base_filter: LogFilter,
    *,
    to_block: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    limit: int = DEFAULT_LIMIT,
    max_chunks: int = DEFAULT_MAX_CHUNKS,
) -> list[LogRecord]:
    """
    Collect the most recent logs matching ``base_filter``.

    Windows are fetched one at a time, newest first. A window whose fetch
    fails is skipped without retry.

    Args:
        source: Log source to query
        base_filter: Address/topic filter applied to every window
        to_block: Newest block to include (defaults to the latest block)
        chunk_size: Blocks per window
        limit: Number of records wanted
        max_chunks: Maximum number of windows to try

    Returns:
        Up to ``limit`` records, sorted ascending by (block_number, log_index).
        Empty if the latest block cannot be looked up.
    """
    if to_block is not None:
        latest = to_block
    else:
        try:
            latest = await source.get_block_number()
        except Exception as e:
            logger.warning(f"Latest block lookup failed, no logs fetched: {e}")
            return []

    chunk_size = max(1, chunk_size)
    limit = max(1, limit)
    max_chunks = max(1, max_chunks)

    to = latest
    collected: list[LogRecord] = []
    chunks_tried = 0

    while len(collected) < limit and to >= 0 and chunks_tried < max_chunks:
        from_block = max(to - chunk_size + 1, 0)

        try:
            logs = await source.get_logs(base_filter, from_block, to)
            if logs:
                collected.extend(logs)
        except Exception as e:
            logger.debug(f"getLogs window {from_block}-{to} failed: {e}")

        to = from_block - 1
        chunks_tried += 1

    logger.debug(
        f"Log walk finished: {len(collected)} records in {chunks_tried} windows "
        f"(latest={latest}, chunk_size={chunk_size})"
    )

    collected.sort(key=lambda log: log.sort_key)
    return collected[-limit:]
