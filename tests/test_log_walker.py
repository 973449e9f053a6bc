"""Tests for the windowed backward log walk."""

import httpx
import pytest

from techsignal.clients import EvmRpcClient
from techsignal.core.models import LogFilter, LogRecord
from techsignal.core.protocol import LogSource
from techsignal.services import get_recent_logs_chunked


class FakeLogSource:
    """In-memory log store recording every window it is asked for."""

    def __init__(self, records: list[LogRecord], latest: int, failing: set[int] | None = None):
        self.records = records
        self.latest = latest
        self.failing = failing or set()
        self.windows: list[tuple[int, int]] = []
        self.block_number_calls = 0

    async def get_block_number(self) -> int:
        self.block_number_calls += 1
        return self.latest

    async def get_logs(self, log_filter, from_block, to_block):
        self.windows.append((from_block, to_block))
        if from_block in self.failing:
            raise RuntimeError("block range too large")
        return [r for r in self.records if from_block <= r.block_number <= to_block]


def _record(block: int, index: int = 0) -> LogRecord:
    return LogRecord(block_number=block, log_index=index)


class TestGetRecentLogsChunked:
    """Tests for get_recent_logs_chunked."""

    def test_fake_satisfies_protocol(self):
        assert isinstance(FakeLogSource([], 0), LogSource)

    @pytest.mark.asyncio
    async def test_stops_after_max_chunks(self):
        """Test records only in the oldest 3 of 10 windows are never reached."""
        # 10 windows of 10 blocks: [90-99] ... [0-9]; records in blocks 0-29
        records = [_record(b) for b in (2, 5, 14, 17, 23, 28)]
        source = FakeLogSource(records, latest=99)

        logs = await get_recent_logs_chunked(
            source, LogFilter(), chunk_size=10, limit=5, max_chunks=4
        )

        assert logs == []
        assert source.windows == [(90, 99), (80, 89), (70, 79), (60, 69)]

    @pytest.mark.asyncio
    async def test_partial_results_sorted(self):
        """Test fewer than `limit` records are returned sorted ascending."""
        records = [_record(95, 2), _record(75), _record(95, 1)]
        source = FakeLogSource(records, latest=99)

        logs = await get_recent_logs_chunked(
            source, LogFilter(), chunk_size=10, limit=5, max_chunks=4
        )

        assert [log.sort_key for log in logs] == [(75, 0), (95, 1), (95, 2)]
        assert len(source.windows) == 4

    @pytest.mark.asyncio
    async def test_stops_when_limit_reached(self):
        """Test the walk stops once enough records are collected."""
        records = [_record(b) for b in (2, 5, 14, 17, 23, 28)]
        source = FakeLogSource(records, latest=99)

        logs = await get_recent_logs_chunked(
            source, LogFilter(), chunk_size=10, limit=5, max_chunks=60
        )

        # [20-29] -> 2, [10-19] -> 4, [0-9] -> 6 >= 5
        assert len(source.windows) == 10
        assert [log.block_number for log in logs] == [5, 14, 17, 23, 28]

    @pytest.mark.asyncio
    async def test_stops_at_genesis(self):
        """Test the walk never goes below block 0."""
        source = FakeLogSource([_record(3)], latest=25)

        logs = await get_recent_logs_chunked(
            source, LogFilter(), chunk_size=10, limit=5, max_chunks=60
        )

        assert source.windows == [(16, 25), (6, 15), (0, 5)]
        assert [log.block_number for log in logs] == [3]

    @pytest.mark.asyncio
    async def test_failed_window_skipped(self):
        """Test a failing window is skipped without retry."""
        records = [_record(85), _record(65)]
        source = FakeLogSource(records, latest=99, failing={80})

        logs = await get_recent_logs_chunked(
            source, LogFilter(), chunk_size=10, limit=5, max_chunks=4
        )

        assert source.windows == [(90, 99), (80, 89), (70, 79), (60, 69)]
        assert [log.block_number for log in logs] == [65]

    @pytest.mark.asyncio
    async def test_returns_most_recent(self):
        """Test only the newest `limit` records are kept."""
        records = [_record(90, i) for i in range(8)]
        source = FakeLogSource(records, latest=99)

        logs = await get_recent_logs_chunked(source, LogFilter(), chunk_size=10, limit=3)

        assert [log.log_index for log in logs] == [5, 6, 7]
        assert len(source.windows) == 1

    @pytest.mark.asyncio
    async def test_latest_block_lookup(self):
        """Test to_block defaults to the source's latest block."""
        source = FakeLogSource([], latest=4999)

        await get_recent_logs_chunked(source, LogFilter(), max_chunks=2)

        assert source.block_number_calls == 1
        assert source.windows == [(3000, 4999), (1000, 2999)]

    @pytest.mark.asyncio
    async def test_explicit_to_block(self):
        source = FakeLogSource([], latest=4999)

        await get_recent_logs_chunked(source, LogFilter(), to_block=100, max_chunks=1)

        assert source.block_number_calls == 0
        assert source.windows == [(0, 100)]

    @pytest.mark.asyncio
    async def test_options_clamped(self):
        """Test non-positive options are raised to 1."""
        source = FakeLogSource([_record(9), _record(8)], latest=9)

        logs = await get_recent_logs_chunked(
            source, LogFilter(), chunk_size=0, limit=0, max_chunks=0
        )

        assert source.windows == [(9, 9)]
        assert [log.block_number for log in logs] == [9]

    @pytest.mark.asyncio
    async def test_latest_block_lookup_failure(self):
        """Test a failing latest-block lookup degrades to an empty result."""
        source = FakeLogSource([_record(10)], latest=99)

        async def failing_block_number():
            raise RuntimeError("503 Service Unavailable")

        source.get_block_number = failing_block_number

        logs = await get_recent_logs_chunked(source, LogFilter())

        assert logs == []
        assert source.windows == []

    @pytest.mark.asyncio
    async def test_rpc_unavailable_returns_empty(self):
        """Test an RPC node answering 503 yields no logs instead of raising."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with EvmRpcClient("https://rpc.test", transport=transport) as client:
            logs = await get_recent_logs_chunked(client, LogFilter())

        assert logs == []
