"""
Unit tests for ui/debounce.py

Tests last-call-wins delivery after the quiet period.
"""

import asyncio
import logging
import pytest
from unittest.mock import AsyncMock, Mock

from cascadeselect.ui.debounce import DebouncedNotifier


WAIT = 0.05


class TestDebouncedNotifier:
    """Test DebouncedNotifier behavior."""

    def test_default_wait(self):
        assert DebouncedNotifier(Mock()).wait_seconds == 0.3

    @pytest.mark.asyncio
    async def test_burst_collapses_to_last_argument(self):
        """Calls within the quiet period deliver exactly once, with the last argument."""
        sink = Mock()
        notify = DebouncedNotifier(sink, wait_seconds=WAIT)

        notify(1)
        notify(2)
        notify(3)

        sink.assert_not_called()
        await asyncio.sleep(WAIT * 3)

        sink.assert_called_once_with(3)
        assert notify.delivered_count == 1
        assert notify.dropped_count == 2

    @pytest.mark.asyncio
    async def test_separate_bursts_deliver_separately(self):
        sink = Mock()
        notify = DebouncedNotifier(sink, wait_seconds=WAIT)

        notify("a")
        await asyncio.sleep(WAIT * 3)
        notify("b")
        await asyncio.sleep(WAIT * 3)

        assert [c.args[0] for c in sink.call_args_list] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending(self):
        sink = Mock()
        notify = DebouncedNotifier(sink, wait_seconds=WAIT)

        notify("a")
        assert notify.pending
        assert notify.cancel() is True
        await asyncio.sleep(WAIT * 3)

        sink.assert_not_called()
        assert notify.cancel() is False

    @pytest.mark.asyncio
    async def test_flush_delivers_immediately(self):
        sink = Mock()
        notify = DebouncedNotifier(sink, wait_seconds=10)

        notify("a")
        notify("b")
        assert notify.flush() is True

        sink.assert_called_once_with("b")
        assert not notify.pending

    @pytest.mark.asyncio
    async def test_async_sink_scheduled(self):
        sink = AsyncMock()
        notify = DebouncedNotifier(sink, wait_seconds=WAIT)

        notify("a")
        await asyncio.sleep(WAIT * 3)

        sink.assert_awaited_once_with("a")

    @pytest.mark.asyncio
    async def test_sink_error_does_not_escape(self):
        sink = Mock(side_effect=RuntimeError("sink broke"))
        notify = DebouncedNotifier(sink, wait_seconds=WAIT)

        notify("a")
        await asyncio.sleep(WAIT * 3)

        sink.assert_called_once_with("a")
        assert not notify.pending

    @pytest.mark.asyncio
    async def test_async_sink_error_logged(self, caplog):
        """A failing async sink is held until done and its error is logged."""
        sink = AsyncMock(side_effect=RuntimeError("async sink broke"))
        notify = DebouncedNotifier(sink, wait_seconds=WAIT)

        with caplog.at_level(logging.ERROR, logger="cascade.notify"):
            notify("a")
            await asyncio.sleep(WAIT * 3)

        sink.assert_awaited_once_with("a")
        assert notify.in_flight == 0
        assert "async sink broke" in caplog.text
