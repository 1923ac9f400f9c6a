"""Tests for transfer progress."""

import pytest
from apibase import ProgressCounter, TransferDirection, TransferProgress


class TestProgressCounter:
    """Tests for ProgressCounter."""

    def test_defaults(self):
        """Test the zero counter."""
        counter = ProgressCounter()
        assert counter.current == 0
        assert counter.expected == 0
        assert counter.fraction is None
        assert counter.is_complete is False

    def test_fraction_and_completion(self):
        """Test fraction and completion."""
        assert ProgressCounter(25, 100).fraction == 0.25
        assert ProgressCounter(100, 100).is_complete is True


class TestTransferProgress:
    """Tests for TransferProgress."""

    def test_initial_state(self):
        """Test that counters start at (0, 0)."""
        progress = TransferProgress()
        assert progress.upload == ProgressCounter(0, 0)
        assert progress.download == ProgressCounter(0, 0)
        assert progress.closed is False

    def test_reports_update_counters(self):
        """Test that reports replace the snapshots."""
        progress = TransferProgress()
        progress.report_upload(10, 100)
        progress.report_download(5, 50)
        assert progress.upload == ProgressCounter(10, 100)
        assert progress.download == ProgressCounter(5, 50)

    def test_subscribers_notified(self):
        """Test that callbacks receive each change."""
        progress = TransferProgress()
        events = []
        progress.subscribe(events.append)

        progress.report_upload(10, 100)
        progress.report_download(50, 50)

        assert [(e.direction, e.current, e.expected) for e in events] == [
            (TransferDirection.UPLOAD, 10, 100),
            (TransferDirection.DOWNLOAD, 50, 50),
        ]
        assert events[0].progress_percent == 10.0
        assert events[1].is_download is True

    def test_counters_never_decrease(self):
        """Test that backwards reports are ignored."""
        progress = TransferProgress()
        events = []
        progress.subscribe(events.append)

        progress.report_upload(10, 100)
        progress.report_upload(5, 100)

        assert progress.upload == ProgressCounter(10, 100)
        assert len(events) == 1

    def test_unchanged_report_not_published(self):
        """Test that repeating the same values publishes nothing."""
        progress = TransferProgress()
        events = []
        progress.subscribe(events.append)

        progress.report_download(10, 10)
        progress.report_download(10, 10)

        assert len(events) == 1

    def test_no_updates_after_close(self):
        """Test that a closed handle ignores reports."""
        progress = TransferProgress()
        events = []
        progress.subscribe(events.append)

        progress.close()
        progress.report_upload(10, 10)

        assert progress.closed is True
        assert progress.upload == ProgressCounter(0, 0)
        assert events == []

    def test_close_is_idempotent(self):
        """Test closing twice."""
        progress = TransferProgress()
        progress.close()
        progress.close()
        assert progress.closed is True

    def test_unsubscribe(self):
        """Test removing a callback."""
        progress = TransferProgress()
        events = []
        unsubscribe = progress.subscribe(events.append)

        unsubscribe()
        unsubscribe()
        progress.report_upload(1, 1)

        assert events == []

    def test_failing_observer_does_not_affect_others(self, caplog):
        """Test that an observer exception is logged and contained."""
        progress = TransferProgress()
        events = []

        def broken(event):
            raise RuntimeError("boom")

        progress.subscribe(broken)
        progress.subscribe(events.append)

        progress.report_upload(1, 2)

        assert progress.upload == ProgressCounter(1, 2)
        assert len(events) == 1
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_updates_iterator_ends_on_close(self):
        """Test async iteration over progress events."""
        progress = TransferProgress()
        updates = progress.updates()

        progress.report_upload(5, 10)
        progress.report_upload(10, 10)
        progress.close()

        events = [event async for event in updates]
        assert [event.current for event in events] == [5, 10]

    @pytest.mark.asyncio
    async def test_updates_after_close_is_empty(self):
        """Test iterating a handle that has already closed."""
        progress = TransferProgress()
        progress.report_upload(5, 10)
        progress.close()

        events = [event async for event in progress.updates()]
        assert events == []
