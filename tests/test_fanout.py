"""Tests for multilog.fanout — fan-out and buffered writers."""

import io
import re
import threading

import pytest

from multilog.errors import FanoutWriteError
from multilog.fanout import BufferedWriter, FanoutWriter
from multilog.sinks import FileSink, Sink


class RecordingSink(Sink):
    """Collects writes in memory."""

    def __init__(self, name="rec"):
        self.name = name
        self.writes = []

    def write(self, text):
        self.writes.append(text)
        return len(text)

    def __repr__(self):
        return f"RecordingSink({self.name!r})"


class BrokenSink(Sink):
    """Fails every write."""

    def __init__(self, exc=None):
        self.exc = exc or OSError(28, "No space left on device")
        self.attempts = 0

    def write(self, text):
        self.attempts += 1
        raise self.exc


class TestFanoutWriter:

    def test_duplicates_to_every_sink(self):
        a, b = RecordingSink("a"), RecordingSink("b")
        writer = FanoutWriter([a, b])
        assert writer.write("line\n") == 5
        assert a.writes == ["line\n"]
        assert b.writes == ["line\n"]

    def test_sinks_kept_in_order(self):
        a, b, c = RecordingSink("a"), RecordingSink("b"), RecordingSink("c")
        assert FanoutWriter([a, b, c]).sinks == (a, b, c)

    def test_failure_does_not_stop_later_sinks(self):
        broken, after = BrokenSink(), RecordingSink()
        writer = FanoutWriter([broken, after])
        with pytest.raises(FanoutWriteError) as excinfo:
            writer.write("line\n")
        assert after.writes == ["line\n"]
        assert broken.attempts == 1
        assert excinfo.value.failures == [(broken, broken.exc)]
        assert excinfo.value.__cause__ is broken.exc

    def test_no_rollback_of_earlier_sinks(self):
        before, broken = RecordingSink(), BrokenSink()
        with pytest.raises(FanoutWriteError):
            FanoutWriter([before, broken]).write("kept\n")
        assert before.writes == ["kept\n"]

    def test_every_failure_collected(self):
        first, second = BrokenSink(), BrokenSink(ValueError("I/O operation on closed file"))
        with pytest.raises(FanoutWriteError) as excinfo:
            FanoutWriter([first, second]).write("x")
        assert [sink for sink, _ in excinfo.value.failures] == [first, second]
        assert excinfo.value.__cause__ is first.exc

    def test_write_error_is_oserror(self):
        with pytest.raises(OSError):
            FanoutWriter([BrokenSink()]).write("x")

    def test_closed_file_sink_reported(self, tmp_path):
        sink = FileSink.open(tmp_path / "closed.log")
        sink.close()
        with pytest.raises(FanoutWriteError):
            FanoutWriter([sink]).write("x\n")


class TestBufferedWriter:

    def test_holds_until_flush(self):
        rec = RecordingSink()
        buffered = BufferedWriter(FanoutWriter([rec]))
        buffered.write("one\n")
        buffered.write("two\n")
        assert rec.writes == []
        assert buffered.buffered == 8
        buffered.flush()
        assert rec.writes == ["one\ntwo\n"]
        assert buffered.buffered == 0

    def test_flushes_at_size(self):
        rec = RecordingSink()
        buffered = BufferedWriter(FanoutWriter([rec]), size=8)
        buffered.write("1234")
        assert rec.writes == []
        buffered.write("5678")
        assert rec.writes == ["12345678"]

    def test_empty_flush_writes_nothing(self):
        rec = RecordingSink()
        BufferedWriter(FanoutWriter([rec])).flush()
        assert rec.writes == []

    def test_flush_error_propagates(self):
        buffered = BufferedWriter(FanoutWriter([BrokenSink()]))
        buffered.write("x")
        with pytest.raises(FanoutWriteError):
            buffered.flush()

    def test_size_must_be_positive(self):
        with pytest.raises(ValueError):
            BufferedWriter(FanoutWriter([]), size=0)


@pytest.mark.slow
class TestConcurrentWrites:
    """Concurrent writers on one channel never interleave partial lines."""

    class SlowSink(Sink):
        """Writes one character at a time into a shared buffer."""

        def __init__(self):
            self.buf = io.StringIO()

        def write(self, text):
            for ch in text:
                self.buf.write(ch)
            return len(text)

    def test_lines_stay_whole(self):
        sink = self.SlowSink()
        writer = FanoutWriter([sink])

        def worker(n):
            for i in range(200):
                writer.write(f"worker-{n} line-{i} " + "x" * 40 + "\n")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = sink.buf.getvalue().splitlines()
        assert len(lines) == 8 * 200
        for line in lines:
            assert line.startswith("worker-")
            assert re.fullmatch(r"worker-\d line-\d+ x{40}", line)

    def test_buffered_lines_stay_whole(self):
        sink = self.SlowSink()
        buffered = BufferedWriter(FanoutWriter([sink]), size=256)

        def worker(n):
            for i in range(200):
                buffered.write(f"w{n}-{i}|\n")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        buffered.flush()

        lines = sink.buf.getvalue().splitlines()
        assert len(lines) == 4 * 200
        assert all(line.endswith("|") for line in lines)
