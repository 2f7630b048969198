"""
LocateW Query Pipeline
======================
Streams decoded entries from a producer thread to a matching consumer.

  producer thread                       consumer (caller's thread)
  ───────────────                       ──────────────────────────
  source() → decoder ── EntryChannel ──▶ classify → match → yield
                       (bounded FIFO)

Rules:
  - Exactly two units of work. The producer owns the source (and with it
    the database file handle); the consumer never touches it.
  - The channel preserves FIFO order, so results come out in database
    order (the order of the original directory walk).
  - Back-pressure: send() blocks while the channel is full, receive()
    blocks while it is empty.
  - Cancellation: the consumer closes the channel (limit reached, caller
    stopped iterating, sink failure). The producer sees the closed channel
    on its next send, closes its source and exits. Wasted decoding is
    bounded by the channel capacity, not by the database size.
  - A producer error travels through the channel and is re-raised in the
    consumer with its original type.
  - A send on a closed channel is expected once the limit is reached.
    Before that it means the consumer went away early; it is kept in
    shutdown_error and logged as a warning, or at debug level when run()'s
    sink raised.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

from query.matcher import PatternSet

logger = logging.getLogger(__name__)

# ─── Constants ──────────────────────────────────────────────────────────────

QUEUE_CAPACITY = 10_000
DIR_SUFFIX = "\\"
SEPARATORS = ("\\", "/")

_POLL_INTERVAL = 0.05      # seconds a blocked send waits before rechecking close
_JOIN_TIMEOUT = 5.0


class _EndOfStream:
    """Marker sent by the producer after the last entry."""

    def __repr__(self) -> str:
        return "<end of stream>"


_END = _EndOfStream()


@dataclass
class _ProducerFailure:
    """Wraps an exception raised on the producer thread."""
    error: Exception


# ─── Entry classification ───────────────────────────────────────────────────

def classify_entry(entry: str) -> Tuple[str, bool]:
    """Split an entry into (path without trailing separator, is_dir)."""
    if entry.endswith(DIR_SUFFIX):
        return entry[:-len(DIR_SUFFIX)], True
    return entry, False


def basename(path: str) -> str:
    """Substring after the last separator (the whole path if none)."""
    cut = max(path.rfind(sep) for sep in SEPARATORS)
    return path[cut + 1:]


# ─── Channel ────────────────────────────────────────────────────────────────

class EntryChannel:
    """
    Bounded, blocking FIFO between one producer and one consumer.

    queue.Queue cannot be closed, so closing is an Event checked by the
    producer between bounded waits.
    """

    def __init__(self, capacity: int = QUEUE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Channel capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, item: Any) -> bool:
        """
        Push an item, blocking while the channel is full.
        Returns False if the consumer has closed the channel.
        """
        while not self._closed.is_set():
            try:
                self._queue.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    def receive(self) -> Any:
        """Pop the next item, blocking while the channel is empty."""
        return self._queue.get()

    def close(self) -> None:
        """
        Consumer side: stop accepting items and discard what is queued,
        which also unblocks a producer waiting on a full channel.
        """
        self._closed.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break


# ─── Pipeline ───────────────────────────────────────────────────────────────

@dataclass
class QueryOptions:
    """How candidates are built and how many results are wanted."""
    match_all: bool = False         # every pattern must match
    basename: bool = False          # match the last path component only
    limit: Optional[int] = None     # stop after this many matches


EntrySource = Callable[[], Iterable[str]]


class QueryPipeline:
    """
    Producer/consumer query over a stream of database entries.

    Usage:
        pipeline = QueryPipeline(PatternSet(["bob"]), QueryOptions(limit=10))
        for path in pipeline.stream(lambda: iter_database(db_path)):
            print(path)
    """

    def __init__(self, patterns: PatternSet, options: Optional[QueryOptions] = None,
                 capacity: int = QUEUE_CAPACITY):
        self.patterns = patterns
        self.options = options or QueryOptions()
        self.capacity = capacity

        # Per-run state
        self.decoded = 0
        self.matched = 0
        self.shutdown_error: Optional[BaseException] = None
        self._limit_reached = False
        self._sink_failed = False

    # ─── Consumer ────────────────────────────────────────────────────

    def stream(self, source: EntrySource) -> Iterator[str]:
        """
        Yield matching paths (trailing separator stripped) in entry order.

        source is called on the producer thread, so whatever it opens
        belongs to that thread.
        """
        self.decoded = 0
        self.matched = 0
        self.shutdown_error = None
        self._limit_reached = False
        self._sink_failed = False

        limit = self.options.limit
        if limit is not None and limit <= 0:
            return

        channel = EntryChannel(self.capacity)
        producer = threading.Thread(
            target=self._produce, args=(source, channel),
            name="locate-producer", daemon=True,
        )
        producer.start()

        try:
            while True:
                item = channel.receive()
                if item is _END:
                    break
                if isinstance(item, _ProducerFailure):
                    raise item.error

                candidate = self._candidate(item)
                if candidate is None:
                    continue
                path, text = candidate
                if not self.patterns.matches(text, self.options.match_all):
                    continue

                self.matched += 1
                if limit is not None and self.matched >= limit:
                    self._limit_reached = True
                yield path
                if self._limit_reached:
                    break
        finally:
            channel.close()
            producer.join(timeout=_JOIN_TIMEOUT)
            if producer.is_alive():
                logger.warning("Producer thread still running after %.1fs", _JOIN_TIMEOUT)

    def run(self, source: EntrySource,
            sink: Optional[Callable[[str], None]] = None) -> int:
        """Drive stream(), passing each match to sink. Returns the match count."""
        matches = self.stream(source)
        count = 0
        try:
            for path in matches:
                if sink is not None:
                    try:
                        sink(path)
                    except BaseException:
                        self._sink_failed = True
                        raise
                count += 1
        finally:
            matches.close()
        return count

    def _candidate(self, entry: str) -> Optional[Tuple[str, str]]:
        """(output path, text to match), or None when the entry is skipped."""
        path, is_dir = classify_entry(entry)
        if self.options.basename:
            if is_dir:
                return None
            return path, basename(path)
        return path, path

    # ─── Producer ────────────────────────────────────────────────────

    def _produce(self, source: EntrySource, channel: EntryChannel) -> None:
        entries = None
        try:
            entries = source()
            for entry in entries:
                self.decoded += 1
                if not channel.send(entry):
                    self._on_closed()
                    return
            if not channel.send(_END):
                self._on_closed()
        except Exception as e:
            logger.debug("Producer failed after %d entries: %s", self.decoded, e)
            if not channel.send(_ProducerFailure(e)):
                logger.error("Producer error after consumer stopped: %s", e)
        finally:
            close = getattr(entries, "close", None)
            if close is not None:
                close()

    def _on_closed(self) -> None:
        if self._limit_reached:
            logger.debug("Result limit reached; producer stopped after %d entries",
                         self.decoded)
            return
        self.shutdown_error = BrokenPipeError(
            "query consumer stopped before the result limit was reached")
        # Sink errors propagate to the caller of run()
        level = logging.DEBUG if self._sink_failed else logging.WARNING
        logger.log(level, "Producer stopped after %d entries: %s",
                   self.decoded, self.shutdown_error)
