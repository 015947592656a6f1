from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from roomgraph.common.errors import StorageError
from roomgraph.persist.files import TimestampRecord

logger = logging.getLogger(__name__)


def format_timestamp(moment: datetime) -> str:
    """Format like ``1:03pm, Tuesday, September 13, 2016``."""
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{hour}:{moment:%M}{meridiem}, {moment:%A}, {moment:%B} {moment:%d}, {moment:%Y}"


class TimeQueryTask:
    """One-shot rendezvous between the prompt loop and a background writer.

    ``arm`` starts a thread that blocks on a gate. ``request`` opens the gate,
    joins the thread (so the write happens before the read), reads the record
    back and re-arms. At most one background thread exists at a time.
    """

    def __init__(
        self,
        record: TimestampRecord,
        now: Callable[[], datetime] = datetime.now,
        formatter: Callable[[datetime], str] = format_timestamp,
    ) -> None:
        self.record = record
        self._now = now
        self._formatter = formatter
        self._gate: threading.Event | None = None
        self._holder: dict[str, object] = {}
        self._thread: threading.Thread | None = None

    @property
    def armed(self) -> bool:
        return self._thread is not None

    def arm(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Time query already armed")
        gate = threading.Event()
        holder: dict[str, object] = {"error": None, "cancelled": False}
        thread = threading.Thread(
            target=self._run, args=(gate, holder), name="time-query", daemon=True
        )
        self._gate = gate
        self._holder = holder
        self._thread = thread
        thread.start()

    def _run(self, gate: threading.Event, holder: dict[str, object]) -> None:
        gate.wait()
        if holder["cancelled"]:
            return
        try:
            self.record.write(self._formatter(self._now()))
        except Exception as exc:
            holder["error"] = exc
            logger.exception("Writing time record %s failed", self.record.path)

    def request(self) -> str:
        """Trigger the armed task, wait for it to finish, and return the record."""
        if self._thread is None or self._gate is None:
            self.arm()
        if self._thread is None or self._gate is None:
            raise RuntimeError("Time query could not be armed")
        thread, gate, holder = self._thread, self._gate, self._holder
        try:
            gate.set()
            thread.join()
            error = holder["error"]
            if error is not None:
                raise StorageError(f"Unable to write {self.record.path}: {error}") from error
            try:
                return self.record.read()
            except (OSError, UnicodeDecodeError) as exc:
                raise StorageError(f"Unable to read {self.record.path}: {exc}") from exc
        finally:
            self._thread = None
            self._gate = None
            self.arm()

    def close(self) -> None:
        """Release an armed, untriggered thread without writing."""
        thread, gate = self._thread, self._gate
        if thread is None or gate is None:
            return
        self._holder["cancelled"] = True
        gate.set()
        thread.join()
        self._thread = None
        self._gate = None
