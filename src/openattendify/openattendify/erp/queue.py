from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..core.constants import DEFAULT_SYNC_QUEUE_MAXSIZE
from ..core.enums import SyncDirection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceSyncJob:
    attendance_id: int
    employee_id: int
    direction: SyncDirection
    occurred_at: datetime


class AttendanceSyncQueue:
    """
    Background queue so the ERP round-trips never delay a check-in/check-out response.
    One attempt per job; the handler records the outcome on the attendance row.
    """

    def __init__(
        self,
        handler: Callable[[AttendanceSyncJob], None],
        maxsize: int = DEFAULT_SYNC_QUEUE_MAXSIZE,
        *,
        autostart: bool = True,
        on_error: Optional[Callable[[Exception, AttendanceSyncJob], None]] = None,
    ):
        self.handler = handler
        self.q: "queue.Queue[AttendanceSyncJob]" = queue.Queue(maxsize=maxsize)
        self.on_error = on_error

        self._stop = threading.Event()
        self._closed = threading.Event()
        self._t: Optional[threading.Thread] = None
        if autostart:
            self.start()

    def start(self) -> None:
        if self._t is not None and self._t.is_alive():
            return
        self._stop.clear()
        self._t = threading.Thread(target=self._run, name="erp-attendance-sync", daemon=True)
        self._t.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._t is not None:
            self._t.join(timeout)
            self._t = None

    def enqueue(self, job: AttendanceSyncJob) -> bool:
        if self._closed.is_set():
            return False
        try:
            self.q.put_nowait(job)
            return True
        except queue.Full:
            return False

    def shutdown(self, *, drain_timeout_s: float = 5.0) -> int:
        """Stop accepting jobs, let the worker finish what is queued, then stop it.

        Returns the number of jobs left unsent when the deadline passed.
        """
        self._closed.set()

        if self._t is not None and self._t.is_alive():
            end = time.time() + float(max(0.0, drain_timeout_s))
            while time.time() < end and self.q.unfinished_tasks:
                time.sleep(0.02)
        self.stop(timeout=drain_timeout_s)

        pending = self.q.qsize()
        if pending:
            logger.warning(f"ERP sync queue stopped with {pending} job(s) not sent")
        return pending

    def join(self) -> None:
        """Block until every enqueued job was handled."""
        self.q.join()

    def drain(self) -> int:
        """Handle all pending jobs on the calling thread (scripts and tests)."""
        handled = 0
        while True:
            try:
                job = self.q.get_nowait()
            except queue.Empty:
                return handled
            self._process(job)
            handled += 1

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                job = self.q.get(timeout=0.5)
            except queue.Empty:
                continue
            self._process(job)

    def _process(self, job: AttendanceSyncJob) -> None:
        try:
            self.handler(job)
        except Exception as e:
            logger.exception(f"ERP sync job failed for attendance {job.attendance_id}")
            if self.on_error:
                self.on_error(e, job)
        finally:
            self.q.task_done()
