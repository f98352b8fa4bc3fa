"""Drift-corrected probe scheduler.

Launch targets are anchored to the start instant (start + n * cadence), so a
late wake-up or a slow probe delays that one launch but never shifts the ones
after it. Probes are fire-and-forget: the loop never waits for one to finish.
Unless max_in_flight is set, nothing bounds how many probes run at once; if
probes keep outlasting the cadence they pile up.
"""

import sys
import threading
import time
from enum import Enum
from typing import Callable, Optional

class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"

class CancellationToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

def spawn_thread(target: Callable[[], None]) -> None:
    # Not a daemon: an in-flight probe may still finish and write after the loop exits
    threading.Thread(target=target, name="probe", daemon=False).start()

class ProbeScheduler:
    def __init__(
        self,
        task: Callable[[], None],
        cadence: float,
        sleep_precision: float = 0.010,
        max_sleep_slice: float = 0.050,
        max_in_flight: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        spawn: Callable[[Callable[[], None]], None] = spawn_thread,
    ):
        if cadence <= 0:
            raise ValueError(f"cadence must be positive, got {cadence}")
        self.task = task
        self.cadence = cadence
        self.sleep_precision = sleep_precision
        self.max_sleep_slice = max_sleep_slice
        self.max_in_flight = max_in_flight
        self.clock = clock
        self.sleep = sleep
        self.spawn = spawn

        self.state = SchedulerState.IDLE
        self.start: Optional[float] = None
        self.next_launch: Optional[float] = None
        self.launch_count = 0
        self.skipped_launches = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def run(self, token: CancellationToken) -> None:
        """Launch probes on schedule until the token is cancelled."""
        if self.state is not SchedulerState.IDLE:
            raise RuntimeError(f"scheduler cannot run from state {self.state.value}")
        self.state = SchedulerState.RUNNING
        self.start = self.clock()
        self.next_launch = self.start
        try:
            while not token.cancelled:
                remaining = self.next_launch - self.clock()
                if remaining > self.sleep_precision:
                    self.sleep(min(remaining - self.sleep_precision, self.max_sleep_slice))
                    continue
                while self.next_launch - self.clock() > 0:
                    pass
                self._launch()
                self.launch_count += 1
                self.next_launch = self.start + self.launch_count * self.cadence
            self.state = SchedulerState.STOPPING
        finally:
            self.state = SchedulerState.STOPPED

    def _launch(self) -> None:
        with self._lock:
            if self.max_in_flight is not None and self._in_flight >= self.max_in_flight:
                self.skipped_launches += 1
                print(f"⚠️  {self._in_flight} probes still running, skipping this launch", file=sys.stderr)
                return
            self._in_flight += 1
        try:
            self.spawn(self._run_task)
        except Exception as e:
            # e.g. the OS refused another thread; the schedule carries on
            self._task_done()
            with self._lock:
                self.skipped_launches += 1
            print(f"❌ Could not start probe: {e}", file=sys.stderr)

    def _run_task(self) -> None:
        try:
            self.task()
        except Exception as e:
            print(f"❌ Probe failed: {e}", file=sys.stderr)
        finally:
            self._task_done()

    def _task_done(self) -> None:
        with self._lock:
            self._in_flight -= 1
