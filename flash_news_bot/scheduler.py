"""Randomized polling loop for Flash News Bot."""

import random
import signal
import time
from collections.abc import Callable
from typing import Any

from .config import ScheduleConfig
from .logging_config import create_execution_logger

IDLE = "idle"
RUNNING = "running"
ARMED = "armed"
STOPPED = "stopped"

# Upper bound on how long a stop request goes unnoticed while armed.
WAIT_SLICE_SECONDS = 0.2


class Scheduler:
    """Runs a job immediately, then again after each jittered delay."""

    def __init__(
        self,
        config: ScheduleConfig,
        job: Callable[[], Any],
        rng: random.Random | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the scheduler.

        Args:
            config: Interval bounds in milliseconds
            job: Callable run once per cycle
            rng: Random source for the delays
            execution_id: Execution ID for logging context
        """
        self.config = config
        self.job = job
        self.rng = rng or random.Random()
        self.logger = create_execution_logger("scheduler", execution_id)
        self.state = IDLE
        # plain attribute: signal handlers must not take locks
        self._stopped = False
        self._stop_signal: str | None = None

    @property
    def stopped(self) -> bool:
        return self._stopped

    def next_delay_ms(self) -> int:
        """Pick a delay uniformly from [min_interval_ms, max_interval_ms]."""
        return self.rng.randint(
            self.config.min_interval_ms, self.config.max_interval_ms
        )

    def run(self) -> None:
        """Run cycles until stop() is called."""
        self._run_job()

        while not self._stopped:
            delay_ms = self.next_delay_ms()
            self.state = ARMED
            self.logger.info(
                f"Next fetch in {round(delay_ms / 1000)} seconds", delay_ms=delay_ms
            )
            if self._wait(delay_ms / 1000):
                break
            self._run_job()

        self.state = STOPPED
        if self._stop_signal:
            self.logger.warning(
                "Termination signal received, stopping",
                signal_name=self._stop_signal,
            )
        self.logger.info("Scheduler stopped")

    def stop(self) -> None:
        """Stop arming new cycles; a running cycle is left to finish."""
        self._stopped = True

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to stop(). Must run on the main thread."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self._handle_signal)

    def _handle_signal(self, signum: int, frame: Any) -> None:
        if self._stop_signal is None:
            self._stop_signal = signal.Signals(signum).name
        self.stop()

    def _wait(self, seconds: float) -> bool:
        """Sleep for ``seconds`` in short slices; True if stopped meanwhile."""
        deadline = time.monotonic() + seconds
        while not self._stopped:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(WAIT_SLICE_SECONDS, remaining))
        return True

    def _run_job(self) -> None:
        self.state = RUNNING
        try:
            self.job()
        except Exception as e:
            self.logger.error(f"Cycle failed: {e}", error=str(e))
