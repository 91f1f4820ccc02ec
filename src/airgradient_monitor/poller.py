import logging
import threading
import time
from typing import Optional, Protocol

from airgradient_monitor.aqi import compute_aqi
from airgradient_monitor.policies import ErrorPolicy, LogAndContinue, SchedulePolicy
from airgradient_monitor.sensing.airgradient import SensorReading

logger = logging.getLogger(__name__)


class ReadingSource(Protocol):
    def fetch_current(self) -> SensorReading: ...


class PointWriter(Protocol):
    def write_point(self, reading: SensorReading, aqi: int) -> None: ...
    def disconnect(self) -> None: ...


class PollLoop(threading.Thread):
    """Thread that fetches a reading, computes its AQI and writes it, forever.

    One cycle runs to completion before the next is scheduled. Failures are
    handed to the error policy and never stop the loop.
    """

    def __init__(
        self,
        source: ReadingSource,
        writer: PointWriter,
        schedule: SchedulePolicy,
        errors: Optional[ErrorPolicy] = None,
    ):
        super().__init__(name="poll-loop", daemon=True)
        self._source = source
        self._writer = writer
        self._schedule = schedule
        self._errors = errors or LogAndContinue()
        self._stop_event = threading.Event()
        self.cycles = 0

    def stop(self) -> None:
        """Signal the poll loop to stop."""
        logger.info("Stopping poll loop")
        self._stop_event.set()

    def run_cycle(self) -> bool:
        """Run a single fetch, compute and write cycle.

        Returns:
            bool: True if the point was written, False if the cycle failed
        """
        self.cycles += 1
        try:
            reading = self._source.fetch_current()
            aqi = compute_aqi(reading)
            self._writer.write_point(reading, aqi)
        except Exception as exc:
            self._errors.handle(exc, self._writer)
            return False

        logger.debug("Cycle %d complete: %s aqi=%d", self.cycles, reading.serialno, aqi)
        return True

    def run(self) -> None:
        logger.info("Starting poll loop")

        while not self._stop_event.is_set():
            started = time.monotonic()
            self.run_cycle()
            delay = self._schedule.next_delay(elapsed=time.monotonic() - started)
            if delay:
                logger.debug("Waiting %.2f seconds before next cycle", delay)
                self._stop_event.wait(delay)

        logger.info("Poll loop stopped")
