import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SchedulePolicy(Protocol):
    """Protocol for deciding how long to wait between poll cycles."""

    def next_delay(self, *, elapsed: float) -> float: ...


class FixedDelay(SchedulePolicy):
    """Wait the full delay after each cycle, so slow cycles push later ones out."""

    def __init__(self, delay_s: float):
        self._delay = delay_s

    def next_delay(self, *, elapsed: float) -> float:
        return self._delay


class FixedRate(SchedulePolicy):
    """Start cycles on a fixed cadence. An overrunning cycle is followed immediately."""

    def __init__(self, interval_s: float):
        self._interval = interval_s

    def next_delay(self, *, elapsed: float) -> float:
        return max(0.0, self._interval - elapsed)


class Disconnectable(Protocol):
    def disconnect(self) -> None: ...


@runtime_checkable
class ErrorPolicy(Protocol):
    """Protocol for handling an exception raised by a poll cycle."""

    def handle(self, exc: Exception, writer: Disconnectable) -> None: ...


class LogAndContinue(ErrorPolicy):
    """Log the failure, reset the writer connection and keep polling.

    Retryable and permanent errors are treated alike, so a misconfigured
    database fails every cycle without escalation.
    """

    def __init__(self) -> None:
        self.failures = 0

    def handle(self, exc: Exception, writer: Disconnectable) -> None:
        self.failures += 1
        logger.error(
            "Poll cycle failed (%d failures so far): %s", self.failures, exc, exc_info=exc
        )
        writer.disconnect()
