from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from harness.contracts.failure import FailureType, normalize_failure


class AttemptStatus(StrEnum):
    UNSET = ""
    PASS = "pass"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class AttemptSnapshot:
    """Immutable execution state used by result assembly."""

    is_completed: bool
    status: AttemptStatus
    failure_type: FailureType
    reason: str
    elapsed_seconds: float

    @classmethod
    def from_controller(cls, controller: AttemptController | None) -> AttemptSnapshot:
        if controller is None:
            return cls.fail(FailureType.ERROR, "Attempt controller is missing.", 0.0)

        status = controller.status or AttemptStatus.FAIL
        if status is AttemptStatus.PASS:
            failure_type = FailureType.NONE
        else:
            failure_type = normalize_failure(controller.failure_type)
        return cls(
            is_completed=controller.is_completed,
            status=status,
            failure_type=failure_type,
            reason=controller.reason,
            elapsed_seconds=max(controller.elapsed_seconds, 0.0),
        )

    @classmethod
    def fail(cls, failure_type: FailureType, reason: str, elapsed_seconds: float) -> AttemptSnapshot:
        return cls(
            is_completed=True,
            status=AttemptStatus.FAIL,
            failure_type=normalize_failure(failure_type),
            reason=reason or "",
            elapsed_seconds=max(elapsed_seconds, 0.0),
        )


class AttemptController:
    """
    Timer and status machine for a single attempt.

    NotStarted -> Running -> Completed. Completion happens exactly once;
    try_complete_* refuse to act unless the attempt is running, which keeps a
    finish-line check and a timeout check in the same tick from both
    completing it.
    """

    def __init__(self, time_limit_seconds: float) -> None:
        self.time_limit_seconds = max(float(time_limit_seconds), 0.0)
        self.reset()

    @property
    def is_running(self) -> bool:
        return self.is_started and not self.is_completed

    @property
    def is_time_limit_exceeded(self) -> bool:
        return self.is_running and self.elapsed_seconds >= self.time_limit_seconds

    def reset(self) -> None:
        self.is_started = False
        self.is_completed = False
        self.elapsed_seconds = 0.0
        self.completed_at: float | None = None
        self.status = AttemptStatus.UNSET
        self.failure_type = FailureType.NONE
        self.reason = ""

    def start(self) -> None:
        if self.is_started:
            return
        self.reset()
        self.is_started = True

    def tick(self, delta_seconds: float) -> None:
        if not self.is_running:
            return
        self.elapsed_seconds += max(delta_seconds, 0.0)

    def try_complete_pass(self, reason: str) -> bool:
        return self._try_complete(AttemptStatus.PASS, FailureType.NONE, reason)

    def try_complete_fail(self, failure_type: FailureType, reason: str) -> bool:
        return self._try_complete(AttemptStatus.FAIL, normalize_failure(failure_type), reason)

    def force_fail(self, failure_type: FailureType, reason: str) -> bool:
        """
        Complete the attempt as failed, starting it first if needed.

        Used for setup and mid-run failures that must still be reported
        through the result schema. An already completed attempt is left as is.
        """
        if self.is_completed:
            return False
        if not self.is_started:
            self.is_started = True
        self._complete(AttemptStatus.FAIL, normalize_failure(failure_type), reason)
        return True

    def snapshot(self) -> AttemptSnapshot:
        return AttemptSnapshot.from_controller(self)

    def _try_complete(self, status: AttemptStatus, failure_type: FailureType, reason: str) -> bool:
        if not self.is_running:
            return False
        self._complete(status, failure_type, reason)
        return True

    def _complete(self, status: AttemptStatus, failure_type: FailureType, reason: str) -> None:
        self.status = status
        self.failure_type = failure_type
        self.reason = reason or ""
        self.completed_at = self.elapsed_seconds
        self.is_completed = True
