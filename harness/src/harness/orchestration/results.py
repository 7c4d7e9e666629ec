from __future__ import annotations

from harness.attempts.controller import AttemptSnapshot, AttemptStatus
from harness.contracts.failure import FailureType, normalize_failure
from harness.contracts.run_result import AttemptArtifacts, AttemptResult

INCOMPLETE_REASON = "Attempt ended without a terminal outcome."


def result_from_snapshot(
    name: str,
    snapshot: AttemptSnapshot,
    artifacts: AttemptArtifacts,
) -> AttemptResult:
    if snapshot.status is AttemptStatus.PASS:
        return AttemptResult(
            name=name,
            status="pass",
            failure_type=FailureType.NONE,
            reason=snapshot.reason,
            duration_seconds=snapshot.elapsed_seconds,
            artifacts=artifacts,
        )

    reason = snapshot.reason if snapshot.is_completed else snapshot.reason or INCOMPLETE_REASON
    return failure_result(
        name,
        snapshot.failure_type,
        reason,
        snapshot.elapsed_seconds,
        artifacts,
    )


def failure_result(
    name: str,
    failure_type: FailureType | None,
    reason: str,
    duration_seconds: float,
    artifacts: AttemptArtifacts,
) -> AttemptResult:
    return AttemptResult(
        name=name,
        status="fail",
        failure_type=normalize_failure(failure_type),
        reason=reason or "",
        duration_seconds=max(duration_seconds, 0.0),
        artifacts=artifacts,
    )
