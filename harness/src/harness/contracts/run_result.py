from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from harness.contracts.failure import FailureType

ResultStatus = Literal["pass", "fail"]


@dataclass(frozen=True, slots=True)
class AttemptArtifacts:
    """Artifact paths relative to the project root."""

    request: str = ""
    result: str = ""
    video: str = ""


@dataclass(frozen=True, slots=True)
class AttemptResult:
    """
    Public attempt outcome contract.

    Keep this stable: result.json consumers depend on the serialized names.
    """

    name: str
    status: ResultStatus
    failure_type: FailureType
    reason: str
    duration_seconds: float
    artifacts: AttemptArtifacts = field(default_factory=AttemptArtifacts)

    @property
    def passed(self) -> bool:
        return self.status == "pass"

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "failureType": str(self.failure_type),
            "reason": self.reason,
            "durationSeconds": self.duration_seconds,
            "artifacts": {
                "request": self.artifacts.request,
                "result": self.artifacts.result,
                "video": self.artifacts.video,
            },
        }
