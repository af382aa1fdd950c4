"""Core domain values describing builds and their lifecycle.

- BuildPhase: lifecycle stage at which a notification may fire
- BuildResult: outcome of a completed build
- PriorBuild: one entry of a build's history, as supplied by the host
- BuildEvent: one lifecycle occurrence handed to the notifier
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class BuildPhase(str, Enum):
    """Lifecycle stage of a build."""

    STARTED = "STARTED"
    COMPLETED = "COMPLETED"


class BuildResult(str, Enum):
    """Outcome of a build, from best to worst."""

    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"


class PriorBuild(BaseModel):
    """An earlier build of the same job.

    Hosts supply these newest-first so the notification policy can find
    the result the current build should be compared against.
    """

    result: Optional[BuildResult] = Field(None, description="Result, absent while building")
    building: bool = Field(False, description="Whether the build is still running")

    model_config = {"frozen": True}


class BuildEvent(BaseModel):
    """A single lifecycle occurrence of a build.

    Attributes:
        phase: STARTED or COMPLETED
        result: Build result; must be absent for STARTED events
        job_name: Name of the job the build belongs to
        display_name: Full display name, e.g. "MyJob #42"
        url: Build URL relative to the server root, e.g. "job/MyJob/42/"
        duration_millis: Build duration so far in milliseconds
        artifact_paths: Archived artifact display paths in archive order
        environment: Build environment variables
        build_variables: Job parameters and build-scoped variables
        previous_result: Result of the most recent finished, relevant prior build
    """

    phase: BuildPhase
    result: Optional[BuildResult] = None
    job_name: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    url: str = ""
    duration_millis: int = Field(0, ge=0)
    artifact_paths: List[str] = Field(default_factory=list)
    environment: Dict[str, str] = Field(default_factory=dict)
    build_variables: Dict[str, str] = Field(default_factory=dict)
    previous_result: Optional[BuildResult] = None

    model_config = {"frozen": True}

    @field_validator("job_name", "display_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        """Strip whitespace from name fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @model_validator(mode="after")
    def started_has_no_result(self):
        """A build that has only just started cannot have a result yet."""
        if self.phase == BuildPhase.STARTED and self.result is not None:
            raise ValueError(
                f"STARTED events must not carry a result (got {self.result.value})"
            )
        return self

    @property
    def result_label(self) -> str:
        """Result name, or "STARTED" for started builds and missing results."""
        if self.phase == BuildPhase.STARTED or self.result is None:
            return "STARTED"
        return self.result.value
