"""Domain models for builds and lifecycle events."""

from .models import BuildEvent, BuildPhase, BuildResult, PriorBuild

__all__ = ["BuildEvent", "BuildPhase", "BuildResult", "PriorBuild"]
