"""Decides whether a lifecycle event should produce a notification.

By default a success that follows another success is suppressed, so
subscribers hear about state changes rather than every green build.
"""

from typing import Iterable, Optional

from snsnotify.domain.models import BuildPhase, BuildResult, PriorBuild

# Results that say nothing about the state of the job
_IGNORED_RESULTS = (BuildResult.ABORTED, BuildResult.NOT_BUILT)


def find_previous_result(prior_builds: Iterable[PriorBuild]) -> Optional[BuildResult]:
    """Result the current build should be compared against.

    Walks the history newest-first, skipping aborted and not-built builds.
    A build that is still running means there is nothing settled to compare
    with, so the walk stops and behaves as if this were the first build.

    Args:
        prior_builds: Earlier builds of the job, most recent first

    Returns:
        The result of the nearest relevant finished build, or None
    """
    for build in prior_builds:
        if build.building:
            return None
        if build.result in _IGNORED_RESULTS:
            continue
        return build.result
    return None


def is_consecutive_success(
    current_result: Optional[BuildResult], previous_result: Optional[BuildResult]
) -> bool:
    """True when this build and the one before it both succeeded."""
    return current_result == BuildResult.SUCCESS and previous_result == BuildResult.SUCCESS


def should_notify(
    phase: BuildPhase,
    notify_on_consecutive_successes: bool,
    current_result: Optional[BuildResult],
    previous_result: Optional[BuildResult],
    send_on_start: bool,
) -> bool:
    """Whether a notification should be sent for this phase and result history."""
    if phase == BuildPhase.STARTED:
        return send_on_start

    return notify_on_consecutive_successes or not is_consecutive_success(
        current_result, previous_result
    )
