"""Subject and message rendering for build notifications.

Templates use ``${NAME}`` placeholders (the bare ``$NAME`` form is accepted
as well). Rendering is best effort: unknown variables are left untouched and
a failure to compute the variables returns the template unchanged.
"""

import logging
import re
from typing import Dict, Mapping, Optional
from urllib.parse import quote

from snsnotify.config.models import DEFAULT_MESSAGE_TEMPLATE
from snsnotify.domain.models import BuildEvent

from .models import RenderError

logger = logging.getLogger(__name__)

MAX_SUBJECT_LENGTH = 100
UNSET_ROOT_URL_PLACEHOLDER = "(Global build server url not set)"

_VARIABLE_PATTERN = re.compile(r"\$(?:\{(?P<braced>[A-Za-z0-9_.]+)\}|(?P<bare>[A-Za-z0-9_]+))")
# Reserved characters that must survive URL encoding of BUILD_URL
_URL_SAFE_CHARS = "/:?#[]@!$&'()*+,;=%"


def substitute(template: str, variables: Mapping[str, str]) -> str:
    """Replace known ``${NAME}`` / ``$NAME`` references; leave the rest as-is."""

    def _replace(match: "re.Match[str]") -> str:
        name = match.group("braced") or match.group("bare")
        if name in variables:
            return variables[name]
        return match.group(0)

    return _VARIABLE_PATTERN.sub(_replace, template)


def truncate(text: str, length: int = MAX_SUBJECT_LENGTH) -> str:
    """Hard cut at length characters, no ellipsis."""
    return text[:length]


def build_url(root_url: Optional[str], relative_url: str) -> str:
    """Absolute, URL-encoded link to a build.

    Args:
        root_url: Build server root URL, or None when it is not configured
        relative_url: Build URL relative to the root, e.g. "job/MyJob/42/"

    Returns:
        "<root>/<relative>" encoded; a placeholder stands in for an unset root
    """
    base = root_url.rstrip("/") if root_url else UNSET_ROOT_URL_PLACEHOLDER
    return quote(f"{base}/{relative_url.lstrip('/')}", safe=_URL_SAFE_CHARS)


class TemplateRenderer:
    """Renders notification subjects and messages for build events."""

    def __init__(self, max_subject_length: int = MAX_SUBJECT_LENGTH):
        self.max_subject_length = max_subject_length

    def synthesized_variables(self, event: BuildEvent) -> Dict[str, str]:
        """Variables derived from the event itself.

        Returns:
            Dictionary containing:
            - BUILD_PHASE: phase name
            - BUILD_RESULT: result name, or STARTED
            - BUILD_DURATION: duration in milliseconds
            - BUILD_ARTIFACT_PATHS: artifact paths, one per line
        """
        return {
            "BUILD_PHASE": event.phase.value,
            "BUILD_RESULT": event.result_label,
            "BUILD_DURATION": str(event.duration_millis),
            "BUILD_ARTIFACT_PATHS": "\n".join(event.artifact_paths),
        }

    def environment_variables(
        self, event: BuildEvent, extra_vars: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        """Variables for the second substitution pass.

        extra_vars supply defaults, the build environment overrides them and
        the synthesized BUILD_* keys override both.

        Raises:
            RenderError: If the variables cannot be computed
        """
        try:
            variables: Dict[str, str] = dict(extra_vars or {})
            variables.update(event.environment)
            variables.update(self.synthesized_variables(event))
        except Exception as e:
            raise RenderError(f"Unable to compute build environment: {e}") from e
        return variables

    def render(
        self,
        template: str,
        event: BuildEvent,
        extra_vars: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Substitute build variables, then environment variables, into template.

        Never raises: on failure the template is returned unrendered.
        """
        try:
            variables = self.environment_variables(event, extra_vars)
            rendered = substitute(template, event.build_variables)
            return substitute(rendered, variables)
        except Exception as e:
            logger.warning(
                f"Unable to replace variables in {template!r}: {e}",
                extra={"event": "notification.render.failure"},
            )
            return template

    def default_subject(self, event: BuildEvent) -> str:
        """``Build <RESULT>: <display name>``, truncated."""
        return truncate(
            f"Build {event.result_label}: {event.display_name}", self.max_subject_length
        )

    def render_subject(
        self,
        template: Optional[str],
        event: BuildEvent,
        extra_vars: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Subject line: the rendered template, or the default when none is set.

        SNS subjects are single-line, so line breaks become spaces.
        """
        if not template or not template.strip():
            return self.default_subject(event)

        subject = self.render(template, event, extra_vars)
        subject = subject.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
        return truncate(subject, self.max_subject_length)

    def render_message(
        self,
        template: Optional[str],
        default_template: Optional[str],
        event: BuildEvent,
        extra_vars: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Message body from the job template, the global default, or ``${BUILD_URL}``."""
        if template and template.strip():
            chosen = template
        elif default_template and default_template.strip():
            chosen = default_template
        else:
            chosen = DEFAULT_MESSAGE_TEMPLATE
        return self.render(chosen, event, extra_vars)
