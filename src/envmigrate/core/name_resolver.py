"""Environment name resolution from branch names and token patterns.

A pattern holds bracketed tokens that are replaced at resolution time:

    GH-[branch]                     -> GH-feature-login
    master-[YYYY]-[MM]-[DD]-[mmss]  -> master-2024-05-17-0412

A bracket may contain a single token or a run of date tokens ([mmss],
[YYYYMMDD]). Anything else in brackets is left untouched. Every date token
is rendered in UTC from a single timestamp taken once per call.
"""

import re
from collections.abc import Callable
from datetime import UTC, datetime

from ..errors import NameResolutionError
from ..models import BranchNames, EnvironmentNames

BRANCH_TOKEN = "branch"

DATE_TOKENS: dict[str, Callable[[datetime], str]] = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "MM": lambda d: f"{d.month:02d}",
    "DD": lambda d: f"{d.day:02d}",
    "hh": lambda d: f"{d.hour:02d}",
    "mm": lambda d: f"{d.minute:02d}",
    "ss": lambda d: f"{d.second:02d}",
}

BRACKET_PATTERN = re.compile(r"\[([A-Za-z]+)\]")
# Longest tokens first so YYYY is not read as YY YY
_DATE_TOKEN = "|".join(sorted(DATE_TOKENS, key=len, reverse=True))
DATE_RUN_PATTERN = re.compile(rf"(?:{_DATE_TOKEN})+")
DATE_TOKEN_PATTERN = re.compile(_DATE_TOKEN)

_UNSAFE_CHARS = re.compile(r"[/_.]")


def sanitize(branch_name: str) -> str:
    """Convert a branch name to a valid environment id fragment.

    Example:
        >>> sanitize("feature/foo_bar.baz")
        'feature-foo-bar-baz'
    """
    return _UNSAFE_CHARS.sub("-", branch_name)


def environment_names(branch_names: BranchNames) -> EnvironmentNames:
    """Sanitize base and head refs for use in environment ids."""
    return EnvironmentNames(
        base=sanitize(branch_names.base_ref),
        head=sanitize(branch_names.head_ref) if branch_names.head_ref else None,
    )


def _render_dates(tokens: str, now: datetime) -> str:
    return "".join(DATE_TOKENS[token](now) for token in DATE_TOKEN_PATTERN.findall(tokens))


def resolve(pattern: str, branch: str | None = None, now: datetime | None = None) -> str:
    """Resolve a name pattern into a concrete name.

    Args:
        pattern: Pattern containing bracketed tokens
        branch: Branch name substituted for [branch]
        now: Timestamp for date tokens (defaults to the current UTC time)

    Returns:
        The resolved name

    Raises:
        NameResolutionError: If the pattern uses [branch] but no branch is given
    """
    now = (now or datetime.now(UTC)).astimezone(UTC)

    def replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token == BRANCH_TOKEN:
            if not branch:
                raise NameResolutionError(
                    f"Pattern {pattern!r} uses [{BRANCH_TOKEN}] but no branch name is available"
                )
            return sanitize(branch)
        if DATE_RUN_PATTERN.fullmatch(token):
            return _render_dates(token, now)
        return match.group(0)

    return BRACKET_PATTERN.sub(replace, pattern)
