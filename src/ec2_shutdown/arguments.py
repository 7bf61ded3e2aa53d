"""Argument resolution for EC2 Shutdown Manager.

Turns the raw invocation tokens into an :class:`Intent`. Resolution never
raises: tokens that are not recognized flags or usable instance ids are
collected as :class:`ParseIssue` entries so the caller can decide whether to
warn about them or reject the invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .models import INSTANCE_ID_PREFIX, Action, Intent, SourceMode, is_instance_id

STATUS_FLAG = "--status"
ALL_FLAG = "--all"
INSTANCES_FLAG = "--instances"

RECOGNIZED_FLAGS = (STATUS_FLAG, ALL_FLAG, INSTANCES_FLAG)


class IssueKind(str, Enum):
    UNRECOGNIZED_FLAG = "unrecognized-flag"
    MALFORMED_IDENTIFIER = "malformed-identifier"
    UNEXPECTED_TOKEN = "unexpected-token"
    IGNORED_IDENTIFIER = "ignored-identifier"


_ISSUE_MESSAGES = {
    IssueKind.UNRECOGNIZED_FLAG: "Unrecognized flag",
    IssueKind.MALFORMED_IDENTIFIER: "Malformed instance id",
    IssueKind.UNEXPECTED_TOKEN: "Unexpected argument",
    IssueKind.IGNORED_IDENTIFIER: "Instance id ignored for this action",
}


@dataclass(frozen=True)
class ParseIssue:
    """A token that did not contribute to the resolved intent."""

    kind: IssueKind
    token: str

    def __str__(self) -> str:
        return f"{_ISSUE_MESSAGES[self.kind]}: {self.token}"


@dataclass(frozen=True)
class ParseResult:
    intent: Intent
    issues: tuple[ParseIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues


def _collect_ids(tokens: Sequence[str]) -> tuple[str, ...]:
    return tuple(token for token in tokens if is_instance_id(token))


def _find_issues(tokens: Sequence[str], scan_start: int | None) -> tuple[ParseIssue, ...]:
    """Classify every token that is neither a flag nor a used instance id.

    ``scan_start`` is the index from which instance ids were collected, or
    None when the action takes its ids from the configuration file.
    """
    issues: list[ParseIssue] = []
    for index, token in enumerate(tokens):
        if token in RECOGNIZED_FLAGS:
            continue
        if is_instance_id(token):
            if scan_start is None or index < scan_start:
                issues.append(ParseIssue(IssueKind.IGNORED_IDENTIFIER, token))
        elif token.startswith(INSTANCE_ID_PREFIX):
            issues.append(ParseIssue(IssueKind.MALFORMED_IDENTIFIER, token))
        elif token.startswith("-"):
            issues.append(ParseIssue(IssueKind.UNRECOGNIZED_FLAG, token))
        else:
            issues.append(ParseIssue(IssueKind.UNEXPECTED_TOKEN, token))
    return tuple(issues)


def resolve_arguments(args: Sequence[str], fallback_ids: Sequence[str]) -> ParseResult:
    """Resolve invocation tokens into an intent.

    Args:
        args: Tokens following the program name, flags included
        fallback_ids: Instance ids from the configuration file

    Returns:
        ParseResult with the intent and any tokens that were not used
    """
    tokens = list(args)
    fallback = tuple(fallback_ids)

    if not tokens:
        return ParseResult(Intent(Action.STOP, SourceMode.CONFIG_FILE, fallback))

    scan_start: int | None
    if STATUS_FLAG in tokens:
        scan_start = tokens.index(STATUS_FLAG) + 1
        ids = _collect_ids(tokens[scan_start:])
        if ids:
            intent = Intent(Action.STATUS, SourceMode.EXPLICIT_LIST, ids)
        else:
            intent = Intent(Action.STATUS, SourceMode.CONFIG_FILE, fallback)
    elif ALL_FLAG in tokens:
        scan_start = None
        intent = Intent(Action.STOP, SourceMode.ALL_FROM_CONFIG, fallback)
    elif INSTANCES_FLAG in tokens:
        scan_start = tokens.index(INSTANCES_FLAG) + 1
        intent = Intent(Action.STOP, SourceMode.EXPLICIT_LIST, _collect_ids(tokens[scan_start:]))
    else:
        scan_start = 0
        ids = _collect_ids(tokens)
        if ids:
            intent = Intent(Action.STOP, SourceMode.EXPLICIT_LIST, ids)
        else:
            intent = Intent(Action.STOP, SourceMode.CONFIG_FILE, fallback)

    return ParseResult(intent, _find_issues(tokens, scan_start))
