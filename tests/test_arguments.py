"""Unit tests for argument resolution."""

from __future__ import annotations

import pytest

from ec2_shutdown.arguments import IssueKind, ParseIssue, resolve_arguments
from ec2_shutdown.models import Action, Intent, SourceMode

CONFIG_IDS = ["i-1"]


def test_no_arguments_stops_config_instances():
    result = resolve_arguments([], CONFIG_IDS)

    assert result.intent == Intent(Action.STOP, SourceMode.CONFIG_FILE, ("i-1",))
    assert result.ok


def test_status_with_ids():
    result = resolve_arguments(["--status", "i-9"], CONFIG_IDS)

    assert result.intent == Intent(Action.STATUS, SourceMode.EXPLICIT_LIST, ("i-9",))


def test_status_without_ids_falls_back_to_config():
    result = resolve_arguments(["--status"], CONFIG_IDS)

    assert result.intent == Intent(Action.STATUS, SourceMode.CONFIG_FILE, ("i-1",))


def test_status_takes_priority_over_other_flags():
    result = resolve_arguments(["--all", "--status", "i-3"], CONFIG_IDS)

    assert result.intent.action is Action.STATUS
    assert result.intent.target_ids == ("i-3",)


def test_status_only_scans_tokens_after_flag():
    result = resolve_arguments(["i-2", "--status", "i-3"], CONFIG_IDS)

    assert result.intent.target_ids == ("i-3",)
    assert result.issues == (ParseIssue(IssueKind.IGNORED_IDENTIFIER, "i-2"),)


def test_all_flag_uses_config():
    result = resolve_arguments(["--all"], ["i-1", "i-2"])

    assert result.intent == Intent(Action.STOP, SourceMode.ALL_FROM_CONFIG, ("i-1", "i-2"))


def test_all_flag_ignores_explicit_ids():
    result = resolve_arguments(["--all", "i-5"], CONFIG_IDS)

    assert result.intent.target_ids == ("i-1",)
    assert [issue.kind for issue in result.issues] == [IssueKind.IGNORED_IDENTIFIER]


def test_instances_flag_collects_following_ids():
    result = resolve_arguments(["--instances", "i-5", "i-6"], CONFIG_IDS)

    assert result.intent == Intent(Action.STOP, SourceMode.EXPLICIT_LIST, ("i-5", "i-6"))


def test_instances_flag_without_ids_gives_empty_target():
    result = resolve_arguments(["--instances"], CONFIG_IDS)

    assert result.intent == Intent(Action.STOP, SourceMode.EXPLICIT_LIST, ())


def test_bare_ids_stop_those_instances():
    result = resolve_arguments(["i-7"], CONFIG_IDS)

    assert result.intent == Intent(Action.STOP, SourceMode.EXPLICIT_LIST, ("i-7",))


def test_unusable_tokens_fall_back_to_config():
    result = resolve_arguments(["hello", "--verbose"], CONFIG_IDS)

    assert result.intent == Intent(Action.STOP, SourceMode.CONFIG_FILE, ("i-1",))
    assert result.issues == (
        ParseIssue(IssueKind.UNEXPECTED_TOKEN, "hello"),
        ParseIssue(IssueKind.UNRECOGNIZED_FLAG, "--verbose"),
    )
    assert not result.ok


@pytest.mark.parametrize("token", ["i-", "i-abc$", "i-12_34"])
def test_malformed_ids_are_reported_not_used(token):
    result = resolve_arguments(["--instances", token, "i-8"], CONFIG_IDS)

    assert result.intent.target_ids == ("i-8",)
    assert result.issues == (ParseIssue(IssueKind.MALFORMED_IDENTIFIER, token),)


def test_issue_message_names_token():
    issue = ParseIssue(IssueKind.UNRECOGNIZED_FLAG, "--force")

    assert str(issue) == "Unrecognized flag: --force"


def test_order_of_ids_is_preserved():
    result = resolve_arguments(["i-c", "i-a", "i-b"], CONFIG_IDS)

    assert result.intent.target_ids == ("i-c", "i-a", "i-b")


def test_resolution_is_repeatable():
    args = ["--status", "junk", "i-4", "i-5"]

    assert resolve_arguments(args, CONFIG_IDS) == resolve_arguments(args, CONFIG_IDS)


def test_fallback_list_is_copied():
    fallback = ["i-1"]
    result = resolve_arguments([], fallback)
    fallback.append("i-2")

    assert result.intent.target_ids == ("i-1",)
