"""Status and stop workflows for EC2 Shutdown Manager.

The orchestrator describes the target instances, reports what it sees and,
for the stop workflow, stops only the instances observed in the ``running``
state. Describe failures are reported and end the workflow; stop failures
propagate to the caller, which decides the process exit code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from .exceptions import DescribeError
from .models import Action, InstanceRecord, Intent, StateTransition
from .reporting import ConsoleReporter

logger = logging.getLogger(__name__)


class InstanceDirectory(Protocol):
    def describe(self, instance_ids: Sequence[str]) -> list[InstanceRecord]: ...

    def stop(self, instance_ids: Sequence[str]) -> list[StateTransition]: ...


class Outcome(str, Enum):
    NO_TARGETS = "no-targets"
    DESCRIBE_FAILED = "describe-failed"
    NOT_FOUND = "not-found"
    REPORTED = "reported"
    NOTHING_TO_DO = "nothing-to-do"
    STOPPED = "stopped"


@dataclass
class WorkflowResult:
    outcome: Outcome
    records: list[InstanceRecord] = field(default_factory=list)
    transitions: list[StateTransition] = field(default_factory=list)


def running_instance_ids(records: Sequence[InstanceRecord]) -> list[str]:
    """Ids of the records observed as running, in record order, without duplicates."""
    return list(dict.fromkeys(record.instance_id for record in records if record.is_running))


class ShutdownWorkflow:
    """Runs the status and stop workflows against an instance directory."""

    def __init__(self, client: InstanceDirectory, reporter: ConsoleReporter):
        self.client = client
        self.reporter = reporter

    def run(self, intent: Intent) -> WorkflowResult:
        """Dispatch ``intent`` to the matching workflow."""
        from_config = intent.source_mode.uses_config

        if intent.action is Action.STATUS:
            if from_config:
                self.reporter.info("Checking status of instances from config file")
            else:
                self.reporter.info("Checking status of specific instances")
            return self.check_status(intent.target_ids)

        if from_config:
            self.reporter.info("Stopping instances from config file")
        else:
            self.reporter.info("Stopping specific instances")
        return self.stop_instances(intent.target_ids)

    def _describe(self, instance_ids: Sequence[str]) -> WorkflowResult:
        try:
            records = self.client.describe(instance_ids)
        except DescribeError as e:
            self.reporter.error(f"Failed to fetch instance details: {e}")
            return WorkflowResult(Outcome.DESCRIBE_FAILED)

        if not records:
            self.reporter.warning("No instances found.")
            return WorkflowResult(Outcome.NOT_FOUND)
        return WorkflowResult(Outcome.REPORTED, records=records)

    def check_status(self, instance_ids: Sequence[str]) -> WorkflowResult:
        if not instance_ids:
            self.reporter.warning("No instances to check.")
            return WorkflowResult(Outcome.NO_TARGETS)

        self.reporter.info(f"Checking status of {len(dict.fromkeys(instance_ids))} instance(s)...")
        self.reporter.blank()

        result = self._describe(instance_ids)
        if result.outcome is Outcome.REPORTED:
            self.reporter.status_table(result.records)
        return result

    def stop_instances(self, instance_ids: Sequence[str]) -> WorkflowResult:
        """Stop the running instances among ``instance_ids``.

        Raises:
            StopInstancesError: If the stop request fails
        """
        if not instance_ids:
            self.reporter.warning("No instances to stop.")
            return WorkflowResult(Outcome.NO_TARGETS)

        self.reporter.info(f"Attempting to stop {len(dict.fromkeys(instance_ids))} instance(s)...")

        described = self._describe(instance_ids)
        if described.outcome is not Outcome.REPORTED:
            return described
        records = described.records

        self.reporter.blank()
        self.reporter.current_state(records)

        eligible = running_instance_ids(records)
        logger.debug("%d of %d instance(s) eligible to stop", len(eligible), len(records))

        if not eligible:
            self.reporter.blank()
            self.reporter.success("All instances are already stopped or in a stopping state. No action needed.")
            return WorkflowResult(Outcome.NOTHING_TO_DO, records=records)

        self.reporter.info(f"{len(eligible)} instance(s) are running and will be stopped.")

        transitions = self.client.stop(eligible)

        self.reporter.blank()
        self.reporter.success("Stop command initiated successfully")
        self.reporter.blank()
        self.reporter.transitions(transitions)
        return WorkflowResult(Outcome.STOPPED, records=records, transitions=transitions)
