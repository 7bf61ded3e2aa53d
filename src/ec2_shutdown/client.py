"""EC2 instance directory client.

Wraps the DescribeInstances and StopInstances calls and translates the
provider's response shapes into :class:`InstanceRecord` and
:class:`StateTransition` values.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import ShutdownConfig
from .exceptions import DescribeError, StopInstancesError
from .models import NOT_AVAILABLE, InstanceRecord, InstanceState, StateTransition

logger = logging.getLogger(__name__)


def _unique(instance_ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(instance_ids))


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code")
        message = error.get("Message") or str(exc)
        return f"{code}: {message}" if code else message
    return str(exc)


def _tag_value(instance: dict[str, Any], key: str) -> str | None:
    for tag in instance.get("Tags") or []:
        if tag.get("Key") == key:
            return tag.get("Value")
    return None


def instance_record_from_response(instance: dict[str, Any]) -> InstanceRecord:
    """Build a record from one entry of ``Reservations[].Instances[]``."""
    return InstanceRecord(
        instance_id=instance["InstanceId"],
        state=InstanceState(instance["State"]["Name"]),
        name=_tag_value(instance, "Name") or NOT_AVAILABLE,
        address=instance.get("PublicIpAddress") or instance.get("PrivateIpAddress") or NOT_AVAILABLE,
    )


def state_transition_from_response(entry: dict[str, Any]) -> StateTransition:
    """Build a transition from one entry of ``StoppingInstances[]``."""
    return StateTransition(
        instance_id=entry["InstanceId"],
        previous_state=InstanceState(entry["PreviousState"]["Name"]),
        current_state=InstanceState(entry["CurrentState"]["Name"]),
    )


class InstanceDirectoryClient:
    """Describes and stops EC2 instances by id."""

    def __init__(self, config: ShutdownConfig, ec2_client: Any | None = None):
        """Initialize the directory client.

        Args:
            config: Shutdown manager configuration
            ec2_client: Optional boto3 EC2 client (for DI/testing)
        """
        self.config = config
        self._ec2_client = ec2_client

    @property
    def ec2_client(self):
        """Lazy-loaded EC2 client.

        Timeouts come from configuration and retries are disabled, so every
        operation is a single request.
        """
        if self._ec2_client is None:
            self._ec2_client = boto3.client(
                "ec2",
                region_name=self.config.aws_region,
                aws_access_key_id=self.config.aws_access_key_id,
                aws_secret_access_key=self.config.aws_secret_access_key,
                config=Config(
                    connect_timeout=self.config.connect_timeout,
                    read_timeout=self.config.read_timeout,
                    retries={"total_max_attempts": 1, "mode": "standard"},
                ),
            )
        return self._ec2_client

    def describe(self, instance_ids: Iterable[str]) -> list[InstanceRecord]:
        """Describe instances by id.

        Args:
            instance_ids: Instance ids to look up; duplicates are dropped

        Returns:
            Records in provider order; empty when nothing matched

        Raises:
            DescribeError: If the API call fails for any reason
        """
        ids = _unique(instance_ids)
        logger.debug("DescribeInstances for %d instance(s): %s", len(ids), ids)

        try:
            response = self.ec2_client.describe_instances(InstanceIds=ids)
        except (ClientError, BotoCoreError) as e:
            logger.debug("DescribeInstances failed", exc_info=True)
            raise DescribeError(
                _error_message(e), details={"instance_ids": ids}
            ) from e

        records = [
            instance_record_from_response(instance)
            for reservation in response.get("Reservations", [])
            for instance in reservation.get("Instances", [])
        ]
        logger.debug("DescribeInstances returned %d record(s)", len(records))
        return records

    def stop(self, instance_ids: Iterable[str]) -> list[StateTransition]:
        """Stop exactly the given instances.

        Raises:
            StopInstancesError: If the API call fails for any reason
        """
        ids = _unique(instance_ids)
        logger.info("StopInstances for %d instance(s): %s", len(ids), ids)

        try:
            response = self.ec2_client.stop_instances(InstanceIds=ids)
        except (ClientError, BotoCoreError) as e:
            logger.debug("StopInstances failed", exc_info=True)
            raise StopInstancesError(_error_message(e), instance_ids=ids) from e

        return [state_transition_from_response(entry) for entry in response.get("StoppingInstances", [])]
