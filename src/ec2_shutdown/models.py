"""Domain records for EC2 Shutdown Manager."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

NOT_AVAILABLE = "N/A"

INSTANCE_ID_PREFIX = "i-"
INSTANCE_ID_PATTERN = re.compile(r"^i-[0-9A-Za-z]+$")


def is_instance_id(token: str) -> bool:
    """Return True when ``token`` has the shape of an EC2 instance id."""
    return bool(INSTANCE_ID_PATTERN.match(token))


class InstanceState(str, Enum):
    """EC2 instance lifecycle states as reported by the provider."""

    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"

    def __str__(self) -> str:
        return self.value


class Action(str, Enum):
    STATUS = "status"
    STOP = "stop"


class SourceMode(str, Enum):
    CONFIG_FILE = "config-file"
    EXPLICIT_LIST = "explicit-list"
    ALL_FROM_CONFIG = "all-from-config"

    @property
    def uses_config(self) -> bool:
        return self is not SourceMode.EXPLICIT_LIST


@dataclass(frozen=True)
class InstanceRecord:
    """Snapshot of one instance taken from a describe call."""

    instance_id: str
    state: InstanceState
    name: str = NOT_AVAILABLE
    address: str = NOT_AVAILABLE

    @property
    def is_running(self) -> bool:
        return self.state is InstanceState.RUNNING


@dataclass(frozen=True)
class StateTransition:
    """State change reported by a stop call."""

    instance_id: str
    previous_state: InstanceState
    current_state: InstanceState


@dataclass(frozen=True)
class Intent:
    """What one invocation should do and to which instances."""

    action: Action
    source_mode: SourceMode
    target_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "target_ids", tuple(self.target_ids))
