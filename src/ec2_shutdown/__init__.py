"""EC2 Shutdown Manager - stop or check EC2 instances from the command line."""

__version__ = "0.1.0"

from .config import ShutdownConfig
from .exceptions import ShutdownError, StopInstancesError

__all__ = [
    "ShutdownConfig",
    "ShutdownError",
    "StopInstancesError",
]
