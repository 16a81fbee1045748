"""Port interfaces for the gpgshim application layer.

These protocol interfaces define contracts for adapters.
Application logic depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ExecutionError",
    "ExecutionResult",
    "ExecutorPort",
    "KeyringPort",
    "StagingPort",
]

from gpgshim.app.ports.executor import ExecutionError, ExecutionResult, ExecutorPort
from gpgshim.app.ports.keyring import KeyringPort
from gpgshim.app.ports.staging import StagingPort
