"""Supervisor do ciclo de vida da conexão (core do gateway)."""

from app.supervisor.restart_policy import RestartPolicy
from app.supervisor.state import SessionSnapshot, SessionState
from app.supervisor.supervisor import SessionSupervisor, safe_notify

__all__ = [
    "RestartPolicy",
    "SessionSnapshot",
    "SessionState",
    "SessionSupervisor",
    "safe_notify",
]
