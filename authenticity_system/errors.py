"""Exception taxonomy for the authenticity engine.

Only ConfigurationError and InvalidRequestError ever reach a caller of the
orchestrator. Transport and invariant errors are raised and handled inside the
agent boundary and surface as abstentions.
"""


class AuthenticityEngineError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(AuthenticityEngineError, ValueError):
    """Registry, verdict band or timeout configuration is inconsistent.

    Fatal at startup: raised while constructing the registry or orchestrator,
    never while analyzing a request.
    """


class InvalidRequestError(AuthenticityEngineError, ValueError):
    """An analysis request payload could not be validated."""


class AdapterTransportError(AuthenticityEngineError):
    """A third-party service call failed (timeout, connection, HTTP status)."""

    def __init__(self, agent_id: str, message: str):
        self.agent_id = agent_id
        super().__init__(f"{agent_id}: {message}")


class MalformedResponseError(AdapterTransportError):
    """A third-party service answered with an empty or unparseable body."""


class InvariantViolation(AuthenticityEngineError):
    """An agent produced a result that breaks the AgentResult invariants."""

    def __init__(self, agent_id: str, message: str):
        self.agent_id = agent_id
        super().__init__(f"{agent_id}: {message}")


__all__ = [
    "AuthenticityEngineError",
    "ConfigurationError",
    "InvalidRequestError",
    "AdapterTransportError",
    "MalformedResponseError",
    "InvariantViolation",
]
