"""Structured logging for agents and the orchestrator using structlog.

Events are snake_case names with key/value context. Every agent logs through
get_agent_logger(), which binds its registry identifier, and every analysis
binds a correlation id so one request can be followed across concurrent agents.
"""

import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from structlog.contextvars import bound_contextvars, merge_contextvars
from structlog.processors import JSONRenderer

from authenticity_system.config.settings import settings
from authenticity_system.data_management.schemas import AgentKind

# Logger component prefix per agent kind
AGENT_COMPONENTS = {
    AgentKind.CORE: "detector",
    AgentKind.EXTERNAL: "adapter",
}


def configure_structured_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog processors and rendering.

    Uses the console renderer on a TTY when the format is "console", JSON lines
    otherwise. Output goes to stderr so CLI JSON on stdout stays parseable.

    Args:
        log_level: Minimum level; defaults to settings.log_level
        log_format: "console" or "json"; defaults to settings.log_format
    """
    level = (log_level or settings.log_level).upper()
    fmt = (log_format or settings.log_format).lower()

    processors = [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if sys.stderr.isatty() and fmt == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_structured_logger(component: str, **context: Any) -> structlog.BoundLogger:
    """
    Get a structured logger bound to a component.

    Args:
        component: Component name (e.g. "orchestrator")
        **context: Additional key/value context to bind
    """
    logger = structlog.get_logger().bind(component=component)
    if context:
        logger = logger.bind(**context)
    return logger


def get_agent_logger(agent_id: str, kind: AgentKind) -> structlog.BoundLogger:
    """
    Logger for one agent, bound with its registry identifier.

    Detectors log as "detector.<id>", adapters as "adapter.<id>"; both carry
    agent_id so events join up with the orchestrator's per-agent events.

    Example:
        >>> log = get_agent_logger("bertTransformer", AgentKind.EXTERNAL)
        >>> log.info("adapter_fallback", reason="timeout")
    """
    return get_structured_logger(f"{AGENT_COMPONENTS[kind]}.{agent_id}", agent_id=agent_id)


def get_correlation_id() -> str:
    """Generate a correlation id for one analysis."""
    return str(uuid.uuid4())


@contextmanager
def analysis_context(correlation_id: Optional[str] = None, **context: Any) -> Iterator[str]:
    """
    Bind a correlation id (and extra context) for every event logged inside.

    Context variables follow asyncio tasks created inside the block, so agent
    events carry the id of the analysis that started them.

    Yields:
        The bound correlation id
    """
    cid = correlation_id or get_correlation_id()
    with bound_contextvars(correlation_id=cid, **context):
        yield cid


configure_structured_logging()

__all__ = [
    "AGENT_COMPONENTS",
    "configure_structured_logging",
    "get_structured_logger",
    "get_agent_logger",
    "get_correlation_id",
    "analysis_context",
]
