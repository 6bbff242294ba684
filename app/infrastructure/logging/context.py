"""Job context binding for structured logging.

Binds the fields of the job being evaluated so every log line emitted while
reconciling or running it carries them.

Usage:
    from infrastructure.logging import bind_job_context

    with bind_job_context(job_id=envelope.id, attempted_count=envelope.attempted_count):
        logger.info("retry_job_completed")

Dependencies:
    - structlog.contextvars
"""

from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_job_context(
    job_id: Any,
    attempted_count: Optional[int] = None,
    message_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind job-scoped context to all logs within the block.

    Args:
        job_id: Identity of the job being evaluated.
        attempted_count: Attempts made so far, if known.
        message_id: Queue message id, when the job came from the queue.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    context: dict[str, Any] = {"job_id": job_id}

    if attempted_count is not None:
        context["attempted_count"] = attempted_count

    if message_id is not None:
        context["message_id"] = message_id

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def clear_job_context() -> None:
    """Clear all bound context, e.g. at the end of a poll cycle."""
    structlog.contextvars.clear_contextvars()
