from collections.abc import Awaitable

from .interceptor import Interceptor
from .task import Task


def run[R](
    awaitable: Awaitable[R],
    /,
    *,
    interceptor: Interceptor | None = None,
    timeout: float | None = None,
) -> R:
    """Run an awaitable as a task and wait for its result."""
    return Task(awaitable, interceptor=interceptor).start().result(timeout)
