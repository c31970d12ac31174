from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Generator
from typing import Any

from .capture import Body
from .capture import capture_interceptable
from .continuation import Continuation
from .continuation import SafeContinuation
from .suspended import SUSPENDED
from .suspended import MaySuspend
from .suspended import Suspended


class Suspend[R](Awaitable[R]):
    """Await the result of a body at a suspension point of the running task."""

    def __init__(self, body: Body[R], /):
        self.__body = body

    def __await__(self) -> Generator[Suspended, Any, R]:
        result = capture_interceptable(self.__body)
        if result is SUSPENDED:
            return (yield SUSPENDED)
        return result


def suspend[R](body: Body[R], /) -> Suspend[R]:
    """Suspend the running task until body's continuation is resumed.

    The body is called with the continuation and returns either the
    result, without suspending, or ``SUSPENDED``. Resuming the
    continuation before the body has returned is allowed, but a body
    that does so should use ``suspend_safely`` instead.
    """
    return Suspend(body)


def suspend_safely[R](body: Callable[[Continuation[R]], None], /) -> Suspend[R]:
    """Suspend the running task until the continuation is resumed.

    The body only hands the continuation on. If it gets resumed before
    the body returns, the result is used directly.
    """

    def safe(continuation: Continuation[R]) -> MaySuspend[R]:
        safe_continuation = SafeContinuation(continuation)
        body(safe_continuation)
        return safe_continuation.get()

    return Suspend(safe)
