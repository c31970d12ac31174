from collections.abc import Callable

from .continuation import AlreadyResumed
from .continuation import Continuation
from .interceptor import Interceptor
from .suspended import SUSPENDED
from .suspended import MaySuspend
from .task import current_task

type Body[T] = Callable[[Continuation[T]], MaySuspend[T]]


def capture[T](
    body: Body[T], /, continuation: Continuation[T] | None = None
) -> MaySuspend[T]:
    """Call body once with the continuation of the current suspension point.

    If body returns ``SUSPENDED``, so does this, and the continuation
    must be resumed later. Any other return value is the result, and the
    continuation is closed so that it can't also be resumed.

    If body raises after resuming the continuation, the result would be
    delivered twice, so ``AlreadyResumed`` is raised from the exception.

    The continuation defaults to a new one from the running task.
    """
    if continuation is None:
        continuation = current_task().continuation()

    try:
        result = body(continuation)
    except BaseException as exception:
        close_after(continuation, exception)
        raise

    if result is not SUSPENDED:
        continuation.close()
    return result


def capture_interceptable[T](
    body: Body[T], /, continuation: Continuation[T] | None = None
) -> MaySuspend[T]:
    """Capture, letting the continuation's interceptor take part."""

    def intercepting(continuation: Continuation[T]) -> MaySuspend[T]:
        interceptor = continuation.interceptor
        if interceptor is None:
            return body(continuation)
        return intercept(body, continuation, interceptor)

    return capture(intercepting, continuation)


def intercept[T](
    body: Body[T], continuation: Continuation[T], interceptor: Interceptor
) -> MaySuspend[T]:
    wrapped = interceptor.intercept_suspend(continuation)
    try:
        result = body(wrapped)
    except Exception as exception:
        if not interceptor.intercept_resume_with_exception(exception, wrapped):
            close_after(wrapped, exception)
            raise
        return SUSPENDED

    if result is SUSPENDED:
        # The interceptor resumes the original through the wrapper.
        return SUSPENDED
    if not interceptor.intercept_resume(result, wrapped):
        wrapped.close()
        return result
    return SUSPENDED


def close_after(continuation: Continuation, exception: BaseException) -> None:
    """Close the continuation of a body that raised."""
    if not continuation.resumed():
        continuation.close()
    elif not isinstance(exception, AlreadyResumed):
        raise AlreadyResumed(
            f"{continuation!r} was resumed before its body raised"
        ) from exception
