import threading
from concurrent.futures import Executor
from concurrent.futures import Future

from .continuation import Continuation
from .interceptor import Interceptor
from .result import Result


def report(future: Future) -> None:
    """Hand an error nobody waits for to the thread excepthook."""
    if future.cancelled() or (exception := future.exception()) is None:
        return
    threading.excepthook(
        threading.ExceptHookArgs(
            (
                type(exception),
                exception,
                exception.__traceback__,
                threading.current_thread(),
            )
        )
    )


class DispatchedContinuation[T](Continuation[T]):
    """Resume another continuation from an executor."""

    def __init__(self, continuation: Continuation[T], executor: Executor, /):
        super().__init__()
        self.__continuation = continuation
        self.__executor = executor

    def _resume(self, result: Result[T], /) -> None:
        future = self.__executor.submit(self.__continuation.resume_with, result)
        future.add_done_callback(report)


class DispatchInterceptor(Interceptor):
    """Run every resumption of a task on an executor.

    With ``immediate``, results and exceptions that a suspension point
    produced without suspending are dispatched too, so the task always
    continues on the executor.
    """

    def __init__(self, executor: Executor, /, *, immediate: bool = False):
        self.__executor = executor
        self.__immediate = immediate

    def intercept_suspend[T](
        self, continuation: Continuation[T], /
    ) -> Continuation[T]:
        return DispatchedContinuation(continuation, self.__executor)

    def intercept_resume[T](self, value: T, continuation: Continuation[T], /) -> bool:
        if not self.__immediate:
            return False
        continuation.resume(value)
        return True

    def intercept_resume_with_exception[T](
        self, exception: Exception, continuation: Continuation[T], /
    ) -> bool:
        if not self.__immediate:
            return False
        continuation.resume_with_exception(exception)
        return True
