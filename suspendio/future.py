from concurrent.futures import CancelledError
from concurrent.futures import Future

from .continuation import Continuation
from .result import Err
from .result import Ok
from .result import Result
from .suspend import Suspend
from .suspend import suspend
from .suspended import SUSPENDED
from .suspended import MaySuspend


def wrap_future[R](future: Future[R], /) -> Suspend[R]:
    """Suspend the running task until the future is done."""

    def body(continuation: Continuation[R]) -> MaySuspend[R]:
        if future.done():
            return outcome(future).unwrap()
        future.add_done_callback(lambda f: continuation.resume_with(outcome(f)))
        return SUSPENDED

    return suspend(body)


def outcome[R](future: Future[R], /) -> Result[R]:
    if future.cancelled():
        return Err(CancelledError())
    exception = future.exception()
    if exception is not None:
        return Err(exception)
    return Ok(future.result())
