from threading import Timer

from .continuation import Continuation
from .suspend import Suspend
from .suspend import suspend
from .suspended import SUSPENDED
from .suspended import MaySuspend


def sleep(interval: float, /) -> Suspend[None]:
    """Suspend the running task for a number of seconds."""

    def body(continuation: Continuation[None]) -> MaySuspend[None]:
        if interval <= 0:
            return None
        Timer(interval, continuation.resume, (None,)).start()
        return SUSPENDED

    return suspend(body)
