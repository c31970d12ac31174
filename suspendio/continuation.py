from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from concurrent.futures import Future
from threading import Lock
from typing import TYPE_CHECKING
from typing import Literal

from .event import random_id
from .result import Err
from .result import Ok
from .result import Result
from .suspended import SUSPENDED
from .suspended import Suspended

if TYPE_CHECKING:
    from .interceptor import Interceptor


class AlreadyResumed(Exception):
    """The continuation has already been resumed."""


class ContinuationClosed(Exception):
    """The suspension point finished without suspending."""


class Continuation[T](ABC):
    """The rest of a computation, waiting on the result of a suspension point.

    A continuation is resumed at most once, either with a value or with an
    exception. Resuming it again raises ``AlreadyResumed``, and resuming it
    after its suspension point has been closed raises ``ContinuationClosed``.
    Whichever of several concurrent resumes takes the lock first wins.

    The optional interceptor is the capability that interceptable
    suspension points look for. It is fixed when the continuation is made.
    """

    def __init__(self, *, interceptor: Interceptor | None = None):
        self.id = random_id()
        self.interceptor = interceptor
        self.__lock = Lock()
        self.__state: Literal["pending", "resumed", "closed"] = "pending"

    def __repr__(self):
        return f"<{type(self).__name__} {self.id!r} {self.__state}>"

    def resume(self, value: T, /) -> None:
        self.resume_with(Ok(value))

    def resume_with_exception(self, exception: BaseException, /) -> None:
        self.resume_with(Err(exception))

    def resume_with(self, result: Result[T], /) -> None:
        with self.__lock:
            match self.__state:
                case "resumed":
                    raise AlreadyResumed(f"{self!r} was already resumed")
                case "closed":
                    raise ContinuationClosed(f"{self!r} is closed")
            self.__state = "resumed"
        self._resume(result)

    def close(self) -> None:
        """Forbid resuming, because the suspension point did not suspend.

        Closing twice is harmless. Closing after a resume means the result
        would be delivered twice, so it raises ``AlreadyResumed``.
        """
        with self.__lock:
            if self.__state == "resumed":
                raise AlreadyResumed(f"{self!r} was resumed before it returned")
            self.__state = "closed"

    def resumed(self) -> bool:
        return self.__state == "resumed"

    def closed(self) -> bool:
        return self.__state == "closed"

    @abstractmethod
    def _resume(self, result: Result[T], /) -> None:
        """Deliver the result. Called at most once."""
        raise NotImplementedError("Subclasses must implement this method.")


class FutureContinuation[T](Continuation[T]):
    """A continuation that completes a future."""

    def __init__(self, *, interceptor: Interceptor | None = None):
        super().__init__(interceptor=interceptor)
        self.__future = Future[T]()

    @property
    def future(self) -> Future[T]:
        return self.__future

    def _resume(self, result: Result[T], /) -> None:
        match result:
            case Ok(value):
                self.__future.set_result(value)
            case Err(error):
                self.__future.set_exception(error)


class SafeContinuation[T](Continuation[T]):
    """Turn a resume that beats the suspension into an immediate result.

    A body holding this continuation may resume it before it returns, on
    any thread. ``get`` then hands back that result directly, and the
    delegate is never resumed. Once ``get`` has reported ``SUSPENDED``,
    a later resume is forwarded to the delegate.
    """

    def __init__(self, delegate: Continuation[T], /):
        super().__init__()
        self.__delegate = delegate
        self.__lock = Lock()
        self.__result: Result[T] | None = None
        self.__suspended = False

    def _resume(self, result: Result[T], /) -> None:
        with self.__lock:
            if not self.__suspended:
                self.__result = result
                return
        self.__delegate.resume_with(result)

    def get(self) -> T | Suspended:
        with self.__lock:
            if self.__result is None:
                self.__suspended = True
                return SUSPENDED
        return self.__result.unwrap()
