from dataclasses import dataclass
from dataclasses import field
from typing import Any

from .bus import Bus
from .continuation import Continuation
from .event import Event
from .interceptor import Interceptor
from .result import Result


@dataclass(eq=False, kw_only=True)
class InterceptionEvent(Event):
    continuation_id: str


@dataclass(eq=False, kw_only=True)
class SuspendIntercepted(InterceptionEvent): ...


@dataclass(eq=False, kw_only=True)
class ResumeIntercepted(InterceptionEvent):
    value: Any = field(repr=False)
    claimed: bool


@dataclass(eq=False, kw_only=True)
class ExceptionIntercepted(InterceptionEvent):
    exception: Exception = field(repr=False)
    claimed: bool


@dataclass(eq=False, kw_only=True)
class ContinuationResumed(InterceptionEvent):
    result: Result[Any] = field(repr=False)


class TracedContinuation[T](Continuation[T]):
    def __init__(self, continuation: Continuation[T], bus: Bus, /):
        super().__init__()
        self.__continuation = continuation
        self.__bus = bus

    def _resume(self, result: Result[T], /) -> None:
        self.__bus.publish(ContinuationResumed(continuation_id=self.id, result=result))
        self.__continuation.resume_with(result)


class TracingInterceptor(Interceptor):
    """Publish an event for every suspension and resumption.

    Decisions are left to the delegate, if there is one; the events
    record whether it claimed each immediate result or exception.
    """

    def __init__(self, bus: Bus, /, *, delegate: Interceptor | None = None):
        self.__bus = bus
        self.__delegate = delegate or Interceptor()

    def intercept_suspend[T](
        self, continuation: Continuation[T], /
    ) -> Continuation[T]:
        wrapped = self.__delegate.intercept_suspend(continuation)
        traced = TracedContinuation(wrapped, self.__bus)
        self.__bus.publish(SuspendIntercepted(continuation_id=traced.id))
        return traced

    def intercept_resume[T](self, value: T, continuation: Continuation[T], /) -> bool:
        claimed = self.__delegate.intercept_resume(value, continuation)
        self.__bus.publish(
            ResumeIntercepted(
                continuation_id=continuation.id,
                value=value,
                claimed=claimed,
            )
        )
        return claimed

    def intercept_resume_with_exception[T](
        self, exception: Exception, continuation: Continuation[T], /
    ) -> bool:
        claimed = self.__delegate.intercept_resume_with_exception(
            exception, continuation
        )
        self.__bus.publish(
            ExceptionIntercepted(
                continuation_id=continuation.id,
                exception=exception,
                claimed=claimed,
            )
        )
        return claimed
