from __future__ import annotations

from collections import deque
from collections.abc import Awaitable
from concurrent.futures import Future
from contextvars import ContextVar
from contextvars import copy_context
from dataclasses import dataclass
from dataclasses import field
from threading import Lock
from typing import Any

from .bus import Bus
from .continuation import Continuation
from .event import Event
from .event import random_id
from .interceptor import Interceptor
from .result import Err
from .result import Ok
from .result import Result
from .suspended import SUSPENDED

_current: ContextVar[Task | None] = ContextVar("Task.current", default=None)


def current_task() -> Task:
    """Get the task whose step is running."""
    task = _current.get()
    if task is None:
        raise RuntimeError("No task is running.")
    return task


class Task[R]:
    """Drive an awaitable from one suspension point to the next.

    The awaitable yields ``SUSPENDED`` whenever it waits on a continuation,
    and the task sends in the result once the continuation is resumed.
    Steps never overlap: a resume that arrives while a step is running is
    queued, and the thread running that step runs the next one as well.
    """

    def __init__(
        self,
        awaitable: Awaitable[R],
        /,
        *,
        interceptor: Interceptor | None = None,
        bus: Bus | None = None,
        name: str | None = None,
    ):
        self.id = random_id()
        self.name = name or f"task-{self.id}"
        self.__generator = awaitable.__await__()
        self.__interceptor = interceptor
        self.__bus = bus
        self.__context = copy_context()
        self.__future = Future[R]()
        self.__lock = Lock()
        self.__started = False
        self.__stepping = False
        self.__pending = deque[Result[Any]]()

    def __repr__(self):
        return f"<{type(self).__name__} {self.name!r}>"

    @property
    def future(self) -> Future[R]:
        return self.__future

    @property
    def interceptor(self) -> Interceptor | None:
        return self.__interceptor

    def start(self) -> Future[R]:
        with self.__lock:
            if self.__started:
                raise RuntimeError(f"{self!r} has already been started.")
            self.__started = True
        self.__publish(TaskStarted(task_id=self.id))
        self.__schedule(Ok(None))
        return self.__future

    def continuation(self) -> Continuation[Any]:
        """Create the continuation for the next suspension point."""
        return TaskContinuation(self, interceptor=self.__interceptor)

    def _resume(self, result: Result[Any], /) -> None:
        if self.__future.done():
            raise RuntimeError(f"{self!r} has already completed.")
        self.__publish(TaskResumed(task_id=self.id))
        self.__schedule(result)

    def __publish(self, event: Event) -> None:
        if self.__bus is not None:
            self.__bus.publish(event)

    def __schedule(self, result: Result[Any]) -> None:
        with self.__lock:
            self.__pending.append(result)
            if self.__stepping:
                return
            self.__stepping = True

        while True:
            with self.__lock:
                if self.__future.done():
                    # A finished generator is never stepped again.
                    self.__pending.clear()
                if not self.__pending:
                    self.__stepping = False
                    return
                result = self.__pending.popleft()
            try:
                self.__context.run(self.__step, result)
            except BaseException:
                with self.__lock:
                    self.__stepping = False
                raise

    def __step(self, result: Result[Any]) -> None:
        token = _current.set(self)
        try:
            match result:
                case Ok(value):
                    yielded = self.__generator.send(value)
                case Err(error):
                    yielded = self.__generator.throw(error)
        except StopIteration as stop:
            self.__publish(TaskSucceeded(task_id=self.id, value=stop.value))
            self.__future.set_result(stop.value)
        except BaseException as exception:
            self.__publish(TaskErrored(task_id=self.id, exception=exception))
            self.__future.set_exception(exception)
        else:
            if yielded is SUSPENDED:
                self.__publish(TaskSuspended(task_id=self.id))
            else:
                error = TypeError(f"{self!r} cannot wait on {yielded!r}")
                with self.__lock:
                    self.__pending.append(Err(error))
        finally:
            _current.reset(token)


class TaskContinuation[T](Continuation[T]):
    """Resume a task at the suspension point it was created for."""

    def __init__(self, task: Task, /, *, interceptor: Interceptor | None = None):
        super().__init__(interceptor=interceptor)
        self.task = task

    def _resume(self, result: Result[T], /) -> None:
        self.task._resume(result)


@dataclass(eq=False, kw_only=True)
class TaskEvent(Event):
    task_id: str


@dataclass(eq=False, kw_only=True)
class TaskStarted(TaskEvent): ...


@dataclass(eq=False, kw_only=True)
class TaskSuspended(TaskEvent): ...


@dataclass(eq=False, kw_only=True)
class TaskResumed(TaskEvent): ...


@dataclass(eq=False, kw_only=True)
class TaskCompleted(TaskEvent): ...


@dataclass(eq=False, kw_only=True)
class TaskSucceeded(TaskCompleted):
    value: Any = field(repr=False)


@dataclass(eq=False, kw_only=True)
class TaskErrored(TaskCompleted):
    exception: BaseException = field(repr=False)
