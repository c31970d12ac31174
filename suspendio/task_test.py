from contextvars import ContextVar
from queue import ShutDown
from threading import Timer

import pytest

from .bus import Bus
from .continuation import AlreadyResumed
from .interceptor import Interceptor
from .run import run
from .suspend import suspend
from .suspended import SUSPENDED
from .task import Task
from .task import TaskErrored
from .task import TaskEvent
from .task import TaskResumed
from .task import TaskStarted
from .task import TaskSucceeded
from .task import TaskSuspended
from .task import current_task

color = ContextVar("color", default="unset")


def resume_later(value, interval: float = 0.001):
    def body(continuation):
        Timer(interval, continuation.resume, (value,)).start()
        return SUSPENDED

    return body


def resume_now(value):
    def body(continuation):
        continuation.resume(value)
        return SUSPENDED

    return body


def drain(events):
    received = []
    while True:
        try:
            received.append(events.get(timeout=1))
        except ShutDown:
            return received


def test_immediate_result_does_not_suspend():
    async def main():
        return await suspend(lambda c: 42)

    future = Task(main()).start()
    assert future.result(timeout=0) == 42


@pytest.mark.timeout(2)
def test_resumed_from_another_thread():
    """The task continues with the value once another thread resumes it."""

    async def main():
        return await suspend(resume_later("done"))

    assert Task(main()).start().result(timeout=1) == "done"


def test_synchronous_resumes_do_not_grow_the_stack():
    """Resuming inside the body is queued rather than run recursively."""

    async def main():
        total = 0
        for i in range(10_000):
            total += await suspend(resume_now(i))
        return total

    assert Task(main()).start().result(timeout=0) == sum(range(10_000))


def test_resumed_with_exception():
    def body(continuation):
        continuation.resume_with_exception(KeyError("k"))
        return SUSPENDED

    async def main():
        try:
            await suspend(body)
        except KeyError:
            return "caught"

    assert Task(main()).start().result(timeout=0) == "caught"


def test_exception_completes_future():
    async def main():
        raise ValueError("boom")

    future = Task(main()).start()
    with pytest.raises(ValueError, match="boom"):
        future.result(timeout=0)


def test_body_exception_raises_at_await():
    def body(continuation):
        raise LookupError("body failed")

    async def main():
        try:
            await suspend(body)
        except LookupError as error:
            return str(error)

    assert Task(main()).start().result(timeout=0) == "body failed"


@pytest.mark.parametrize("finish", ["returns", "raises"])
def test_double_delivery_fails_the_task(finish):
    """A body that resumes and then finishes fails the task, not its driver."""
    error = ValueError("boom")

    def body(continuation):
        continuation.resume(1)
        if finish == "raises":
            raise error
        return 2

    async def main():
        return await suspend(body)

    task = Task(main())
    future = task.start()

    with pytest.raises(AlreadyResumed) as excinfo:
        future.result(timeout=0)
    if finish == "raises":
        assert excinfo.value.__cause__ is error

    with pytest.raises(RuntimeError, match="already completed"):
        task.continuation().resume(3)


def test_unknown_yield_is_a_type_error():
    class Foreign:
        def __await__(self):
            yield "nonsense"

    async def main():
        try:
            await Foreign()
        except TypeError as error:
            return str(error)

    message = Task(main()).start().result(timeout=0)
    assert "cannot wait on 'nonsense'" in message


def test_start_twice_raises():
    async def main():
        return 1

    task = Task(main())
    task.start()
    with pytest.raises(RuntimeError, match="already been started"):
        task.start()


def test_current_task_is_the_running_task():
    async def main():
        return current_task()

    task = Task(main())
    assert task.start().result(timeout=0) is task


def test_resume_after_completion_raises():
    leaked = []

    async def main():
        leaked.append(current_task().continuation())
        return 1

    Task(main()).start().result(timeout=0)
    with pytest.raises(RuntimeError, match="already completed"):
        leaked[0].resume(2)


@pytest.mark.timeout(2)
def test_steps_run_in_the_task_context():
    """Context variables follow the task onto the resuming thread."""

    async def main():
        before = color.get()
        await suspend(resume_later(None))
        return before, color.get()

    token = color.set("blue")
    try:
        task = Task(main())
    finally:
        color.reset(token)

    assert task.start().result(timeout=1) == ("blue", "blue")


def test_claimed_immediate_result_arrives_once():
    """A claimed result suspends the task until the interceptor resumes it."""

    class Claiming(Interceptor):
        def __init__(self):
            self.claimed = []

        def intercept_resume(self, value, continuation, /):
            self.claimed.append((value, continuation))
            return True

    interceptor = Claiming()
    observed = []

    async def main():
        value = await suspend(lambda c: 7)
        observed.append(value)
        return value

    future = Task(main(), interceptor=interceptor).start()
    assert not future.done()

    [(value, continuation)] = interceptor.claimed
    continuation.resume(value)

    assert future.result(timeout=0) == 7
    assert observed == [7]


def test_suspension_is_intercepted_once():
    class Recording(Interceptor):
        def __init__(self):
            self.calls = []

        def intercept_suspend(self, continuation, /):
            self.calls.append(("suspend", continuation))
            return continuation

        def intercept_resume(self, value, continuation, /):
            self.calls.append(("resume", value))
            return False

        def intercept_resume_with_exception(self, exception, continuation, /):
            self.calls.append(("exception", exception))
            return False

    interceptor = Recording()
    received = []

    def body(continuation):
        received.append(continuation)
        return SUSPENDED

    async def main():
        return await suspend(body)

    future = Task(main(), interceptor=interceptor).start()
    [(kind, continuation)] = interceptor.calls
    assert kind == "suspend"
    assert received == [continuation]
    assert continuation.interceptor is interceptor

    continuation.resume("done")
    assert future.result(timeout=0) == "done"
    assert len(interceptor.calls) == 1


def test_task_publishes_lifecycle_events():
    bus = Bus()
    events = bus.subscribe({TaskEvent})

    async def main():
        return await suspend(resume_now(1))

    task = Task(main(), bus=bus)
    task.start().result(timeout=0)
    bus.shutdown()

    received = drain(events)
    assert [type(event) for event in received] == [
        TaskStarted,
        TaskResumed,
        TaskSuspended,
        TaskSucceeded,
    ]
    assert {event.task_id for event in received} == {task.id}
    assert received[-1].value == 1


def test_task_publishes_errors():
    bus = Bus()
    events = bus.subscribe({TaskErrored})
    error = ValueError("boom")

    async def main():
        raise error

    Task(main(), bus=bus).start()
    bus.shutdown()

    [event] = drain(events)
    assert event.exception is error


@pytest.mark.timeout(2)
def test_run_waits_for_result():
    async def main():
        first = await suspend(resume_later(1))
        second = await suspend(resume_later(2))
        return first + second

    assert run(main(), timeout=1) == 3
