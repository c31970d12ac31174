from collections.abc import Awaitable
from collections.abc import Iterable
from queue import Queue

from .bus import Bus
from .config import Config
from .dispatch import DispatchInterceptor
from .executor import Executor
from .interceptor import Interceptor
from .task import Task
from .tracing import TracingInterceptor


class SuspendIO:
    def __init__(self, *, config: Config | None = None):
        self.__config = config or Config.load()
        self.__bus = Bus()
        self.__executor: Executor | None = None
        self.__interceptor = self.__default_interceptor()

    @property
    def config(self) -> Config:
        return self.__config

    def __default_interceptor(self) -> Interceptor | None:
        interceptor: Interceptor | None = None
        if self.__config.dispatch == "thread":
            self.__executor = Executor(name="suspendio-dispatch")
            interceptor = DispatchInterceptor(
                self.__executor, immediate=self.__config.immediate
            )
        if self.__config.trace:
            interceptor = TracingInterceptor(self.__bus, delegate=interceptor)
        return interceptor

    def start[R](
        self, awaitable: Awaitable[R], /, *, name: str | None = None
    ) -> Task[R]:
        """Start running an awaitable as a task."""
        task = Task(
            awaitable, interceptor=self.__interceptor, bus=self.__bus, name=name
        )
        task.start()
        return task

    def run[R](self, awaitable: Awaitable[R], /) -> R:
        """Run an awaitable as a task and wait for its result."""
        return self.start(awaitable).future.result(self.__config.timeout)

    def subscribe[T](self, types: Iterable[type[T]]) -> Queue[T]:
        return self.__bus.subscribe(types)

    def unsubscribe(self, queue: Queue):
        return self.__bus.unsubscribe(queue)

    def shutdown(self):
        """Wait for dispatched resumptions and shut down subscriptions."""
        if self.__executor is not None:
            self.__executor.shutdown(wait=True)
        self.__bus.shutdown()
