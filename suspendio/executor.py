from collections.abc import Callable
from concurrent.futures import Executor as BaseExecutor
from concurrent.futures import Future
from itertools import count
from threading import Lock
from threading import Thread
from typing import Any


def annotate[T](**kwargs: Any) -> Callable[[T], T]:
    def decorator(fn: T) -> T:
        for k, v in kwargs.items():
            setattr(fn, k, v)
        return fn

    return decorator


class Executor(BaseExecutor):
    """Run each task in a separate thread."""

    # Each call gets a thread of its own, and shutdown joins them all.

    def __init__(self, *, name: str):
        self.__name = name
        self.__lock = Lock()
        self.__shutdown = False
        self.__futures = set[Future[Any]]()
        self.__threads = set[Thread]()
        self.__counter = count(1).__next__

    @annotate(__doc__=BaseExecutor.submit.__doc__)
    def submit[T](
        self, fn: Callable[..., T], /, *args: Any, **kwargs: Any
    ) -> Future[T]:
        future = Future[T]()
        future.add_done_callback(self.__forget)
        with self.__lock:
            if self.__shutdown:
                raise RuntimeError(f"Executor {self.__name!r} is shut down.")
            thread = Thread(
                target=self.__run,
                name=f"{self.__name}-{self.__counter()}",
                args=(future, fn, args, kwargs),
            )
            self.__futures.add(future)
            self.__threads = {t for t in self.__threads if t.is_alive()}
            self.__threads.add(thread)
            thread.start()
        return future

    def __forget(self, future: Future[Any]) -> None:
        with self.__lock:
            self.__futures.discard(future)

    @annotate(__doc__=BaseExecutor.shutdown.__doc__)
    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False):
        with self.__lock:
            self.__shutdown = True
            futures, threads = set(self.__futures), set(self.__threads)
        if cancel_futures:
            for future in futures:
                future.cancel()
        if wait:
            for thread in threads:
                thread.join()

    def __run[T](
        self,
        future: Future[T],
        fn: Callable[..., T],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ):
        if not future.set_running_or_notify_cancel():
            return

        try:
            result = fn(*args, **kwargs)
        except BaseException as exception:
            future.set_exception(exception)
        else:
            future.set_result(result)
