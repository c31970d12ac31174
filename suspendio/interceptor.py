from abc import ABC

from .continuation import Continuation


class Interceptor(ABC):
    """Wrap, redirect, or observe the suspensions of a task.

    Every method has a pass-through default, so subclasses override only
    the events they care about.
    """

    def intercept_suspend[T](
        self, continuation: Continuation[T], /
    ) -> Continuation[T]:
        """Return the continuation the suspension point should be given."""
        return continuation

    def intercept_resume[T](self, value: T, continuation: Continuation[T], /) -> bool:
        """Handle a result the suspension point returned without suspending.

        Return True after taking responsibility for resuming ``continuation``
        with the value; the suspension point then reports that it suspended.
        Return False to let the value be returned as usual.
        """
        return False

    def intercept_resume_with_exception[T](
        self, exception: Exception, continuation: Continuation[T], /
    ) -> bool:
        """Handle an exception the suspension point raised.

        Return True after taking responsibility for resuming ``continuation``
        with it, which stops it from propagating. Return False to let it
        be raised as usual.
        """
        return False
