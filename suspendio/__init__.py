from .capture import capture as capture
from .capture import capture_interceptable as capture_interceptable
from .continuation import AlreadyResumed as AlreadyResumed
from .continuation import Continuation as Continuation
from .continuation import ContinuationClosed as ContinuationClosed
from .future import wrap_future as wrap_future
from .interceptor import Interceptor as Interceptor
from .run import run as run
from .sleep import sleep as sleep
from .suspend import suspend as suspend
from .suspend import suspend_safely as suspend_safely
from .suspended import SUSPENDED as SUSPENDED
from .suspended import Suspended as Suspended
from .suspendio import SuspendIO as SuspendIO
from .task import Task as Task
from .task import current_task as current_task
