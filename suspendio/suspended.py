from typing import Final
from typing import final


@final
class Suspended:
    """The marker for a suspension point that has no result yet.

    A body returns ``SUSPENDED`` to say that its continuation will be
    resumed later with the result. There is only ever one instance,
    so it can be compared with ``is``.
    """

    __instance: "Suspended | None" = None

    def __new__(cls):
        if cls.__instance is None:
            cls.__instance = super().__new__(cls)
        return cls.__instance

    def __repr__(self):
        return "SUSPENDED"

    def __reduce__(self):
        return "SUSPENDED"


SUSPENDED: Final = Suspended()

type MaySuspend[T] = T | Suspended
