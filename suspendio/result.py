from dataclasses import dataclass
from typing import NoReturn


@dataclass(frozen=True)
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err[E: BaseException]:
    error: E

    def unwrap(self) -> NoReturn:
        raise self.error


type Result[T, E: BaseException = BaseException] = Ok[T] | Err[E]
