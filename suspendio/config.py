import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal
from typing import Self

DISPATCHES = ("inline", "thread")


@dataclass(frozen=True, kw_only=True)
class Config:
    """How SuspendIO runs tasks.

    ``dispatch`` is ``"inline"`` to resume tasks on whichever thread
    resumes them, or ``"thread"`` to resume them on threads of their own.
    ``immediate`` also dispatches results that did not suspend.
    ``trace`` publishes interception events, and ``timeout`` bounds
    ``SuspendIO.run``.
    """

    dispatch: Literal["inline", "thread"] = "inline"
    immediate: bool = False
    trace: bool = False
    timeout: float | None = None

    def __post_init__(self):
        if self.dispatch not in DISPATCHES:
            raise ValueError(
                f"dispatch must be one of {', '.join(DISPATCHES)}, "
                f"got: {self.dispatch!r}"
            )
        if not isinstance(self.immediate, bool):
            raise ValueError(f"immediate must be a boolean, got: {self.immediate!r}")
        if not isinstance(self.trace, bool):
            raise ValueError(f"trace must be a boolean, got: {self.trace!r}")
        if self.immediate and self.dispatch == "inline":
            raise ValueError("immediate requires thread dispatch")
        if self.timeout is not None and not self.timeout > 0:
            raise ValueError(f"timeout must be positive, got: {self.timeout!r}")

    @classmethod
    def load(cls) -> Self:
        """Load configuration from the environment and pyproject.toml.

        Environment variables take precedence over ``[tool.suspendio]``
        in the nearest pyproject.toml.
        """
        config = pyproject_config()

        dispatch = os.environ.get("SUSPENDIO_DISPATCH") or config.get(
            "dispatch", "inline"
        )

        timeout = os.environ.get("SUSPENDIO_TIMEOUT") or config.get("timeout")
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError):
                raise ValueError(
                    f"timeout must be a number, got: {timeout!r}"
                ) from None

        return cls(
            dispatch=dispatch,
            immediate=config.get("immediate", False),
            trace=config.get("trace", False),
            timeout=timeout,
        )


def pyproject() -> Path | None:
    for path in [cwd := Path.cwd(), *cwd.parents]:
        candidate = path / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def pyproject_config() -> dict[str, Any]:
    if path := pyproject():
        with path.open("rb") as f:
            config = tomllib.load(f)
        return config.get("tool", {}).get("suspendio", {})
    return {}
