import ast
import importlib
from collections.abc import Awaitable
from dataclasses import asdict
from dataclasses import replace
from queue import ShutDown
from threading import Thread
from typing import Annotated
from typing import Any

from typer import Argument
from typer import BadParameter
from typer import Option
from typer import Typer

from .config import Config
from .suspendio import SuspendIO

app = Typer()


def parse_target(target: str):
    module_name, _, function_name = target.partition(":")
    if not module_name or not function_name:
        raise BadParameter(f"Expected MODULE:FUNCTION, got: {target!r}")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, function_name)
    except AttributeError:
        raise BadParameter(
            f"{module_name!r} has no attribute {function_name!r}"
        ) from None


def parse_arg(arg: str) -> Any:
    """Read an argument as a Python literal, or else as a string."""
    try:
        return ast.literal_eval(arg)
    except (ValueError, SyntaxError):
        return arg


@app.command()
def run(
    target: Annotated[
        str,
        Argument(
            help="The function to run. Examples: 'mypackage.jobs:main'",
            metavar="MODULE:FUNCTION",
        ),
    ],
    args: Annotated[
        list[str] | None,
        Argument(help="Arguments, read as Python literals where possible."),
    ] = None,
    dispatch: Annotated[
        str | None, Option(help="Where tasks resume: 'inline' or 'thread'.")
    ] = None,
    immediate: Annotated[
        bool | None, Option(help="Dispatch results that did not suspend.")
    ] = None,
    trace: Annotated[
        bool | None, Option(help="Print events as the task runs.")
    ] = None,
    timeout: Annotated[
        float | None, Option(help="Seconds to wait for the result.")
    ] = None,
):
    """Run a function as a task and print its result.

    Async functions run until they finish, suspending and resuming as
    they await. Other functions are simply called.
    """
    overrides = {
        key: value
        for key, value in {
            "dispatch": dispatch,
            "immediate": immediate,
            "trace": trace,
            "timeout": timeout,
        }.items()
        if value is not None
    }
    try:
        config = replace(Config.load(), **overrides)
    except ValueError as error:
        raise BadParameter(str(error)) from None

    fn = parse_target(target)
    result = fn(*map(parse_arg, args or []))
    if not isinstance(result, Awaitable):
        print(repr(result))
        return

    suspendio = SuspendIO(config=config)
    events = suspendio.subscribe({object})

    def printer():
        while True:
            try:
                event = events.get()
            except ShutDown:
                break
            if config.trace:
                print(event)

    thread = Thread(target=printer, name="suspendio-trace")
    thread.start()
    try:
        value = suspendio.run(result)
    finally:
        suspendio.shutdown()
        thread.join()
    print(repr(value))


@app.command()
def config():
    """Show the configuration from the environment and pyproject.toml."""
    for key, value in asdict(Config.load()).items():
        print(f"{key} = {value!r}")


if __name__ == "__main__":
    app()
