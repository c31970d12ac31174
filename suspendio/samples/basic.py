from threading import Timer

from suspendio import SUSPENDED
from suspendio import sleep
from suspendio import suspend


async def answer():
    # Returns without suspending
    return await suspend(lambda continuation: 42)


async def delayed(value, interval: float = 0.001):
    def body(continuation):
        Timer(interval, continuation.resume, (value,)).start()
        return SUSPENDED

    return await suspend(body)


async def countdown(start: int):
    remaining = []
    for n in range(start, 0, -1):
        await sleep(0.01)
        remaining.append(n)
    return remaining


def plain(a, b):
    return a + b
