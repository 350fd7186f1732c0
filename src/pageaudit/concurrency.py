"""Fan-out/fan-in helpers that never let one failure sink the batch."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    """Outcome of one awaited task: a value or the exception it raised."""

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(aws: Iterable[Awaitable[T]]) -> list[Settled[T]]:
    """Run awaitables concurrently and wait for every one to finish.

    Results come back in input order. Exceptions are captured per task rather
    than propagated.
    """
    results: list[Any] = await asyncio.gather(*aws, return_exceptions=True)
    settled: list[Settled[T]] = []
    for result in results:
        if isinstance(result, BaseException):
            settled.append(Settled(error=result))
        else:
            settled.append(Settled(value=result))
    return settled
