"""Wait for observed device state to converge.

A watch follows a stream of values for one endpoint until a predicate holds
or the deadline elapses. Streams come from a :class:`StateSource`; polling a
blocking getter and push based delivery look the same to the waiter.

Several watches run concurrently and are joined before returning, so a caller
only proceeds once every endpoint converged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from nidefaults.exceptions import ConvergenceTimeout

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterable

_LOGGER = logging.getLogger(__name__)


class StateSource(Protocol):
    """Source of observed values for a single state path."""

    def values(self) -> AsyncIterator[Any]:
        """Return an asynchronous stream of observed values.

        :return: observed values, newest last
        """


class PollingStateSource:
    """Turn a blocking state getter into a stream of values."""

    def __init__(self, getter: Callable[[], Any], interval: float = 1.0) -> None:
        """Initialize the polling source.

        :param getter: callable returning the current value, None when not present
        :type getter: Callable[[], Any]
        :param interval: seconds between two reads, defaults to 1.0
        :type interval: float
        """
        self._getter = getter
        self._interval = interval

    async def values(self) -> AsyncIterator[Any]:
        """Read the state now and then every interval.

        Reads run on a worker owned by this stream. Closing the stream does
        not wait for a read still blocked in the getter.

        :yield: value returned by the getter
        """
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="state-poll")
        try:
            while True:
                yield await loop.run_in_executor(executor, self._getter)
                await asyncio.sleep(self._interval)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


def is_present(value: Any) -> bool:  # noqa: ANN401
    """Return True if a state value is present.

    :param value: observed value
    :type value: Any
    :return: False for None and empty containers
    :rtype: bool
    """
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict, set, str)):
        return bool(value)
    return True


@dataclass(frozen=True)
class WatchRequest:
    """Condition one endpoint has to reach."""

    endpoint: str
    source: StateSource
    predicate: Callable[[Any], bool] = is_present
    path: str = ""


@dataclass
class ConvergenceResult:
    """Outcome of waiting on a group of watches."""

    satisfied: dict[str, Any] = field(default_factory=dict)
    timed_out: tuple[str, ...] = ()
    observed: dict[str, Any] = field(default_factory=dict)
    elapsed: float = 0.0

    @property
    def converged(self) -> bool:
        """True when every watched endpoint satisfied its predicate."""
        return not self.timed_out

    def raise_for_timeout(self) -> None:
        """Raise if any endpoint did not converge.

        :raises ConvergenceTimeout: naming the unresolved endpoints
        """
        if self.timed_out:
            raise ConvergenceTimeout(
                self.timed_out,
                {endpoint: self.observed.get(endpoint) for endpoint in self.timed_out},
            )


_NOT_SATISFIED = object()


async def _watch(
    request: WatchRequest,
    deadline: float,
    observed: dict[str, Any],
) -> Any:  # noqa: ANN401
    _LOGGER.info("Checking %s on %s", request.path or "state", request.endpoint)
    timeout = asyncio.timeout(deadline)
    try:
        async with timeout:
            async with aclosing(request.source.values()) as values:
                async for value in values:
                    observed[request.endpoint] = value
                    if request.predicate(value):
                        return value
            # a finished stream cannot satisfy the predicate any more
            await asyncio.sleep(deadline)
    except TimeoutError:
        if not timeout.expired():
            # raised by the state read itself
            raise
        _LOGGER.warning(
            "%s did not converge within %ss, last observed %r",
            request.endpoint,
            deadline,
            observed.get(request.endpoint),
        )
    return _NOT_SATISFIED


async def await_all(
    requests: Iterable[WatchRequest],
    deadline: float,
) -> ConvergenceResult:
    """Wait until every request is satisfied or its deadline elapsed.

    :param requests: watches to run concurrently
    :type requests: Iterable[WatchRequest]
    :param deadline: seconds each watch may take
    :type deadline: float
    :raises ValueError: when an endpoint is watched twice
    :return: satisfied values and the endpoints that timed out
    :rtype: ConvergenceResult
    """
    requests = list(requests)
    endpoints = [request.endpoint for request in requests]
    if len(set(endpoints)) != len(endpoints):
        msg = f"Endpoints must be watched only once: {endpoints}"
        raise ValueError(msg)
    observed: dict[str, Any] = {}
    start_time = time.monotonic()
    try:
        async with asyncio.TaskGroup() as task_group:
            tasks = {
                request.endpoint: task_group.create_task(
                    _watch(request, deadline, observed),
                )
                for request in requests
            }
    except ExceptionGroup as exc_group:
        # a failing state read is fatal, surface the first error
        raise exc_group.exceptions[0] from exc_group
    result = ConvergenceResult(
        observed=observed,
        elapsed=time.monotonic() - start_time,
    )
    timed_out = []
    for endpoint, task in tasks.items():
        if (value := task.result()) is _NOT_SATISFIED:
            timed_out.append(endpoint)
        else:
            result.satisfied[endpoint] = value
    result.timed_out = tuple(timed_out)
    _LOGGER.debug("Convergence wait ran for %ss.", result.elapsed)
    return result


def wait_for_convergence(
    requests: Iterable[WatchRequest],
    deadline: float,
) -> ConvergenceResult:
    """Block until every request is satisfied or its deadline elapsed.

    :param requests: watches to run concurrently
    :type requests: Iterable[WatchRequest]
    :param deadline: seconds each watch may take
    :type deadline: float
    :return: satisfied values and the endpoints that timed out
    :rtype: ConvergenceResult
    """
    return asyncio.run(await_all(requests, deadline))
