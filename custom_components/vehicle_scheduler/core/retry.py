"""Retry-once policy for command dispatch."""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")


class RetryOncePolicy:
    """Run an attempt and, if it fails, run it exactly one more time.

    No delay between attempts and no further retries regardless of the
    second result. This covers transient remote failures; it does not make
    non-idempotent commands safe to repeat.
    """

    max_attempts = 2

    async def async_run(
        self,
        attempt: Callable[[], Awaitable[T]],
        succeeded: Callable[[T], bool],
        on_retry: Callable[[T], None] | None = None,
    ) -> tuple[T, int]:
        """Run the attempt under the policy.

        Args:
            attempt: Coroutine factory performing one attempt
            succeeded: Predicate deciding whether a result is a success
            on_retry: Called with the failed first result before retrying

        Returns:
            Tuple of (last result, number of attempts made)
        """
        result = await attempt()
        if succeeded(result):
            return result, 1

        if on_retry is not None:
            on_retry(result)
        return await attempt(), self.max_attempts
