"""Backoff policies.

A backoff policy maps an attempt number to the wait before the next attempt.
Every stock policy makes the first execution immediate (attempt 0 yields no
delay) and closes over a single seed delay.

For a seed of 5 seconds:

    attempt      constant   linear   exponential
    0            0s         0s       0s
    1            5s         5s       5s
    2            5s         10s      10s
    3            5s         15s      20s

Exponential growth is not capped here; a huge attempt count overflows
``timedelta`` and raises OverflowError.
"""

from datetime import timedelta
from typing import Callable, Dict, Union

BackoffPolicy = Callable[[int], timedelta]

ZERO = timedelta(0)


def _as_timedelta(seed: Union[timedelta, int, float]) -> timedelta:
    seed_delay = seed if isinstance(seed, timedelta) else timedelta(seconds=seed)
    if seed_delay < ZERO:
        raise ValueError("backoff seed must not be negative")
    return seed_delay


def _check_attempt(attempt: int) -> None:
    if attempt < 0:
        raise ValueError(f"attempt must be >= 0, got {attempt}")


def constant_backoff(seed: Union[timedelta, int, float]) -> BackoffPolicy:
    """Wait the seed delay between every attempt."""
    seed_delay = _as_timedelta(seed)

    def policy(attempt: int) -> timedelta:
        _check_attempt(attempt)
        if attempt == 0:
            return ZERO
        return seed_delay

    return policy


def linear_backoff(seed: Union[timedelta, int, float]) -> BackoffPolicy:
    """Wait seed x attempt."""
    seed_delay = _as_timedelta(seed)

    def policy(attempt: int) -> timedelta:
        _check_attempt(attempt)
        return seed_delay * attempt

    return policy


def exponential_backoff(seed: Union[timedelta, int, float]) -> BackoffPolicy:
    """Wait seed x 2^(attempt - 1), doubling after the first retry."""
    seed_delay = _as_timedelta(seed)

    def policy(attempt: int) -> timedelta:
        _check_attempt(attempt)
        if attempt == 0:
            return ZERO
        return seed_delay * (2 ** (attempt - 1))

    return policy


BACKOFF_STRATEGIES: Dict[str, Callable[[Union[timedelta, int, float]], BackoffPolicy]] = {
    "constant": constant_backoff,
    "linear": linear_backoff,
    "exponential": exponential_backoff,
}


def get_backoff_policy(
    name: str, seed: Union[timedelta, int, float]
) -> BackoffPolicy:
    """Build a stock backoff policy by name.

    Args:
        name: 'constant', 'linear' or 'exponential' (case-insensitive)
        seed: Seed delay as a timedelta or a number of seconds

    Returns:
        The backoff policy

    Raises:
        ValueError: If the name is unknown or the seed is negative
    """
    factory = BACKOFF_STRATEGIES.get(name.strip().lower())
    if factory is None:
        raise ValueError(
            f"Unknown backoff strategy: {name}. "
            f"Supported: {', '.join(sorted(BACKOFF_STRATEGIES))}"
        )
    return factory(seed)
