"""
Optimistic state for toggle controls (like, retweet, follow, friend actions).

A control shows a flipped value as soon as the user clicks, sends the
mutation and then reconciles: the server's answer confirms the value, a
failure rolls it back, and an override nobody confirmed is dropped after a
few seconds so a lost update can't leave the control stuck.

The reconciliation itself is the pure :func:`reduce`. :class:`OptimisticToggle`
wires it to a mutation callable and a cancellable staleness timer.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from logging import getLogger
from typing import Protocol

from socialfeed.core.config import settings

from .errors import ErrorCategory, classify_error

__all__ = [
    "ToggleValue",
    "Confirmed",
    "Optimistic",
    "NoState",
    "State",
    "Toggle",
    "Success",
    "Failure",
    "Stale",
    "ServerUpdate",
    "Event",
    "reduce",
    "displayed",
    "OptimisticToggle",
]

logger = getLogger(__name__)

DEFAULT_STALE_AFTER = settings.OPTIMISTIC_STALE_SECONDS


@dataclass(frozen=True)
class ToggleValue:
    active: bool
    count: int

    def flipped(self) -> "ToggleValue":
        if self.active:
            return ToggleValue(active=False, count=max(0, self.count - 1))
        return ToggleValue(active=True, count=self.count + 1)


# States


@dataclass(frozen=True)
class Confirmed:
    value: ToggleValue


@dataclass(frozen=True)
class Optimistic:
    value: ToggleValue
    stamped_at: float
    # Last value the server confirmed, restored on failure or staleness
    base: ToggleValue | None
    generation: int = 0


@dataclass(frozen=True)
class NoState:
    pass


State = Confirmed | Optimistic | NoState


# Events


@dataclass(frozen=True)
class Toggle:
    at: float
    generation: int = 0


@dataclass(frozen=True)
class Success:
    server_value: ToggleValue | None = None
    generation: int | None = None


@dataclass(frozen=True)
class Failure:
    generation: int | None = None


@dataclass(frozen=True)
class Stale:
    at: float
    max_age: float = DEFAULT_STALE_AFTER


@dataclass(frozen=True)
class ServerUpdate:
    value: ToggleValue


Event = Toggle | Success | Failure | Stale | ServerUpdate


def displayed(state: State) -> ToggleValue | None:
    if isinstance(state, NoState):
        return None
    return state.value


def _restore(base: ToggleValue | None) -> State:
    return Confirmed(base) if base is not None else NoState()


def _superseded(state: Optimistic, generation: int | None) -> bool:
    return generation is not None and generation != state.generation


def reduce(state: State, event: Event) -> State:
    """
    Apply one event to a toggle's state.

    Toggle flips whatever is displayed. Success confirms the server's value
    or, without one, the optimistic value. Failure and Stale restore the last
    confirmed value. A ServerUpdate that matches the override confirms it; one
    that doesn't only moves the base, since the server may not have seen the
    mutation yet.

    Success and Failure tagged with the generation of an older Toggle are
    superseded: they never settle the override, though a superseded Success
    still moves the base to the value the server reported.
    """
    if isinstance(event, Toggle):
        if isinstance(state, NoState):
            return state
        base = state.base if isinstance(state, Optimistic) else state.value
        return Optimistic(
            value=state.value.flipped(),
            stamped_at=event.at,
            generation=event.generation,
            base=base,
        )

    if isinstance(event, ServerUpdate):
        if isinstance(state, Optimistic) and state.value != event.value:
            return replace(state, base=event.value)
        return Confirmed(event.value)

    if not isinstance(state, Optimistic):
        return state

    if isinstance(event, (Success, Failure)) and _superseded(state, event.generation):
        # An older mutation answered while a newer toggle is still in flight
        if isinstance(event, Success) and event.server_value is not None:
            return replace(state, base=event.server_value)
        return state

    if isinstance(event, Success):
        return Confirmed(event.server_value or state.value)
    if isinstance(event, Failure):
        return _restore(state.base)
    if isinstance(event, Stale):
        if event.at - state.stamped_at >= event.max_age:
            return _restore(state.base)
        return state
    raise TypeError(f"Unknown event: {event!r}")


class Cancellable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]
Mutation = Callable[[bool], ToggleValue | None]
ErrorReporter = Callable[[ErrorCategory, str], None]


def _thread_timer(delay: float, callback: Callable[[], None]) -> Cancellable:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class OptimisticToggle:
    """
    Drives one toggle control.

    ``mutation`` receives the desired ``active`` flag and may return the
    server's resulting value. Errors it raises are rolled back and passed to
    ``on_error`` with their category. ``schedule`` and ``clock`` are
    injectable so tests can run the staleness timer by hand.
    """

    def __init__(
        self,
        mutation: Mutation,
        *,
        initial: ToggleValue | None = None,
        on_error: ErrorReporter | None = None,
        stale_after: float = DEFAULT_STALE_AFTER,
        schedule: Scheduler = _thread_timer,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._mutation = mutation
        self._on_error = on_error
        self._stale_after = stale_after
        self._schedule = schedule
        self._clock = clock
        self._lock = threading.RLock()
        self._timer: Cancellable | None = None
        self._generation = 0
        self._state: State = Confirmed(initial) if initial is not None else NoState()

    @property
    def state(self) -> State:
        return self._state

    @property
    def value(self) -> ToggleValue | None:
        return displayed(self._state)

    def _dispatch(self, event: Event) -> State:
        with self._lock:
            self._state = reduce(self._state, event)
            if not isinstance(self._state, Optimistic):
                self._cancel_timer()
            return self._state

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self) -> None:
        self._dispatch(Stale(at=self._clock(), max_age=self._stale_after))

    def server_update(self, value: ToggleValue) -> State:
        return self._dispatch(ServerUpdate(value))

    def toggle(self) -> ToggleValue | None:
        """
        Flip the displayed value, run the mutation and reconcile.

        Returns:
            ToggleValue | None: The value shown after reconciliation.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            state = self._dispatch(Toggle(at=self._clock(), generation=generation))
            if not isinstance(state, Optimistic):
                return displayed(state)
            desired = state.value.active
            self._cancel_timer()
            self._timer = self._schedule(self._stale_after, self._expire)

        try:
            server_value = self._mutation(desired)
        except Exception as e:
            message = str(e)
            category = classify_error(message)
            logger.warning("Optimistic toggle rolled back (%s): %s", category.value, message)
            self._dispatch(Failure(generation))
            if self._on_error is not None:
                self._on_error(category, message)
            return self.value

        self._dispatch(Success(server_value, generation))
        return self.value
