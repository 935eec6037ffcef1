from collections import defaultdict
from collections.abc import Iterable
from enum import StrEnum
from typing import Generic, Literal, NamedTuple, TypeVar

from matchday.utils.errors import (
    AuthorizationError,
    LifecycleError,
    TransitionError,
    ValidationError,
)

StateT = TypeVar("StateT", bound=StrEnum)

VerdictKind = Literal["allowed", "transition", "authorization", "validation"]


class TransitionVerdict(NamedTuple):
    allowed: bool
    kind: VerdictKind = "allowed"
    reason: str | None = None

    @classmethod
    def permit(cls) -> "TransitionVerdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, kind: VerdictKind, reason: str) -> "TransitionVerdict":
        return cls(allowed=False, kind=kind, reason=reason)

    def raise_if_denied(self) -> None:
        if self.allowed:
            return

        error_type: type[LifecycleError] = {
            "transition": TransitionError,
            "authorization": AuthorizationError,
            "validation": ValidationError,
        }[self.kind]
        raise error_type(self.reason or "Transition not allowed")


class StateMachine(Generic[StateT]):
    """
    Finite state machine described by a list of directed edges.

    Matches and season registrations share this, only their edge lists differ. Any pair that is
    not an edge (including staying in the same state) is an invalid transition.
    """

    def __init__(self, name: str, edges: Iterable[tuple[StateT, StateT]]) -> None:
        self.name = name
        self._edges: dict[StateT, set[StateT]] = defaultdict(set)
        for source, target in edges:
            self._edges[source].add(target)

    def targets(self, current: StateT) -> frozenset[StateT]:
        return frozenset(self._edges.get(current, set()))

    def is_terminal(self, state: StateT) -> bool:
        return len(self.targets(state)) < 1

    def can_transition(self, current: StateT, target: StateT) -> bool:
        return target in self.targets(current)

    def edges(self) -> list[tuple[StateT, StateT]]:
        return [(source, target) for source, targets in self._edges.items() for target in targets]

    def check(self, current: StateT, target: StateT) -> TransitionVerdict:
        if self.can_transition(current, target):
            return TransitionVerdict.permit()

        return TransitionVerdict.deny(
            "transition",
            f"Invalid state transition from {current.value} to {target.value}",
        )

    def require(self, current: StateT, target: StateT) -> None:
        self.check(current, target).raise_if_denied()
