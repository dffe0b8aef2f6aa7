"""Order status state machine.

``OrderStateMachine`` answers two questions for a (current, requested)
status pair:

1. Is the transition allowed?  ``validate`` raises ``UnknownStatus``,
   ``TerminalState`` or ``InvalidTransition`` otherwise.
2. Which stock action goes with it?  ``stock_action`` returns exactly one
   ``StockAction``:

   - into ``cancelled`` from a non-terminal state: ``RELEASE`` (return every
     line's quantity to stock);
   - ``pending -> confirmed``: ``COMMIT`` (decrement every line's quantity
     again; stock was already decremented at creation);
   - anything else: ``NONE``.

The machine holds its tables by reference and never mutates them, so a
single module-level instance (``order_state_machine``) is shared by every
service.
"""

from __future__ import annotations

import enum
from typing import Mapping, Tuple

from modules.orders.constants import (
    STATUS_RANK,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from modules.orders.exceptions import InvalidTransition, TerminalState, UnknownStatus


class StockAction(enum.Enum):
    NONE = "none"
    RELEASE = "release"
    COMMIT = "commit"


class OrderStateMachine:
    def __init__(
        self,
        transitions: Mapping[str, Tuple[str, ...]] = VALID_TRANSITIONS,
        ranks: Mapping[str, int] = STATUS_RANK,
    ) -> None:
        self._transitions = transitions
        self._ranks = ranks

    @property
    def statuses(self) -> Tuple[str, ...]:
        return tuple(str(status) for status in self._transitions)

    def is_known(self, status: str) -> bool:
        return status in self._transitions

    def allowed_next(self, current: str) -> Tuple[str, ...]:
        return tuple(str(status) for status in self._transitions.get(current, ()))

    def can_transition(self, current: str, requested: str) -> bool:
        return requested in self._transitions.get(current, ())

    def validate(self, current: str, requested: str) -> None:
        """Raise if ``current -> requested`` is not a legal transition.

        Checks run in a fixed order: unknown status, delivered (terminal),
        backward motion or leaving cancelled, then the explicit table.
        """
        if not self.is_known(requested):
            raise UnknownStatus(requested, allowed=self.statuses)

        if current == OrderStatus.DELIVERED:
            raise TerminalState(current=str(current), requested=requested)

        moves_backward = self._ranks[requested] < self._ranks[current]
        leaves_cancelled = (
            current == OrderStatus.CANCELLED and requested != OrderStatus.CANCELLED
        )
        if (
            moves_backward
            or leaves_cancelled
            or not self.can_transition(current, requested)
        ):
            raise InvalidTransition(
                current=str(current),
                requested=requested,
                allowed=self.allowed_next(current),
            )

    def stock_action(self, current: str, requested: str) -> StockAction:
        if requested == OrderStatus.CANCELLED and current not in TERMINAL_STATES:
            return StockAction.RELEASE
        if current == OrderStatus.PENDING and requested == OrderStatus.CONFIRMED:
            return StockAction.COMMIT
        return StockAction.NONE


order_state_machine = OrderStateMachine()
