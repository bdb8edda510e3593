"""
Order lifecycle rules.

Statuses move forward one step at a time:

    pending -> processing -> shipped -> delivered

`cancelled` can be entered from any non-terminal status. `delivered` and
`cancelled` are terminal and never advance.
"""
from typing import FrozenSet, Tuple
import structlog
from orderflow.modules.orders.enums import OrderStatus
from orderflow.modules.orders.models import Order

logger = structlog.get_logger(__name__)

FORWARD_SEQUENCE: Tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)


class InvalidTransitionError(ValueError):
    """Raised when a requested status is not reachable from the current one"""

    def __init__(self, current: OrderStatus, target: OrderStatus):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move order from '{current.value}' to '{target.value}'"
        )


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_advance(status: OrderStatus) -> bool:
    """True for pending, processing and shipped"""
    return not is_terminal(status)


def next_status(current: OrderStatus) -> OrderStatus:
    """Next status in the forward sequence. Terminal statuses map to themselves."""
    if is_terminal(current):
        return current
    return FORWARD_SEQUENCE[FORWARD_SEQUENCE.index(current) + 1]


def allowed_targets(current: OrderStatus) -> FrozenSet[OrderStatus]:
    if is_terminal(current):
        return frozenset()
    return frozenset({next_status(current), OrderStatus.CANCELLED})


def apply_transition(order: Order, target: OrderStatus) -> OrderStatus:
    """
    Move `order` to `target` and return the status it had before.

    Requesting the current status is a no-op. Any target outside
    `allowed_targets` raises InvalidTransitionError and leaves the order
    untouched. Timestamps and tracking events are not modified.
    """
    target = OrderStatus(target)
    previous = order.status
    if target == previous:
        return previous
    if target not in allowed_targets(previous):
        raise InvalidTransitionError(previous, target)

    order.status = target
    logger.info(
        "order_transitioned",
        order_id=order.id,
        old_status=previous.value,
        new_status=target.value,
    )
    return previous
