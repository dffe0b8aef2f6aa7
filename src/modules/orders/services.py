"""Order service layer (Use Cases).

Orchestrates the order lifecycle: stock-aware creation, status transitions
with their compensating stock adjustments, full order updates and queries.
Every write runs in one ``transaction.atomic()`` block; the service defines
the unit-of-work boundary and any ``DatabaseError`` inside it surfaces as
``PersistenceFailure``.

Business rules enforced:
- Every line must be covered by current stock before anything is written.
- Total = sum of quantity x caller-supplied price.
- Stock is decremented at creation and, for ``pending -> confirmed``, once
  more at confirmation; cancelling from a non-terminal state returns every
  line's quantity.
- Status moves are validated by ``OrderStateMachine``.
- The third-party push happens after commit and cannot affect the order.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

import structlog
from django.db import DatabaseError, transaction

from modules.orders.constants import CREATABLE_STATUSES
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidInput,
    InvalidTransition,
    OrderNotFound,
    PersistenceFailure,
    ProductNotFound,
    TerminalState,
    UnknownStatus,
)
from modules.orders.state_machine import StockAction, order_state_machine

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO
    from modules.orders.models import SalesOrder
    from modules.orders.notifications import IOrderNotifier
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.state_machine import OrderStateMachine
    from modules.products.repositories.interfaces import IInventoryLedger

logger = structlog.get_logger(__name__)


@contextmanager
def _unit_of_work(log) -> Iterator[None]:
    try:
        with transaction.atomic():
            yield
    except DatabaseError as exc:
        log.error("order.persistence_failed", error=str(exc))
        raise PersistenceFailure() from exc


class OrderService:
    """Application service for SalesOrder use-cases.

    Receives its collaborators via constructor injection (DIP).  The state
    machine defaults to the shared, immutable module-level instance.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        inventory_ledger: IInventoryLedger,
        notifier: IOrderNotifier,
        state_machine: OrderStateMachine = order_state_machine,
    ) -> None:
        self._order_repo = order_repository
        self._ledger = inventory_ledger
        self._notifier = notifier
        self._state_machine = state_machine

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> SalesOrder:
        """Create an order, decrement stock and schedule the third-party push.

        Steps:
        1. Lock every referenced product row (primary-key order).
        2. Check stock for each line in request order; the first shortfall
           aborts with nothing written.
        3. Persist order + lines and decrement stock in the same transaction.
        4. After commit, hand the order to the notifier.

        Raises:
            UnknownStatus: ``dto.status`` is not a recognised status.
            InvalidInput: ``dto.status`` is ``cancelled``.
            InsufficientStock: a product is missing or short on stock.
            PersistenceFailure: the database aborted the transaction.
        """
        log = logger.bind(
            customer_name=dto.customer_name,
            item_count=len(dto.items),
            status=dto.status,
        )
        log.info("order.creation_started")

        self._check_initial_status(dto.status)

        with _unit_of_work(log):
            products = self._ledger.lock_products(item.product_id for item in dto.items)

            for item in dto.items:
                product = products.get(item.product_id)
                available = product.stock_quantity if product else 0
                if available < item.quantity:
                    log.warning(
                        "order.insufficient_stock",
                        product_id=str(item.product_id),
                        available=available,
                        requested=item.quantity,
                    )
                    raise InsufficientStock(
                        item.product_id, available=available, requested=item.quantity
                    )

            order = self._order_repo.create(
                {
                    "customer_name": dto.customer_name,
                    "email": dto.email,
                    "mobile_number": dto.mobile_number,
                    "status": dto.status,
                    "order_date": dto.order_date,
                    "items": [item.model_dump() for item in dto.items],
                }
            )
            for item in dto.items:
                self._ledger.decrement(item.product_id, item.quantity)

            created = self._order_repo.get_by_id(str(order.id))
            transaction.on_commit(
                lambda: self._notifier.notify(created), robust=True
            )

        log.info(
            "order.created",
            order_id=str(created.id),
            order_number=created.order_number,
            total_amount=str(created.total_amount),
        )
        return created

    def update_status(self, order_id: str, requested_status: str) -> SalesOrder:
        """Move an order to ``requested_status`` and apply its stock action.

        The order row stays locked while the transition is validated, the
        stock deltas are applied and the new status is written.

        Raises:
            UnknownStatus: not one of the five statuses.
            OrderNotFound: order does not exist.
            TerminalState: order is delivered.
            InvalidTransition: move not allowed from the current status.
            InsufficientStock: confirmation found a line short on stock.
            PersistenceFailure: the database aborted the transaction.
        """
        log = logger.bind(order_id=str(order_id), requested_status=requested_status)

        if not self._state_machine.is_known(requested_status):
            log.warning("order.unknown_status")
            raise UnknownStatus(requested_status, allowed=self._state_machine.statuses)

        with _unit_of_work(log):
            order = self._order_repo.get_for_update(str(order_id))
            if order is None:
                raise OrderNotFound(orderId=str(order_id))

            current = str(order.status)
            log = log.bind(current_status=current)
            try:
                self._state_machine.validate(current, requested_status)
            except (TerminalState, InvalidTransition) as exc:
                log.warning("order.transition_rejected", code=exc.code)
                raise

            action = self._state_machine.stock_action(current, requested_status)
            self._apply_stock_action(order, action, log)
            self._order_repo.set_status(order, requested_status)

        log.info("order.status_updated", stock_action=action.value)
        return self._order_repo.get_by_id(str(order_id))

    def update_order(self, order_id: str, dto: UpdateOrderDTO) -> SalesOrder:
        """Replace customer fields, order date and lines of an order.

        Lines are deleted and recreated; the total is recomputed from them.
        Stock is not touched and the status can only change through
        ``update_status``.

        Raises:
            OrderNotFound: order does not exist.
            TerminalState: order is delivered or cancelled.
            InvalidTransition: ``dto.status`` differs from the current status.
            ProductNotFound: a line references an unknown product.
            PersistenceFailure: the database aborted the transaction.
        """
        log = logger.bind(order_id=str(order_id), item_count=len(dto.items))

        with _unit_of_work(log):
            order = self._order_repo.get_for_update(str(order_id))
            if order is None:
                raise OrderNotFound(orderId=str(order_id))

            current = str(order.status)
            if order.is_terminal:
                raise TerminalState(current=current, requested=dto.status)
            if dto.status is not None and dto.status != current:
                raise InvalidTransition(
                    current=current,
                    requested=dto.status,
                    allowed=self._state_machine.allowed_next(current),
                )

            products = self._ledger.lock_products(item.product_id for item in dto.items)
            for item in dto.items:
                if item.product_id not in products:
                    raise ProductNotFound(
                        f"Product {item.product_id} not found.",
                        productId=str(item.product_id),
                    )

            self._order_repo.update(
                str(order.id),
                {
                    "customer_name": dto.customer_name,
                    "email": dto.email,
                    "mobile_number": dto.mobile_number,
                    "order_date": dto.order_date,
                    "items": [item.model_dump() for item in dto.items],
                },
            )

        updated = self._order_repo.get_by_id(str(order_id))
        log.info("order.updated", total_amount=str(updated.total_amount))
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> SalesOrder:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(orderId=str(order_id))
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Return orders newest first, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_initial_status(self, status: str) -> None:
        if not self._state_machine.is_known(status):
            raise UnknownStatus(status, allowed=self._state_machine.statuses)
        if status not in CREATABLE_STATUSES:
            raise InvalidInput(
                "Orders cannot be created as cancelled",
                status=status,
                allowed=sorted(str(s) for s in CREATABLE_STATUSES),
            )

    def _apply_stock_action(self, order: SalesOrder, action: StockAction, log) -> None:
        if action is StockAction.NONE:
            return

        for item in order.items.all():
            if action is StockAction.RELEASE:
                self._ledger.increment(item.product_id, item.quantity)
            else:
                self._ledger.decrement(item.product_id, item.quantity)

        log.info(
            "order.stock_adjusted",
            stock_action=action.value,
            line_count=len(order.items.all()),
        )
