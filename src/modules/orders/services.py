"""Order service layer (Use Cases).

Orchestrates order placement, status management, cancellation and
delivery tracking. All write operations are atomic: the service
defines the unit-of-work boundary.

Order placement runs the following stages inside one transaction:

    STARTED -> CUSTOMER_RESOLVED -> ORDER_CREATED -> ITEMS_INSERTED
            -> INVENTORY_UPDATED -> DELIVERY_CREATED -> COMMITTED

Any failure before COMMITTED rolls every write back (ROLLED_BACK).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from django.db import DatabaseError, transaction

from modules.orders.constants import (
    DeliveryStatus,
    OrderStatus,
    PlacementStage,
)
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidDeliveryStatus,
    InvalidOrderStatus,
    OrderNotFound,
    StoreFailure,
)

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import PlaceOrderDTO
    from modules.orders.models import Delivery, Order
    from modules.orders.repositories.interfaces import (
        IDeliveryRepository,
        IOrderRepository,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
        delivery_repository: IDeliveryRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository
        self._delivery_repo = delivery_repository

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place_order(self, dto: PlaceOrderDTO) -> Order:
        """Place an order as one atomic unit.

        Steps:
        1. Resolve the customer by email (insert-or-get).
        2. Insert the order (``pending``, created now).
        3. Insert all line items.
        4. Decrement stock per item, in request order, with a conditional
           UPDATE. The first short item aborts the placement.
        5. Insert the ``pending`` delivery.

        Nothing is retried and no in-process lock is taken; concurrent
        placements are serialised by the database row locks.

        Raises:
            InsufficientStock: a product is missing or holds too few units.
            StoreFailure: the database rejected a statement or the commit.
        """
        stage = PlacementStage.STARTED
        log = logger.bind(item_count=len(dto.items), email=dto.customer.email)
        log.info("order.placement_started", stage=stage.value)

        try:
            with transaction.atomic():
                customer, created = self._customer_repo.get_or_create_by_email(
                    name=dto.customer.name,
                    email=dto.customer.email,
                    phone=dto.customer.phone,
                )
                stage = PlacementStage.CUSTOMER_RESOLVED
                log = log.bind(customer_id=customer.id)
                log.info("order.stage", stage=stage.value, customer_created=created)

                order = self._order_repo.create(customer)
                stage = PlacementStage.ORDER_CREATED
                log = log.bind(order_id=order.id)
                log.info("order.stage", stage=stage.value)

                self._order_repo.add_items(order, dto.items)
                stage = PlacementStage.ITEMS_INSERTED
                log.info("order.stage", stage=stage.value)

                for item in dto.items:
                    if not self._product_repo.decrement_stock(
                        item.product_id, item.quantity
                    ):
                        raise InsufficientStock(item.product_id)
                    log.info(
                        "order.stock_decremented",
                        product_id=item.product_id,
                        quantity=item.quantity,
                    )
                stage = PlacementStage.INVENTORY_UPDATED
                log.info("order.stage", stage=stage.value)

                self._delivery_repo.create_for_order(order)
                stage = PlacementStage.DELIVERY_CREATED
                log.info("order.stage", stage=stage.value)
        except InsufficientStock as exc:
            log.warning(
                "order.insufficient_stock",
                product_id=exc.product_id,
                failed_after=stage.value,
                stage=PlacementStage.ROLLED_BACK.value,
            )
            raise
        except DatabaseError as exc:
            log.error(
                "order.store_failure",
                failed_after=stage.value,
                stage=PlacementStage.ROLLED_BACK.value,
                error=str(exc),
            )
            raise StoreFailure(str(exc), stage=stage) from exc

        log.info("order.placed", stage=PlacementStage.COMMITTED.value)
        return order

    # ------------------------------------------------------------------
    # Status management
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(self, order_id: int, new_status: str) -> Order:
        """Transition an order to a new status.

        Acquires a row-level lock (``SELECT FOR UPDATE``) on the order
        before validating the transition. Cancellation is not accepted
        here because it must also restore stock; use ``cancel_order``.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(
            order_id=order_id,
            current_status=order.status,
            new_status=new_status,
        )

        if new_status == OrderStatus.CANCELLED:
            log.warning("order.cancel_via_status_rejected")
            raise InvalidOrderStatus(
                "Use POST /orders/{id}/cancel to cancel an order."
            )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

        order.status = new_status
        self._order_repo.save(order)
        log.info("order.status_updated")
        return self._order_repo.get_by_id(order_id)

    @transaction.atomic
    def cancel_order(self, order_id: int) -> Order:
        """Cancel an order, put its stock back and cancel its delivery.

        Acquires a row-level lock on the order **first** so concurrent
        cancellations cannot restore stock twice.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: cancellation not allowed from current status.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=order_id, current_status=order.status)

        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(f"Cannot cancel order in status {order.status}.")

        for item in order.items.all():
            self._product_repo.increment_stock(item.product_id, item.quantity)
            log.info(
                "order.stock_restored",
                product_id=item.product_id,
                quantity=item.quantity,
            )

        order.status = OrderStatus.CANCELLED
        self._order_repo.save(order)

        delivery = self._delivery_repo.get_for_update(order_id)
        if delivery and delivery.status != DeliveryStatus.CANCELLED:
            delivery.status = DeliveryStatus.CANCELLED
            self._delivery_repo.save(delivery)

        log.info("order.cancelled")
        return self._order_repo.get_by_id(order_id)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def get_delivery(self, order_id: int) -> Delivery:
        """Retrieve the delivery of an order.

        Raises:
            OrderNotFound: no delivery exists for the order.
        """
        delivery = self._delivery_repo.get_by_id(order_id)
        if not delivery:
            raise OrderNotFound(f"Order {order_id} not found.")
        return delivery

    @transaction.atomic
    def update_delivery(
        self,
        order_id: int,
        status: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Delivery:
        """Move a delivery along its state machine and/or record its location.

        Raises:
            OrderNotFound: no delivery exists for the order.
            InvalidDeliveryStatus: transition is not allowed.
        """
        delivery = self._delivery_repo.get_for_update(order_id)
        if not delivery:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=order_id, current_status=delivery.status)

        if status is not None and status != delivery.status:
            if not delivery.can_transition_to(status):
                log.warning("delivery.invalid_transition", new_status=status)
                raise InvalidDeliveryStatus(
                    f"Cannot transition delivery from {delivery.status} to {status}."
                )
            delivery.status = status

        if location is not None:
            delivery.location = location

        self._delivery_repo.save(delivery)
        log.info("delivery.updated", new_status=delivery.status)
        return delivery

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order
