"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into their error envelope
(``exc.to_dict()`` with ``exc.status_code``); the view never swallows
generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import invalid_input_from_pydantic
from modules.core.identifiers import parse_uuid
from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidInput,
    InvalidTransition,
    OrderNotFound,
    PersistenceFailure,
    ProductNotFound,
    TerminalState,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import SalesOrder
from modules.orders.notifications import CeleryOrderNotifier
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderInputSerializer,
    OrderSerializer,
    StatusUpdateSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import InventoryDjangoLedger


class OrderViewSet(GenericViewSet):
    """ViewSet for SalesOrder operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer, and orders are never deleted.
    """

    queryset = SalesOrder.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            inventory_ledger=InventoryDjangoLedger(),
            notifier=CeleryOrderNotifier(),
        )

    def get_queryset(self):
        return self._service.list_orders()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/orders/"""
        serializer = OrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateOrderDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            error = invalid_input_from_pydantic(exc)
            return Response(error.to_dict(), status=error.status_code)

        try:
            order = self._service.create_order(dto)
        except (InvalidInput, InsufficientStock, PersistenceFailure) as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(
            {
                "message": "Order created successfully",
                "order": OrderSerializer(order).data,
                "stockUpdated": True,
            },
            status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/orders/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/orders/{pk}/"""
        try:
            order = self._service.get_order(str(parse_uuid(pk, "order ID")))
        except (InvalidInput, OrderNotFound) as exc:
            return Response(exc.to_dict(), status=exc.status_code)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/orders/{pk}/

        Replaces customer fields, order date and lines.  Stock is untouched;
        status changes go through ``PATCH .../status/``.
        """
        try:
            order_id = parse_uuid(pk, "order ID")
        except InvalidInput as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        serializer = OrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateOrderDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            error = invalid_input_from_pydantic(exc)
            return Response(error.to_dict(), status=error.status_code)

        try:
            order = self._service.update_order(str(order_id), dto)
        except (
            OrderNotFound,
            ProductNotFound,
            TerminalState,
            InvalidTransition,
            PersistenceFailure,
        ) as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(
            {"message": "Order updated successfully", "order": OrderSerializer(order).data}
        )

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/orders/{pk}/status/"""
        try:
            order_id = parse_uuid(pk, "order ID")
        except InvalidInput as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]

        try:
            order = self._service.update_status(str(order_id), new_status)
        except (
            InvalidInput,
            OrderNotFound,
            TerminalState,
            InvalidTransition,
            InsufficientStock,
            PersistenceFailure,
        ) as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(
            {
                "message": f'Status updated to "{new_status}" successfully',
                "order": OrderSerializer(order).data,
            }
        )
