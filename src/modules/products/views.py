"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into their error envelope
(``exc.to_dict()`` with ``exc.status_code``); the view never swallows
generic exceptions.

Reads and creation are public.  Updates and deletion are internal-only and
require the ``X-Internal-Key`` header.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import InvalidInput, invalid_input_from_pydantic
from modules.core.identifiers import parse_uuid
from modules.core.permissions import IsInternalRequest
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductInputSerializer, ProductSerializer
from modules.products.services import ProductService

_INTERNAL_ACTIONS = {"update", "partial_update", "destroy"}


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "sku", "description"]
    ordering_fields = ["name", "price", "stock_quantity", "created_at"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action in _INTERNAL_ACTIONS:
            return [IsInternalRequest()]
        return [AllowAny()]

    def get_queryset(self):
        return self._service.list_products()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/products/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = ProductSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/products/{pk}/"""
        try:
            product = self._service.get_product(str(parse_uuid(pk, "product ID")))
        except (InvalidInput, ProductNotFound) as exc:
            return Response(exc.to_dict(), status=exc.status_code)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/products/"""
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateProductDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            error = invalid_input_from_pydantic(exc)
            return Response(error.to_dict(), status=error.status_code)

        try:
            product = self._service.create_product(dto)
        except ProductAlreadyExists as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/products/{pk}/ (internal only)"""
        return self._update(request, pk, partial=False)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/products/{pk}/ (internal only)"""
        return self._update(request, pk, partial=True)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/products/{pk}/ (internal only)"""
        try:
            product_id = parse_uuid(pk, "product ID")
            self._service.delete_product(str(product_id))
        except (InvalidInput, ProductNotFound, ProductInUse) as exc:
            return Response(exc.to_dict(), status=exc.status_code)
        return Response(
            {"message": "Product deleted successfully", "productId": str(product_id)},
            status=status.HTTP_200_OK,
        )

    def _update(self, request: Request, pk: str | None, partial: bool) -> Response:
        serializer = ProductInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateProductDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            error = invalid_input_from_pydantic(exc)
            return Response(error.to_dict(), status=error.status_code)

        try:
            product = self._service.update_product(
                str(parse_uuid(pk, "product ID")), dto
            )
        except (InvalidInput, ProductNotFound, ProductAlreadyExists) as exc:
            return Response(exc.to_dict(), status=exc.status_code)

        return Response(ProductSerializer(product).data)

