"""Unit tests for ProductService."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.models import Product
from modules.products.repositories import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ProductService(repository=ProductDjangoRepository())


class TestCreateProduct:
    def test_creates_with_normalised_sku(self, service):
        product = service.create_product(
            CreateProductDTO(sku=" kb-01 ", name="Keyboard", price=Decimal("399.90"))
        )

        assert product.sku == "KB-01"
        assert product.stock_quantity == 0
        assert product.status == "active"

    def test_duplicate_sku(self, service, make_product):
        make_product(sku="KB-01")

        with pytest.raises(ProductAlreadyExists) as exc_info:
            service.create_product(
                CreateProductDTO(sku="kb-01", name="Other", price=Decimal("1.00"))
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.to_dict()["sku"] == "KB-01"


class TestUpdateProduct:
    def test_only_supplied_fields_change(self, service, make_product):
        product = make_product(name="Old", price=Decimal("5.00"), stock_quantity=3)

        updated = service.update_product(
            str(product.id), UpdateProductDTO(price=Decimal("6.00"))
        )

        assert updated.price == Decimal("6.00")
        assert updated.name == "Old"
        assert updated.stock_quantity == 3

    def test_sku_taken_by_another_product(self, service, make_product):
        make_product(sku="TAKEN")
        product = make_product(sku="MINE")

        with pytest.raises(ProductAlreadyExists):
            service.update_product(str(product.id), UpdateProductDTO(sku="taken"))

    def test_missing_product(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product(str(uuid4()), UpdateProductDTO(name="x"))


class TestDeleteProduct:
    def test_deletes_unreferenced_product(self, service, make_product):
        product = make_product()
        service.delete_product(str(product.id))
        assert not Product.objects.filter(id=product.id).exists()

    def test_referenced_product_is_in_use(
        self, service, make_product, order_service, make_order_dto
    ):
        product = make_product()
        order_service.create_order(make_order_dto([(product, 1, Decimal("1.00"))]))

        with pytest.raises(ProductInUse):
            service.delete_product(str(product.id))

        assert Product.objects.filter(id=product.id).exists()

    def test_missing_product(self, service):
        with pytest.raises(ProductNotFound):
            service.delete_product(str(uuid4()))
