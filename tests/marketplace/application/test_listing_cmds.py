"""Application tests for supplier product listing."""

import pytest
from marketplace.catalogue.listing import ChangeProductStatus
from marketplace.catalogue.product import Product, ProductStatus
from marketplace.shared.errors import NotPermittedError
from protean import current_domain


class TestListProduct:
    def test_supplier_lists_product(self, sms_supplier_id, list_product):
        product_id = list_product(sms_supplier_id, name="Shemma scarf", price=350.0, category="textiles")

        product = current_domain.repository_for(Product).get(product_id)
        assert product.supplier_id == sms_supplier_id
        assert product.price == 350.0
        assert product.status == ProductStatus.ACTIVE.value

    def test_client_cannot_list(self, buyer_id, list_product):
        with pytest.raises(NotPermittedError):
            list_product(buyer_id)


class TestChangeProductStatus:
    def test_owner_deactivates(self, sms_supplier_id, basket_id):
        current_domain.process(
            ChangeProductStatus(actor_id=sms_supplier_id, product_id=basket_id, status="inactive"),
            asynchronous=False,
        )
        product = current_domain.repository_for(Product).get(basket_id)
        assert product.status == ProductStatus.INACTIVE.value

    def test_other_supplier_cannot_change(self, app_supplier_id, basket_id):
        with pytest.raises(NotPermittedError):
            current_domain.process(
                ChangeProductStatus(actor_id=app_supplier_id, product_id=basket_id, status="inactive"),
                asynchronous=False,
            )
