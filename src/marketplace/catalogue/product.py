"""Product aggregate — an item a supplier offers on the marketplace."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.catalogue.events import ProductListed, ProductStatusChanged
from marketplace.domain import marketplace


class ProductStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@marketplace.aggregate
class Product:
    supplier_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)  # Ethiopian birr
    stock = Integer(default=0, min_value=0)
    category = String(max_length=100)
    status = String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    image_url = String(max_length=500)
    created_at = DateTime()

    @classmethod
    def create(cls, supplier_id, name, price, stock=0, category=None, description=None, image_url=None):
        now = datetime.now(UTC)
        product = cls(
            supplier_id=supplier_id,
            name=name,
            price=price,
            stock=stock,
            category=category,
            description=description,
            image_url=image_url,
            status=ProductStatus.ACTIVE.value,
            created_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                supplier_id=str(supplier_id),
                name=name,
                price=price,
                category=category,
                listed_at=now,
            )
        )
        return product

    @property
    def is_active(self):
        return self.status == ProductStatus.ACTIVE.value

    def change_status(self, new_status):
        try:
            new_status = ProductStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown product status: {new_status!r}"]}) from None

        if new_status.value == self.status:
            return

        previous = self.status
        self.status = new_status.value
        self.raise_(
            ProductStatusChanged(
                product_id=str(self.id),
                previous_status=previous,
                new_status=new_status.value,
            )
        )
