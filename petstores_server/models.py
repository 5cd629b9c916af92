"""Data models for the Petstores shop."""

from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Exact in memory, a plain JSON number on the wire.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: float(value), return_type=float, when_used="json"),
]

ProductCategory = Literal["dog", "cat"]


class ShopModel(BaseModel):
    """Base model using camelCase names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(ShopModel):
    """Represents a product in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Product ID")
    name: str = Field(description="Product name")
    price: Money = Field(ge=0, description="Unit price in USD")
    description: str = Field(description="Product description")
    category: ProductCategory = Field(description="Category tag")
    image: str = Field(description="Product image URL")


class CartItem(ShopModel):
    """Represents a line item in the shopping cart."""

    product_id: str = Field(description="ID of the product in the catalog")
    name: str = Field(description="Product name at the time it was added")
    price: Money = Field(description="Unit price at the time it was added")
    quantity: int = Field(ge=1, description="Quantity of the product")
    image: str = Field(description="Product image URL")

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "CartItem":
        """Snapshot a catalog product into a new line item."""
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            image=product.image,
        )


class Cart(ShopModel):
    """Represents one session's shopping cart."""

    items: list[CartItem] = Field(default_factory=list, description="Cart items")

    def find(self, product_id: str) -> Optional[CartItem]:
        """Return the line item for a product, if present."""
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def remove(self, product_id: str) -> Optional[CartItem]:
        """Remove and return the line item for a product, if present."""
        item = self.find(product_id)
        if item is not None:
            self.items.remove(item)
        return item

    def clear(self) -> None:
        """Remove every line item."""
        self.items.clear()

    @property
    def is_empty(self) -> bool:
        return not self.items


class CartSnapshot(ShopModel):
    """Point-in-time view of a cart with derived totals."""

    items: list[CartItem] = Field(default_factory=list)
    total: Money = Field(default=Decimal("0"), description="Total cart value")
    item_count: int = Field(default=0, description="Total number of items")


class OrderConfirmation(ShopModel):
    """Confirmation returned once by a successful checkout."""

    order_id: str = Field(description="Human-readable order ID")
    total: Money = Field(description="Order total value")
    item_count: int = Field(description="Number of items ordered")
    status: Literal["confirmed"] = "confirmed"


class ShopState(ShopModel):
    """Unified response returned by every shop operation."""

    message: Optional[str] = None
    products: list[Product]
    cart: CartSnapshot
    categories: list[str]
    current_category: str
    order_confirmation: Optional[OrderConfirmation] = None

    def to_payload(self) -> dict:
        """Serialize to the JSON shape consumed by the widget."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
