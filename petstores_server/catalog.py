"""Static product catalog."""

from decimal import Decimal
from typing import Iterable, Optional

from .models import Product

ALL_CATEGORIES = "all"
CATEGORIES = (ALL_CATEGORIES, "dog", "cat")

# 4 dog foods, 4 cat foods
PRODUCTS = (
    Product(
        id="dog-1",
        name="Royal Canin Adult Dog",
        price=Decimal("89.99"),
        description="Premium nutrition for adult dogs, supports healthy digestion",
        category="dog",
        image="https://placehold.co/200x200/e8d5b7/333?text=🐕+Royal+Canin",
    ),
    Product(
        id="dog-2",
        name="Hill's Science Diet Puppy",
        price=Decimal("74.99"),
        description="Specially formulated for growing puppies with DHA",
        category="dog",
        image="https://placehold.co/200x200/e8d5b7/333?text=🐶+Hills",
    ),
    Product(
        id="dog-3",
        name="Blue Buffalo Wilderness",
        price=Decimal("64.99"),
        description="High-protein, grain-free recipe with real chicken",
        category="dog",
        image="https://placehold.co/200x200/e8d5b7/333?text=🐕+Blue+Buffalo",
    ),
    Product(
        id="dog-4",
        name="Purina Pro Plan Sport",
        price=Decimal("59.99"),
        description="Advanced nutrition for active dogs, 30% protein",
        category="dog",
        image="https://placehold.co/200x200/e8d5b7/333?text=🐕+Purina",
    ),
    Product(
        id="cat-1",
        name="Royal Canin Indoor Cat",
        price=Decimal("49.99"),
        description="Tailored nutrition for indoor cats, hairball control",
        category="cat",
        image="https://placehold.co/200x200/d5e8e8/333?text=🐱+Royal+Canin",
    ),
    Product(
        id="cat-2",
        name="Hill's Science Diet Adult",
        price=Decimal("44.99"),
        description="Balanced nutrition for adult cats, easy digestion",
        category="cat",
        image="https://placehold.co/200x200/d5e8e8/333?text=🐱+Hills",
    ),
    Product(
        id="cat-3",
        name="Blue Buffalo Tastefuls",
        price=Decimal("39.99"),
        description="Natural cat food with real salmon, no by-products",
        category="cat",
        image="https://placehold.co/200x200/d5e8e8/333?text=🐱+Blue+Buffalo",
    ),
    Product(
        id="cat-4",
        name="Purina ONE Healthy Kitten",
        price=Decimal("34.99"),
        description="DHA for brain and vision development in kittens",
        category="cat",
        image="https://placehold.co/200x200/d5e8e8/333?text=🐱+Purina",
    ),
)


class Catalog:
    """Read-only set of purchasable products."""

    def __init__(self, products: Iterable[Product]) -> None:
        self._products = tuple(products)
        self._by_id = {product.id: product for product in self._products}
        if len(self._by_id) != len(self._products):
            raise ValueError("Catalog product IDs must be unique")

    @classmethod
    def default(cls) -> "Catalog":
        """Build the built-in Petstores catalog."""
        return cls(PRODUCTS)

    @property
    def categories(self) -> list[str]:
        return list(CATEGORIES)

    def all(self) -> tuple[Product, ...]:
        """Get every product in catalog order."""
        return self._products

    def find(self, product_id: str) -> Optional[Product]:
        """Get a product by ID, or None if it is not in the catalog."""
        return self._by_id.get(product_id)

    def filter(self, category: str) -> tuple[Product, ...]:
        """Get the products in a category; "all" returns the whole catalog."""
        if category == ALL_CATEGORIES:
            return self._products
        return tuple(product for product in self._products if product.category == category)

    def __len__(self) -> int:
        return len(self._products)
