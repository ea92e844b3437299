"""Category model for transaction labels."""

from dataclasses import dataclass
from typing import List
import uuid


@dataclass
class Category:
    """Represents a spending category.

    Transactions reference categories by name, so the name is the key used
    by breakdowns and comparisons.

    Attributes:
        id: Unique identifier ("1".."13" for built-ins, uuid4 hex otherwise).
        name: Display name (unique).
        icon: Icon name, opaque to the engine.
        color: Hex color, opaque to the engine.
        is_custom: False for the built-in set, True for user-added categories.
    """

    id: str
    name: str
    icon: str
    color: str
    is_custom: bool = False

    @classmethod
    def new(cls, name: str, icon: str, color: str) -> "Category":
        """Create a custom Category with a freshly generated ID."""
        return cls(id=uuid.uuid4().hex, name=name, icon=icon, color=color, is_custom=True)


# Label used for transactions with no category
OTHER_CATEGORY = "Diğer"

FALLBACK_COLOR = "#6b7280"

DEFAULT_CATEGORIES: List[Category] = [
    Category(id="1", name="Market", icon="cart.fill", color="#22c55e"),
    Category(id="2", name="Restoran", icon="fork.knife", color="#f97316"),
    Category(id="3", name="Ulaşım", icon="car.fill", color="#3b82f6"),
    Category(id="4", name="Giyim", icon="tshirt.fill", color="#a855f7"),
    Category(id="5", name="Teknoloji", icon="laptopcomputer", color="#6366f1"),
    Category(id="6", name="Sağlık", icon="heart.fill", color="#ef4444"),
    Category(id="7", name="Eğlence", icon="film.fill", color="#ec4899"),
    Category(id="8", name="Fatura", icon="doc.text.fill", color="#84cc16"),
    Category(id="9", name="Abonelik", icon="repeat", color="#14b8a6"),
    Category(id="10", name="Eşya", icon="shippingbox.fill", color="#f59e0b"),
    Category(id="11", name="Kırtasiye", icon="pencil.and.ruler.fill", color="#eab308"),
    Category(id="12", name="İade", icon="arrow.uturn.backward.circle.fill", color="#06b6d4"),
    Category(id="13", name=OTHER_CATEGORY, icon="ellipsis.circle.fill", color=FALLBACK_COLOR),
]

DEFAULT_CATEGORY_NAMES = [c.name for c in DEFAULT_CATEGORIES]
