from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from goshop.models import new_id, utcnow


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price_cents: int                      # minor units, never negative
    image_url: str = ""
    stock: int = 0
    market_slug: str = ""                 # kaneshie, accra, kumasi
    vendor_name: str = ""
    description: str = ""
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price_cents": self.price_cents,
            "image_url": self.image_url,
            "stock": self.stock,
            "market_slug": self.market_slug,
            "vendor_name": self.vendor_name,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }


CATALOG = (
    # Kaneshie
    ("Fresh Bananas", 1500, "src/images/products/banana.png", "kaneshie"),
    ("Fresh Herbs", 800, "src/images/products/herbs.png", "kaneshie"),
    ("Fresh Tomatoes", 1200, "src/images/tomato.png", "kaneshie"),
    # Accra
    ("Roma Tomatoes", 1000, "src/images/tomato.png", "accra"),
    ("Imported Rice", 3000, "src/images/rice.png", "accra"),
    ("Green Apples", 2200, "src/images/apple-inhand.png", "accra"),
    # Kumasi
    ("Garden Eggs", 900, "src/images/farmers/shop1.jpg", "kumasi"),
    ("Kontomire Leaves", 500, "src/images/products/herbs.png", "kumasi"),
    ("Local Red Rice", 2800, "src/images/rice.png", "kumasi"),
)


def seed_catalog(stock: int = 100) -> List[Product]:
    """Build the fixed storefront catalog with fresh ids."""
    now = utcnow()
    return [
        Product(
            id=new_id(),
            name=name,
            price_cents=price,
            image_url=image,
            stock=stock,
            market_slug=market,
            created_at=now,
        )
        for name, price, image, market in CATALOG
    ]
