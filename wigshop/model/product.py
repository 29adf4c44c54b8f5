# wigshop/model/product.py
from dataclasses import dataclass

from ..errors import UnknownProduct
from ..utils.money import format_minor, to_major

@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: int                 # minor units (cents), what Stripe expects
    image: str                 # relative to the site root, e.g. "product1.jpg"
    description: str

    @property
    def price_display(self) -> str:
        return format_minor(self.price)

    @property
    def price_major(self) -> float:
        return float(to_major(self.price))

    def as_api(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "priceDisplay": self.price_display,
            "image": self.image,
            "description": self.description,
        }


# hard-coded catalog; never mutated after import
PRODUCTS = {
    p.id: p for p in (
        Product("1", "The 'Malibu' Blonde Wig", 54999, "product1.jpg",
                "Stunning blonde wig with natural texture"),
        Product("2", "The 'Espresso' Brown Wig", 49999, "product2.jpg",
                "Rich brown wig with luxurious feel"),
        Product("3", "The 'Autumn' Ginger Wig", 52999, "product3.jpg",
                "Vibrant ginger wig for a bold look"),
        Product("4", "The 'Onyx' Black Wig", 49999, "product4.jpg",
                "Classic black wig with elegant styling"),
    )
}

def find_product(product_id):
    return PRODUCTS.get(str(product_id)) if product_id is not None else None

def get_product(product_id) -> Product:
    p = find_product(product_id)
    if not p:
        raise UnknownProduct(product_id)
    return p

def catalog_as_api():
    return {pid: p.as_api() for pid, p in PRODUCTS.items()}
