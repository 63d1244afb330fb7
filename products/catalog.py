"""Static product catalog and delivery configuration.

The catalog is fixed in code; orders may only reference products listed here
and take their unit price from it at creation time.
"""

from decimal import Decimal

PRODUCTS = (
    {
        "id": 1,
        "name": "Laptop - Dell XPS 13",
        "category": "Laptops",
        "price": Decimal("1299.99"),
        "description": "Ultra-portable laptop with Intel Core i7 processor",
        "image": "https://via.placeholder.com/300x200?text=Dell+XPS+13",
        "in_stock": True,
    },
    {
        "id": 2,
        "name": "Laptop - MacBook Pro",
        "category": "Laptops",
        "price": Decimal("1999.99"),
        "description": "Apple MacBook Pro with M2 chip",
        "image": "https://via.placeholder.com/300x200?text=MacBook+Pro",
        "in_stock": True,
    },
    {
        "id": 3,
        "name": "Laptop - HP Spectre",
        "category": "Laptops",
        "price": Decimal("1149.99"),
        "description": "HP Spectre x360 convertible laptop",
        "image": "https://via.placeholder.com/300x200?text=HP+Spectre",
        "in_stock": True,
    },
    {
        "id": 4,
        "name": "Smartphone - iPhone 15",
        "category": "Smartphones",
        "price": Decimal("799.99"),
        "description": "Latest iPhone with advanced camera system",
        "image": "https://via.placeholder.com/300x200?text=iPhone+15",
        "in_stock": True,
    },
    {
        "id": 5,
        "name": "Smartphone - Samsung Galaxy S24",
        "category": "Smartphones",
        "price": Decimal("699.99"),
        "description": "Samsung Galaxy S24 with AI features",
        "image": "https://via.placeholder.com/300x200?text=Galaxy+S24",
        "in_stock": True,
    },
    {
        "id": 6,
        "name": "Smartphone - Google Pixel 8",
        "category": "Smartphones",
        "price": Decimal("599.99"),
        "description": "Google Pixel 8 with pure Android experience",
        "image": "https://via.placeholder.com/300x200?text=Pixel+8",
        "in_stock": True,
    },
    {
        "id": 7,
        "name": "Tablet - iPad Pro",
        "category": "Tablets",
        "price": Decimal("799.99"),
        "description": "iPad Pro with M2 chip and Apple Pencil support",
        "image": "https://via.placeholder.com/300x200?text=iPad+Pro",
        "in_stock": True,
    },
    {
        "id": 8,
        "name": "Tablet - Surface Pro",
        "category": "Tablets",
        "price": Decimal("899.99"),
        "description": "Microsoft Surface Pro with detachable keyboard",
        "image": "https://via.placeholder.com/300x200?text=Surface+Pro",
        "in_stock": True,
    },
    {
        "id": 9,
        "name": "Headphones - Sony WH-1000XM5",
        "category": "Audio",
        "price": Decimal("299.99"),
        "description": "Premium noise-canceling headphones",
        "image": "https://via.placeholder.com/300x200?text=Sony+WH-1000XM5",
        "in_stock": True,
    },
    {
        "id": 10,
        "name": "Headphones - Bose QuietComfort",
        "category": "Audio",
        "price": Decimal("249.99"),
        "description": "Comfortable noise-canceling headphones",
        "image": "https://via.placeholder.com/300x200?text=Bose+QC",
        "in_stock": True,
    },
    {
        "id": 11,
        "name": "Smart Watch - Apple Watch",
        "category": "Wearables",
        "price": Decimal("399.99"),
        "description": "Apple Watch with health monitoring features",
        "image": "https://via.placeholder.com/300x200?text=Apple+Watch",
        "in_stock": True,
    },
    {
        "id": 12,
        "name": "Smart Watch - Samsung Galaxy Watch",
        "category": "Wearables",
        "price": Decimal("249.99"),
        "description": "Samsung Galaxy Watch with fitness tracking",
        "image": "https://via.placeholder.com/300x200?text=Galaxy+Watch",
        "in_stock": True,
    },
    {
        "id": 13,
        "name": "Camera - Canon EOS R5",
        "category": "Cameras",
        "price": Decimal("3899.99"),
        "description": "Professional mirrorless camera with 8K video",
        "image": "https://via.placeholder.com/300x200?text=Canon+EOS+R5",
        "in_stock": True,
    },
    {
        "id": 14,
        "name": "Camera - Sony A7 IV",
        "category": "Cameras",
        "price": Decimal("2499.99"),
        "description": "Full-frame mirrorless camera with 4K video",
        "image": "https://via.placeholder.com/300x200?text=Sony+A7+IV",
        "in_stock": True,
    },
    {
        "id": 15,
        "name": "Gaming Console - PlayStation 5",
        "category": "Gaming",
        "price": Decimal("499.99"),
        "description": "Next-generation gaming console from Sony",
        "image": "https://via.placeholder.com/300x200?text=PlayStation+5",
        "in_stock": True,
    },
    {
        "id": 16,
        "name": "Gaming Console - Xbox Series X",
        "category": "Gaming",
        "price": Decimal("499.99"),
        "description": "Microsoft Xbox Series X with 4K gaming",
        "image": "https://via.placeholder.com/300x200?text=Xbox+Series+X",
        "in_stock": True,
    },
)

PRODUCT_PRICES = {p["name"]: p["price"] for p in PRODUCTS}
PRODUCT_NAMES = tuple(PRODUCT_PRICES)

DELIVERY_LOCATIONS = (
    "Colombo",
    "Gampaha",
    "Kalutara",
    "Kandy",
    "Matale",
    "Nuwara Eliya",
    "Galle",
    "Matara",
    "Hambantota",
    "Jaffna",
    "Kilinochchi",
    "Mannar",
    "Vavuniya",
    "Mullaitivu",
    "Batticaloa",
    "Ampara",
    "Trincomalee",
    "Kurunegala",
    "Puttalam",
    "Anuradhapura",
    "Polonnaruwa",
    "Badulla",
    "Moneragala",
    "Ratnapura",
    "Kegalle",
)

DELIVERY_TIMES = ("10:00 AM", "11:00 AM", "12:00 PM")

# date.weekday() value on which no deliveries happen (Sunday).
EXCLUDED_DELIVERY_WEEKDAY = 6


def categories():
    """Distinct category names in catalog order."""
    return list(dict.fromkeys(p["category"] for p in PRODUCTS))


def get_product(product_id):
    return next((p for p in PRODUCTS if p["id"] == product_id), None)


def unit_price_for(name):
    return PRODUCT_PRICES.get(name)


def _matches(product, term):
    term = term.lower()
    return (
        term in product["name"].lower()
        or term in product["description"].lower()
        or term in product["category"].lower()
    )


def search_products(term):
    return [p for p in PRODUCTS if _matches(p, term)]


def filter_products(category=None, search=None):
    """Products in ``category`` (case-insensitive, ``all`` = any) matching ``search``."""
    products = list(PRODUCTS)
    if category and category.lower() != "all":
        products = [p for p in products if p["category"].lower() == category.lower()]
    if search:
        products = [p for p in products if _matches(p, search)]
    return products
