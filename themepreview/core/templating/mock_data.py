# themepreview/core/templating/mock_data.py
"""
Deterministic storefront entities for preview contexts.

Every generator is a pure function of its index, so two contexts built from
the same schema are identical.
"""
from typing import Any, Dict, List, Optional

from .filters import handleize, placeholder_image

PRODUCT_TITLES = [
    "Premium Cotton T-Shirt",
    "Classic Denim Jacket",
    "Leather Messenger Bag",
    "Wireless Headphones",
    "Organic Face Serum",
    "Handcrafted Ceramic Mug",
]
PRODUCT_VENDORS = ["Acme Co", "StyleBrand", "TechGear", "NatureCraft"]
PRODUCT_TYPES = ["Apparel", "Accessories", "Electronics", "Home & Garden"]
PRODUCT_TAGS = ["new", "featured", "bestseller"]
COLLECTION_TITLES = [
    "New Arrivals",
    "Best Sellers",
    "Summer Collection",
    "Sale Items",
    "Featured Products",
]
VARIANT_SIZES = ["Small", "Medium", "Large", "X-Large"]
VARIANT_COLORS = ["Black", "White", "Navy", "Gray"]
SORT_OPTIONS = [
    ("Best Selling", "best-selling"),
    ("Alphabetically, A-Z", "title-ascending"),
    ("Alphabetically, Z-A", "title-descending"),
    ("Price, low to high", "price-ascending"),
    ("Price, high to low", "price-descending"),
    ("Date, old to new", "created-ascending"),
    ("Date, new to old", "created-descending"),
]

IMAGE_SIZE = 800
PRODUCTS_PER_COLLECTION = 8


def mock_image(index: int = 0, label: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": 1000 + index,
        "src": placeholder_image(IMAGE_SIZE, IMAGE_SIZE, label or "Product"),
        "alt": f"Sample image {index + 1}",
        "width": IMAGE_SIZE,
        "height": IMAGE_SIZE,
        "aspect_ratio": 1.0,
        "position": index + 1,
    }


def mock_variant(index: int, product_handle: str) -> Dict[str, Any]:
    size = VARIANT_SIZES[index % len(VARIANT_SIZES)]
    color = VARIANT_COLORS[(index // len(VARIANT_SIZES)) % len(VARIANT_COLORS)]
    price = 2999 + index * 500
    variant_id = 2000 + index
    return {
        "id": variant_id,
        "title": f"{size} / {color}",
        "sku": f"SKU-{product_handle.upper()}-{index + 1}",
        "barcode": f"123456789{index}",
        "price": price,
        "compare_at_price": price + 1000 if index % 2 == 0 else None,
        "available": index % 3 != 2,
        "inventory_quantity": 10 + index,
        "inventory_policy": "deny",
        "option1": size,
        "option2": color,
        "option3": None,
        "image": None,
        "featured_image": None,
        "url": f"/products/{product_handle}?variant={variant_id}",
        "weight": 500,
        "weight_unit": "g",
    }


def _option_values(values: List[str], unavailable: Optional[str] = None) -> List[Dict[str, Any]]:
    return [{"value": v, "available": v != unavailable} for v in values]


def mock_product(index: int = 0) -> Dict[str, Any]:
    title = PRODUCT_TITLES[index % len(PRODUCT_TITLES)]
    handle = handleize(title)
    price = 2999 + index * 1000
    on_sale = index % 2 == 0
    variants = [mock_variant(i, handle) for i in range(4)]
    images = [mock_image(i, "Product") for i in range(3)]
    media = [
        {"id": 3000 + i, "media_type": "image", "preview_image": img, "alt": img["alt"], "position": i + 1}
        for i, img in enumerate(images)
    ]
    return {
        "id": 1000 + index,
        "title": title,
        "handle": handle,
        "description": (
            f"<p>High-quality {title.lower()} made with premium materials. "
            "Perfect for everyday use with exceptional durability and style.</p>"
        ),
        "price": price,
        "price_min": price,
        "price_max": price + 2000,
        "compare_at_price": price + 1500 if on_sale else None,
        "compare_at_price_min": price + 1500 if on_sale else None,
        "compare_at_price_max": price + 3500 if on_sale else None,
        "featured_image": images[0],
        "featured_media": {"id": 3000, "media_type": "image", "preview_image": images[0], "alt": title, "position": 1},
        "images": images,
        "media": media,
        "variants": variants,
        "options": [
            {"name": "Size", "position": 1, "values": list(VARIANT_SIZES)},
            {"name": "Color", "position": 2, "values": list(VARIANT_COLORS)},
        ],
        "options_with_values": [
            {"name": "Size", "position": 1, "values": _option_values(VARIANT_SIZES, "X-Large"), "selected_value": "Medium"},
            {"name": "Color", "position": 2, "values": _option_values(VARIANT_COLORS), "selected_value": "Black"},
        ],
        "vendor": PRODUCT_VENDORS[index % len(PRODUCT_VENDORS)],
        "type": PRODUCT_TYPES[index % len(PRODUCT_TYPES)],
        "tags": PRODUCT_TAGS[: (index % 3) + 1],
        "available": True,
        "selected_variant": variants[0],
        "selected_or_first_available_variant": variants[0],
        "first_available_variant": variants[0],
        "has_only_default_variant": False,
        "requires_selling_plan": False,
        "selling_plan_groups": [],
        "url": f"/products/{handle}",
        "collections": [],
    }


def mock_collection(index: int = 0) -> Dict[str, Any]:
    title = COLLECTION_TITLES[index % len(COLLECTION_TITLES)]
    handle = handleize(title)
    products = [mock_product(i) for i in range(PRODUCTS_PER_COLLECTION)]
    return {
        "id": 5000 + index,
        "title": title,
        "handle": handle,
        "description": f"<p>Explore our {title.lower()} featuring the best products curated just for you.</p>",
        "image": mock_image(0, "Collection"),
        "products": products,
        "products_count": len(products),
        "all_products_count": 24,
        "all_tags": ["new", "featured", "sale", "bestseller"],
        "all_types": ["Apparel", "Accessories", "Electronics"],
        "all_vendors": ["Acme Co", "StyleBrand", "TechGear"],
        "url": f"/collections/{handle}",
        "current_type": None,
        "current_vendor": None,
        "sort_by": "best-selling",
        "sort_options": [{"name": name, "value": value} for name, value in SORT_OPTIONS],
    }


def mock_shop() -> Dict[str, Any]:
    """Shop, request, template and cart placeholders shared by every context."""
    return {
        "shop": {
            "name": "Demo Store",
            "description": "Your one-stop shop for quality products",
            "email": "hello@demo-store.com",
            "url": "https://demo-store.myshopify.com",
            "currency": {"iso_code": "USD"},
            "money_format": "${{amount}}",
            "enabled_payment_types": ["visa", "mastercard", "amex", "paypal", "apple_pay", "google_pay"],
        },
        "request": {
            "locale": {"iso_code": "en", "name": "English"},
            "host": "demo-store.myshopify.com",
            "path": "/",
        },
        "template": {"name": "index", "suffix": None},
        "cart": {
            "currency": {"iso_code": "USD"},
            "item_count": 3,
            "items": [],
            "total_price": 8997,
            "original_total_price": 10497,
        },
        "customer": None,
        "canonical_url": "https://demo-store.myshopify.com/",
        "page_title": "Demo Store",
        "page_description": "Your one-stop shop for quality products",
    }


def _menu_link(title: str, url: str, link_type: str, handle: Optional[str] = None) -> Dict[str, Any]:
    return {
        "active": False,
        "child_active": False,
        "current": False,
        "child_current": False,
        "handle": handle or handleize(title),
        "levels": 0,
        "links": [],
        "object": None,
        "title": title,
        "type": link_type,
        "url": url,
    }


def mock_linklists() -> Dict[str, Any]:
    return {
        "main-menu": {
            "handle": "main-menu",
            "title": "Main Menu",
            "levels": 2,
            "links": [
                _menu_link("Home", "/", "http"),
                _menu_link("Catalog", "/collections/all", "collection"),
                _menu_link("About", "/pages/about", "page"),
                _menu_link("Contact", "/pages/contact", "page"),
            ],
        },
        "footer-menu": {
            "handle": "footer-menu",
            "title": "Footer Menu",
            "levels": 1,
            "links": [
                _menu_link("Search", "/search", "http"),
                _menu_link("About Us", "/pages/about", "page", handle="about"),
                _menu_link("Contact", "/pages/contact", "page"),
            ],
        },
    }


def mock_routes() -> Dict[str, str]:
    return {
        "root_url": "/",
        "account_url": "/account",
        "account_login_url": "/account/login",
        "account_logout_url": "/account/logout",
        "account_register_url": "/account/register",
        "account_addresses_url": "/account/addresses",
        "collections_url": "/collections",
        "all_products_collection_url": "/collections/all",
        "search_url": "/search",
        "cart_url": "/cart",
    }
