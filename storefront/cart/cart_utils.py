from typing import Any, Dict, Iterable, Optional


def generate_cart_item_id(product_id: Any, size: Optional[str] = None, color: Optional[str] = None) -> str:
    """One cart line per product/size/color combination."""
    size_part = f"_size_{size}" if size else ""
    color_part = f"_color_{color}" if color else ""
    return f"{product_id}{size_part}{color_part}"


def format_cart_item(cart_item: Optional[dict]) -> Optional[dict]:
    if not cart_item:
        return None

    images = cart_item.get("images") or []
    return {
        **cart_item,
        "display_name": cart_item.get("title"),
        "display_price": cart_item.get("price"),
        "display_image": images[0] if images else "",
        "variation_text": " / ".join(v for v in (cart_item.get("size"), cart_item.get("color")) if v),
    }


def calculate_cart_totals(items: Iterable[dict]) -> Dict[str, Any]:
    """Subtotal, total and item count. Total equals subtotal (no tax or shipping)."""
    if not isinstance(items, (list, tuple)):
        return {"subtotal": 0, "total": 0, "item_count": 0}

    subtotal = sum((item.get("price") or 0) * (item.get("quantity") or 0) for item in items)
    item_count = sum(item.get("quantity") or 0 for item in items)
    return {
        "subtotal": round(subtotal, 2),
        "total": round(subtotal, 2),
        "item_count": item_count,
    }


def validate_stock_availability(
    product: Optional[dict],
    requested_quantity: int = 1,
    existing_cart_items: Iterable[dict] = (),
) -> Dict[str, Any]:
    if not product:
        return {"is_valid": False, "error": "Invalid product"}

    stock = product.get("stock") or 0
    if stock < 1:
        return {"is_valid": False, "error": "Product is out of stock"}

    existing = next((item for item in existing_cart_items if item.get("id") == product.get("id")), None)
    current_quantity = existing.get("quantity", 0) if existing else 0
    if current_quantity + requested_quantity > stock:
        return {
            "is_valid": False,
            "error": (
                f"Only {stock} items available in stock. "
                f"You already have {current_quantity} in your cart."
            ),
        }

    return {"is_valid": True, "error": None}
