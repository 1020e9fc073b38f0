"""Order totals. Always computed server side from snapshot lines."""

TAX_RATE = 0.12
FREE_SHIPPING_THRESHOLD = 100.0
FLAT_SHIPPING_FEE = 10.0


def _money(amount: float) -> float:
    return round(amount, 2)


def compute_pricing(lines, discount_amount: float = 0.0) -> dict:
    """Price a list of ``{"price", "quantity"}`` lines.

    Tax is 12% of the items price; shipping is free strictly above 100 and a
    flat 10 otherwise. Each component is rounded to cents before totalling.
    """
    items_price = _money(sum(line["price"] * line["quantity"] for line in lines))
    tax_price = _money(items_price * TAX_RATE)
    shipping_price = 0.0 if items_price > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE
    discount_amount = _money(discount_amount)
    total_price = _money(items_price + tax_price + shipping_price - discount_amount)

    return {
        "items_price": items_price,
        "tax_price": tax_price,
        "shipping_price": shipping_price,
        "discount_amount": discount_amount,
        "total_price": total_price,
    }
