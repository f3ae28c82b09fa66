# catalog/packages.py
"""
Quantity tiers and package price options nested inside a product.

    quantityDetails = [
        {"quantity": "500 g", "packages": [
            {"name": "Box", "basePrice": 250, "sellPrice": 200,
             "discountType": "flat", "discountAmount": 50},
        ]},
    ]

Older rows use price / sellingPrice / discountValue and "percentage"; both
spellings are read, only the new one is written.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from core.exceptions import ApiError

CENT = Decimal('0.01')
PRICE_TOLERANCE = Decimal('0.01')

DISCOUNT_TYPES = {
    'flat':       'flat',
    'percent':    'percent',
    'percentage': 'percent',
}


def to_decimal(value, default=None):
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return default


def to_number(value):
    """Decimal → JSON-friendly int/float rounded to cents."""
    value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    return int(value) if value == value.to_integral_value() else float(value)


def base_price(package):
    return to_decimal(package.get('basePrice', package.get('price')))


def sell_price(package):
    return to_decimal(package.get('sellPrice', package.get('sellingPrice')))


def effective_price(package):
    """What a buyer pays for one unit of this package."""
    price = sell_price(package)
    return price if price is not None else base_price(package)


# ─────────────────────────────────────────────────────────────
# NORMALISATION (on write)
# ─────────────────────────────────────────────────────────────

def normalize_package(raw):
    if not isinstance(raw, dict):
        raise ApiError(400, 'Each package must be an object')

    base = base_price(raw)
    if base is None or base < 0:
        raise ApiError(400, 'Each package needs a non-negative basePrice')

    discount_type = DISCOUNT_TYPES.get(str(raw.get('discountType') or 'flat').lower())
    if discount_type is None:
        raise ApiError(400, 'discountType must be flat or percent')

    amount = to_decimal(raw.get('discountAmount', raw.get('discountValue')), Decimal('0'))
    if amount < 0:
        raise ApiError(400, 'discountAmount cannot be negative')

    sell = sell_price(raw)
    if sell is None:
        if discount_type == 'percent':
            sell = base * (Decimal('1') - amount / Decimal('100'))
        else:
            sell = base - amount
        sell = max(sell, Decimal('0'))

    if sell < 0:
        raise ApiError(400, 'sellPrice cannot be negative')
    if sell > base:
        raise ApiError(400, 'sellPrice cannot exceed basePrice')

    return {
        'name':           str(raw.get('name') or '').strip(),
        'basePrice':      to_number(base),
        'sellPrice':      to_number(sell),
        'discountType':   discount_type,
        'discountAmount': to_number(amount),
    }


def normalize_quantity_details(tiers):
    if not isinstance(tiers, list):
        raise ApiError(400, 'quantityDetails must be a list')

    normalized = []
    for tier in tiers:
        if not isinstance(tier, dict):
            raise ApiError(400, 'Each quantity tier must be an object')
        label = str(tier.get('quantity') or '').strip()
        if not label:
            raise ApiError(400, 'Each quantity tier needs a quantity label')
        packages = tier.get('packages') or []
        if not isinstance(packages, list):
            raise ApiError(400, 'packages must be a list')
        normalized.append({
            'quantity': label,
            'packages': [normalize_package(p) for p in packages],
        })
    return normalized


def normalize_metadata(entries):
    if not isinstance(entries, list):
        raise ApiError(400, 'metadata must be a list')

    normalized = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get('title') or not entry.get('description'):
            raise ApiError(400, 'Each metadata entry needs a title and description')
        try:
            order = int(entry.get('order', 0))
        except (TypeError, ValueError):
            order = 0
        normalized.append({
            'title':       str(entry['title']).strip(),
            'description': str(entry['description']).strip(),
            'order':       order,
        })
    return sorted(normalized, key=lambda e: e['order'])


# ─────────────────────────────────────────────────────────────
# LOOKUP
# ─────────────────────────────────────────────────────────────

def get_package(quantity_details, quantity_index, package_index):
    """Strict positional lookup. Returns (tier, package) or raises IndexError."""
    if quantity_index < 0 or package_index < 0:
        raise IndexError('negative index')
    tier = quantity_details[quantity_index]
    return tier, tier.get('packages', [])[package_index]


def resolve_package(quantity_details, quantity_index, package_index,
                    price=None, total_price=None, quantity=0):
    """
    Best-effort mapping of an order line's stored index pair back onto a
    product whose tiers may have been edited since the purchase.

    Returns {'package', 'quantityLabel', 'quantityIndex', 'packageIndex',
    'matchReason'}; matchReason is one of exact, package_clamped,
    price_match, first_available, placeholder.
    """
    tiers = quantity_details or []

    def result(tier, package, qi, pi, reason):
        return {
            'package':       package,
            'quantityLabel': tier.get('quantity') if tier else None,
            'quantityIndex': qi,
            'packageIndex':  pi,
            'matchReason':   reason,
        }

    qi_valid = 0 <= quantity_index < len(tiers)
    if qi_valid:
        packages = tiers[quantity_index].get('packages') or []
        if 0 <= package_index < len(packages):
            return result(tiers[quantity_index], packages[package_index], quantity_index, package_index, 'exact')
        if packages:
            return result(tiers[quantity_index], packages[0], quantity_index, 0, 'package_clamped')

    unit_price = None
    if quantity:
        total = to_decimal(total_price)
        if total is not None:
            unit_price = total / Decimal(quantity)
    if unit_price is None:
        unit_price = to_decimal(price)

    if unit_price is not None:
        for qi, tier in enumerate(tiers):
            for pi, package in enumerate(tier.get('packages') or []):
                for candidate in (sell_price(package), base_price(package)):
                    if candidate is not None and abs(candidate - unit_price) <= PRICE_TOLERANCE:
                        return result(tier, package, qi, pi, 'price_match')

    for qi, tier in enumerate(tiers):
        packages = tier.get('packages') or []
        if packages:
            return result(tier, packages[0], qi, 0, 'first_available')

    stored = to_decimal(price, Decimal('0'))
    placeholder = {
        'name':           '',
        'basePrice':      to_number(stored),
        'sellPrice':      to_number(stored),
        'discountType':   'flat',
        'discountAmount': 0,
    }
    return result(None, placeholder, quantity_index, package_index, 'placeholder')
