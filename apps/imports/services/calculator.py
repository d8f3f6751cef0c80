"""
Import-cost simulation.

Prices a product bought abroad and shipped through one of the freight
forwarder's warehouses. Every cost line is computed in the warehouse
currency, then converted to MGA.
"""

import logging
from decimal import Decimal
from typing import Optional

from apps.currency.services import get_rates, convert, to_base, quantize, ExchangeRateMissingError
from .exceptions import ImportValidationError, InvalidCalculationError
from .import_settings import get_import_settings

logger = logging.getLogger(__name__)

WAREHOUSES = {
    'air': {
        'usa': {'name': 'États-Unis', 'currency': 'USD'},
        'france': {'name': 'France', 'currency': 'EUR'},
        'uk': {'name': 'Royaume-Uni', 'currency': 'GBP'},
    },
    'sea': {
        'france': {'name': 'France', 'currency': 'EUR'},
        'china': {'name': 'Chine', 'currency': 'USD'},
    },
}

TRANSIT_TIMES = {
    'air': '2-4 weeks',
    'sea': '1-3 months',
}

COMMISSION_BANDS = [
    (Decimal('10'), 'commission_0_10'),
    (Decimal('25'), 'commission_10_25'),
    (Decimal('100'), 'commission_25_100'),
    (Decimal('200'), 'commission_100_200'),
]


def commission_key(price: Decimal) -> str:
    for upper, key in COMMISSION_BANDS:
        if price < upper:
            return key
    return 'commission_200_plus'


def _line(amount: Decimal, currency: str, rates, details: str = '') -> dict:
    return {
        'amount': quantize(amount, currency),
        'currency': currency,
        'amount_mga': quantize(to_base(amount, currency, rates), 'MGA'),
        'details': details,
    }


def calculate_import_cost(
    *,
    mode: str,
    supplier_price,
    supplier_currency: str,
    weight,
    warehouse: str,
    volume=None,
    product_name: str = '',
    product_url: str = '',
) -> dict:
    """
    Simulate the landed cost of an imported product.

    Args:
        mode: ``air`` or ``sea``
        supplier_price: Price charged by the supplier (> 0)
        supplier_currency: ISO code of ``supplier_price``
        weight: Weight in kg (0 accepted)
        warehouse: Warehouse key valid for ``mode``
        volume: Volume in m³, required for sea freight

    Returns:
        Dictionary with the cost lines (``product``, ``transport``,
        ``commission``, ``processing_fee``, ``tax``), each in warehouse
        currency and MGA, the totals, the rates used and the transit time.

    Raises:
        ImportValidationError: Invalid mode, price, weight, volume or warehouse
        InvalidCalculationError: Missing exchange rate or non-positive total
    """
    if mode not in WAREHOUSES:
        raise ImportValidationError("Mode must be 'air' or 'sea'")
    if supplier_price is None or Decimal(str(supplier_price)) <= 0:
        raise ImportValidationError("Supplier price must be greater than 0")
    if weight is None or Decimal(str(weight)) < 0:
        raise ImportValidationError("Weight must not be negative")
    if mode == 'sea' and (volume is None or Decimal(str(volume)) <= 0):
        raise ImportValidationError("Volume is required for sea freight")

    warehouse_config = WAREHOUSES[mode].get(warehouse)
    if warehouse_config is None:
        raise ImportValidationError(f"Unknown warehouse '{warehouse}' for {mode} freight")

    supplier_price = Decimal(str(supplier_price))
    supplier_currency = supplier_currency.upper()
    weight = Decimal(str(weight))
    currency = warehouse_config['currency']
    settings_values = get_import_settings()
    rates = get_rates()

    try:
        price_wh = convert(supplier_price, supplier_currency, currency, rates)
        rate_eur = settings_values[f'transport_{warehouse}_rate']
        transport_rate = convert(rate_eur, 'EUR', currency, rates)
    except ExchangeRateMissingError as e:
        raise InvalidCalculationError(str(e))

    transport = weight * transport_rate
    band = commission_key(price_wh)
    commission_pct = settings_values[band]
    commission = price_wh * commission_pct / 100
    processing_fee = settings_values['processing_fee']
    tax_rate = settings_values['tax_rate']
    tax = price_wh * tax_rate / 100

    total_wh = price_wh + transport + commission + processing_fee + tax
    total_mga = to_base(total_wh, currency, rates)
    if total_mga <= 0:
        logger.error("Import calculation produced non-positive total %s", total_mga)
        raise InvalidCalculationError("Calculated total is not a positive amount")

    logger.debug(
        "Import cost %s/%s: %s %s -> %s MGA",
        mode, warehouse, supplier_price, supplier_currency, total_mga,
    )

    return {
        'mode': mode,
        'warehouse': warehouse,
        'warehouse_name': warehouse_config['name'],
        'currency': currency,
        'product_name': product_name,
        'product_url': product_url,
        'supplier_price': supplier_price,
        'supplier_currency': supplier_currency,
        'weight': weight,
        'volume': Decimal(str(volume)) if volume is not None else None,
        'costs': {
            'product': _line(price_wh, currency, rates, f"{supplier_price} {supplier_currency}"),
            'transport': _line(
                transport, currency, rates,
                f"{weight} kg × {rate_eur} EUR/kg → {transport_rate:.2f} {currency}/kg",
            ),
            'commission': _line(commission, currency, rates, f"{commission_pct}%"),
            'processing_fee': _line(processing_fee, currency, rates),
            'tax': _line(tax, currency, rates, f"{tax_rate}%"),
        },
        'total': quantize(total_wh, currency),
        'total_mga': quantize(total_mga, 'MGA'),
        'rates': {code: rates[code] for code in {currency, supplier_currency, 'EUR'}},
        'transit_time': TRANSIT_TIMES[mode],
    }
