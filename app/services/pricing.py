"""
Pricing - Tax-exclusive unit price from a tax-inclusive shelf price
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from app.core.errors import InvalidPrice, InvalidVAT, InvalidICO, InvalidTaxCalculation

TAXES_FORMAT_PERCENTAGE = "percentage"
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
# Rates are stored with 8 decimal places, so a percentage may carry at most 6
RATE_PERCENT_PLACES = 6


@dataclass(frozen=True)
class PriceBreakdown:
    """Result of the price derivation. vat/ico are decimals (0.19), not percentages"""
    total_price_with_taxes: Decimal
    vat: Decimal
    ico: Decimal
    unit_price: Decimal


@dataclass(frozen=True)
class TaxConfig:
    """Flat rates applied to open orders (decimals)"""
    vat_rate: Decimal = Decimal("0.19")
    ico_rate: Decimal = Decimal("0.08")
    tip_rate: Decimal = Decimal("0.10")

    @classmethod
    def from_settings(cls, settings) -> "TaxConfig":
        return cls(
            vat_rate=Decimal(str(settings.DEFAULT_VAT_RATE)),
            ico_rate=Decimal(str(settings.DEFAULT_ICO_RATE)),
            tip_rate=Decimal(str(settings.DEFAULT_TIP_RATE)),
        )


def round_cents(value: Decimal) -> Decimal:
    """Round to 2 places, half away from zero"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_decimal(value) -> Optional[Decimal]:
    """Parse a decimal string (or number). Returns None when not a finite number"""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def _decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return max(0, -exponent)


def calculate_taxes_and_unit_price(
    total_price_with_taxes: str,
    vat: str,
    ico: str,
    taxes_format: str,
) -> PriceBreakdown:
    """
    Derive the unit price from a tax-inclusive price and percentage rates.

    unit_price = total / (1 + (vat + ico) / 100), rounded to cents.
    Rates are accepted as percentages ("19") and returned as decimals (0.19).
    """
    total = parse_decimal(total_price_with_taxes)
    if total is None:
        raise InvalidPrice("total_price_with_taxes must be a number", total_price_with_taxes)
    if total <= 0:
        raise InvalidPrice("total_price_with_taxes must be greater than 0", total_price_with_taxes)

    vat_percent = parse_decimal(vat)
    if vat_percent is None:
        raise InvalidVAT("vat must be a number", vat)
    if vat_percent < 0:
        raise InvalidVAT("vat must be greater than or equal to 0", vat)
    if _decimal_places(vat_percent) > RATE_PERCENT_PLACES:
        raise InvalidVAT(f"vat supports at most {RATE_PERCENT_PLACES} decimal places", vat)

    ico_percent = parse_decimal(ico)
    if ico_percent is None:
        raise InvalidICO("ico must be a number", ico)
    if ico_percent < 0:
        raise InvalidICO("ico must be greater than or equal to 0", ico)
    if _decimal_places(ico_percent) > RATE_PERCENT_PLACES:
        raise InvalidICO(f"ico supports at most {RATE_PERCENT_PLACES} decimal places", ico)

    if vat_percent + ico_percent == 0:
        raise InvalidTaxCalculation(
            "vat and ico cannot both be 0 (would result in division by zero)",
            {"vat": vat, "ico": ico},
        )

    # Fixed-amount taxes are accepted by the request schema but not implemented
    if taxes_format != TAXES_FORMAT_PERCENTAGE:
        raise InvalidTaxCalculation("taxes_format must be 'percentage'", taxes_format)

    unit_price = total / (1 + (vat_percent + ico_percent) / HUNDRED)

    return PriceBreakdown(
        total_price_with_taxes=total,
        vat=vat_percent / HUNDRED,
        ico=ico_percent / HUNDRED,
        unit_price=round_cents(unit_price),
    )
