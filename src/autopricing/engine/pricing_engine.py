"""
Pricing Engine - cost-plus price derivation.

One engine parameterised over a pricing mode:
- ITEMIZED: material + labor + overhead, then profit, discount and tax
- UNIT_COST: fixed costs spread over units, variable cost, markup, optional VAT

The engine never rounds. Records keep full precision and every consumer
formats currency with format_money().
"""
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from ..config.settings import get_settings, Settings
from .models import (
    ItemizedInput,
    ItemizedRecord,
    PricingMode,
    PricingRecord,
    TimeUnit,
    UnitCostInput,
    UnitCostRecord,
    ValidationResult,
    to_camel,
)

logger = logging.getLogger(__name__)

# Leading numeric prefix, the way a browser's parseFloat reads "12.5kg"
_NUMBER_PREFIX = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')

_TRUTHY = {'true', '1', 'yes', 'on'}

FIELD_LABELS = {
    'product_name': 'Product Name',
    'material_cost': 'Material Cost',
    'labor_cost': 'Labor Cost',
    'overhead_expenses': 'Overhead Expenses',
    'profit_percentage': 'Profit Margin',
    'discount_percentage': 'Discount',
    'tax_percentage': 'Tax Rate',
    'fixed_costs': 'Fixed Costs',
    'variable_cost_per_unit': 'Variable Cost per Unit',
    'units_produced': 'Units Produced',
    'markup_percentage': 'Markup',
    'time_unit': 'Time Unit',
    'include_vat': 'Include VAT',
}

NUMERIC_FIELDS = {
    PricingMode.ITEMIZED: (
        'material_cost', 'labor_cost', 'overhead_expenses',
        'profit_percentage', 'discount_percentage', 'tax_percentage',
    ),
    PricingMode.UNIT_COST: (
        'fixed_costs', 'variable_cost_per_unit', 'units_produced', 'markup_percentage',
    ),
}


class PricingInputError(ValueError):
    """Raised by strict computations when the input does not validate."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.errors) or "Invalid pricing input")


def parse_amount(value: Any) -> float:
    """
    Coerce a raw form value to a float.

    Missing, empty, non-numeric and non-finite values become 0.0.
    Never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return 0.0
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def parse_flag(value: Any) -> bool:
    """Coerce a checkbox-style value to bool."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def parse_time_unit(value: Any) -> TimeUnit:
    """Coerce a time unit; unknown values fall back to month."""
    if isinstance(value, TimeUnit):
        return value
    try:
        return TimeUnit(str(value).strip().lower())
    except ValueError:
        return TimeUnit.MONTH


def format_money(amount: float, symbol: str = '$') -> str:
    """Format a currency amount rounded to 2 decimals, e.g. $1,234.50 or -$20.40."""
    amount = round(float(amount), 2)
    if amount < 0:
        return f"-{symbol}{-amount:,.2f}"
    return f"{symbol}{amount:,.2f}"


def _raw_value(raw: Mapping, name: str) -> Any:
    """Look up a field by snake_case or camelCase key."""
    if name in raw:
        return raw[name]
    return raw.get(to_camel(name))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _shown(value: Any) -> str:
    """Short repr for messages; ints past the str conversion limit can't be printed."""
    try:
        text = repr(value)
    except ValueError:
        return "<number too large>"
    return text if len(text) <= 40 else text[:37] + "..."


def _strict_number(value: Any) -> Optional[float]:
    """Parse a whole value as a finite number; None when it isn't one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class PricingEngine:
    """
    Stateless pricing engine.

    compute() accepts raw form input (strings or numbers, snake_case or
    camelCase keys) and returns an immutable record carrying every
    intermediate amount.
    """

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings or get_settings()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _timestamp(self) -> str:
        return self.clock().isoformat(timespec='milliseconds')

    def validate(self, raw: Mapping, mode: PricingMode = PricingMode.ITEMIZED) -> ValidationResult:
        """
        Check raw input without coercing it.

        Unparseable or negative numbers and a missing product name are
        errors; blank numbers only warn because they compute as 0.
        """
        mode = PricingMode(mode)
        result = ValidationResult()

        name = _raw_value(raw, 'product_name')
        if _is_blank(name):
            result.add_error("Product Name is required")

        numbers = {}
        for field_name in NUMERIC_FIELDS[mode]:
            label = FIELD_LABELS[field_name]
            value = _raw_value(raw, field_name)
            if _is_blank(value):
                result.add_warning(f"{label} not provided, using 0")
                numbers[field_name] = 0.0
                continue
            number = _strict_number(value)
            if number is None:
                result.add_error(f"{label} must be a number, got {_shown(value)}")
                continue
            if number < 0:
                result.add_error(f"{label} cannot be negative")
            numbers[field_name] = number

        if mode == PricingMode.UNIT_COST:
            time_unit = _raw_value(raw, 'time_unit')
            if not _is_blank(time_unit) and not isinstance(time_unit, TimeUnit):
                if str(time_unit).strip().lower() not in {t.value for t in TimeUnit}:
                    result.add_error(f"Time Unit must be one of day, week, month, got {time_unit!r}")
            if numbers.get('units_produced') == 0 and numbers.get('fixed_costs', 0) > 0:
                result.add_warning("Units Produced is 0, fixed costs are not spread per unit")

        return result

    def parse_input(self, raw: Mapping, mode: PricingMode = PricingMode.ITEMIZED):
        """Coerce raw form input into the typed input for the mode."""
        mode = PricingMode(mode)
        name = _raw_value(raw, 'product_name')
        product_name = '' if name is None else str(name).strip()
        amounts = {f: parse_amount(_raw_value(raw, f)) for f in NUMERIC_FIELDS[mode]}

        if mode == PricingMode.ITEMIZED:
            return ItemizedInput(product_name=product_name, **amounts)

        return UnitCostInput(
            product_name=product_name,
            time_unit=parse_time_unit(_raw_value(raw, 'time_unit')),
            include_vat=parse_flag(_raw_value(raw, 'include_vat')),
            **amounts,
        )

    def compute(self, raw: Mapping, mode: PricingMode = PricingMode.ITEMIZED, strict: bool = False) -> PricingRecord:
        """
        Compute a pricing record from raw input.

        Args:
            raw: Form values keyed by field name
            mode: Which formula to apply
            strict: Raise PricingInputError instead of coercing bad input to 0

        Returns:
            ItemizedRecord or UnitCostRecord
        """
        mode = PricingMode(mode)
        if strict:
            result = self.validate(raw, mode)
            if not result.valid:
                raise PricingInputError(result)

        pricing_input = self.parse_input(raw, mode)
        if mode == PricingMode.ITEMIZED:
            return self.compute_itemized(pricing_input)
        return self.compute_unit_cost(pricing_input)

    def compute_itemized(self, data: ItemizedInput) -> ItemizedRecord:
        """Itemized cost-plus-discount-plus-tax formula."""
        base_cost = data.material_cost + data.labor_cost + data.overhead_expenses
        profit_amount = base_cost * data.profit_percentage / 100
        with_profit = base_cost + profit_amount
        discount_amount = with_profit * data.discount_percentage / 100
        after_discount = with_profit - discount_amount
        tax_amount = after_discount * data.tax_percentage / 100
        total_price = after_discount + tax_amount

        logger.debug("Itemized price for %r: base %.4f -> total %.4f",
                     data.product_name, base_cost, total_price)

        return ItemizedRecord(
            product_name=data.product_name,
            material_cost=data.material_cost,
            labor_cost=data.labor_cost,
            overhead_expenses=data.overhead_expenses,
            profit_percentage=data.profit_percentage,
            discount_percentage=data.discount_percentage,
            tax_percentage=data.tax_percentage,
            base_cost=base_cost,
            profit_amount=profit_amount,
            with_profit=with_profit,
            discount_amount=discount_amount,
            after_discount=after_discount,
            tax_amount=tax_amount,
            total_price=total_price,
            timestamp=self._timestamp(),
        )

    def compute_unit_cost(self, data: UnitCostInput) -> UnitCostRecord:
        """Per-unit cost-plus formula with optional VAT."""
        if data.units_produced > 0:
            fixed_cost_per_unit = data.fixed_costs / data.units_produced
        else:
            fixed_cost_per_unit = 0.0
        cost_per_unit = fixed_cost_per_unit + data.variable_cost_per_unit
        selling_price_raw = cost_per_unit + cost_per_unit * data.markup_percentage / 100

        if data.include_vat:
            selling_price = selling_price_raw * (1 + self.settings.vat_rate)
        else:
            selling_price = selling_price_raw
        profit_per_unit = selling_price - cost_per_unit

        logger.debug("Unit price for %r: cost/unit %.4f -> selling %.4f",
                     data.product_name, cost_per_unit, selling_price)

        return UnitCostRecord(
            product_name=data.product_name,
            fixed_costs=data.fixed_costs,
            variable_cost_per_unit=data.variable_cost_per_unit,
            units_produced=data.units_produced,
            markup_percentage=data.markup_percentage,
            time_unit=data.time_unit,
            include_vat=data.include_vat,
            fixed_cost_per_unit=fixed_cost_per_unit,
            cost_per_unit=cost_per_unit,
            selling_price_raw=selling_price_raw,
            vat_amount=selling_price - selling_price_raw,
            selling_price=selling_price,
            profit_per_unit=profit_per_unit,
            period_revenue=selling_price * data.units_produced,
            period_profit=profit_per_unit * data.units_produced,
            timestamp=self._timestamp(),
        )
