"""Engine subpackage - core pricing logic and record models."""
from .pricing_engine import PricingEngine, PricingInputError, format_money, parse_amount
from .models import (
    ItemizedRecord,
    PricingMode,
    TimeUnit,
    UnitCostRecord,
    ValidationResult,
    record_from_dict,
)

__all__ = [
    'PricingEngine', 'PricingInputError', 'format_money', 'parse_amount',
    'ItemizedRecord', 'UnitCostRecord', 'PricingMode', 'TimeUnit',
    'ValidationResult', 'record_from_dict',
]
