"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Records are frozen: once the engine has produced one it is never mutated.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import ClassVar, Optional, Union


class PricingMode(str, Enum):
    """Which pricing formula a calculation uses."""
    ITEMIZED = "itemized"      # material + labor + overhead, profit, discount, tax
    UNIT_COST = "unit_cost"    # fixed/variable cost per unit, markup, optional VAT


class TimeUnit(str, Enum):
    """Production period the unit count refers to."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# Serialized keys that don't follow plain camelCase
_KEY_OVERRIDES = {
    'include_vat': 'includeVAT',
}


def to_camel(name: str) -> str:
    """Map a field name to its serialized key (product_name -> productName)."""
    if name in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[name]
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


@dataclass
class TraceStep:
    """A single step in the price derivation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False

    def add_warning(self, warning: str):
        self.warnings.append(warning)


@dataclass(frozen=True)
class ItemizedInput:
    """Coerced input for the itemized cost-plus-discount-plus-tax formula."""
    product_name: str
    material_cost: float = 0.0
    labor_cost: float = 0.0
    overhead_expenses: float = 0.0
    profit_percentage: float = 0.0
    discount_percentage: float = 0.0
    tax_percentage: float = 0.0


@dataclass(frozen=True)
class UnitCostInput:
    """Coerced input for the per-unit cost-plus formula."""
    product_name: str
    fixed_costs: float = 0.0
    variable_cost_per_unit: float = 0.0
    units_produced: float = 0.0
    markup_percentage: float = 0.0
    time_unit: TimeUnit = TimeUnit.MONTH
    include_vat: bool = False


class _RecordMixin:
    """Serialization and trace helpers shared by both record types."""

    mode: ClassVar[PricingMode]

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used in persisted history."""
        data = {'mode': self.mode.value}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            data[to_camel(f.name)] = value
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Rebuild a record from its serialized form. Raises on missing or bad values."""
        kwargs = {}
        for f in fields(cls):
            key = to_camel(f.name)
            if key not in data:
                if f.name == 'time_unit':
                    kwargs[f.name] = TimeUnit.MONTH
                    continue
                if f.name == 'include_vat':
                    kwargs[f.name] = False
                    continue
                raise KeyError(f"Missing '{key}' in history entry")
            value = data[key]
            if f.name in ('product_name', 'timestamp'):
                kwargs[f.name] = str(value)
            elif f.name == 'time_unit':
                kwargs[f.name] = TimeUnit(value)
            elif f.name == 'include_vat':
                kwargs[f.name] = bool(value)
            else:
                kwargs[f.name] = float(value)
        return cls(**kwargs)

    def get_trace_text(self) -> str:
        """Get human-readable derivation as formatted text."""
        lines = []
        for t in self.trace():
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


@dataclass(frozen=True)
class ItemizedRecord(_RecordMixin):
    """Itemized calculation: inputs, every intermediate amount and the total."""
    product_name: str
    material_cost: float
    labor_cost: float
    overhead_expenses: float
    profit_percentage: float
    discount_percentage: float
    tax_percentage: float
    base_cost: float
    profit_amount: float
    with_profit: float
    discount_amount: float
    after_discount: float
    tax_amount: float
    total_price: float
    timestamp: str

    mode: ClassVar[PricingMode] = PricingMode.ITEMIZED

    @property
    def final_price(self) -> float:
        return self.total_price

    def trace(self) -> list[TraceStep]:
        return [
            TraceStep("Base Cost", "material + labor + overhead", f"{self.base_cost:.2f}"),
            TraceStep("Profit", f"{self.profit_percentage:g}% of base cost", f"{self.profit_amount:.2f}"),
            TraceStep("With Profit", "base cost + profit", f"{self.with_profit:.2f}"),
            TraceStep("Discount", f"{self.discount_percentage:g}% of price with profit", f"{self.discount_amount:.2f}"),
            TraceStep("After Discount", "price with profit - discount", f"{self.after_discount:.2f}"),
            TraceStep("Tax", f"{self.tax_percentage:g}% of discounted price", f"{self.tax_amount:.2f}"),
            TraceStep("Total", "discounted price + tax", f"{self.total_price:.2f}"),
        ]


@dataclass(frozen=True)
class UnitCostRecord(_RecordMixin):
    """Per-unit cost-plus calculation with optional VAT."""
    product_name: str
    fixed_costs: float
    variable_cost_per_unit: float
    units_produced: float
    markup_percentage: float
    time_unit: TimeUnit
    include_vat: bool
    fixed_cost_per_unit: float
    cost_per_unit: float
    selling_price_raw: float
    vat_amount: float
    selling_price: float
    profit_per_unit: float
    period_revenue: float
    period_profit: float
    timestamp: str

    mode: ClassVar[PricingMode] = PricingMode.UNIT_COST

    @property
    def final_price(self) -> float:
        return self.selling_price

    def trace(self) -> list[TraceStep]:
        steps = []
        if self.units_produced > 0:
            steps.append(TraceStep("Fixed Cost / Unit", f"fixed costs / {self.units_produced:g} units",
                                   f"{self.fixed_cost_per_unit:.2f}"))
        else:
            steps.append(TraceStep("Fixed Cost / Unit", "no units produced, fixed cost not spread", "0.00"))
        steps.append(TraceStep("Cost / Unit", "fixed cost per unit + variable cost per unit", f"{self.cost_per_unit:.2f}"))
        steps.append(TraceStep("Markup", f"{self.markup_percentage:g}% on cost per unit", f"{self.selling_price_raw:.2f}"))
        if self.include_vat:
            steps.append(TraceStep("VAT", "VAT added to selling price", f"{self.vat_amount:.2f}"))
        steps.append(TraceStep("Selling Price", "per unit", f"{self.selling_price:.2f}"))
        steps.append(TraceStep("Profit / Unit", "selling price - cost per unit", f"{self.profit_per_unit:.2f}"))
        steps.append(TraceStep("Period Profit", f"per {self.time_unit.value}", f"{self.period_profit:.2f}"))
        return steps


PricingRecord = Union[ItemizedRecord, UnitCostRecord]

RECORD_TYPES = {
    PricingMode.ITEMIZED: ItemizedRecord,
    PricingMode.UNIT_COST: UnitCostRecord,
}


def record_from_dict(data: dict) -> PricingRecord:
    """
    Decode one serialized history entry.

    Entries written before the mode tag existed are itemized when they carry
    a materialCost key.
    """
    if not isinstance(data, dict):
        raise TypeError(f"History entry must be an object, got {type(data).__name__}")
    mode = data.get('mode')
    if mode is None:
        mode = PricingMode.ITEMIZED if 'materialCost' in data else PricingMode.UNIT_COST
    return RECORD_TYPES[PricingMode(mode)].from_dict(data)
