"""
Application state for the calculator screen.

All UI state lives in one immutable AppState. Changes go through reduce(),
a pure function of (state, action); side effects (storage, rendering)
happen in the controller before an action is dispatched.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ..engine.models import PricingMode, PricingRecord

ITEMIZED_FIELDS = (
    'product_name', 'material_cost', 'labor_cost', 'overhead_expenses',
    'profit_percentage', 'discount_percentage', 'tax_percentage',
)
UNIT_COST_FIELDS = (
    'product_name', 'fixed_costs', 'variable_cost_per_unit', 'units_produced',
    'markup_percentage', 'time_unit', 'include_vat',
)
FORM_FIELDS = {
    PricingMode.ITEMIZED: ITEMIZED_FIELDS,
    PricingMode.UNIT_COST: UNIT_COST_FIELDS,
}


def empty_form(mode: PricingMode) -> dict[str, Any]:
    form = {name: '' for name in FORM_FIELDS[mode]}
    if mode == PricingMode.UNIT_COST:
        form['time_unit'] = 'month'
        form['include_vat'] = False
    return form


@dataclass(frozen=True)
class Action:
    """A state transition request."""
    kind: str
    payload: dict = field(default_factory=dict)


FIELD_CHANGED = 'field_changed'
MODE_CHANGED = 'mode_changed'
CALCULATED = 'calculated'
FORM_RESET = 'form_reset'
HISTORY_LOADED = 'history_loaded'
HISTORY_TOGGLED = 'history_toggled'
THEME_TOGGLED = 'theme_toggled'


@dataclass(frozen=True)
class AppState:
    mode: PricingMode = PricingMode.ITEMIZED
    form: dict = field(default_factory=lambda: empty_form(PricingMode.ITEMIZED))
    current: Optional[PricingRecord] = None
    show_results: bool = False
    show_history: bool = False
    dark_mode: bool = True
    history: tuple = ()


def reduce(state: AppState, action: Action) -> AppState:
    """Return the next state. Never mutates state."""
    payload = action.payload

    if action.kind == FIELD_CHANGED:
        name = payload['name']
        if name not in FORM_FIELDS[state.mode]:
            raise ValueError(f"Unknown field {name!r} for mode {state.mode.value}")
        return replace(state, form={**state.form, name: payload['value']})

    if action.kind == MODE_CHANGED:
        mode = PricingMode(payload['mode'])
        if mode == state.mode:
            return state
        return replace(state, mode=mode, form=empty_form(mode), current=None, show_results=False)

    if action.kind == CALCULATED:
        return replace(state, current=payload['record'], show_results=True)

    if action.kind == FORM_RESET:
        return replace(state, form=empty_form(state.mode), current=None, show_results=False)

    if action.kind == HISTORY_LOADED:
        return replace(state, history=tuple(payload['history']))

    if action.kind == HISTORY_TOGGLED:
        show = payload.get('show', not state.show_history)
        return replace(state, show_history=bool(show))

    if action.kind == THEME_TOGGLED:
        dark = payload.get('dark', not state.dark_mode)
        return replace(state, dark_mode=bool(dark))

    raise ValueError(f"Unknown action {action.kind!r}")
