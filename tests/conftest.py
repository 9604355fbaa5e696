"""
Shared test fixtures - isolated settings, fixed clock, in-memory store.
"""
import os
import sys
from datetime import datetime, timezone

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from autopricing.config.settings import Settings
from autopricing.engine import PricingEngine
from autopricing.services.history_service import HistoryStore
from autopricing.services.kv_store import MemoryStore

FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

ITEMIZED_EXAMPLE = {
    'product_name': 'Oak Table',
    'material_cost': '100',
    'labor_cost': '50',
    'overhead_expenses': '20',
    'profit_percentage': '20',
    'discount_percentage': '10',
    'tax_percentage': '12',
}

UNIT_COST_EXAMPLE = {
    'product_name': 'Candle',
    'fixed_costs': 11000,
    'variable_cost_per_unit': 35,
    'units_produced': 700,
    'markup_percentage': 50,
}


@pytest.fixture
def settings(tmp_path):
    return Settings.load(project_root=tmp_path, data_dir=tmp_path / 'data')


@pytest.fixture
def engine(settings):
    return PricingEngine(settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def history(store, settings):
    return HistoryStore(store, settings)


@pytest.fixture
def itemized_input():
    return dict(ITEMIZED_EXAMPLE)


@pytest.fixture
def unit_cost_input():
    return dict(UNIT_COST_EXAMPLE)
