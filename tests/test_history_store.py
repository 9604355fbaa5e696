"""
History store and key-value backend tests.
"""
import json

import pytest

from autopricing.engine import ItemizedRecord, PricingMode, UnitCostRecord
from autopricing.services.history_service import HistoryStore, ThemePreference
from autopricing.services.kv_store import JsonFileStore, MemoryStore


def _record(engine, name, cost=10):
    return engine.compute({'product_name': name, 'material_cost': cost})


def test_load_empty_when_absent(history):
    assert history.load() == []
    assert len(history) == 0


def test_append_prepends_and_persists(engine, history, store, settings):
    first = _record(engine, 'A')
    second = _record(engine, 'B')

    history.append(first)
    result = history.append(second)

    assert [r.product_name for r in result] == ['B', 'A']
    loaded = history.load()
    assert loaded[0] == second
    assert len(loaded) == 2
    assert json.loads(store.get(settings.history_key))[0]['productName'] == 'B'


def test_append_allows_duplicates(engine, history):
    record = _record(engine, 'Same')
    history.append(record)
    history.append(record)
    assert history.load() == [record, record]


def test_delete_at_preserves_order(engine, history):
    for name in ('C', 'B', 'A'):
        history.append(_record(engine, name))

    result = history.delete_at(1)

    assert [r.product_name for r in result] == ['A', 'C']
    assert [r.product_name for r in history.load()] == ['A', 'C']


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_delete_at_out_of_range(engine, history, index):
    history.append(_record(engine, 'A'))
    history.append(_record(engine, 'B'))

    with pytest.raises(IndexError):
        history.delete_at(index)
    assert len(history) == 2


def test_clear_removes_key(engine, history, store, settings):
    history.append(_record(engine, 'A'))
    history.clear()

    assert history.load() == []
    assert settings.history_key not in store


def test_get_by_index(engine, history):
    history.append(_record(engine, 'A'))
    history.append(_record(engine, 'B'))

    assert history.get(1).product_name == 'A'
    with pytest.raises(IndexError):
        history.get(2)


@pytest.mark.parametrize("payload", [
    "not json",
    '{"productName": "x"}',
    '[{"productName": "x"}]',
    '[42]',
    '[{"mode": "bogus", "productName": "x"}]',
    '[' * 100000 + ']' * 100000,
])
def test_malformed_payload_reads_as_empty(store, settings, payload):
    store.set(settings.history_key, payload)
    assert HistoryStore(store, settings).load() == []


def test_round_trip_keeps_both_modes(engine, history, unit_cost_input):
    unit_cost_input['include_vat'] = True
    unit = engine.compute(unit_cost_input, PricingMode.UNIT_COST)
    itemized = _record(engine, 'Chair', 45.5)

    history.append(unit)
    history.append(itemized)

    loaded = history.load()
    assert isinstance(loaded[0], ItemizedRecord)
    assert isinstance(loaded[1], UnitCostRecord)
    assert loaded == [itemized, unit]


def test_loads_payload_without_mode_tag(store, settings):
    """Entries saved by the browser version carry camelCase keys and no mode."""
    entry = {
        "productName": "Bag", "materialCost": 100, "laborCost": 50, "overheadExpenses": 20,
        "profitPercentage": 20, "discountPercentage": 10, "taxPercentage": 12,
        "baseCost": 170, "profitAmount": 34, "withProfit": 204, "discountAmount": 20.4,
        "afterDiscount": 183.6, "taxAmount": 22.032, "totalPrice": 205.632,
        "timestamp": "2025-03-01T10:00:00.000Z",
    }
    store.set(settings.history_key, json.dumps([entry]))

    loaded = HistoryStore(store, settings).load()

    assert len(loaded) == 1
    assert loaded[0].total_price == 205.632
    assert loaded[0].to_dict()['mode'] == 'itemized'


def test_serialized_keys_match_browser_format(engine, unit_cost_input):
    unit_cost_input['include_vat'] = True
    data = engine.compute(unit_cost_input, PricingMode.UNIT_COST).to_dict()

    assert data['mode'] == 'unit_cost'
    assert data['includeVAT'] is True
    assert data['timeUnit'] == 'month'
    assert 'variableCostPerUnit' in data
    assert 'sellingPrice' in data


def test_json_file_store_persists(tmp_path):
    path = tmp_path / 'nested' / 'store.json'
    store = JsonFileStore(path)

    store.set('a', '1')
    store.set('b', '2')
    store.remove('a')
    store.remove('missing')

    reopened = JsonFileStore(path)
    assert reopened.get('a') is None
    assert reopened.get('b') == '2'


def test_json_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text('{broken', encoding='utf-8')
    store = JsonFileStore(path)

    assert store.get('pricingHistory') is None
    store.set('pricingHistory', '[]')
    assert store.get('pricingHistory') == '[]'


def test_history_over_json_file(engine, settings):
    store = JsonFileStore(settings.store_file)
    HistoryStore(store, settings).append(_record(engine, 'Persisted'))

    loaded = HistoryStore(JsonFileStore(settings.store_file), settings).load()
    assert [r.product_name for r in loaded] == ['Persisted']


@pytest.mark.parametrize("stored,expected", [
    (None, True),
    ('dark', True),
    ('light', False),
    ('purple', False),
    ('', True),
])
def test_theme_preference_load(settings, stored, expected):
    store = MemoryStore({} if stored is None else {settings.theme_key: stored})
    assert ThemePreference(store, settings).load() is expected


def test_theme_preference_save(settings):
    store = MemoryStore()
    theme = ThemePreference(store, settings)

    theme.save(False)
    assert store.get('theme') == 'light'
    theme.save(True)
    assert store.get('theme') == 'dark'
