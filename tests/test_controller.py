"""
Application state reducer and controller tests.
"""
import pytest

from autopricing.engine import PricingMode
from autopricing.services.kv_store import MemoryStore
from autopricing.ui import state as app_state
from autopricing.ui.controller import PricingController


@pytest.fixture
def controller(store, settings, engine):
    ctl = PricingController(store, settings, engine=engine)
    ctl.start()
    return ctl


def _fill(controller, values):
    for name, value in values.items():
        controller.change_field(name, value)


def test_reduce_does_not_mutate():
    before = app_state.AppState()
    after = app_state.reduce(before, app_state.Action(app_state.FIELD_CHANGED,
                                                      {'name': 'labor_cost', 'value': '5'}))

    assert before.form['labor_cost'] == ''
    assert after.form['labor_cost'] == '5'
    assert after is not before


def test_reduce_rejects_unknown_action_and_field():
    state = app_state.AppState()
    with pytest.raises(ValueError):
        app_state.reduce(state, app_state.Action('explode'))
    with pytest.raises(ValueError):
        app_state.reduce(state, app_state.Action(app_state.FIELD_CHANGED, {'name': 'fixed_costs', 'value': 1}))


def test_mode_change_swaps_form():
    state = app_state.reduce(app_state.AppState(),
                             app_state.Action(app_state.MODE_CHANGED, {'mode': 'unit_cost'}))

    assert state.mode == PricingMode.UNIT_COST
    assert set(state.form) == set(app_state.UNIT_COST_FIELDS)
    assert state.form['time_unit'] == 'month'
    assert state.form['include_vat'] is False


def test_toggle_actions_flip_flags():
    state = app_state.AppState()
    state = app_state.reduce(state, app_state.Action(app_state.THEME_TOGGLED))
    state = app_state.reduce(state, app_state.Action(app_state.HISTORY_TOGGLED))

    assert state.dark_mode is False
    assert state.show_history is True


def test_start_loads_theme_and_history(engine, settings):
    store = MemoryStore({settings.theme_key: 'light'})
    ctl = PricingController(store, settings, engine=engine)
    ctl.history_store.append(engine.compute({'product_name': 'Old'}))

    state = ctl.start()

    assert state.dark_mode is False
    assert [r.product_name for r in state.history] == ['Old']


def test_calculate_then_save(controller, itemized_input):
    _fill(controller, itemized_input)
    state = controller.calculate()

    assert state.show_results
    assert state.current.total_price == pytest.approx(205.632)
    assert controller.last_validation.valid

    file_name, pdf = controller.save()

    assert file_name == 'Oak_Table_pricing.pdf'
    assert pdf.startswith(b'%PDF')
    assert controller.state.current is None
    assert controller.state.show_results is False
    assert controller.state.form['product_name'] == ''
    assert len(controller.state.history) == 1
    assert len(controller.history_store.load()) == 1


def test_save_without_calculation_is_noop(controller):
    assert controller.save() is None
    assert controller.state.history == ()


def test_calculate_with_bad_input_records_validation(controller):
    _fill(controller, {'product_name': '', 'material_cost': 'oops'})
    state = controller.calculate()

    assert not controller.last_validation.valid
    assert state.current.material_cost == 0


def test_delete_and_clear(controller, engine):
    for name in ('C', 'B', 'A'):
        controller.history_store.append(engine.compute({'product_name': name}))
    controller.start()

    controller.delete(1)
    assert [r.product_name for r in controller.state.history] == ['A', 'C']

    controller.clear_history()
    assert controller.state.history == ()
    assert controller.history_store.load() == []


def test_toggle_theme_persists(controller, store, settings):
    controller.toggle_theme()
    assert controller.state.dark_mode is False
    assert store.get(settings.theme_key) == 'light'


def test_unit_cost_flow(controller, unit_cost_input):
    controller.change_mode(PricingMode.UNIT_COST)
    _fill(controller, {**unit_cost_input, 'include_vat': True})
    state = controller.calculate()

    assert state.current.mode == PricingMode.UNIT_COST
    assert state.current.selling_price == pytest.approx(state.current.selling_price_raw * 1.12)

    controller.save()
    name, pdf = controller.report_for(0)
    assert name == "Candle_pricing.pdf"
    assert pdf.startswith(b"%PDF")


@pytest.mark.parametrize("index", [-1, 1, 5])
def test_report_for_out_of_range(controller, engine, index):
    controller.history_store.append(engine.compute({'product_name': 'Only'}))
    controller.start()

    with pytest.raises(IndexError):
        controller.report_for(index)


def test_toggle_history_panel(controller):
    assert controller.toggle_history().show_history is True
    assert controller.toggle_history(show=False).show_history is False
