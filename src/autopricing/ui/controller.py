"""
Calculator controller - runs side effects and feeds the state reducer.

The Streamlit page only calls controller methods and renders
controller.state, so the whole interaction flow is testable without a UI.
"""
import logging
from typing import Any, Optional

from ..config.settings import get_settings, Settings
from ..engine.models import PricingMode, ValidationResult
from ..engine.pricing_engine import PricingEngine
from ..services.history_service import HistoryStore, ThemePreference
from ..services.kv_store import KeyValueStore
from ..services.report_renderer import render_pdf, report_filename
from . import state as app_state

logger = logging.getLogger(__name__)


class PricingController:
    """Owns AppState and the collaborators that change it."""

    def __init__(self, store: KeyValueStore, settings: Optional[Settings] = None,
                 engine: Optional[PricingEngine] = None):
        self.settings = settings or get_settings()
        self.engine = engine or PricingEngine(self.settings)
        self.history_store = HistoryStore(store, self.settings)
        self.theme = ThemePreference(store, self.settings)
        self.state = app_state.AppState()
        self.last_validation: Optional[ValidationResult] = None

    def dispatch(self, kind: str, **payload) -> app_state.AppState:
        self.state = app_state.reduce(self.state, app_state.Action(kind, payload))
        return self.state

    def start(self) -> app_state.AppState:
        """Load persisted history and theme."""
        self.dispatch(app_state.HISTORY_LOADED, history=self.history_store.load())
        return self.dispatch(app_state.THEME_TOGGLED, dark=self.theme.load())

    def change_field(self, name: str, value: Any) -> app_state.AppState:
        return self.dispatch(app_state.FIELD_CHANGED, name=name, value=value)

    def change_mode(self, mode: PricingMode) -> app_state.AppState:
        return self.dispatch(app_state.MODE_CHANGED, mode=mode)

    def calculate(self) -> app_state.AppState:
        """
        Compute a record from the current form.

        Validation problems are kept in last_validation for display; the
        calculation still runs with blank or bad numbers read as 0.
        """
        self.last_validation = self.engine.validate(self.state.form, self.state.mode)
        if not self.last_validation.valid:
            logger.info("Calculating with invalid input: %s", "; ".join(self.last_validation.errors))
        record = self.engine.compute(self.state.form, self.state.mode)
        return self.dispatch(app_state.CALCULATED, record=record)

    def save(self) -> Optional[tuple[str, bytes]]:
        """
        Persist the current record, render its report and reset the form.

        Returns:
            (file name, PDF bytes), or None when nothing has been calculated
        """
        record = self.state.current
        if record is None:
            return None
        history = self.history_store.append(record)
        report = (report_filename(record), render_pdf(record, self.settings))
        self.dispatch(app_state.HISTORY_LOADED, history=history)
        self.dispatch(app_state.FORM_RESET)
        return report

    def report_for(self, index: int) -> tuple[str, bytes]:
        """Render the PDF for a saved record. Raises IndexError when out of range."""
        HistoryStore.check_index(index, len(self.state.history))
        record = self.state.history[index]
        return report_filename(record), render_pdf(record, self.settings)

    def delete(self, index: int) -> app_state.AppState:
        history = self.history_store.delete_at(index)
        return self.dispatch(app_state.HISTORY_LOADED, history=history)

    def clear_history(self) -> app_state.AppState:
        self.history_store.clear()
        return self.dispatch(app_state.HISTORY_LOADED, history=[])

    def toggle_theme(self) -> app_state.AppState:
        self.dispatch(app_state.THEME_TOGGLED)
        self.theme.save(self.state.dark_mode)
        return self.state

    def toggle_history(self, show: Optional[bool] = None) -> app_state.AppState:
        if show is None:
            return self.dispatch(app_state.HISTORY_TOGGLED)
        return self.dispatch(app_state.HISTORY_TOGGLED, show=show)

    def reset_form(self) -> app_state.AppState:
        return self.dispatch(app_state.FORM_RESET)
