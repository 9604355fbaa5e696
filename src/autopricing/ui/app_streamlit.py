"""
Streamlit UI for AutoPricing.

Features:
- Calculator for itemized and per-unit cost-plus pricing
- Result breakdown with derivation trace
- Saved calculation history with PDF download and delete
- CSV/Excel export of the history
- Dark/light theme persisted with the history store
"""
import streamlit as st
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from autopricing.config.settings import get_settings
from autopricing.engine import PricingMode, format_money
from autopricing.engine.models import ItemizedRecord, TimeUnit
from autopricing.services import history_export
from autopricing.services.kv_store import JsonFileStore
from autopricing.services.report_renderer import format_timestamp
from autopricing.ui.controller import PricingController
from autopricing.ui.faqs import faq_markdown, terms_markdown


settings = get_settings()

st.set_page_config(
    page_title="AutoPricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


def get_controller() -> PricingController:
    """Per-session controller, started once."""
    if 'controller' not in st.session_state:
        controller = PricingController(JsonFileStore(settings.store_file), settings)
        controller.start()
        st.session_state.controller = controller
        st.session_state.form_nonce = 0
    return st.session_state.controller


def money(amount: float) -> str:
    return format_money(amount, settings.currency_symbol)


try:
    controller = get_controller()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

state = controller.state


# ============================================================================
# CUSTOM CSS & THEME
# ============================================================================
if state.dark_mode:
    background, surface, text = "#0f172a", "#1e293b", "#f1f5f9"
else:
    background, surface, text = "#f8fafc", "#ffffff", "#0f172a"

st.markdown(f"""
    <style>
        .stApp {{
            background-color: {background};
            color: {text};
        }}
        .block-container {{
            padding-top: 2rem;
            padding-bottom: 2rem;
        }}
        h1, h2, h3, h4, p, label {{
            color: {text} !important;
        }}
        .stMetric {{
            background-color: {surface};
            padding: 10px;
            border-radius: 5px;
            border-left: 5px solid rgb(16, 185, 129);
        }}
    </style>
""", unsafe_allow_html=True)


# ============================================================================
# SIDEBAR: Mode, theme, help
# ============================================================================
with st.sidebar:
    st.header("⚙️ Settings")

    mode_labels = {
        PricingMode.ITEMIZED: "Itemized (material / labor / overhead)",
        PricingMode.UNIT_COST: "Per Unit (fixed / variable cost)",
    }
    selected_mode = st.radio(
        "Pricing Mode",
        options=list(mode_labels),
        format_func=mode_labels.get,
        index=list(mode_labels).index(state.mode),
    )
    if selected_mode != state.mode:
        controller.change_mode(selected_mode)
        st.session_state.form_nonce += 1
        st.rerun()

    theme_label = "☀️ Light Mode" if state.dark_mode else "🌙 Dark Mode"
    if st.button(theme_label, use_container_width=True):
        controller.toggle_theme()
        st.rerun()

    st.divider()
    st.caption(f"🗂️ **{len(state.history)}** saved calculations")

    with st.expander("❓ FAQs"):
        st.markdown(faq_markdown())
    with st.expander("📖 Definition of Terms"):
        st.markdown(terms_markdown())


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("AutoPricing")
st.caption(f"Fast Pricing, Zero Hassle! | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["🧮 Price Calculator", f"🕘 History ({len(state.history)})"])


def render_form():
    """Calculator inputs. Returns True when the form was submitted."""
    nonce = st.session_state.form_nonce
    form = state.form
    values = {}

    with st.form(f"calculator_{nonce}"):
        values['product_name'] = st.text_input(
            "Product Name", value=form['product_name'], placeholder="Enter product name")

        if state.mode == PricingMode.ITEMIZED:
            c1, c2, c3 = st.columns(3)
            values['material_cost'] = c1.text_input("Material Cost", value=form['material_cost'], placeholder="0.00")
            values['labor_cost'] = c2.text_input("Labor Cost", value=form['labor_cost'], placeholder="0.00")
            values['overhead_expenses'] = c3.text_input("Overhead", value=form['overhead_expenses'], placeholder="0.00")
            c1, c2, c3 = st.columns(3)
            values['profit_percentage'] = c1.text_input("Profit Margin %", value=form['profit_percentage'], placeholder="0.00")
            values['discount_percentage'] = c2.text_input("Discount %", value=form['discount_percentage'], placeholder="0.00")
            values['tax_percentage'] = c3.text_input("Tax Rate %", value=form['tax_percentage'], placeholder="0.00")
        else:
            units = [t.value for t in TimeUnit]
            c1, c2 = st.columns(2)
            values['fixed_costs'] = c1.text_input("Fixed Costs", value=form['fixed_costs'], placeholder="0.00")
            values['variable_cost_per_unit'] = c2.text_input(
                "Variable Cost per Unit", value=form['variable_cost_per_unit'], placeholder="0.00")
            c1, c2, c3 = st.columns(3)
            values['units_produced'] = c1.text_input("Units Produced", value=form['units_produced'], placeholder="0")
            values['time_unit'] = c2.selectbox("Per", units, index=units.index(form['time_unit'] or 'month'))
            values['markup_percentage'] = c3.text_input("Markup %", value=form['markup_percentage'], placeholder="0.00")
            values['include_vat'] = st.checkbox(
                f"Include VAT ({settings.vat_rate * 100:g}%)", value=bool(form['include_vat']))

        submitted = st.form_submit_button("📈 Calculate Price", type="primary")

    if submitted:
        for name, value in values.items():
            controller.change_field(name, value)
    return submitted


def render_result(record):
    """Metrics and breakdown for the current calculation."""
    if isinstance(record, ItemizedRecord):
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Base Cost", money(record.base_cost))
        m2.metric(f"With Profit ({record.profit_percentage:g}%)", money(record.with_profit))
        m3.metric(f"After Discount ({record.discount_percentage:g}%)", money(record.after_discount))
        m4.metric(f"Tax ({record.tax_percentage:g}%)", money(record.tax_amount))
        st.markdown(f"### :green[Total Price: {money(record.total_price)}]")
    else:
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Fixed Cost / Unit", money(record.fixed_cost_per_unit))
        m2.metric("Cost / Unit", money(record.cost_per_unit))
        m3.metric("Profit / Unit", money(record.profit_per_unit))
        m4.metric(f"Profit / {record.time_unit.value}", money(record.period_profit))
        vat_note = " (incl. VAT)" if record.include_vat else ""
        st.markdown(f"### :green[Selling Price: {money(record.selling_price)}{vat_note}]")

    with st.expander("🔍 Calculation Details"):
        for t in record.trace():
            st.caption(f"**{t.step}**: {t.description} = `{t.value}`")


# ============================================================================
# TAB 1: CALCULATOR
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.4, 1.0], gap="large")

    with col1:
        st.subheader("Price Calculator")
        if render_form():
            st.session_state.pop('pending_report', None)
            controller.calculate()
            st.rerun()

        validation = controller.last_validation
        if validation and state.show_results:
            for error in validation.errors:
                st.warning(error)

    with col2:
        st.subheader("Result")
        with st.container(border=True):
            if state.show_results and state.current is not None:
                render_result(state.current)
                st.divider()

                btn_col1, btn_col2 = st.columns(2)
                with btn_col1:
                    if st.button("💾 Save & Generate PDF", type="primary", use_container_width=True):
                        st.session_state.pending_report = controller.save()
                        st.session_state.form_nonce += 1
                        st.rerun()
                with btn_col2:
                    if st.button("↩️ New Calculation", use_container_width=True):
                        controller.reset_form()
                        st.session_state.form_nonce += 1
                        st.rerun()
            else:
                st.info("🧮 Fill in the form and press Calculate Price.")

        pending = st.session_state.get('pending_report')
        if pending:
            file_name, data = pending
            st.success("Calculation saved to history.")
            st.download_button(
                "📥 Download PDF",
                data=data,
                file_name=file_name,
                mime="application/pdf",
                use_container_width=True,
            )


# ============================================================================
# TAB 2: HISTORY
# ============================================================================
with tab2:
    st.subheader("Calculation History")

    if not state.history:
        st.info("No saved calculations yet.")
    else:
        exp_col1, exp_col2, exp_col3 = st.columns(3)
        with exp_col1:
            st.download_button(
                "📥 CSV",
                data=history_export.to_csv(state.history),
                file_name="pricing_history.csv",
                mime="text/csv",
                use_container_width=True,
            )
        with exp_col2:
            st.download_button(
                "📥 Excel",
                data=history_export.to_excel(state.history),
                file_name="pricing_history.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True,
            )
        with exp_col3:
            confirm = st.checkbox("Confirm delete ALL calculations")
            if st.button("🗑️ Clear All", disabled=not confirm, use_container_width=True):
                controller.clear_history()
                st.rerun()

        st.divider()

        for index, record in enumerate(state.history):
            with st.container(border=True):
                c1, c2, c3, c4 = st.columns([2.5, 1.5, 1, 1])
                c1.markdown(f"**{record.product_name or '(unnamed)'}**")
                c1.caption(format_timestamp(record.timestamp))
                label = "Total" if isinstance(record, ItemizedRecord) else "Price / unit"
                c2.metric(label, money(record.final_price))
                report = st.session_state.get('history_reports', {}).get(record.timestamp + record.product_name)
                if report:
                    file_name, data = report
                    c3.download_button("📥 PDF", data=data, file_name=file_name,
                                       mime="application/pdf", key=f"pdf_{index}")
                elif c3.button("📄 PDF", key=f"render_{index}"):
                    reports = st.session_state.setdefault('history_reports', {})
                    reports[record.timestamp + record.product_name] = controller.report_for(index)
                    st.rerun()
                if c4.button("🗑️", key=f"delete_{index}"):
                    try:
                        controller.delete(index)
                    except IndexError as e:
                        st.error(str(e))
                    st.rerun()
