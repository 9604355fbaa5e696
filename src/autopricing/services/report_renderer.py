"""
PDF pricing report generator.

Renders one pricing record as a single-page cost breakdown: labelled
amounts, separator rules and a highlighted total. Uses fpdf2 (pure Python,
no system dependencies).
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fpdf import FPDF

from ..config.settings import get_settings, Settings
from ..engine.models import ItemizedRecord, PricingRecord, UnitCostRecord
from ..engine.pricing_engine import format_money

ACCENT = (16, 185, 129)
MUTED = (100, 100, 100)
RULE_GRAY = (200, 200, 200)


@dataclass
class ReportLine:
    """One labelled value in the breakdown."""
    label: str
    value: float
    bold: bool = False
    money: bool = True
    gap_before: float = 0  # extra vertical space before the line (mm)
    rule_before: bool = False


def _pct(value: float) -> str:
    return f"{value:g}%"


def report_lines(record: PricingRecord) -> list[ReportLine]:
    """Labelled (name, value) pairs for a record, excluding the total."""
    if isinstance(record, ItemizedRecord):
        return [
            ReportLine("Material Cost:", record.material_cost),
            ReportLine("Labor Cost:", record.labor_cost),
            ReportLine("Overhead Expenses:", record.overhead_expenses),
            ReportLine("Base Cost:", record.base_cost, bold=True, gap_before=2, rule_before=True),
            ReportLine(f"Profit ({_pct(record.profit_percentage)}):", record.profit_amount, gap_before=4),
            ReportLine("Price with Profit:", record.with_profit, bold=True),
            ReportLine(f"Discount ({_pct(record.discount_percentage)}):", -record.discount_amount, gap_before=4),
            ReportLine("Price after Discount:", record.after_discount, bold=True),
            ReportLine(f"Tax ({_pct(record.tax_percentage)}):", record.tax_amount, gap_before=4),
        ]

    if isinstance(record, UnitCostRecord):
        period = record.time_unit.value
        lines = [
            ReportLine(f"Fixed Costs (per {period}):", record.fixed_costs),
            ReportLine("Variable Cost per Unit:", record.variable_cost_per_unit),
            ReportLine(f"Units Produced (per {period}):", record.units_produced, money=False),
            ReportLine("Fixed Cost per Unit:", record.fixed_cost_per_unit, gap_before=2, rule_before=True),
            ReportLine("Cost per Unit:", record.cost_per_unit, bold=True),
            ReportLine(f"Markup ({_pct(record.markup_percentage)}):",
                       record.selling_price_raw - record.cost_per_unit, gap_before=4),
            ReportLine("Price before VAT:", record.selling_price_raw, bold=True),
        ]
        if record.include_vat:
            lines.append(ReportLine("VAT:", record.vat_amount))
        lines.extend([
            ReportLine("Profit per Unit:", record.profit_per_unit, gap_before=4),
            ReportLine(f"Profit per {period}:", record.period_profit),
        ])
        return lines

    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def report_total(record: PricingRecord) -> ReportLine:
    """The highlighted total line."""
    label = "TOTAL PRICE:" if isinstance(record, ItemizedRecord) else "SELLING PRICE / UNIT:"
    return ReportLine(label, record.final_price, bold=True)


def report_filename(record: PricingRecord) -> str:
    """File name derived from the product name: Widget A -> Widget_A_pricing.pdf"""
    return re.sub(r'[^a-z0-9]', '_', record.product_name, flags=re.IGNORECASE) + '_pricing.pdf'


def format_timestamp(timestamp: str) -> str:
    """Render an ISO timestamp in local time; unparseable values pass through."""
    try:
        moment = datetime.fromisoformat(timestamp.replace('Z', '+00:00'))
    except ValueError:
        return timestamp
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime('%m/%d/%Y, %I:%M:%S %p')


def _safe(text: str) -> str:
    """Replace characters the built-in PDF fonts (latin-1) can't render."""
    if not text:
        return ""
    return (
        text
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class PricingReportPDF(FPDF):
    """Single-page pricing report."""

    LABEL_X = 25
    VALUE_RIGHT = 160

    def __init__(self, currency_symbol: str = '$'):
        super().__init__()
        self.currency_symbol = currency_symbol
        self.set_auto_page_break(auto=True, margin=20)

    def rule(self, y: float, x1: float, x2: float, color=RULE_GRAY):
        self.set_draw_color(*color)
        self.line(x1, y, x2, y)

    def amount_row(self, y: float, line: ReportLine):
        """Label on the left, value right-aligned at VALUE_RIGHT."""
        self.set_font("Helvetica", "B" if line.bold else "", 11)
        self.set_xy(self.LABEL_X, y - 5)
        self.cell(90, 6, _safe(line.label))
        if line.money:
            text = format_money(line.value, self.currency_symbol)
        else:
            text = f"{line.value:,.2f}".rstrip('0').rstrip('.')
        self.set_xy(self.VALUE_RIGHT - 45, y - 5)
        self.cell(45, 6, _safe(text), align="R")


def render_pdf(record: PricingRecord, settings: Optional[Settings] = None) -> bytes:
    """
    Generate the PDF report for a record.

    Returns:
        PDF file content as bytes
    """
    settings = settings or get_settings()
    pdf = PricingReportPDF(currency_symbol=settings.currency_symbol)
    pdf.add_page()

    # Title
    pdf.set_font("Helvetica", "B", 22)
    pdf.set_text_color(*ACCENT)
    pdf.set_xy(0, 12)
    pdf.cell(pdf.w, 10, _safe(settings.app_title), align="C")

    # Product + date
    pdf.set_font("Helvetica", "", 16)
    pdf.set_text_color(0, 0, 0)
    pdf.text(20, 40, _safe(f"Product: {record.product_name}"))

    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(*MUTED)
    pdf.text(20, 48, _safe(f"Date: {format_timestamp(record.timestamp)}"))

    pdf.rule(52, 20, 190, color=ACCENT)

    pdf.set_font("Helvetica", "", 14)
    pdf.set_text_color(0, 0, 0)
    pdf.text(20, 62, "Cost Breakdown:")

    y = 72
    for line in report_lines(record):
        if line.rule_before:
            y += line.gap_before
            pdf.rule(y, PricingReportPDF.LABEL_X, PricingReportPDF.VALUE_RIGHT)
            y += 8
        else:
            y += line.gap_before
        pdf.amount_row(y, line)
        y += 8

    y += 4
    pdf.rule(y, PricingReportPDF.LABEL_X, PricingReportPDF.VALUE_RIGHT, color=ACCENT)
    y += 10

    total = report_total(record)
    pdf.set_font("Helvetica", "B", 14)
    pdf.set_text_color(*ACCENT)
    pdf.set_xy(PricingReportPDF.LABEL_X, y - 6)
    pdf.cell(90, 8, total.label)
    pdf.set_xy(PricingReportPDF.VALUE_RIGHT - 45, y - 6)
    pdf.cell(45, 8, _safe(format_money(total.value, settings.currency_symbol)), align="R")

    return bytes(pdf.output())
