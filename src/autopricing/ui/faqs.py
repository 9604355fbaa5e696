"""FAQ and glossary content for the help panel."""

FAQS = [
    ("What is AutoPricing?",
     "AutoPricing is a smart pricing calculator that helps businesses determine "
     "accurate selling prices based on costs and desired profit."),
    ("What pricing method does it use?",
     "The system uses Cost-Plus Pricing, where a markup percentage is added to "
     "the total cost per unit."),
    ("Why should I include fixed costs?",
     "Including fixed costs ensures that all expenses are covered and prevents underpricing."),
    ("What happens if production increases?",
     "Increasing production lowers the fixed cost per unit, which can increase profitability."),
    ("Can I change the markup?",
     "Yes. You can adjust the markup percentage depending on your desired profit margin."),
    ("Why is my selling price high?",
     "It may be due to high fixed costs, high variable costs, low production volume, "
     "or a high markup percentage."),
]

TERMS = [
    ("AutoPricing", "A smart pricing calculator system that automatically computes selling "
                    "prices using Cost-Plus Pricing."),
    ("Fixed Costs", "Expenses that remain constant regardless of production volume "
                    "(e.g., rent, utilities, depreciation)."),
    ("Variable Costs", "Costs that change depending on the number of units produced "
                       "(e.g., materials, labor, packaging)."),
    ("Fixed Cost per Unit", "Total Fixed Costs divided by the number of units produced."),
    ("Cost per Unit", "Fixed Cost per Unit plus Variable Cost per Unit."),
    ("Markup Percentage", "The percentage added to the cost per unit to determine profit."),
    ("Selling Price", "Final price after adding markup."),
    ("Profit per Unit", "Selling Price minus Cost per Unit."),
    ("VAT", "Flat 12% consumption tax optionally added to the selling price."),
    ("Cost-Plus Pricing", "A pricing strategy where a markup percentage is added to total cost."),
]


def faq_markdown() -> str:
    lines = ["#### Frequently Asked Questions"]
    for i, (question, answer) in enumerate(FAQS, start=1):
        lines.append(f"**{i}. {question}**  \n{answer}")
    return "\n\n".join(lines)


def terms_markdown() -> str:
    lines = ["#### Definition of Terms"]
    lines.extend(f"- **{term}**: {definition}" for term, definition in TERMS)
    return "\n".join(lines)
