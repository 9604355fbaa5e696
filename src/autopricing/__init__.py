"""
AutoPricing Package

A cost-plus pricing calculator for small businesses.
Derives selling prices from cost inputs, keeps a calculation history and
exports PDF pricing reports.
"""

__version__ = "1.0.0"
