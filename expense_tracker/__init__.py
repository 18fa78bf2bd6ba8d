"""
Expense Tracker - Source Package

A personal expense tracker for a single user: transactions entered by hand
or by voice, monthly summaries, budget alerts and an AI chat assistant.

DESIGN PRINCIPLES:
1. Everything lives in local key-value storage, one JSON document per key
2. Summaries and alerts are derived on demand, never stored
3. Services are built once at startup and passed around explicitly
4. External AI failures never reach the user as errors
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
