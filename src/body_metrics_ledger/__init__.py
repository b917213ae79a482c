"""
Body Metrics Ledger - Personal body measurement tracking.

Records periodic body and fitness measurements per metric type and derives
current values, trends, and summary statistics from the entry history.
"""

__version__ = "0.1.0"
