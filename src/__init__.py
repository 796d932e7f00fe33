"""
Grouped Totals: multi-level grouping with subtotals.
"""
