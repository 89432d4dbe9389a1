"""
Tabular export of fills and orders (pandas DataFrames and CSV files).
"""
