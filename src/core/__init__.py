"""
Shared infrastructure: configuration loading, errors, dates and locales.
"""
