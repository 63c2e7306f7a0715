"""
Top-level package for the table browser.

This package exposes the tabular data engine (filter, paginate, select,
sort-direction state) and a thin Dash host that drives it.
Most code should import from submodules such as:
    table_browser.core
    table_browser.config
    table_browser.ui
"""

__all__: list[str] = []
