"""
UI adapters for the table browser.

Currently provides a Dash-based web UI via create_dash_app(). The UI is the
engine's host: it owns the table state and applies the commands the engine
proposes.
"""

from .dash_app import create_dash_app

__all__ = ["create_dash_app"]
