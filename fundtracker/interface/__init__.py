"""Mini README: Interactive interfaces for the fund tracker.

Exports the FastAPI application factory serving the admin and public JSON
views. The Typer CLI in ``main_fund_tracker.py`` launches it.
"""

from .web_app import create_application

__all__ = ["create_application"]
