"""
CLI layer for tablestate.

Provides a Typer application that drives a :class:`~tablestate.engine.DataTable`
from the terminal. All table logic lives in ``tablestate.core`` and
``tablestate.engine``; this package handles only argument parsing and
output formatting.

Entry point::

    tablestate --help
"""

from tablestate.cli.app import app

__all__ = ["app"]
