"""This package renders matrices of text cells as bordered tables."""

__app_name__ = "gridtable"
__version__ = "0.1.0"
__license__ = "MIT"

from gridtable.cell import Cell, Matrix, SpanError
from gridtable.config import ConfigurationError, ConstraintError, Size, TableStyle
from gridtable.table import Table, render, render_lines

__all__ = [
    "Cell",
    "ConfigurationError",
    "ConstraintError",
    "Matrix",
    "Size",
    "SpanError",
    "Table",
    "TableStyle",
    "render",
    "render_lines",
]
