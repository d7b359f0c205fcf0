"""gridcalc - a 2-D cell grid with A1-notation formulas.

Usage::

    from gridcalc import Grid, load_grid

    grid = Grid.new()            # 20 rows x 10 columns by default
    grid["A1"] = "1"
    grid["A2"] = "2"
    grid["A3"] = "3"
    grid["B1"] = "=SUM(A1:A3)"
    print(grid["B1"].value)      # "6"

    grid["C1"] = "=Z1"           # outside a 10-column grid
    print(grid["C1"].value, grid["C1"].error)
    # "#ERROR" "Cell reference out of bounds: Z1"

    grid.save("sheet.json")
    same = load_grid("sheet.json")
"""

import os

from gridcalc._cell import Cell, Formatting
from gridcalc._document import DocumentError, GridDocument
from gridcalc._grid import Column, Grid, Row
from gridcalc.config import Settings, configure_logging, get_settings

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "Column",
    "DocumentError",
    "Formatting",
    "Grid",
    "GridDocument",
    "Row",
    "Settings",
    "configure_logging",
    "get_settings",
    "load_grid",
]


def load_grid(
    filename: str | os.PathLike[str],
    settings: Settings | None = None,
) -> Grid:
    """Open a saved JSON grid document and recalculate it once.

    Raises ``DocumentError`` if the file is not a well-formed grid document.
    """
    return Grid.load(filename, settings=settings)
