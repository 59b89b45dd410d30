"""
Plot grid helper functions.

Provides utilities for:
- Materializing a dense plot grid from plant positions
- Resolving the Moore neighborhood of a cell
"""
from dataclasses import dataclass, field
from typing import Optional
import numpy as np
import logging

from cropguard.domain.models import Plant

logger = logging.getLogger(__name__)

EMPTY_CELL = -1

# Moore neighborhood, row-major: NW, N, NE, W, E, SW, S, SE
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


@dataclass
class PlotGrid:
    """
    Dense rows x columns grid of plant handles.
    
    Cells are stored in a flat array indexed by ``row * columns + column``.
    Each cell holds the index of the occupying plant in ``plants`` or
    ``EMPTY_CELL``.
    """
    rows: int
    columns: int
    plants: list[Plant]
    cells: np.ndarray
    excluded_plant_ids: list[str] = field(default_factory=list)
    
    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.columns
    
    def cell_index(self, row: int, column: int) -> int:
        if not self.in_bounds(row, column):
            raise IndexError(f"Cell ({row}, {column}) outside {self.rows}x{self.columns} grid")
        return row * self.columns + column
    
    def plant_at(self, row: int, column: int) -> Optional[Plant]:
        """Return the plant occupying (row, column), or None if empty."""
        handle = int(self.cells[self.cell_index(row, column)])
        if handle == EMPTY_CELL:
            return None
        return self.plants[handle]
    
    def is_placed(self, plant: Plant) -> bool:
        """Whether the plant occupies its declared cell on this grid."""
        if plant.position is None:
            return False
        row, column = plant.position.row, plant.position.column
        if not self.in_bounds(row, column):
            return False
        occupant = self.plant_at(row, column)
        return occupant is not None and occupant.id == plant.id
    
    def to_matrix(self) -> list[list[Optional[Plant]]]:
        """Nested row-major view of the grid."""
        return [
            [self.plant_at(row, column) for column in range(self.columns)]
            for row in range(self.rows)
        ]


def build_grid(rows: int, columns: int, plants: list[Plant]) -> PlotGrid:
    """
    Build a dense grid from plot dimensions and plant positions.
    
    Unplaced plants are left off the grid. Plants whose position falls outside
    the current bounds, or onto a cell already claimed earlier in the list,
    are excluded and reported in ``excluded_plant_ids``.
    
    Args:
        rows: Number of grid rows
        columns: Number of grid columns
        plants: Plants of the plot, in store order
        
    Returns:
        PlotGrid instance
    """
    cells = np.full(rows * columns, EMPTY_CELL, dtype=np.intp)
    excluded: list[str] = []
    
    for handle, plant in enumerate(plants):
        if plant.position is None:
            continue
        
        row, column = plant.position.row, plant.position.column
        if not (0 <= row < rows and 0 <= column < columns):
            excluded.append(plant.id)
            continue
        
        index = row * columns + column
        if cells[index] != EMPTY_CELL:
            excluded.append(plant.id)
            continue
        
        cells[index] = handle
    
    if excluded:
        logger.debug(f"Excluded {len(excluded)} plants from {rows}x{columns} grid: {excluded}")
    
    return PlotGrid(
        rows=rows,
        columns=columns,
        plants=plants,
        cells=cells,
        excluded_plant_ids=excluded,
    )


def get_neighbors(
    grid: PlotGrid,
    row: int,
    column: int,
) -> list[tuple[int, int, Optional[Plant]]]:
    """
    Resolve the existing Moore neighbors of a cell.
    
    Args:
        grid: Plot grid
        row: Cell row
        column: Cell column
        
    Returns:
        List of (row, column, plant or None) for every in-bounds neighbor
    """
    neighbors = []
    for d_row, d_column in NEIGHBOR_OFFSETS:
        n_row, n_column = row + d_row, column + d_column
        if grid.in_bounds(n_row, n_column):
            neighbors.append((n_row, n_column, grid.plant_at(n_row, n_column)))
    return neighbors
