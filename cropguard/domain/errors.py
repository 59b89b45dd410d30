"""
Domain errors raised by the plot and plant services.
"""


class NotFoundError(Exception):
    """A requested entity does not exist in the store."""
    
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class PlotNotFoundError(NotFoundError):
    def __init__(self, plot_id: str):
        super().__init__("Plot", plot_id)


class PlantNotFoundError(NotFoundError):
    def __init__(self, plant_id: str):
        super().__init__("Plant", plant_id)


class ValidationError(ValueError):
    """A write would violate a plot/plant invariant."""
    pass


class PositionOccupiedError(ValidationError):
    def __init__(self, plot_id: str, row: int, column: int):
        self.plot_id = plot_id
        self.row = row
        self.column = column
        super().__init__(
            f"Position ({row}, {column}) in plot '{plot_id}' is already occupied"
        )


class PositionOutOfBoundsError(ValidationError):
    def __init__(self, plot_id: str, row: int, column: int, rows: int, columns: int):
        self.plot_id = plot_id
        super().__init__(
            f"Position ({row}, {column}) is outside plot '{plot_id}' "
            f"bounds {rows}x{columns}"
        )


class InvalidStatusTransition(Exception):
    """A plant status change not allowed by the lifecycle."""
    pass
