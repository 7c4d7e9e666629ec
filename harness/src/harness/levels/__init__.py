from .grid import DEFAULT_CELL_SIZE, CellKind, Grid, MapValidationError, map_symbol, validate_map

__all__ = [
    "DEFAULT_CELL_SIZE",
    "CellKind",
    "Grid",
    "MapValidationError",
    "map_symbol",
    "validate_map",
]
