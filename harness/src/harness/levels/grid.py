from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

DEFAULT_CELL_SIZE = 10.0

_SYMBOLS = {"W": "WALL", "S": "START", "F": "FINISH"}


class MapValidationError(ValueError):
    pass


class CellKind(Enum):
    EMPTY = 0
    WALL = 1
    START = 2
    FINISH = 3


@dataclass(frozen=True, slots=True)
class Grid:
    """
    Normalized level in cell coordinates: row -> world X, col -> world Z.

    The world extent is centered on the origin, so each axis spans
    [-extent / 2, +extent / 2).
    """

    cells: tuple[tuple[CellKind, ...], ...]
    start: tuple[int, int]
    finish: tuple[int, int]
    cell_size: float = DEFAULT_CELL_SIZE

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0])

    @property
    def extent_x(self) -> float:
        return self.height * self.cell_size

    @property
    def extent_z(self) -> float:
        return self.width * self.cell_size

    @property
    def origin_x(self) -> float:
        return -self.extent_x / 2

    @property
    def origin_z(self) -> float:
        return -self.extent_z / 2

    def __getitem__(self, index: tuple[int, int]) -> CellKind:
        row, col = index
        return self.cells[row][col]

    def iter_cells(self) -> Iterator[tuple[int, int, CellKind]]:
        for row, line in enumerate(self.cells):
            for col, kind in enumerate(line):
                yield row, col, kind

    def cell_center(self, row: int, col: int) -> tuple[float, float]:
        half = self.cell_size / 2
        x = self.origin_x + row * self.cell_size + half
        z = self.origin_z + col * self.cell_size + half
        return x, z

    def cell_rect(self, row: int, col: int) -> tuple[float, float, float, float]:
        """Return (min_x, max_x, min_z, max_z) of a cell; max edges are exclusive."""
        min_x = self.origin_x + row * self.cell_size
        min_z = self.origin_z + col * self.cell_size
        return min_x, min_x + self.cell_size, min_z, min_z + self.cell_size

    def contains_point(self, row: int, col: int, x: float, z: float) -> bool:
        min_x, max_x, min_z, max_z = self.cell_rect(row, col)
        return min_x <= x < max_x and min_z <= z < max_z

    def is_within_bounds(self, x: float, z: float) -> bool:
        """Single source of truth for "inside the level"."""
        return (
            self.origin_x <= x < self.origin_x + self.extent_x
            and self.origin_z <= z < self.origin_z + self.extent_z
        )

    def cell_at(self, x: float, z: float) -> tuple[int, int] | None:
        if not self.is_within_bounds(x, z):
            return None
        row = int((x - self.origin_x) // self.cell_size)
        col = int((z - self.origin_z) // self.cell_size)
        # float rounding at the far edge
        return min(row, self.height - 1), min(col, self.width - 1)


def map_symbol(symbol: object) -> CellKind:
    """Map a request symbol to a cell kind; unknown symbols are Empty."""
    if isinstance(symbol, str) and symbol in _SYMBOLS:
        return CellKind[_SYMBOLS[symbol]]
    return CellKind.EMPTY


def validate_map(
    raw_map: Sequence[Sequence[str | None] | None] | None,
    *,
    cell_size: float = DEFAULT_CELL_SIZE,
) -> Grid:
    if not raw_map:
        raise MapValidationError("Map must contain at least one row.")
    if not raw_map[0]:
        raise MapValidationError("Map must contain at least one column.")
    if cell_size <= 0:
        raise MapValidationError(f"Cell size must be > 0, got {cell_size}.")

    cols = len(raw_map[0])
    rows: list[tuple[CellKind, ...]] = []
    starts: list[tuple[int, int]] = []
    finishes: list[tuple[int, int]] = []

    for row_index, raw_row in enumerate(raw_map):
        if raw_row is None:
            raise MapValidationError(f"Map row {row_index} is null.")
        if len(raw_row) != cols:
            raise MapValidationError("Map must be rectangular (all rows same length).")

        kinds = tuple(map_symbol(symbol) for symbol in raw_row)
        for col_index, kind in enumerate(kinds):
            if kind is CellKind.START:
                starts.append((row_index, col_index))
            elif kind is CellKind.FINISH:
                finishes.append((row_index, col_index))
        rows.append(kinds)

    if len(starts) != 1:
        raise MapValidationError("Map must contain exactly one S (Start).")
    if len(finishes) != 1:
        raise MapValidationError("Map must contain exactly one F (Finish).")

    return Grid(cells=tuple(rows), start=starts[0], finish=finishes[0], cell_size=cell_size)
