"""I/O utilities for CSV import."""

from .import_csv import import_shifts_csv, import_workers_csv

__all__ = [
    "import_shifts_csv",
    "import_workers_csv",
]
