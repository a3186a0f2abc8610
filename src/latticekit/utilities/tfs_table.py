"""
Row source for lattice construction.

DataTable gives row/column access to a table of lattice elements, one row
per element. Tables are read from MAD/TFS files with tfs-pandas or built
from records in memory.
"""

from ..exceptions import LatticeSourceError, MissingColumnError, TableFormatError
from pathlib import Path
from tfs.errors import TfsFormatError
from typing import Any, Iterable, Mapping, Optional
import logging
import math
import pandas as pd
import tfs

logger = logging.getLogger(__name__)


class DataTable:
    """Row/column accessor over a pandas DataFrame.

    Column names are upper-cased on construction. Numeric columns that are
    absent read as zero, which is how MAD omits unset attributes; string
    columns that are absent raise MissingColumnError.
    """

    def __init__(self, frame: pd.DataFrame, headers: Optional[Mapping[str, Any]] = None, source: str = "<memory>"):
        frame = frame.reset_index(drop=True).copy()
        frame.columns = [str(c).upper() for c in frame.columns]
        self._frame = frame
        self.headers = dict(headers or {})
        self.source = source

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], source: str = "<records>") -> 'DataTable':
        """Build a table from a list of dicts, one per row."""
        return cls(pd.DataFrame.from_records(list(records)), source=source)

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    def length(self) -> int:
        """Number of rows."""
        return len(self._frame)

    def __len__(self):
        return self.length()

    def has_col(self, column: str) -> bool:
        return column.upper() in self._frame.columns

    def _check_row(self, row: int):
        if not 0 <= row < len(self._frame):
            raise IndexError(f"Row {row} out of range for table with {len(self._frame)} rows")

    def get_s(self, column: str, row: int) -> str:
        """String value of a cell."""
        column = column.upper()
        if column not in self._frame.columns:
            raise MissingColumnError(column)
        self._check_row(row)
        value = self._frame.at[row, column]
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return ""
        return str(value)

    def get_d(self, column: str, row: int) -> float:
        """Numeric value of a cell, zero for an absent column or an empty cell."""
        column = column.upper()
        self._check_row(row)
        if column not in self._frame.columns:
            return 0.0
        value = self._frame.at[row, column]
        if value is None:
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise TableFormatError(f"{self.source}: non-numeric value {value!r} in column {column}, row {row}") from e
        return 0.0 if math.isnan(number) else number

    def set_s(self, column: str, row: int, value: str):
        """Overwrite a string cell, creating the column if needed."""
        column = column.upper()
        self._check_row(row)
        if column not in self._frame.columns:
            self._frame[column] = ""
        self._frame[column] = self._frame[column].astype(object)
        self._frame.at[row, column] = value

    def __repr__(self):
        return f"DataTable(source={self.source}, rows={len(self._frame)}, columns={list(self._frame.columns)})"


def read_tfs_table(path: str | Path) -> DataTable:
    """Read a MAD/TFS file into a DataTable.

    Raises:
        LatticeSourceError: If the file cannot be opened
        TableFormatError: If the file is not a valid TFS table
    """
    path = Path(path)
    if not path.is_file():
        raise LatticeSourceError(f"ERROR opening file {path}")
    try:
        frame = tfs.read(path)
    except OSError as e:
        raise LatticeSourceError(f"ERROR reading file {path}: {e}") from e
    except (TfsFormatError, ValueError) as e:
        logger.error(f"Error reading {path}")
        raise TableFormatError(f"{path}: {e}") from e
    logger.debug(f"Read {len(frame)} rows from {path}")
    return DataTable(frame, headers=getattr(frame, 'headers', {}), source=str(path))
