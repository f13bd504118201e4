import logging
import math
import os
from typing import Dict, Optional

import pandas as pd

from .address import zip5
from .errors import DirectoryNotLoadedError, DirectoryUnavailableError
from .models import ZipRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["zip", "city", "state_id", "state_name", "county_name", "county_fips"]


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ""


def _cell_text(value) -> str:
    return "" if _is_blank(value) else str(value).strip()


def _padded_code(value, width: int) -> str:
    """Render a numeric code cell as a zero-padded string (6824 -> '06824')."""
    if _is_blank(value):
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)).zfill(width)
    text = str(value).strip()
    if text.endswith(".0") and text[:-2].isdigit():
        text = text[:-2]
    return text.zfill(width) if text.isdigit() else text


class ZipDirectory:
    """In-memory ZIP code table, loaded once per process.

    The backing file is a spreadsheet (.xlsx/.xls) or CSV with the columns
    zip, city, state_id, state_name, county_name and county_fips.
    """

    def __init__(self, path: str):
        self.path = path
        self._records: Optional[Dict[str, ZipRecord]] = None

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    def __len__(self) -> int:
        return len(self._records) if self._records else 0

    def __contains__(self, zipcode: str) -> bool:
        return self.lookup(zipcode) is not None

    def load(self) -> "ZipDirectory":
        """Read the table into memory. Calling it again is a no-op."""
        if self._records is not None:
            return self

        logger.info(f"📇 Loading ZIP code table from {self.path}")
        df = self._read_table()

        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise DirectoryUnavailableError(
                f"ZIP code table {self.path} is missing columns: {', '.join(missing)}"
            )

        records: Dict[str, ZipRecord] = {}
        for row in df.to_dict(orient="records"):
            zipcode = _padded_code(row.get("zip"), 5)
            county_name = _cell_text(row.get("county_name"))
            state_id = _cell_text(row.get("state_id"))
            if not zipcode or not county_name or not state_id:
                continue

            records[zipcode] = ZipRecord(
                zip=zipcode,
                city=_cell_text(row.get("city")),
                state_id=state_id,
                state_name=_cell_text(row.get("state_name")),
                county_name=county_name,
                county_fips=_padded_code(row.get("county_fips"), 5),
            )

        self._records = records
        logger.info(f"Loaded {len(records)} ZIP codes")
        return self

    def _read_table(self) -> pd.DataFrame:
        extension = os.path.splitext(self.path)[1].lower()
        try:
            if extension in (".xlsx", ".xls"):
                return pd.read_excel(self.path, sheet_name=0)
            if extension == ".csv":
                return pd.read_csv(self.path)
        except Exception as e:
            logger.error(f"Error loading ZIP data: {e}")
            raise DirectoryUnavailableError(f"Failed to load ZIP code database: {e}") from e

        raise DirectoryUnavailableError(
            f"Unsupported ZIP code table format '{extension}' for {self.path}"
        )

    def lookup(self, zipcode: str) -> Optional[ZipRecord]:
        """Return the record for a ZIP (or ZIP+4) code, or None if unknown."""
        if self._records is None:
            raise DirectoryNotLoadedError()

        key = _padded_code(zip5(str(zipcode).strip()), 5)
        record = self._records.get(key)
        logger.debug(f"ZIP lookup {key}: {'found' if record else 'not found'}")
        return record
