import os

import pandas as pd
import pytest

from property_history.errors import DirectoryNotLoadedError, DirectoryUnavailableError
from property_history.models import ZipRecord
from property_history.zip_directory import ZipDirectory

from conftest import ZIP_ROWS


def test_lookup_returns_padded_record(directory):
    record = directory.lookup("06824")
    assert record == ZipRecord(
        zip="06824",
        city="Fairfield",
        state_id="CT",
        state_name="Connecticut",
        county_name="Fairfield",
        county_fips="09001",
    )


def test_lookup_zip_plus_four_uses_prefix(directory):
    assert directory.lookup("06824-1234").city == "Fairfield"


def test_lookup_absent_zip_returns_none(directory):
    assert directory.lookup("99501") is None
    assert "99501" not in directory


def test_rows_without_county_or_state_are_dropped(directory):
    assert len(directory) == 2
    assert directory.lookup("96799") is None


def test_lookup_before_load_fails(zip_table):
    directory = ZipDirectory(zip_table)
    assert not directory.is_loaded
    with pytest.raises(DirectoryNotLoadedError):
        directory.lookup("06824")


def test_load_is_idempotent(zip_table):
    directory = ZipDirectory(zip_table)
    directory.load()
    os.remove(zip_table)

    # Second load must not touch the (now missing) file
    assert directory.load() is directory
    assert len(directory) == 2


def test_missing_file_is_unavailable(tmp_path):
    directory = ZipDirectory(str(tmp_path / "missing.xlsx"))
    with pytest.raises(DirectoryUnavailableError):
        directory.load()
    assert not directory.is_loaded


def test_missing_columns_are_unavailable(tmp_path):
    path = tmp_path / "partial.csv"
    pd.DataFrame([{"zip": 6824, "city": "Fairfield"}]).to_csv(path, index=False)

    with pytest.raises(DirectoryUnavailableError) as excinfo:
        ZipDirectory(str(path)).load()
    assert "county_name" in excinfo.value.message


def test_unsupported_format_is_unavailable(tmp_path):
    path = tmp_path / "uszips.json"
    path.write_text("[]")
    with pytest.raises(DirectoryUnavailableError):
        ZipDirectory(str(path)).load()


def test_loads_excel_workbook(tmp_path):
    path = tmp_path / "uszips.xlsx"
    pd.DataFrame(ZIP_ROWS).to_excel(path, index=False)

    directory = ZipDirectory(str(path)).load()
    record = directory.lookup("10001")
    assert record.city == "New York"
    assert record.county_fips == "36061"
    assert directory.lookup("06824").zip == "06824"


def test_string_zip_cells_are_padded(tmp_path):
    path = tmp_path / "uszips.csv"
    pd.DataFrame(
        [
            {
                "zip": "501",
                "city": "Holtsville",
                "state_id": "NY",
                "state_name": "New York",
                "county_name": "Suffolk",
                "county_fips": "36103",
            }
        ]
    ).to_csv(path, index=False)

    directory = ZipDirectory(str(path)).load()
    assert directory.lookup("00501").county_name == "Suffolk"
