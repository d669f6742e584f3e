"""
CSV city catalog loader.
"""

import csv
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from shared.logging import get_logger
from shared.errors import CatalogError
from ..rules.models import City

logger = get_logger("distribution.catalog")

DEFAULT_HEADER_TOKEN = "City Code"

# Column positions in the source sheet
CODE_COLUMN = 0
NAME_COLUMN = 3
PROVINCE_COLUMN = 4
COUNTRY_COLUMN = 5


def parse_city_rows(
    rows: Iterable[Sequence[str]],
    header_token: str = DEFAULT_HEADER_TOKEN
) -> List[City]:
    """Turn raw CSV rows into City records, skipping header and blank rows.

    When ``rows`` is a ``csv.reader`` errors cite the physical line number,
    so quoted fields spanning several lines are accounted for.
    """
    cities: List[City] = []
    for record_number, row in enumerate(rows, start=1):
        line_number = getattr(rows, "line_num", record_number)
        if not row or all(not cell.strip() for cell in row):
            continue
        if row[CODE_COLUMN] == header_token:
            continue
        if len(row) <= COUNTRY_COLUMN:
            raise CatalogError(
                f"Row {line_number} has {len(row)} columns, expected at least {COUNTRY_COLUMN + 1}",
                {"line": line_number, "columns": len(row)}
            )
        cities.append(City(
            code=row[CODE_COLUMN],
            name=row[NAME_COLUMN],
            province=row[PROVINCE_COLUMN],
            country=row[COUNTRY_COLUMN],
        ))
    return cities


def load_cities(path: Union[str, Path], header_token: str = DEFAULT_HEADER_TOKEN) -> List[City]:
    """Load the city catalog from a CSV file."""
    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8-sig") as handle:
            cities = parse_city_rows(csv.reader(handle), header_token)
    except OSError as e:
        raise CatalogError(f"Error while opening the file {path}", {"path": str(path), "error": str(e)}) from e
    except csv.Error as e:
        raise CatalogError(f"Error while reading records from {path}", {"path": str(path), "error": str(e)}) from e
    except UnicodeDecodeError as e:
        raise CatalogError(f"File {path} is not valid UTF-8", {"path": str(path), "error": str(e)}) from e

    logger.info("City catalog loaded", path=str(path), cities=len(cities))
    return cities
