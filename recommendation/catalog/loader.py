"""
Catalog Sources

Reads the course index and payment table as raw records. Transformation
into contracts happens in recommendation.logic.adapter.
"""

import csv
import logging
import os
from typing import Any, Dict, List, Tuple

import gspread
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

SHEETS_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]

Records = List[Dict[str, Any]]


class SheetsCatalogSource:
    """Course index and payment worksheets in one Google spreadsheet."""

    name = "sheets"

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_file: str,
        course_worksheet: str = "course_index",
        payment_worksheet: str = "payments",
    ):
        self.spreadsheet_id = spreadsheet_id
        self.service_account_file = service_account_file
        self.course_worksheet = course_worksheet
        self.payment_worksheet = payment_worksheet

    def fetch(self) -> Tuple[Records, Records]:
        creds = service_account.Credentials.from_service_account_file(
            self.service_account_file,
            scopes=SHEETS_SCOPES,
        )
        gc = gspread.authorize(creds)
        sh = gc.open_by_key(self.spreadsheet_id)

        courses = sh.worksheet(self.course_worksheet).get_all_records()
        payments = sh.worksheet(self.payment_worksheet).get_all_records()
        logger.info(f"Fetched {len(courses)} course rows and {len(payments)} payment rows from sheet {self.spreadsheet_id}")
        return courses, payments


class CsvCatalogSource:
    """course_index.csv and payments.csv in a local directory."""

    name = "csv"

    def __init__(self, directory: str):
        self.directory = directory

    def _read(self, filename: str) -> Records:
        path = os.path.join(self.directory, filename)
        with open(path, newline="", encoding="utf-8-sig") as f:
            return list(csv.DictReader(f))

    def fetch(self) -> Tuple[Records, Records]:
        courses = self._read("course_index.csv")
        payments = self._read("payments.csv")
        logger.info(f"Read {len(courses)} course rows and {len(payments)} payment rows from {self.directory}")
        return courses, payments


def source_from_env():
    """
    Pick the catalog source from environment settings.

    A configured spreadsheet wins; otherwise the local CSV directory is used.
    """
    sheet_id = os.getenv("CATALOG_SHEET_ID")
    service_account_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")
    if sheet_id and service_account_file:
        return SheetsCatalogSource(
            spreadsheet_id=sheet_id,
            service_account_file=service_account_file,
            course_worksheet=os.getenv("COURSE_INDEX_WORKSHEET", "course_index"),
            payment_worksheet=os.getenv("PAYMENT_WORKSHEET", "payments"),
        )
    return CsvCatalogSource(os.getenv("CATALOG_CSV_DIR", "data"))
