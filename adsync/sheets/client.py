"""Google Sheets access helpers."""

from __future__ import annotations

import logging
import os
from typing import Any

import gspread
from gspread.exceptions import GSpreadException

from adsync.errors import SinkError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_ACCOUNT_FILE = "service_account.json"
VALUE_INPUT_OPTION = "RAW"

Grid = list[list[Any]]


class SheetsClient:
    """Range level reads and writes against one spreadsheet."""

    def __init__(self, spreadsheet: gspread.Spreadsheet) -> None:
        self.spreadsheet = spreadsheet

    def update_range(self, range_a1: str, values: Grid) -> None:
        try:
            self.spreadsheet.values_update(
                range_a1,
                params={"valueInputOption": VALUE_INPUT_OPTION},
                body={"values": values},
            )
        except GSpreadException as exc:
            raise SinkError(f"Unable to update {range_a1}: {exc}") from exc
        logger.debug("Wrote %s rows to %s", len(values), range_a1)

    def batch_update(self, data: dict[str, Grid]) -> None:
        body = {
            "valueInputOption": VALUE_INPUT_OPTION,
            "data": [{"range": range_a1, "values": values} for range_a1, values in data.items()],
        }
        try:
            self.spreadsheet.values_batch_update(body)
        except GSpreadException as exc:
            raise SinkError(f"Batch update failed: {exc}") from exc
        logger.debug("Batch updated %s ranges", len(data))

    def read_range(self, range_a1: str) -> Grid:
        try:
            response = self.spreadsheet.values_get(range_a1)
        except GSpreadException as exc:
            raise SinkError(f"Unable to read range {range_a1}: {exc}") from exc
        return response.get("values", [])


def create_sheets_client_from_env(spreadsheet_id: str) -> SheetsClient:
    """Authorise with the service account in GOOGLE_SERVICE_ACCOUNT_FILE."""
    filename = os.environ.get("GOOGLE_SERVICE_ACCOUNT_FILE", DEFAULT_SERVICE_ACCOUNT_FILE)
    client = gspread.service_account(filename=filename)
    return SheetsClient(client.open_by_key(spreadsheet_id))
