"""
Google Sheets Reader

Reads a range of cells from a spreadsheet and returns it untouched:
a list of rows, each a list of strings, header row first.

Features:
1. Sheet Integration:
   - Open by key
   - A1 range reads
   - Raw string values

2. Error Handling:
   - Missing sheet id
   - Sheet not found
   - API / permission errors

Dependencies:
-----------
- gspread: Google Sheets API
- logging: Debug tracking

Author: Signage Development Team
"""

import logging
from typing import List

import gspread
from google.auth.exceptions import GoogleAuthError
from requests.exceptions import RequestException

from signage.shared.errors import UpstreamError

logger = logging.getLogger(__name__)


class SheetReader:
    """
    Range reader for Google Sheets.

    Attributes:
        provider: GoogleClientProvider supplying the gspread client

    Notes:
        - Single attempt, no retries
        - Values are never parsed
    """

    def __init__(self, provider):
        self.provider = provider

    def read(self, sheet_id: str, cell_range: str) -> List[List[str]]:
        """
        Read a range of cells.

        Args:
            sheet_id (str): Spreadsheet key
            cell_range (str): A1 range, e.g. "Sheet1!A1:C"

        Returns:
            List[List[str]]: Header row followed by data rows,
                or [] when the range holds no data

        Raises:
            UpstreamError: For missing/invalid sheets, bad ranges
                or missing read access
        """
        if not sheet_id:
            raise UpstreamError("No spreadsheet id configured", service="sheets")

        try:
            client = self.provider.sheets()
            spreadsheet = client.open_by_key(sheet_id)
            response = spreadsheet.values_get(cell_range)
        except gspread.SpreadsheetNotFound:
            raise UpstreamError(f"Spreadsheet {sheet_id} not found", service="sheets")
        except gspread.exceptions.APIError as e:
            raise UpstreamError(f"Failed to read {cell_range}: {str(e)}", service="sheets")
        except (GoogleAuthError, RequestException) as e:
            raise UpstreamError(f"Failed to reach Google Sheets: {str(e)}", service="sheets")

        rows = response.get("values", [])
        logger.info(f"Retrieved {len(rows)} rows from {sheet_id} ({cell_range})")
        return [[str(cell) for cell in row] for row in rows]
