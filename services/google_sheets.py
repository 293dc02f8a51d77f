"""
Google Sheets Service
Authentication and table-level reads/writes against one spreadsheet.
"""

import os.path
from typing import Any, Dict, List, Optional
import pandas as pd

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import app_config


class SheetsServiceError(Exception):
    """Raised when a Google Sheets request fails or the service is not connected."""


class GoogleSheetsService:
    """Service class for Google Sheets API operations on a single spreadsheet."""

    def __init__(self, spreadsheet_id: Optional[str] = None,
                 scopes: Optional[List[str]] = None,
                 authenticate: bool = True):
        """Initialize the Google Sheets service.

        Args:
            spreadsheet_id: The spreadsheet to work on. Defaults to config.
            scopes: List of OAuth2 scopes. Defaults to full read/write access.
            authenticate: Run the OAuth flow immediately.
        """
        self.spreadsheet_id = spreadsheet_id or app_config.spreadsheet_id
        self.scopes = scopes or ["https://www.googleapis.com/auth/spreadsheets"]
        self.service = None
        self.credentials = None
        if authenticate:
            self.authenticate()

    def authenticate(self) -> bool:
        """Authenticate with Google Sheets API, reusing a cached token.

        Returns:
            True if authentication successful, False otherwise.
        """
        try:
            creds = None
            token_file = app_config.token_file
            credentials_file = app_config.credentials_file

            if os.path.exists(token_file):
                creds = Credentials.from_authorized_user_file(token_file, self.scopes)

            if not creds or not creds.valid:
                if creds and creds.expired and creds.refresh_token:
                    creds.refresh(Request())
                else:
                    if not os.path.exists(credentials_file):
                        raise FileNotFoundError(
                            f"Credentials file '{credentials_file}' not found. "
                            "Please download it from Google Cloud Console."
                        )
                    flow = InstalledAppFlow.from_client_secrets_file(
                        credentials_file, self.scopes
                    )
                    creds = flow.run_local_server(port=0)

                with open(token_file, "w") as token:
                    token.write(creds.to_json())

            self.credentials = creds
            self.service = build("sheets", "v4", credentials=creds)
            print("🔐 Connected to Google Sheets")
            return True

        except Exception as e:
            print(f"❌ Authentication failed: {e}")
            return False

    def is_authenticated(self) -> bool:
        return self.service is not None and self.credentials is not None

    def _spreadsheets(self):
        if not self.service:
            raise SheetsServiceError("Not authenticated with Google Sheets API")
        return self.service.spreadsheets()

    def get_sheet_ids(self) -> Dict[str, int]:
        """Map of sheet title to numeric sheet id."""
        try:
            info = self._spreadsheets().get(spreadsheetId=self.spreadsheet_id).execute()
        except HttpError as err:
            raise SheetsServiceError(f"Could not read spreadsheet: {err}") from err
        return {
            sheet["properties"]["title"]: sheet["properties"]["sheetId"]
            for sheet in info.get("sheets", [])
        }

    def read_table(self, sheet_name: str) -> pd.DataFrame:
        """Read a sheet whose first row holds column headers.

        Short rows are padded with empty strings and long rows trimmed so
        every row matches the header width.
        """
        try:
            result = self._spreadsheets().values().get(
                spreadsheetId=self.spreadsheet_id,
                range=f"'{sheet_name}'!A:Z"
            ).execute()
        except HttpError as err:
            raise SheetsServiceError(f"Could not read '{sheet_name}': {err}") from err

        values = result.get("values", [])
        if not values:
            return pd.DataFrame()

        headers = values[0]
        width = len(headers)
        rows = [(row + [''] * width)[:width] for row in values[1:]]
        return pd.DataFrame(rows, columns=headers)

    def ensure_sheet(self, sheet_name: str, headers: List[str]) -> bool:
        """Create the sheet with a header row if it does not exist yet.

        Returns:
            True if the sheet was created, False if it already existed.
        """
        if sheet_name in self.get_sheet_ids():
            return False

        try:
            self._spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={'requests': [{'addSheet': {'properties': {'title': sheet_name}}}]}
            ).execute()
        except HttpError as err:
            raise SheetsServiceError(f"Could not create '{sheet_name}': {err}") from err

        self.update_ranges(sheet_name, [{'range': 'A1', 'values': [headers]}])
        print(f"✅ Created '{sheet_name}' sheet with headers")
        return True

    def update_ranges(self, sheet_name: str, updates: List[Dict[str, Any]]) -> int:
        """Write several ranges in one batch request.

        Args:
            sheet_name: Name of the sheet.
            updates: [{'range': 'A2:I2', 'values': [[...]]}, ...]

        Returns:
            Number of cells updated.
        """
        if not updates:
            return 0
        body = {
            'valueInputOption': 'RAW',
            'data': [
                {'range': f"'{sheet_name}'!{update['range']}", 'values': update['values']}
                for update in updates
            ]
        }
        try:
            result = self._spreadsheets().values().batchUpdate(
                spreadsheetId=self.spreadsheet_id, body=body
            ).execute()
        except HttpError as err:
            raise SheetsServiceError(f"Batch update of '{sheet_name}' failed: {err}") from err

        updated_cells = result.get('totalUpdatedCells', 0)
        if app_config.verbose_logging:
            print(f"📝 {updated_cells} cells updated in '{sheet_name}'")
        return updated_cells

    def append_rows(self, sheet_name: str, rows: List[List[Any]]) -> None:
        try:
            self._spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=f"'{sheet_name}'!A:A",
                valueInputOption='RAW',
                insertDataOption='INSERT_ROWS',
                body={'values': rows}
            ).execute()
        except HttpError as err:
            raise SheetsServiceError(f"Append to '{sheet_name}' failed: {err}") from err

    def delete_rows(self, sheet_name: str, row_numbers: List[int]) -> int:
        """Delete rows (1-based, header is row 1) in a single batch request.

        Rows are removed bottom-up so earlier deletions do not shift later ones.

        Returns:
            Number of rows deleted.
        """
        if not row_numbers:
            return 0

        sheet_id = self.get_sheet_ids().get(sheet_name)
        if sheet_id is None:
            raise SheetsServiceError(f"Sheet '{sheet_name}' not found")

        requests = [
            {
                'deleteDimension': {
                    'range': {
                        'sheetId': sheet_id,
                        'dimension': 'ROWS',
                        'startIndex': row_num - 1,
                        'endIndex': row_num
                    }
                }
            }
            for row_num in sorted(set(row_numbers), reverse=True)
        ]
        try:
            self._spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id, body={'requests': requests}
            ).execute()
        except HttpError as err:
            raise SheetsServiceError(f"Deleting rows from '{sheet_name}' failed: {err}") from err

        print(f"🗑️ Deleted {len(requests)} row(s) from '{sheet_name}'")
        return len(requests)
