"""Services package for the supplier application."""

from .google_sheets import GoogleSheetsService, SheetsServiceError

__all__ = [
    'GoogleSheetsService',
    'SheetsServiceError'
]
