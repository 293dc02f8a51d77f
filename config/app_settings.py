"""
Application Settings
Timing, spreadsheet and logging options for the supplier editing workflow.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union


class AppSettings:
    """Default settings for the application."""

    # Edit Engine Timing
    QUICK_EDIT_DEBOUNCE_MS = 500        # Quiet period before a quick-edit field auto-saves
    SAVED_STATUS_RESET_MS = 1000        # How long the "saved" indicator stays up
    BULK_AUTO_SAVE_INTERVAL_S = 60      # Safety-net save while bulk editing

    # Spreadsheet
    SPREADSHEET_ID = ""                 # Set via config file
    SUPPLIERS_SHEET = "Suppliers"
    PURCHASES_SHEET = "Purchases"

    # Google Auth
    CREDENTIALS_FILE = "credentials.json"
    TOKEN_FILE = "token.json"

    # Debug Settings
    VERBOSE_LOGGING = False             # Print per-edit and per-timer diagnostics


class AppConfig:
    """Runtime configuration that can be modified or loaded from a file."""

    def __init__(self):
        """Initialize with default settings."""
        self.quick_edit_debounce_ms = AppSettings.QUICK_EDIT_DEBOUNCE_MS
        self.saved_status_reset_ms = AppSettings.SAVED_STATUS_RESET_MS
        self.bulk_auto_save_interval_s = AppSettings.BULK_AUTO_SAVE_INTERVAL_S
        self.spreadsheet_id = AppSettings.SPREADSHEET_ID
        self.suppliers_sheet = AppSettings.SUPPLIERS_SHEET
        self.purchases_sheet = AppSettings.PURCHASES_SHEET
        self.credentials_file = AppSettings.CREDENTIALS_FILE
        self.token_file = AppSettings.TOKEN_FILE
        self.verbose_logging = AppSettings.VERBOSE_LOGGING

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'quick_edit_debounce_ms': self.quick_edit_debounce_ms,
            'saved_status_reset_ms': self.saved_status_reset_ms,
            'bulk_auto_save_interval_s': self.bulk_auto_save_interval_s,
            'spreadsheet_id': self.spreadsheet_id,
            'suppliers_sheet': self.suppliers_sheet,
            'purchases_sheet': self.purchases_sheet,
            'credentials_file': self.credentials_file,
            'token_file': self.token_file,
            'verbose_logging': self.verbose_logging
        }

    def from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Load config from dictionary. Unknown keys are ignored."""
        for key, current in self.to_dict().items():
            setattr(self, key, config_dict.get(key, current))

    def load_file(self, path: Union[str, Path]) -> bool:
        """Load config values from a JSON file.

        Args:
            path: Path to the JSON config file.

        Returns:
            True if the file was read, False if defaults were kept.
        """
        config_path = Path(path)
        if not config_path.exists():
            print(f"⚠️ Config file {config_path} not found, using defaults")
            return False

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                self.from_dict(json.load(f))
            print(f"📂 Loaded config from {config_path}")
            return True
        except (OSError, ValueError) as e:
            print(f"❌ Error reading config {config_path}: {e}")
            return False


# Global config instance
app_config = AppConfig()
