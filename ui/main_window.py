"""
Main Window for Supplier Desk
Login screen, then the supplier table once Google Sheets is connected.
"""

import asyncio

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QPushButton, QLabel, QMessageBox,
    QStatusBar, QProgressBar, QGroupBox
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QAction
from typing import Optional

from config import app_config
from repositories.purchase_repository import PurchaseRepository
from repositories.supplier_repository import SupplierRepository
from services.google_sheets import GoogleSheetsService
from services.supplier_service import SupplierService
from ui.components.status_manager import status_manager
from ui.components.supplier_table import SupplierTable


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("📇 Supplier Desk - Login")
        self.setFixedSize(500, 360)

        self.sheets_service = GoogleSheetsService(authenticate=False)
        self.supplier_service: Optional[SupplierService] = None
        self.supplier_table: Optional[SupplierTable] = None
        self.is_authenticated = False
        self._login_task = None

        self.setup_login_ui()
        self.setup_status_bar()

    def setup_login_ui(self):
        self.login_widget = QWidget()
        self.setCentralWidget(self.login_widget)

        main_layout = QVBoxLayout()
        self.login_widget.setLayout(main_layout)
        main_layout.addStretch()

        title_label = QLabel("📇 Supplier Desk")
        title_font = QFont()
        title_font.setPointSize(20)
        title_font.setBold(True)
        title_label.setFont(title_font)
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title_label.setStyleSheet("color: #2E86AB; margin: 20px;")
        main_layout.addWidget(title_label)

        login_group = QGroupBox("Authentication")
        login_layout = QVBoxLayout()
        login_group.setLayout(login_layout)

        self.auth_status_label = QLabel("🔴 Not connected to Google Sheets")
        self.auth_status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.auth_status_label.setStyleSheet("""
            QLabel {
                padding: 10px;
                background-color: #f8f9fa;
                border: 1px solid #dee2e6;
                border-radius: 5px;
                font-size: 14px;
            }
        """)
        login_layout.addWidget(self.auth_status_label)

        self.login_button = QPushButton("🔐 Login to Google Sheets")
        self.login_button.setMinimumHeight(50)
        self.login_button.setStyleSheet("""
            QPushButton {
                background-color: #4285f4;
                color: white;
                border: none;
                border-radius: 8px;
                font-size: 16px;
                font-weight: bold;
                padding: 15px;
            }
            QPushButton:hover {
                background-color: #3367d6;
            }
            QPushButton:disabled {
                background-color: #cccccc;
                color: #666666;
            }
        """)
        self.login_button.clicked.connect(self.login_to_google_sheets)
        login_layout.addWidget(self.login_button)

        main_layout.addWidget(login_group)

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        main_layout.addWidget(self.progress_bar)
        main_layout.addStretch()

    def setup_status_bar(self):
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_label = QLabel("Ready to connect")
        self.status_bar.addWidget(self.status_label)

    def setup_main_ui(self):
        """Replace the login screen with the supplier table."""
        supplier_repo = SupplierRepository(self.sheets_service)
        purchase_repo = PurchaseRepository(self.sheets_service)
        self.supplier_service = SupplierService(supplier_repo, purchase_repo)
        self.supplier_table = SupplierTable(self.supplier_service)
        self.setCentralWidget(self.supplier_table)

        self.setFixedSize(16777215, 16777215)
        self.setMinimumSize(800, 500)
        self.resize(1200, 800)
        self.setWindowTitle("📇 Supplier Desk")

        status_manager.set_status_label(self.status_label)
        self.setup_help_menu()
        self.supplier_table.refresh_data()

    def login_to_google_sheets(self):
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)
        self.status_label.setText("Connecting to Google Sheets...")
        self.login_button.setEnabled(False)
        self.login_button.setText("🔄 Connecting...")
        self._login_task = asyncio.ensure_future(self.connect())

    async def connect(self):
        """Authenticate in a worker thread and make sure the supplier sheet exists."""
        try:
            connected = await asyncio.to_thread(self.sheets_service.authenticate)
            if connected:
                await asyncio.to_thread(
                    SupplierRepository(self.sheets_service).ensure_sheet
                )
        except Exception as e:
            self.on_auth_failed(str(e))
            return
        finally:
            self.progress_bar.setVisible(False)
            self.login_button.setEnabled(True)

        if connected:
            self.on_auth_success()
        else:
            self.on_auth_failed(
                f"Check '{app_config.credentials_file}' and the configured spreadsheet id."
            )

    def on_auth_success(self):
        self.is_authenticated = True
        self.setup_main_ui()
        status_manager.show_success("Connected to Google Sheets")

    def on_auth_failed(self, error_message: str):
        self.is_authenticated = False
        self.login_button.setText("🔐 Login to Google Sheets")
        self.auth_status_label.setText("❌ Failed to connect to Google Sheets")
        self.status_label.setText("❌ Authentication failed")
        QMessageBox.critical(
            self, "Authentication Failed",
            f"Failed to connect to Google Sheets:\n\n{error_message}"
        )

    def setup_help_menu(self):
        help_menu = self.menuBar().addMenu("❓ Help")
        about_action = QAction("📜 About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def show_about(self):
        message = """
📇 Supplier Desk

Supplier records kept in Google Sheets.

• Double-click a row (or ✏️ Edit Row) to quick edit; fields save as you type
• 📝 Edit All edits every row; 💾 Save All writes them in one request
• Arrow keys, Tab and Enter move between cells; Esc leaves edit mode
• Suppliers with purchases cannot be deleted, archive them instead
        """
        QMessageBox.about(self, "About Supplier Desk", message)

    def closeEvent(self, event):
        """Confirm before discarding unsaved edits."""
        if self.supplier_table and self.supplier_table.session.has_unsaved_changes:
            reply = QMessageBox.question(
                self, "Unsaved Changes",
                "You have unsaved changes. Quit anyway?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No
            )
            if reply != QMessageBox.StandardButton.Yes:
                event.ignore()
                return
        if self.supplier_table:
            self.supplier_table.session.close()
        event.accept()
