#!/usr/bin/env python3
"""
Supplier Desk
A PySide6 application for editing supplier records stored in Google Sheets.

The asyncio event loop runs on top of Qt's loop, so UI slots can schedule
coroutines with asyncio.ensure_future.
"""

import sys
import os
from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QPalette, QColor
from PySide6 import QtAsyncio

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import app_config
from ui.main_window import MainWindow


CONFIG_FILE = "config.json"

LIGHT_THEME_STYLESHEET = """
QMainWindow {
    background-color: #ffffff;
    color: #000000;
}
QWidget {
    background-color: #ffffff;
    color: #000000;
}
QTableWidget {
    background-color: #ffffff;
    gridline-color: #e0e0e0;
    color: #000000;
    selection-background-color: #b3d9ff;
    selection-color: #000000;
    outline: none;
}
QTableWidget::item {
    color: #000000;
    border: none;
    padding: 4px;
}
QHeaderView::section {
    background-color: #f0f0f0;
    color: #000000;
    padding: 4px;
    border: 1px solid #c0c0c0;
}
QComboBox {
    background-color: #ffffff;
    color: #000000;
    border: 1px solid #c0c0c0;
    padding: 2px 6px;
    border-radius: 3px;
}
QPushButton {
    padding: 6px 12px;
    border: 1px solid #c0c0c0;
    border-radius: 4px;
    background-color: #f0f0f0;
}
QPushButton:hover {
    background-color: #e8e8e8;
}
"""


def main():
    """Main entry point for the application."""
    app = QApplication(sys.argv)
    app.setApplicationName("Supplier Desk")
    app.setApplicationVersion("1.0.0")
    app.setOrganizationName("Personal")

    app.setStyle('Fusion')
    app.setStyleSheet(LIGHT_THEME_STYLESHEET)

    # Force light colors even if the system prefers dark mode
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.black)
    palette.setColor(QPalette.ColorRole.Base, Qt.GlobalColor.white)
    palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.black)
    palette.setColor(QPalette.ColorRole.Button, QColor(240, 240, 240))
    palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.black)
    palette.setColor(QPalette.ColorRole.Highlight, QColor(179, 217, 255))
    palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.black)
    app.setPalette(palette)

    app_config.load_file(CONFIG_FILE)

    window = MainWindow()
    window.show()

    # Run the application
    QtAsyncio.run(handle_sigint=True)


if __name__ == "__main__":
    main()
