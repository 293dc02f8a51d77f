"""
Supplier Dialog
Dialog for adding a new supplier.
"""

from typing import Any, Dict, Optional

from PySide6.QtWidgets import (
    QDialog, QFormLayout, QLineEdit, QTextEdit, QDialogButtonBox
)


class SupplierDialog(QDialog):
    """Dialog for adding a supplier."""

    def __init__(self, parent=None, values: Optional[Dict[str, Any]] = None):
        super().__init__(parent)
        self.setWindowTitle("Add New Supplier")
        self.setModal(True)
        self.setMinimumWidth(460)

        self.values = values or {}

        self.setup_ui()

    def setup_ui(self):
        """Setup the dialog UI."""
        layout = QFormLayout()
        self.setLayout(layout)

        self.name_input = QLineEdit(self.values.get('name', ""))
        self.name_input.setPlaceholderText("Enter supplier name")
        layout.addRow("Supplier Name *:", self.name_input)

        self.website_input = QLineEdit(self.values.get('website', ""))
        self.website_input.setPlaceholderText("https://supplier-website.com")
        layout.addRow("Website:", self.website_input)

        self.phone_input = QLineEdit(self.values.get('contact_phone', ""))
        self.phone_input.setPlaceholderText("(555) 123-4567")
        layout.addRow("Phone:", self.phone_input)

        self.email_input = QLineEdit(self.values.get('email', ""))
        self.email_input.setPlaceholderText("orders@supplier.com")
        layout.addRow("Email:", self.email_input)

        self.address_input = QTextEdit(self.values.get('address', ""))
        self.address_input.setMaximumHeight(60)
        layout.addRow("Address:", self.address_input)

        self.notes_input = QTextEdit(self.values.get('notes', ""))
        self.notes_input.setMaximumHeight(60)
        self.notes_input.setPlaceholderText("Optional notes...")
        layout.addRow("Notes:", self.notes_input)

        button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        button_box.accepted.connect(self.accept)
        button_box.rejected.connect(self.reject)
        layout.addRow(button_box)

    def get_data(self) -> Dict[str, str]:
        """Get the entered data, keyed by supplier field name."""
        return {
            'name': self.name_input.text(),
            'website': self.website_input.text(),
            'contact_phone': self.phone_input.text(),
            'email': self.email_input.text(),
            'address': self.address_input.toPlainText(),
            'notes': self.notes_input.toPlainText()
        }
