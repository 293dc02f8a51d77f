"""
Supplier Table Component
Spreadsheet-style supplier table driven by an EditSession: quick edit of one
row with auto-save, bulk edit of all rows with explicit save, archiving and
deletion of selected suppliers.
"""

import asyncio
from typing import Any, Dict, List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QTableWidget,
    QTableWidgetItem, QComboBox, QHeaderView, QMessageBox, QGroupBox,
    QCheckBox, QLineEdit
)
from PySide6.QtCore import Qt, QEvent, Signal
from PySide6.QtGui import QColor

from editing import (
    EditMode, EditModeError, NavigationKey, SaveStatus, create_supplier_session
)
from editing.batch_save import SaveOutcome
from models.supplier_model import EDITABLE_COLUMNS, ArchiveStatus, Supplier, SupplierField
from services.supplier_service import SupplierService
from services.supplier_validation import SupplierValidator
from ui.components.status_manager import status_manager
from ui.dialogs.supplier_dialog import SupplierDialog


CHANGED_COLOR = QColor(255, 235, 130)
STATUS_COLORS = {
    SaveStatus.SAVING: QColor(204, 229, 255),
    SaveStatus.SAVED: QColor(212, 237, 218),
    SaveStatus.ERROR: QColor(248, 215, 218),
}

QT_NAVIGATION_KEYS = {
    Qt.Key.Key_Up: NavigationKey.ARROW_UP,
    Qt.Key.Key_Down: NavigationKey.ARROW_DOWN,
    Qt.Key.Key_Tab: NavigationKey.TAB,
    Qt.Key.Key_Backtab: NavigationKey.TAB,
    Qt.Key.Key_Return: NavigationKey.ENTER,
    Qt.Key.Key_Enter: NavigationKey.ENTER,
    Qt.Key.Key_Escape: NavigationKey.ESCAPE,
}


class ColumnConfig:
    """Configuration for a table column."""

    def __init__(self, field: SupplierField, width: Optional[int] = None,
                 resize_mode: str = "content", tooltip: Optional[str] = None):
        """Initialize column configuration.

        Args:
            field: Supplier field shown in the column.
            width: Fixed column width in pixels.
            resize_mode: "content", "stretch" or "interactive".
            tooltip: Tooltip text for the column.
        """
        self.field = field
        self.header = field.header
        self.width = width
        self.resize_mode = resize_mode
        self.tooltip = tooltip


DEFAULT_COLUMNS = [
    ColumnConfig(SupplierField.NAME, resize_mode="interactive"),
    ColumnConfig(SupplierField.WEBSITE),
    ColumnConfig(SupplierField.CONTACT_PHONE),
    ColumnConfig(SupplierField.EMAIL),
    ColumnConfig(SupplierField.ADDRESS, resize_mode="stretch"),
    ColumnConfig(SupplierField.NOTES, resize_mode="stretch"),
    ColumnConfig(SupplierField.IS_ARCHIVED, width=110),
]


class SupplierTable(QWidget):
    """Editable supplier table."""

    data_changed = Signal()

    def __init__(self, supplier_service: SupplierService, parent=None):
        super().__init__(parent)
        self.supplier_service = supplier_service
        self.columns_config = DEFAULT_COLUMNS
        self.suppliers: List[Supplier] = []
        self.visible_suppliers: List[Supplier] = []
        self._populating = False
        self._tasks = set()

        self.validator = SupplierValidator(lambda: self.suppliers)
        self.session = create_supplier_session(
            supplier_service,
            validator=self.validator,
            on_exit_requested=self.request_exit_edit,
            on_auto_save=lambda outcome: self._after_save(outcome, automatic=True)
        )
        self.session.navigator.on_cursor_changed = self._on_cursor_changed
        self.session.tracker.add_listener(self._on_pending_changed)
        self.session.controller.add_listener(lambda mode, _row: self._on_mode_changed(mode))

        self.setup_ui()
        self.setup_table()

    # Setup

    def setup_ui(self):
        layout = QVBoxLayout(self)

        controls_group = QGroupBox("Suppliers")
        controls_layout = QHBoxLayout()
        controls_group.setLayout(controls_layout)
        layout.addWidget(controls_group)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("🔍 Search suppliers...")
        self.search_input.textChanged.connect(self.apply_filter)
        controls_layout.addWidget(self.search_input)

        self.show_archived_checkbox = QCheckBox("Show archived")
        self.show_archived_checkbox.toggled.connect(lambda _checked: self.refresh_data())
        controls_layout.addWidget(self.show_archived_checkbox)

        self.refresh_button = QPushButton("🔄 Refresh")
        self.refresh_button.clicked.connect(self.refresh_data)
        controls_layout.addWidget(self.refresh_button)

        self.edit_row_button = QPushButton("✏️ Edit Row")
        self.edit_row_button.clicked.connect(self.toggle_current_row)
        controls_layout.addWidget(self.edit_row_button)

        self.edit_all_button = QPushButton("📝 Edit All")
        self.edit_all_button.clicked.connect(self.enter_all_edit)
        controls_layout.addWidget(self.edit_all_button)

        self.save_all_button = QPushButton("💾 Save All")
        self.save_all_button.clicked.connect(lambda: self._run(self.save_all()))
        controls_layout.addWidget(self.save_all_button)

        self.undo_row_button = QPushButton("↩️ Undo Row")
        self.undo_row_button.clicked.connect(self.undo_current_row)
        controls_layout.addWidget(self.undo_row_button)

        self.cancel_button = QPushButton("✖ Cancel")
        self.cancel_button.clicked.connect(self.request_exit_edit)
        controls_layout.addWidget(self.cancel_button)

        controls_layout.addStretch()

        self.add_button = QPushButton("➕ Add Supplier")
        self.add_button.clicked.connect(self.add_supplier)
        controls_layout.addWidget(self.add_button)

        self.archive_button = QPushButton("📦 Archive")
        self.archive_button.clicked.connect(lambda: self._run(self.archive_selected(True)))
        controls_layout.addWidget(self.archive_button)

        self.unarchive_button = QPushButton("📤 Unarchive")
        self.unarchive_button.clicked.connect(lambda: self._run(self.archive_selected(False)))
        controls_layout.addWidget(self.unarchive_button)

        self.delete_button = QPushButton("🗑️ Delete")
        self.delete_button.clicked.connect(lambda: self._run(self.delete_selected()))
        controls_layout.addWidget(self.delete_button)

        self.data_table = QTableWidget()
        self.data_table.setAlternatingRowColors(False)
        self.data_table.setSortingEnabled(False)
        self.data_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.data_table)

        self.update_button_visibility()

    def setup_table(self):
        self.data_table.setColumnCount(len(self.columns_config))
        self.data_table.setHorizontalHeaderLabels([col.header for col in self.columns_config])

        header = self.data_table.horizontalHeader()
        for i, col_config in enumerate(self.columns_config):
            if col_config.width:
                self.data_table.setColumnWidth(i, col_config.width)
                header.setSectionResizeMode(i, QHeaderView.ResizeMode.Fixed)
            elif col_config.resize_mode == "stretch":
                header.setSectionResizeMode(i, QHeaderView.ResizeMode.Stretch)
            elif col_config.resize_mode == "interactive":
                header.setSectionResizeMode(i, QHeaderView.ResizeMode.Interactive)
            else:
                header.setSectionResizeMode(i, QHeaderView.ResizeMode.ResizeToContents)

        self.data_table.itemChanged.connect(self.on_table_item_changed)
        self.data_table.cellClicked.connect(self.session.navigator.handle_cell_click)
        self.data_table.cellDoubleClicked.connect(self.on_cell_double_clicked)
        self.data_table.currentCellChanged.connect(self.on_current_cell_changed)
        self.data_table.itemSelectionChanged.connect(self.on_selection_changed)
        self.data_table.installEventFilter(self)

    # Async helpers

    def _run(self, coro):
        """Schedule a coroutine on the running loop and keep a reference to it."""
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # Loading

    def refresh_data(self):
        self._run(self.load_data())

    async def load_data(self):
        status_manager.show_loading("Loading suppliers...")
        result = await self.supplier_service.fetch_records(
            include_archived=self.show_archived_checkbox.isChecked()
        )
        if not result.success:
            status_manager.show_error(f"Failed to load suppliers: {result.error}")
            return
        self.suppliers = result.data
        self.session.load_records(self.suppliers)
        self.apply_filter()
        status_manager.show_success(f"Loaded {len(self.suppliers)} suppliers")

    def apply_filter(self, *_args):
        needle = self.search_input.text().strip().lower()
        self.visible_suppliers = [
            supplier for supplier in self.suppliers
            if not needle or needle in supplier.name.lower()
        ]
        self.session.set_visible_rows([supplier.supplier_id for supplier in self.visible_suppliers])
        self.populate_table()

    def populate_table(self):
        self._populating = True
        try:
            self.data_table.setRowCount(len(self.visible_suppliers))
            for row, supplier in enumerate(self.visible_suppliers):
                effective = self.session.get_row_data(supplier.supplier_id, supplier)
                editable = self.session.is_row_editable(supplier.supplier_id)
                for col, col_config in enumerate(self.columns_config):
                    self._set_cell(row, col, col_config.field, effective, editable)
                    self._paint_cell(row, col)
        finally:
            self._populating = False
        self.update_button_visibility()

    def _set_cell(self, row: int, col: int, field: SupplierField, record: Supplier, editable: bool):
        value = record.get(field)
        if field == SupplierField.IS_ARCHIVED:
            combo = QComboBox()
            combo.addItems([status.value for status in ArchiveStatus])
            combo.setCurrentText(ArchiveStatus.from_flag(value).value)
            combo.setEnabled(editable)
            combo.currentTextChanged.connect(
                lambda text, r=row, f=field: self.on_cell_value_changed(r, f, ArchiveStatus.parse(text).is_archived)
            )
            self.data_table.setCellWidget(row, col, combo)
            return

        item = QTableWidgetItem(self.session.display_formatter(field.value, value))
        if not editable:
            item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
        self.data_table.setItem(row, col, item)

    def _paint_cell(self, row: int, col: int):
        row_id = self.session.row_id_at(row)
        field = self.columns_config[col].field
        editor = self.session.get_field_editor(row_id, field)

        color = QColor()
        if editor is not None and editor.save_status in STATUS_COLORS:
            color = STATUS_COLORS[editor.save_status]
        elif field.value in self.session.tracker.get_row_changes(row_id):
            color = CHANGED_COLOR

        widget = self.data_table.cellWidget(row, col)
        if isinstance(widget, QComboBox):
            widget.setStyleSheet(f"QComboBox {{ background-color: {color.name()}; }}" if color.isValid() else "")
            return
        item = self.data_table.item(row, col)
        if item:
            self._populating = True
            try:
                item.setBackground(color)
            finally:
                self._populating = False

    # Editing

    def on_table_item_changed(self, item: QTableWidgetItem):
        if self._populating:
            return
        field = self.columns_config[item.column()].field
        self.on_cell_value_changed(item.row(), field, item.text())

    def on_cell_value_changed(self, row: int, field: SupplierField, value: Any):
        if self._populating:
            return
        row_id = self.session.row_id_at(row)
        if not self.session.is_row_editable(row_id):
            return
        editor = self._editor_for(row, field)
        editor.update_value(value)
        self._paint_cell(row, self._column_of(field))
        self.update_button_visibility()

    def _editor_for(self, row: int, field: SupplierField):
        row_id = self.session.row_id_at(row)
        editor = self.session.get_field_editor(row_id, field)
        if editor is None:
            editor = self.session.create_field_editor(row_id, field)
            editor.on_status_changed = (
                lambda status, rid=row_id, f=field: self._on_save_status(rid, f, status)
            )
        return editor

    def _on_save_status(self, row_id: str, field: SupplierField, status: SaveStatus):
        for row, supplier in enumerate(self.visible_suppliers):
            if supplier.supplier_id == row_id:
                self._paint_cell(row, self._column_of(field))
                break
        if status == SaveStatus.ERROR:
            status_manager.show_error("Auto-save failed. Edit the cell to retry or undo the row.")

    def _column_of(self, field: SupplierField) -> int:
        return EDITABLE_COLUMNS.index(field)

    def on_current_cell_changed(self, row: int, col: int, previous_row: int, previous_col: int):
        if previous_row >= 0 and previous_col >= 0 and previous_row < len(self.visible_suppliers):
            previous_id = self.session.row_id_at(previous_row)
            editor = self.session.get_field_editor(previous_id, self.columns_config[previous_col].field)
            if editor is not None:
                editor.set_focused(False)
        if row >= 0 and col >= 0 and row < len(self.visible_suppliers):
            editor = self.session.get_field_editor(self.session.row_id_at(row), self.columns_config[col].field)
            if editor is not None:
                editor.set_focused(True)

    def on_cell_double_clicked(self, row: int, _col: int):
        if self.session.edit_mode == EditMode.VIEWING:
            self.toggle_row(self.session.row_id_at(row))

    def eventFilter(self, watched, event):
        if watched is self.data_table and event.type() == QEvent.Type.KeyPress:
            key = QT_NAVIGATION_KEYS.get(event.key())
            if key is not None:
                shift = event.key() == Qt.Key.Key_Backtab or bool(
                    event.modifiers() & Qt.KeyboardModifier.ShiftModifier
                )
                if self.session.navigator.handle_key(key, shift=shift):
                    return True
        return super().eventFilter(watched, event)

    def _on_cursor_changed(self, position):
        if position is not None:
            self.data_table.setCurrentCell(position.row, position.col)

    # Mode actions

    def toggle_current_row(self):
        row = self.data_table.currentRow()
        if row < 0:
            status_manager.show_info("Select a supplier to edit")
            return
        self.toggle_row(self.session.row_id_at(row))

    def toggle_row(self, row_id: str):
        try:
            if not self.session.toggle_single_edit(row_id):
                if self._confirm_discard():
                    self.session.toggle_single_edit(row_id, discard_confirmed=True)
        except EditModeError as e:
            status_manager.show_warning(str(e))

    def enter_all_edit(self):
        try:
            self.session.enter_all_edit()
        except EditModeError as e:
            status_manager.show_warning(str(e))

    def request_exit_edit(self):
        if self.session.edit_mode == EditMode.VIEWING:
            return
        if self.session.has_unsaved_changes and not self._confirm_discard():
            return
        self.session.exit_edit()

    def undo_current_row(self):
        row = self.data_table.currentRow()
        if row < 0:
            return
        self.session.undo_row_changes(self.session.row_id_at(row))
        self.populate_table()

    async def save_all(self):
        status_manager.show_loading("Saving changes...")
        outcome = await self.session.save_all()
        self._after_save(outcome)
        if not outcome.success and not outcome.skipped:
            QMessageBox.warning(
                self, "Save Failed",
                f"Your changes were not saved and are still pending.\n\n{outcome.error}"
            )

    def _after_save(self, outcome: SaveOutcome, automatic: bool = False):
        status_manager.report_save(outcome, automatic=automatic)
        if outcome.success and outcome.row_count:
            self.data_changed.emit()
            self.refresh_data()
        else:
            self.populate_table()

    def _confirm_discard(self) -> bool:
        count = self.session.tracker.changed_rows_count
        reply = QMessageBox.question(
            self, "Discard Changes",
            f"Discard unsaved changes on {count} row(s)?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        return reply == QMessageBox.StandardButton.Yes

    def _on_pending_changed(self):
        status_manager.set_unsaved_count(self.session.tracker.changed_rows_count)
        self.update_button_visibility()

    def _on_mode_changed(self, mode: EditMode):
        self.populate_table()
        labels = {
            EditMode.VIEWING: "Viewing",
            EditMode.QUICK_EDIT: "Quick edit: changes save automatically",
            EditMode.BULK_EDIT: "Editing all rows: press Save All to keep changes",
        }
        status_manager.show_info(labels[mode])

    # Creation

    def add_supplier(self):
        values = None
        while True:
            dialog = SupplierDialog(self, values)
            if dialog.exec() != SupplierDialog.DialogCode.Accepted:
                return
            values = dialog.get_data()
            result = self.validator.validate_new_supplier(values)
            if result.is_valid:
                break
            QMessageBox.warning(self, "Invalid Supplier", "\n".join(result.errors.values()))

        supplier = Supplier.from_dict({**values, **result.cleaned})
        self._run(self.create_supplier(supplier))

    async def create_supplier(self, supplier: Supplier):
        status_manager.show_loading(f"Adding {supplier.name}...")
        result = await self.supplier_service.create_record(supplier)
        if result.success:
            status_manager.show_success(f"Added supplier {supplier.name}")
            self.data_changed.emit()
            await self.load_data()
        else:
            status_manager.show_error(f"Failed to add supplier: {result.error}")

    # Selection actions

    def on_selection_changed(self):
        rows = sorted({index.row() for index in self.data_table.selectionModel().selectedRows()})
        self.session.selection.replace(self.session.row_id_at(row) for row in rows)
        self.update_button_visibility()

    async def archive_selected(self, archive: bool):
        selected = self.session.selection.selected_ids()
        if not selected:
            return
        if archive:
            result = await self.supplier_service.bulk_archive_records(selected)
            count, verb = result.archived_count, "Archived"
        else:
            result = await self.supplier_service.bulk_unarchive_records(selected)
            count, verb = result.unarchived_count, "Unarchived"

        if result.success:
            status_manager.show_success(f"{verb} {count} supplier(s)")
            self.session.selection.clear()
            await self.load_data()
        else:
            status_manager.show_error(f"Failed to update suppliers: {result.error}")

    async def delete_selected(self):
        selected = self.session.selection.selected_ids()
        if not selected:
            return
        plural = "" if len(selected) == 1 else "s"
        reply = QMessageBox.question(
            self, "Confirm Deletion",
            f"Are you sure you want to delete {len(selected)} supplier{plural}? "
            "This action cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        result = await self.supplier_service.bulk_delete_records(selected)
        status_manager.report_delete(result)
        message = result.summary_message()
        if result.blocked_count or not result.success:
            QMessageBox.information(self, "Delete Suppliers", message)

        self.session.selection.apply_delete_result(result)
        if result.success:
            await self.load_data()
            self._restore_selection()

    def _restore_selection(self):
        selected = set(self.session.selection.selected_ids())
        self.data_table.clearSelection()
        for row, supplier in enumerate(self.visible_suppliers):
            if supplier.supplier_id in selected:
                self.data_table.selectRow(row)

    def update_button_visibility(self):
        mode = self.session.edit_mode
        has_changes = self.session.has_unsaved_changes
        has_selection = len(self.session.selection) > 0

        self.edit_all_button.setVisible(mode == EditMode.VIEWING)
        self.add_button.setVisible(mode == EditMode.VIEWING)
        self.edit_row_button.setVisible(mode != EditMode.BULK_EDIT)
        self.save_all_button.setVisible(mode == EditMode.BULK_EDIT)
        self.cancel_button.setVisible(mode != EditMode.VIEWING)
        self.undo_row_button.setVisible(has_changes)
        self.archive_button.setVisible(has_selection and mode == EditMode.VIEWING)
        self.unarchive_button.setVisible(has_selection and mode == EditMode.VIEWING)
        self.delete_button.setVisible(has_selection and mode == EditMode.VIEWING)

        if has_changes:
            count = self.session.tracker.changed_rows_count
            row_text = "row" if count == 1 else "rows"
            self.save_all_button.setText(f"💾 Save All ({count} {row_text})")
        else:
            self.save_all_button.setText("💾 Save All")

    def closeEvent(self, event):
        self.session.close()
        super().closeEvent(event)
