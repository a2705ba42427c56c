"""
settings_dialog.py

Engine settings dialog for Rubra.
A category sidebar selects a page of toggles; every toggle is saved and
applied as soon as it changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QVBoxLayout,
    QWidget,
    QGroupBox,
    QCheckBox,
    QDialogButtonBox,
    QScrollArea,
    QFrame,
    QListWidget,
    QStackedWidget,
)

if TYPE_CHECKING:
    from settings import SettingsStore

from debug_trace import trace


class SettingsDialog(QDialog):
    """
    Settings dialog with one page per settings category.

    Pages and checkboxes are built from the store's document, so the
    dialog always shows categories and keys in file order.
    """

    def __init__(self, store: "SettingsStore", parent=None):
        super().__init__(parent)
        self.store = store
        self.setWindowTitle("Rubra Settings")
        self.setMinimumSize(650, 480)
        self.resize(900, 600)

        self.checkboxes: Dict[str, QCheckBox] = {}

        self._setup_ui()

    def _setup_ui(self):
        """Create the dialog UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(4)

        body = QHBoxLayout()
        layout.addLayout(body)

        self.sidebar = QListWidget()
        self.sidebar.setFixedWidth(200)
        body.addWidget(self.sidebar)

        self.pages = QStackedWidget()
        body.addWidget(self.pages, 1)

        self._build_pages()
        self.sidebar.currentRowChanged.connect(self.pages.setCurrentIndex)
        self.sidebar.setCurrentRow(0)

        button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Close |
            QDialogButtonBox.StandardButton.RestoreDefaults
        )
        button_box.rejected.connect(self.reject)
        button_box.button(QDialogButtonBox.StandardButton.RestoreDefaults).clicked.connect(self._on_restore_defaults)
        layout.addWidget(button_box)

    def _build_pages(self):
        """Add a sidebar entry and a page of checkboxes per category."""
        for category in self.store.document.categories:
            self.sidebar.addItem(category.name)

            group = QGroupBox(category.name)
            group_layout = QVBoxLayout(group)
            group_layout.setContentsMargins(6, 4, 6, 4)
            group_layout.setSpacing(4)

            for setting in category.settings:
                cb = QCheckBox(setting.key)
                cb.setChecked(setting.enabled)
                cb.toggled.connect(lambda checked, key=setting.key: self._on_toggled(key, checked))
                group_layout.addWidget(cb)
                self.checkboxes.setdefault(setting.key, cb)

            group_layout.addStretch()
            self.pages.addWidget(self._create_scrollable_page(group))

    def _create_scrollable_page(self, content_widget: QWidget) -> QScrollArea:
        """Wrap a page in a scroll area for categories with many toggles."""
        scroll = QScrollArea()
        scroll.setWidget(content_widget)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        return scroll

    def _on_toggled(self, key: str, checked: bool):
        trace(f"Setting '{key}' toggled to {checked}", "SETTINGS")
        self.store.toggle(key, checked)

    def _on_restore_defaults(self):
        """Handle Restore Defaults button - rebuild pages from the default document."""
        self.store.restore_defaults()
        self._rebuild_pages()

    def _rebuild_pages(self):
        """Drop every page and checkbox and build them again from the store."""
        row = max(self.sidebar.currentRow(), 0)
        self.sidebar.blockSignals(True)
        self.sidebar.clear()
        self.sidebar.blockSignals(False)
        while self.pages.count():
            page = self.pages.widget(0)
            self.pages.removeWidget(page)
            page.deleteLater()
        self.checkboxes.clear()

        self._build_pages()
        self.sidebar.setCurrentRow(min(row, self.sidebar.count() - 1))
        self.pages.setCurrentIndex(self.sidebar.currentRow())
