"""
main.py

Rubra - a minimal web browser shell.

PyQt6 application with:
- A QtWebEngine view with back/forward/reload
- An address bar that accepts URLs, paths, domains or search terms
- An engine settings dialog whose toggles are saved and applied live

Usage:
    python main.py [--home URL] [--settings-file PATH] [--debug]

Dependencies:
    pip install PyQt6 PyQt6-WebEngine platformdirs
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from PyQt6.QtCore import QSize, QUrl
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QLineEdit,
    QMainWindow,
    QToolBar,
)
from PyQt6.QtWebEngineWidgets import QWebEngineView

from address_resolver import resolve_input
from debug_trace import configure_logging, trace, trace_call, trace_exception, close_log
from engine_settings import QtEngineSettings
from settings import SettingsDocument, SettingsStore, get_settings
from settings_applier import apply_settings
from settings_dialog import SettingsDialog

DEFAULT_HOME_URL = "https://start.duckduckgo.com/"


def attach_view(store: SettingsStore, view: QWebEngineView):
    """Apply the store's document to ``view`` now and after every change.

    Returns:
        The listener registered with the store, for unsubscribing.
    """
    def on_settings_changed(document: SettingsDocument):
        apply_settings(QtEngineSettings.for_view(view), document)

    on_settings_changed(store.document)
    store.subscribe(on_settings_changed)
    return on_settings_changed


class BrowserWindow(QMainWindow):
    """Main browser window: toolbar, address bar and one web view.

    Args:
        store: The SettingsStore holding the engine settings.
        home_url: Page loaded when the window opens.
    """

    def __init__(self, store: SettingsStore, home_url: str = DEFAULT_HOME_URL):
        super().__init__()
        self.store = store
        self.setWindowTitle("Rubra")

        self.view = QWebEngineView(self)
        self.setCentralWidget(self.view)

        self._build_toolbar()

        self.view.urlChanged.connect(self._on_url_changed)
        self.view.titleChanged.connect(self._on_title_changed)

        self._settings_listener = attach_view(store, self.view)
        self.view.setUrl(QUrl(home_url))

    def _build_toolbar(self):
        """Build the navigation toolbar."""
        tb = QToolBar("Navigation")
        tb.setIconSize(QSize(18, 18))
        tb.setMovable(False)
        self.addToolBar(tb)

        back_act = QAction("<", self)
        back_act.setToolTip("Back")
        back_act.setShortcut(QKeySequence.StandardKey.Back)
        back_act.triggered.connect(self.view.back)
        tb.addAction(back_act)

        forward_act = QAction(">", self)
        forward_act.setToolTip("Forward")
        forward_act.setShortcut(QKeySequence.StandardKey.Forward)
        forward_act.triggered.connect(self.view.forward)
        tb.addAction(forward_act)

        reload_act = QAction("⟳", self)
        reload_act.setToolTip("Reload")
        reload_act.setShortcut(QKeySequence.StandardKey.Refresh)
        reload_act.triggered.connect(self.view.reload)
        tb.addAction(reload_act)

        self.address_bar = QLineEdit()
        self.address_bar.setPlaceholderText("Search or enter address")
        self.address_bar.returnPressed.connect(self._on_address_submitted)
        tb.addWidget(self.address_bar)

        settings_act = QAction("⋮", self)
        settings_act.setToolTip("Settings")
        settings_act.triggered.connect(lambda: self.show_settings_dialog())
        tb.addAction(settings_act)

    @trace_call("NAV")
    def _on_address_submitted(self):
        target = resolve_input(self.address_bar.text())
        trace(f"Navigating to {target}", "NAV")
        self.view.setUrl(QUrl(target))

    def _on_url_changed(self, url: QUrl):
        self.address_bar.setText(url.toString())

    def _on_title_changed(self, title: str):
        self.setWindowTitle(f"{title} - Rubra" if title else "Rubra")

    @trace_call("SETTINGS")
    def show_settings_dialog(self):
        """Open the settings dialog, applying the current settings first."""
        apply_settings(QtEngineSettings.for_view(self.view), self.store.document)
        dialog = SettingsDialog(self.store, self)
        dialog.exec()

    def closeEvent(self, event):
        self.store.unsubscribe(self._settings_listener)
        super().closeEvent(event)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rubra web browser")
    parser.add_argument(
        "--home",
        default=DEFAULT_HOME_URL,
        help=f"Page to open at startup (default: {DEFAULT_HOME_URL})"
    )
    parser.add_argument(
        "--settings-file",
        help="Settings JSON file (default: settings.json in the user config directory)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug tracing to stderr and rubra_debug.log"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Application entry point."""
    args = parse_args(argv)
    configure_logging(args.debug)

    trace("Application starting", "MAIN")
    app = QApplication(sys.argv[:1])

    # A settings file that exists but is unreadable or corrupt ends the
    # process here; it is never replaced with defaults.
    trace("Loading settings", "MAIN")
    store = SettingsStore(args.settings_file) if args.settings_file else get_settings()

    app.aboutToQuit.connect(close_log)

    trace("Creating BrowserWindow", "MAIN")
    w = BrowserWindow(store, resolve_input(args.home))
    w.resize(1500, 900)
    w.show()
    trace("Entering event loop", "MAIN")
    sys.exit(app.exec())


if __name__ == "__main__":
    try:
        main()
    except Exception:
        trace_exception("Fatal exception")
        close_log()
        raise
