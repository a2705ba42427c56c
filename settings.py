"""
settings.py

Persistent engine settings for Rubra.

The settings document is a flat, ordered list of categories, each holding
an ordered list of key/value toggles. It is stored as JSON with platformdirs
picking the user config directory.

Settings file location:
    - Windows: %APPDATA%/rubra/settings.json
    - macOS: ~/Library/Application Support/rubra/settings.json
    - Linux: ~/.config/rubra/settings.json

Key strings are written to disk verbatim and must stay stable so existing
settings files keep working. A settings file that exists but cannot be read
or parsed is an error; it is never silently replaced with defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import platformdirs

log = logging.getLogger(__name__)

APP_NAME = "rubra"
SETTINGS_FILENAME = "settings.json"

TRUE = "true"
FALSE = "false"

# Global settings store instance (singleton)
_settings_store: Optional["SettingsStore"] = None


def get_settings() -> "SettingsStore":
    """Get the global settings store instance.

    Returns:
        The singleton SettingsStore instance.
    """
    global _settings_store
    if _settings_store is None:
        _settings_store = SettingsStore()
    return _settings_store


# =============================================================================
# Errors
# =============================================================================

class SettingsError(Exception):
    """Base class for settings file failures."""

    def __init__(self, message: str, path: Path):
        super().__init__(f"{message}: {path}")
        self.path = path


class SettingsLoadError(SettingsError):
    """The settings file exists but could not be read."""


class SettingsFormatError(SettingsError):
    """The settings file is not valid JSON or has the wrong structure."""


class SettingsSaveError(SettingsError):
    """The settings file could not be written."""


# =============================================================================
# Setting identity
# =============================================================================

class SettingKey(str, Enum):
    """Every setting the engine understands.

    The value is the exact string stored in the settings file.
    """
    # General
    ENABLE_JAVASCRIPT = "Enable JavaScript"
    ZOOM_TEXT_ONLY = "Zoom Text Only"
    PRINT_BACKGROUNDS = "Print Backgrounds"
    AUTO_LOAD_IMAGES = "Auto Load Images"
    ALLOW_MODAL_DIALOGS = "Allow Modal Dialogs"
    ALLOW_FILE_ACCESS_FROM_FILE_URLS = "Allow File Access from File URLs"
    LOAD_ICONS_IGNORING_IMAGE_LOAD_SETTING = "Load Icons Ignoring Image Load Setting"

    # Media
    MEDIA_PLAYBACK_REQUIRES_USER_GESTURE = "Media Playback Requires User Gesture"
    MEDIA_PLAYBACK_ALLOWS_INLINE = "Media Playback Allows Inline"
    ENABLE_MEDIA = "Enable Media"
    ENABLE_WEBRTC = "Enable WebRTC"
    ENABLE_MEDIA_STREAM = "Enable Media Stream"
    ENABLE_MEDIA_CAPABILITIES = "Enable Media Capabilities"
    ENABLE_ENCRYPTED_MEDIA = "Enable Encrypted Media"
    ENABLE_WEBGL = "Enable WebGL"
    ENABLE_WEBAUDIO = "Enable WebAudio"

    # JavaScript
    JAVASCRIPT_CAN_OPEN_WINDOWS_AUTOMATICALLY = "JavaScript Can Open Windows Automatically"
    JAVASCRIPT_CAN_ACCESS_CLIPBOARD = "JavaScript Can Access Clipboard"
    ENABLE_JAVASCRIPT_MARKUP = "Enable JavaScript Markup"

    # Web features
    ENABLE_TABS_TO_LINKS = "Enable Tabs to Links"
    ENABLE_SPATIAL_NAVIGATION = "Enable Spatial Navigation"
    ENABLE_SMOOTH_SCROLLING = "Enable Smooth Scrolling"
    ENABLE_RESIZABLE_TEXT_AREAS = "Enable Resizable Text Areas"
    ENABLE_PAGE_CACHE = "Enable Page Cache"
    ENABLE_OFFLINE_WEB_APPLICATION_CACHE = "Enable Offline Web Application Cache"
    ENABLE_HTML5_LOCAL_STORAGE = "Enable HTML5 Local Storage"
    ENABLE_HTML5_DATABASE = "Enable HTML5 Database"
    ENABLE_FULLSCREEN = "Enable Fullscreen"
    ENABLE_DNS_PREFETCHING = "Enable DNS Prefetching"
    ENABLE_CARET_BROWSING = "Enable Caret Browsing"

    # Security and developer tooling
    DISABLE_WEB_SECURITY = "Disable Web Security"
    ALLOW_UNIVERSAL_ACCESS_FROM_FILE_URLS = "Allow Universal Access from File URLs"
    ALLOW_TOP_NAVIGATION_TO_DATA_URLS = "Allow Top Navigation to Data URLs"
    ENABLE_DEVELOPER_EXTRAS = "Enable Developer Extras"
    ENABLE_HYPERLINK_AUDITING = "Enable Hyperlink Auditing"
    DRAW_COMPOSITING_INDICATORS = "Draw Compositing Indicators"
    ENABLE_MOCK_CAPTURE_DEVICES = "Enable Mock Capture Devices"
    ENABLE_SITE_SPECIFIC_QUIRKS = "Enable Site-Specific Quirks"
    ENABLE_BACK_FORWARD_NAVIGATION_GESTURES = "Enable Back Forward Navigation Gestures"
    ENABLE_WRITE_CONSOLE_MESSAGES_TO_STDOUT = "Enable Write Console Messages to Stdout"

    @classmethod
    def parse(cls, key: str) -> Optional["SettingKey"]:
        """Return the member whose file string is ``key``, or None."""
        try:
            return cls(key)
        except ValueError:
            return None


# =============================================================================
# Default document
# =============================================================================

# Category name -> ordered (key, default) pairs. The default document is
# built from this table only.
DEFAULT_CATEGORIES: Tuple[Tuple[str, Tuple[Tuple[SettingKey, bool], ...]], ...] = (
    ("General Settings", (
        (SettingKey.ENABLE_JAVASCRIPT, True),
        (SettingKey.ZOOM_TEXT_ONLY, False),
        (SettingKey.PRINT_BACKGROUNDS, True),
        (SettingKey.AUTO_LOAD_IMAGES, True),
        (SettingKey.ALLOW_MODAL_DIALOGS, True),
        (SettingKey.ALLOW_FILE_ACCESS_FROM_FILE_URLS, False),
    )),
    ("Media Settings", (
        (SettingKey.MEDIA_PLAYBACK_REQUIRES_USER_GESTURE, True),
        (SettingKey.MEDIA_PLAYBACK_ALLOWS_INLINE, True),
        (SettingKey.ENABLE_MEDIA, True),
        (SettingKey.ENABLE_WEBRTC, True),
        (SettingKey.ENABLE_MEDIA_STREAM, True),
        (SettingKey.ENABLE_MEDIA_CAPABILITIES, True),
        (SettingKey.ENABLE_ENCRYPTED_MEDIA, True),
    )),
    ("JavaScript Settings", (
        (SettingKey.JAVASCRIPT_CAN_OPEN_WINDOWS_AUTOMATICALLY, True),
        (SettingKey.JAVASCRIPT_CAN_ACCESS_CLIPBOARD, True),
        (SettingKey.ENABLE_JAVASCRIPT_MARKUP, False),
    )),
    ("Web Features", (
        (SettingKey.ENABLE_TABS_TO_LINKS, True),
        (SettingKey.ENABLE_SPATIAL_NAVIGATION, False),
        (SettingKey.ENABLE_SMOOTH_SCROLLING, True),
        (SettingKey.ENABLE_RESIZABLE_TEXT_AREAS, True),
        (SettingKey.ENABLE_PAGE_CACHE, True),
        (SettingKey.ENABLE_OFFLINE_WEB_APPLICATION_CACHE, False),
        (SettingKey.ENABLE_HTML5_LOCAL_STORAGE, True),
        (SettingKey.ENABLE_HTML5_DATABASE, False),
        (SettingKey.ENABLE_FULLSCREEN, True),
        (SettingKey.ENABLE_DNS_PREFETCHING, True),
    )),
    ("Security Settings", (
        (SettingKey.DISABLE_WEB_SECURITY, False),
        (SettingKey.ALLOW_UNIVERSAL_ACCESS_FROM_FILE_URLS, False),
        (SettingKey.ALLOW_TOP_NAVIGATION_TO_DATA_URLS, False),
        (SettingKey.ENABLE_DEVELOPER_EXTRAS, False),
        (SettingKey.ENABLE_HYPERLINK_AUDITING, False),
        (SettingKey.DRAW_COMPOSITING_INDICATORS, False),
        (SettingKey.ENABLE_MOCK_CAPTURE_DEVICES, False),
        (SettingKey.ENABLE_SITE_SPECIFIC_QUIRKS, False),
        (SettingKey.ENABLE_BACK_FORWARD_NAVIGATION_GESTURES, False),
        (SettingKey.ENABLE_WRITE_CONSOLE_MESSAGES_TO_STDOUT, False),
    )),
)


def to_value(enabled: bool) -> str:
    """Convert a boolean to the stored string token."""
    return TRUE if enabled else FALSE


# =============================================================================
# Document model
# =============================================================================

@dataclass
class Setting:
    """A single key/value toggle.

    ``value`` is kept as the raw string from the file. Anything other than
    ``"true"`` reads as disabled.
    """
    key: str
    value: str

    @property
    def setting_key(self) -> Optional[SettingKey]:
        return SettingKey.parse(self.key)

    @property
    def enabled(self) -> bool:
        return self.value == TRUE


@dataclass
class Category:
    """A named, ordered group of settings."""
    name: str
    settings: List[Setting] = field(default_factory=list)


@dataclass
class SettingsDocument:
    """The full settings model, in display order."""
    categories: List[Category] = field(default_factory=list)

    def iter_settings(self):
        """Yield ``(category, setting)`` pairs in document order."""
        for category in self.categories:
            for setting in category.settings:
                yield category, setting

    def find(self, key: str) -> Optional[Setting]:
        """Return the first setting with ``key`` across all categories."""
        for _, setting in self.iter_settings():
            if setting.key == key:
                return setting
        return None

    def keys(self) -> List[str]:
        return [setting.key for _, setting in self.iter_settings()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [
                {
                    "name": category.name,
                    "settings": [
                        {"key": s.key, "value": s.value}
                        for s in category.settings
                    ],
                }
                for category in self.categories
            ]
        }


def default_document() -> SettingsDocument:
    """Build the default settings document from DEFAULT_CATEGORIES."""
    return SettingsDocument(categories=[
        Category(
            name=name,
            settings=[Setting(key.value, to_value(default)) for key, default in pairs],
        )
        for name, pairs in DEFAULT_CATEGORIES
    ])


def _parse_document(data: Any, path: Path) -> SettingsDocument:
    """Parse decoded JSON into a SettingsDocument.

    Args:
        data: Decoded JSON value.
        path: File the data came from, used in error messages.

    Returns:
        The parsed document.

    Raises:
        SettingsFormatError: If any part of the structure is missing or has
            the wrong type.
    """
    if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
        raise SettingsFormatError("Expected an object with a 'categories' list", path)

    document = SettingsDocument()
    for raw_category in data["categories"]:
        if not isinstance(raw_category, dict):
            raise SettingsFormatError("Category entries must be objects", path)
        name = raw_category.get("name")
        raw_settings = raw_category.get("settings")
        if not isinstance(name, str) or not isinstance(raw_settings, list):
            raise SettingsFormatError("Category needs a 'name' string and a 'settings' list", path)

        category = Category(name=name)
        for raw_setting in raw_settings:
            if not isinstance(raw_setting, dict):
                raise SettingsFormatError(f"Settings in '{name}' must be objects", path)
            key = raw_setting.get("key")
            value = raw_setting.get("value")
            if not isinstance(key, str) or not isinstance(value, str):
                raise SettingsFormatError(f"Setting in '{name}' needs 'key' and 'value' strings", path)
            category.settings.append(Setting(key, value))
        document.categories.append(category)

    return document


def _warn_duplicate_keys(document: SettingsDocument) -> None:
    seen = set()
    duplicates = []
    for key in document.keys():
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    if duplicates:
        log.warning("Duplicate setting keys, only the first of each is updated: %s",
                    ", ".join(duplicates))


# =============================================================================
# Load / save / set
# =============================================================================

def load_document(path: Path) -> SettingsDocument:
    """Load the settings document, creating the default file if missing.

    Args:
        path: Location of the settings JSON file.

    Returns:
        The loaded document, or the freshly saved defaults.

    Raises:
        SettingsLoadError: If the file exists but cannot be read.
        SettingsFormatError: If the file is not a valid settings document.
        SettingsSaveError: If the default file cannot be written.
    """
    path = Path(path)
    if not path.exists():
        log.info("No settings file at %s, writing defaults", path)
        document = default_document()
        save_document(document, path)
        return document

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SettingsLoadError(f"Unable to read settings file ({e})", path) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SettingsFormatError(f"Unable to parse settings JSON ({e})", path) from e

    document = _parse_document(data, path)
    _warn_duplicate_keys(document)
    log.debug("Loaded %d settings from %s", len(document.keys()), path)
    return document


def save_document(document: SettingsDocument, path: Path) -> None:
    """Write the whole document to ``path``, replacing any existing file.

    Creates the parent directory if it doesn't exist.

    Raises:
        SettingsSaveError: If the directory or file cannot be written.
    """
    path = Path(path)
    text = json.dumps(document.to_dict(), indent=2)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise SettingsSaveError(f"Unable to write settings file ({e})", path) from e


def set_value(document: SettingsDocument, key: str, value: str) -> bool:
    """Overwrite the value of the first setting named ``key``.

    Unknown keys are ignored.

    Returns:
        True if a setting was found and updated.
    """
    setting = document.find(key)
    if setting is None:
        return False
    setting.value = value
    return True


# =============================================================================
# Settings Store
# =============================================================================

Listener = Callable[[SettingsDocument], None]


class SettingsStore:
    """Owns the settings document and keeps the file and listeners in sync.

    Every mutation is saved immediately and then broadcast to subscribed
    listeners, which re-apply the document to their engine views.

    Args:
        path: Settings file location. Defaults to ``settings.json`` in the
            platform user config directory.
        app_name: Application name used for the config directory.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, app_name: str = APP_NAME):
        if path is None:
            self.settings_dir = Path(platformdirs.user_config_dir(app_name))
            self.settings_file = self.settings_dir / SETTINGS_FILENAME
        else:
            self.settings_file = Path(path)
            self.settings_dir = self.settings_file.parent
        self._listeners: List[Listener] = []
        self.document = self.load()

    def load(self) -> SettingsDocument:
        """Load the document from the settings file (see load_document)."""
        return load_document(self.settings_file)

    def save(self) -> None:
        """Save the current document to the settings file."""
        save_document(self.document, self.settings_file)

    def subscribe(self, listener: Listener) -> None:
        """Register ``listener`` to receive the document after each change."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.document)

    def set(self, key: str, value: str) -> None:
        """Set ``key`` to a raw string value, then save and notify."""
        log.info("Setting '%s' changed to %s", key, value)
        set_value(self.document, key, value)
        self.save()
        self._notify()

    def toggle(self, key: str, enabled: bool) -> None:
        """Set ``key`` to ``"true"`` or ``"false"``, then save and notify."""
        self.set(key, to_value(enabled))

    def is_enabled(self, key: str) -> bool:
        setting = self.document.find(key)
        return setting is not None and setting.enabled

    def restore_defaults(self) -> None:
        """Replace the document with the defaults, then save and notify."""
        log.info("Restoring default settings")
        self.document = default_document()
        self.save()
        self._notify()

    def get_settings_path(self) -> Path:
        """Get the path to the settings file."""
        return self.settings_file
