"""
engine_settings.py

Boolean setters over QtWebEngine's per-view settings.

The setter names follow the engine toggles stored in the settings file.
QtWebEngine (Chromium) does not expose every toggle; those setters only
record the value, so applying a document never fails on them.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Set

from PyQt6.QtWebEngineCore import QWebEngineSettings

log = logging.getLogger(__name__)


# Setter name -> QWebEngineSettings.WebAttribute member name
# (None: QtWebEngine has no equivalent, the value is only recorded)
_ATTRIBUTES: Dict[str, Optional[str]] = {
    # General
    "set_enable_javascript": "JavascriptEnabled",
    "set_zoom_text_only": None,
    "set_print_backgrounds": "PrintElementBackgrounds",
    "set_auto_load_images": "AutoLoadImages",
    "set_allow_modal_dialogs": None,
    "set_allow_file_access_from_file_urls": "LocalContentCanAccessFileUrls",
    "set_load_icons_ignoring_image_load_setting": "AutoLoadIconsForPage",

    # Media
    "set_media_playback_requires_user_gesture": "PlaybackRequiresUserGesture",
    "set_media_playback_allows_inline": None,
    "set_enable_media": None,
    "set_enable_webrtc": "WebRTCPublicInterfacesOnly",
    "set_enable_media_stream": None,
    "set_enable_media_capabilities": None,
    "set_enable_encrypted_media": None,
    "set_enable_webgl": "WebGLEnabled",
    "set_enable_webaudio": None,

    # JavaScript
    "set_javascript_can_open_windows_automatically": "JavascriptCanOpenWindows",
    "set_javascript_can_access_clipboard": "JavascriptCanAccessClipboard",
    "set_enable_javascript_markup": None,

    # Web features
    "set_enable_tabs_to_links": "LinksIncludedInFocusChain",
    "set_enable_spatial_navigation": "SpatialNavigationEnabled",
    "set_enable_smooth_scrolling": "ScrollAnimatorEnabled",
    "set_enable_resizable_text_areas": None,
    "set_enable_page_cache": None,
    "set_enable_offline_web_application_cache": None,
    "set_enable_html5_local_storage": "LocalStorageEnabled",
    "set_enable_html5_database": None,
    "set_enable_fullscreen": "FullScreenSupportEnabled",
    "set_enable_dns_prefetching": "DnsPrefetchEnabled",
    "set_enable_caret_browsing": None,

    # Security and developer tooling
    "set_disable_web_security": None,
    "set_allow_universal_access_from_file_urls": "LocalContentCanAccessRemoteUrls",
    "set_allow_top_navigation_to_data_urls": None,
    "set_enable_developer_extras": None,
    "set_enable_hyperlink_auditing": "HyperlinkAuditingEnabled",
    "set_draw_compositing_indicators": None,
    "set_enable_mock_capture_devices": None,
    "set_enable_site_specific_quirks": None,
    "set_enable_back_forward_navigation_gestures": None,
    "set_enable_write_console_messages_to_stdout": None,
}

# Setters whose attribute means the opposite of the toggle
_INVERTED = {"set_enable_webrtc"}


class QtEngineSettings:
    """Engine-settings target wrapping a ``QWebEngineSettings``.

    Every setter name in _ATTRIBUTES is available as a method taking one
    bool, e.g. ``engine.set_enable_javascript(False)``.

    Attributes:
        values: Last value passed to each setter, keyed by setter name.
        unsupported: Setters called that have no QtWebEngine attribute.
    """

    def __init__(self, web_settings: QWebEngineSettings):
        self.web_settings = web_settings
        self.values: Dict[str, bool] = {}
        self.unsupported: Set[str] = set()

    def __getattr__(self, name: str):
        if name not in _ATTRIBUTES:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

        def setter(enabled: bool) -> None:
            self.set_toggle(name, enabled)
        return setter

    @classmethod
    def for_view(cls, view) -> Optional["QtEngineSettings"]:
        """Wrap the settings of a QWebEngineView, or None if it has none."""
        web_settings = view.settings()
        if web_settings is None:
            return None
        return cls(web_settings)

    def is_enabled(self, setter_name: str) -> Optional[bool]:
        """Last value applied through ``setter_name``, or None if never set."""
        return self.values.get(setter_name)

    def set_toggle(self, setter_name: str, enabled: bool) -> None:
        """Record ``enabled`` for ``setter_name`` and apply it if supported."""
        self.values[setter_name] = enabled
        attribute = _ATTRIBUTES[setter_name]
        if attribute is None:
            if setter_name not in self.unsupported:
                log.debug("%s has no QtWebEngine equivalent, value recorded only", setter_name)
            self.unsupported.add(setter_name)
            return

        on = not enabled if setter_name in _INVERTED else enabled
        self.web_settings.setAttribute(getattr(QWebEngineSettings.WebAttribute, attribute), on)
