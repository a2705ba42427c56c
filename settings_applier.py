"""
settings_applier.py

Projects a settings document onto an engine-settings target.

The target is any object with the boolean setters named in SETTING_DISPATCH
(see engine_settings.QtEngineSettings). Applying is idempotent: the same
document always leaves the target in the same state.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from settings import SettingKey, SettingsDocument

log = logging.getLogger(__name__)


# SettingKey -> name of the boolean setter on the engine target
SETTING_DISPATCH: Dict[SettingKey, str] = {
    SettingKey.ENABLE_JAVASCRIPT: "set_enable_javascript",
    SettingKey.ZOOM_TEXT_ONLY: "set_zoom_text_only",
    SettingKey.PRINT_BACKGROUNDS: "set_print_backgrounds",
    SettingKey.AUTO_LOAD_IMAGES: "set_auto_load_images",
    SettingKey.ALLOW_MODAL_DIALOGS: "set_allow_modal_dialogs",
    SettingKey.ALLOW_FILE_ACCESS_FROM_FILE_URLS: "set_allow_file_access_from_file_urls",
    SettingKey.LOAD_ICONS_IGNORING_IMAGE_LOAD_SETTING: "set_load_icons_ignoring_image_load_setting",
    SettingKey.MEDIA_PLAYBACK_REQUIRES_USER_GESTURE: "set_media_playback_requires_user_gesture",
    SettingKey.MEDIA_PLAYBACK_ALLOWS_INLINE: "set_media_playback_allows_inline",
    SettingKey.ENABLE_MEDIA: "set_enable_media",
    SettingKey.ENABLE_WEBRTC: "set_enable_webrtc",
    SettingKey.ENABLE_MEDIA_STREAM: "set_enable_media_stream",
    SettingKey.ENABLE_MEDIA_CAPABILITIES: "set_enable_media_capabilities",
    SettingKey.ENABLE_ENCRYPTED_MEDIA: "set_enable_encrypted_media",
    SettingKey.ENABLE_WEBGL: "set_enable_webgl",
    SettingKey.ENABLE_WEBAUDIO: "set_enable_webaudio",
    SettingKey.JAVASCRIPT_CAN_OPEN_WINDOWS_AUTOMATICALLY: "set_javascript_can_open_windows_automatically",
    SettingKey.JAVASCRIPT_CAN_ACCESS_CLIPBOARD: "set_javascript_can_access_clipboard",
    SettingKey.ENABLE_JAVASCRIPT_MARKUP: "set_enable_javascript_markup",
    SettingKey.ENABLE_TABS_TO_LINKS: "set_enable_tabs_to_links",
    SettingKey.ENABLE_SPATIAL_NAVIGATION: "set_enable_spatial_navigation",
    SettingKey.ENABLE_SMOOTH_SCROLLING: "set_enable_smooth_scrolling",
    SettingKey.ENABLE_RESIZABLE_TEXT_AREAS: "set_enable_resizable_text_areas",
    SettingKey.ENABLE_PAGE_CACHE: "set_enable_page_cache",
    SettingKey.ENABLE_OFFLINE_WEB_APPLICATION_CACHE: "set_enable_offline_web_application_cache",
    SettingKey.ENABLE_HTML5_LOCAL_STORAGE: "set_enable_html5_local_storage",
    SettingKey.ENABLE_HTML5_DATABASE: "set_enable_html5_database",
    SettingKey.ENABLE_FULLSCREEN: "set_enable_fullscreen",
    SettingKey.ENABLE_DNS_PREFETCHING: "set_enable_dns_prefetching",
    SettingKey.ENABLE_CARET_BROWSING: "set_enable_caret_browsing",
    SettingKey.DISABLE_WEB_SECURITY: "set_disable_web_security",
    SettingKey.ALLOW_UNIVERSAL_ACCESS_FROM_FILE_URLS: "set_allow_universal_access_from_file_urls",
    SettingKey.ALLOW_TOP_NAVIGATION_TO_DATA_URLS: "set_allow_top_navigation_to_data_urls",
    SettingKey.ENABLE_DEVELOPER_EXTRAS: "set_enable_developer_extras",
    SettingKey.ENABLE_HYPERLINK_AUDITING: "set_enable_hyperlink_auditing",
    SettingKey.DRAW_COMPOSITING_INDICATORS: "set_draw_compositing_indicators",
    SettingKey.ENABLE_MOCK_CAPTURE_DEVICES: "set_enable_mock_capture_devices",
    SettingKey.ENABLE_SITE_SPECIFIC_QUIRKS: "set_enable_site_specific_quirks",
    SettingKey.ENABLE_BACK_FORWARD_NAVIGATION_GESTURES: "set_enable_back_forward_navigation_gestures",
    SettingKey.ENABLE_WRITE_CONSOLE_MESSAGES_TO_STDOUT: "set_enable_write_console_messages_to_stdout",
}


def apply_settings(target: Optional[Any], document: SettingsDocument) -> None:
    """Apply every setting in ``document`` to ``target``.

    Args:
        target: Engine settings object exposing the SETTING_DISPATCH setters.
            None (no settings available for the view) does nothing.
        document: Settings to apply. Not modified.
    """
    if target is None:
        return

    for category, setting in document.iter_settings():
        key = setting.setting_key
        if key is None:
            log.warning("Unknown setting: %s (in '%s')", setting.key, category.name)
            continue
        getattr(target, SETTING_DISPATCH[key])(setting.enabled)
