"""Tests for settings_applier.apply_settings and its dispatch table."""
from __future__ import annotations

import logging

import pytest

from settings import (
    Category,
    Setting,
    SettingKey,
    SettingsDocument,
    SettingsStore,
    default_document,
    load_document,
    set_value,
)
from settings_applier import SETTING_DISPATCH, apply_settings


class RecordingTarget:
    """Engine target that records every setter call."""

    def __init__(self):
        self.calls = []
        self.state = {}

    def __getattr__(self, name):
        if not name.startswith("set_"):
            raise AttributeError(name)

        def setter(enabled):
            self.calls.append((name, enabled))
            self.state[name] = enabled
        return setter


# ─────────────────────────────────────────────────────────
# Dispatch table
# ─────────────────────────────────────────────────────────


class TestDispatchTable:
    def test_every_key_dispatched(self):
        assert set(SETTING_DISPATCH) == set(SettingKey)

    def test_setter_names_unique(self):
        names = list(SETTING_DISPATCH.values())
        assert len(names) == len(set(names))

    def test_setter_names_follow_keys(self):
        assert SETTING_DISPATCH[SettingKey.ENABLE_JAVASCRIPT] == "set_enable_javascript"
        assert SETTING_DISPATCH[SettingKey.DISABLE_WEB_SECURITY] == "set_disable_web_security"


# ─────────────────────────────────────────────────────────
# apply_settings
# ─────────────────────────────────────────────────────────


class TestApplySettings:
    def test_applies_every_default(self):
        target = RecordingTarget()
        apply_settings(target, default_document())

        assert len(target.calls) == 36
        assert target.state["set_enable_javascript"] is True
        assert target.state["set_zoom_text_only"] is False
        assert target.state["set_disable_web_security"] is False

    def test_calls_in_document_order(self):
        target = RecordingTarget()
        doc = default_document()
        apply_settings(target, doc)
        expected = [SETTING_DISPATCH[s.setting_key] for _, s in doc.iter_settings()]
        assert [name for name, _ in target.calls] == expected

    def test_idempotent(self):
        doc = default_document()
        once = RecordingTarget()
        apply_settings(once, doc)

        twice = RecordingTarget()
        apply_settings(twice, doc)
        apply_settings(twice, doc)

        assert twice.state == once.state

    def test_does_not_mutate_document(self):
        doc = default_document()
        before = doc.to_dict()
        apply_settings(RecordingTarget(), doc)
        assert doc.to_dict() == before

    def test_non_canonical_value_is_false(self):
        doc = SettingsDocument([Category("General Settings", [
            Setting("Enable JavaScript", "TRUE"),
            Setting("Auto Load Images", "1"),
        ])])
        target = RecordingTarget()
        apply_settings(target, doc)
        assert target.state == {
            "set_enable_javascript": False,
            "set_auto_load_images": False,
        }

    def test_unknown_key_logged_and_skipped(self, caplog):
        doc = SettingsDocument([Category("Custom", [
            Setting("Enable Teleport", "true"),
            Setting("Enable WebGL", "true"),
        ])])
        target = RecordingTarget()
        with caplog.at_level(logging.WARNING, logger="settings_applier"):
            apply_settings(target, doc)

        assert target.calls == [("set_enable_webgl", True)]
        assert "Unknown setting: Enable Teleport" in caplog.text

    def test_none_target_is_noop(self):
        apply_settings(None, default_document())

    def test_empty_document(self):
        target = RecordingTarget()
        apply_settings(target, SettingsDocument())
        assert target.calls == []


# ─────────────────────────────────────────────────────────
# Store -> applier cycle
# ─────────────────────────────────────────────────────────


class TestToggleCycle:
    def test_disable_javascript(self, tmp_path):
        path = tmp_path / "settings.json"
        doc = load_document(path)
        set_value(doc, "Enable JavaScript", "false")
        target = RecordingTarget()
        apply_settings(target, doc)

        assert target.state["set_enable_javascript"] is False

    def test_store_listener_reapplies(self, tmp_path):
        path = tmp_path / "settings.json"
        store = SettingsStore(path)
        target = RecordingTarget()
        store.subscribe(lambda document: apply_settings(target, document))

        store.toggle("Enable JavaScript", False)

        assert target.state["set_enable_javascript"] is False
        assert load_document(path).find("Enable JavaScript").value == "false"

        store.toggle("Enable JavaScript", True)
        assert target.state["set_enable_javascript"] is True
