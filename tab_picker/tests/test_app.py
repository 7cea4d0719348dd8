"""Smoke and pilot tests for the Textual app."""

import asyncio
import json

from tab_picker.app import DEMO_SNAPSHOT, Services, TabPickerApp, _title_for
from tab_picker.screens.picker import PickerScreen
from tab_picker.services.config import ConfigManager
from tab_picker.widgets.candidate_list import CandidateList


def _services(tmp_path, snapshot_path=None):
    return Services.create(config=ConfigManager(config_dir=tmp_path), snapshot_path=snapshot_path)


def test_app_import():
    """App module imports without errors."""
    assert TabPickerApp is not None


def test_app_instantiation(bus, tmp_path):
    """App can be instantiated without errors."""
    app = TabPickerApp(services=_services(tmp_path))
    assert app.mediator.machine is app.services.machine


def test_services_demo_fallback(bus, tmp_path):
    """A missing snapshot falls back to demo tabs."""
    services = _services(tmp_path, snapshot_path=tmp_path / "missing.json")
    assert len(services.directory.all_tabs()) == len(DEMO_SNAPSHOT["tabs"])


def test_services_load_snapshot(bus, tmp_path):
    path = tmp_path / "tabs.json"
    path.write_text(json.dumps({"tabs": [{"id": 5, "title": "Only", "url": "https://only.test"}]}))
    services = _services(tmp_path, snapshot_path=path)
    assert [t.id for t in services.directory.all_tabs()] == [5]
    assert services.settings.snapshot_path == path


def test_services_snapshot_from_config(bus, tmp_path):
    """Without --snapshot the configured file is used."""
    path = tmp_path / "tabs.json"
    path.write_text(json.dumps({"tabs": [{"id": 8, "title": "Configured", "url": "https://c.test"}]}))
    (tmp_path / "config.json").write_text(json.dumps({"snapshot_path": str(path)}))
    services = _services(tmp_path)
    assert [t.id for t in services.directory.all_tabs()] == [8]


def test_title_for():
    assert _title_for("https://github.com/pulls") == "github.com"


def test_picker_switches_tab(bus, tmp_path):
    """Toggle, type, enter: the matching tab becomes active."""
    services = _services(tmp_path)
    app = TabPickerApp(services=services)

    async def run():
        async with app.run_test() as pilot:
            await pilot.press("ctrl+o")
            await pilot.pause()
            assert isinstance(app.screen, PickerScreen)

            await pilot.press("d", "o", "c")
            await pilot.pause()
            rendered = app.screen.query_one(CandidateList).rendered_ids
            assert rendered[0] == "tab-2"
            assert rendered[-1] == "new-tab"

            await pilot.press("enter")
            await pilot.pause()
            assert not isinstance(app.screen, PickerScreen)

    asyncio.run(run())
    assert services.directory.active_tab().title == "Docs"


def test_toggle_twice_closes(bus, tmp_path):
    """The shortcut closes an open picker."""
    services = _services(tmp_path)
    app = TabPickerApp(services=services)

    async def run():
        async with app.run_test() as pilot:
            await pilot.press("ctrl+o")
            await pilot.pause()
            assert isinstance(app.screen, PickerScreen)
            await pilot.press("ctrl+o")
            await pilot.pause()
            assert not isinstance(app.screen, PickerScreen)

    asyncio.run(run())
    assert not services.machine.is_open
    assert services.directory.active_tab().id == 1


def test_close_tab_from_picker(bus, tmp_path):
    """alt+w closes the highlighted tab and the highlight moves on."""
    services = _services(tmp_path)
    app = TabPickerApp(services=services)

    async def run():
        async with app.run_test() as pilot:
            await pilot.press("ctrl+o")
            await pilot.pause()
            await pilot.press("down", "alt+w")
            await pilot.pause()
            assert isinstance(app.screen, PickerScreen)
            assert "tab-2" not in app.screen.query_one(CandidateList).rendered_ids

    asyncio.run(run())
    assert 2 not in [t.id for t in services.directory.all_tabs()]
    assert services.machine.selected.id == "tab-3"


def test_escape_dismisses(bus, tmp_path):
    services = _services(tmp_path)
    app = TabPickerApp(services=services)

    async def run():
        async with app.run_test() as pilot:
            await pilot.press("ctrl+o")
            await pilot.pause()
            await pilot.press("down", "escape")
            await pilot.pause()
            assert not isinstance(app.screen, PickerScreen)

    asyncio.run(run())
    assert not services.machine.is_open
    assert services.directory.active_tab().id == 1


def test_debug_enabled(monkeypatch):
    """Falsy spellings keep file logging off."""
    from tab_picker.app import DEBUG_ENV, debug_enabled

    for value in ("", "0", "false"):
        monkeypatch.setenv(DEBUG_ENV, value)
        assert not debug_enabled()
    monkeypatch.setenv(DEBUG_ENV, "1")
    assert debug_enabled()


def test_main_passes_snapshot(monkeypatch, tmp_path):
    """--snapshot reaches the service container."""
    from unittest.mock import patch

    from tab_picker.app import DEBUG_ENV, main

    monkeypatch.delenv(DEBUG_ENV, raising=False)
    path = tmp_path / "tabs.json"
    with patch("tab_picker.app.Services") as services_cls, patch("tab_picker.app.TabPickerApp") as app_cls:
        main(["--snapshot", str(path)])

    services_cls.create.assert_called_once_with(snapshot_path=path)
    app_cls.return_value.run.assert_called_once()


def test_debug_log_bare_filename(monkeypatch, tmp_path):
    """A debug path without a directory logs next to the working directory."""
    import logging
    from unittest.mock import patch

    from tab_picker.app import DEBUG_ENV, DEBUG_PATH_ENV, _configure_logging

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(DEBUG_ENV, "1")
    monkeypatch.setenv(DEBUG_PATH_ENV, "debug.log")
    with patch.object(logging, "basicConfig") as basic_config:
        _configure_logging()

    assert basic_config.call_args.kwargs["filename"].name == "debug.log"
