import asyncio
import threading
from unittest.mock import MagicMock, patch

import pytest

from config import Config
from main import AppDetailApp, format_detail, main, parse_args, print_detail
from models import LoadState
from services import AppLookupService, FetchError
from ui import LogPane, ScreenshotStrip, ScreenshotViewer
from viewmodel import AppDetailViewModel


@pytest.fixture
def lookup_service():
    return MagicMock(spec=AppLookupService)


def test_parse_args_defaults_to_configured_track_id():
    args = parse_args([])

    assert args.track_id == 547702041
    assert args.print_only is False


def test_parse_args_reads_track_id_and_print_flag():
    args = parse_args(["389801252", "--print"])

    assert args.track_id == 389801252
    assert args.print_only is True


def test_format_detail_lists_every_section(app_detail):
    text = format_detail(app_detail)

    assert text.startswith("Lets Build That App\nby Brian Voong")
    assert "What's New\nBug fixes." in text
    assert "  https://example.com/2.png" in text
    assert text.endswith("Description\nLearn to build apps.")


@pytest.mark.asyncio
async def test_print_detail_success(lookup_service, app_detail, capsys):
    lookup_service.fetch_app_detail.return_value = (app_detail, None)

    exit_code = await print_detail(AppDetailViewModel(1, lookup_service))

    assert exit_code == 0
    assert "Lets Build That App" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_print_detail_not_found(lookup_service, capsys):
    lookup_service.fetch_app_detail.return_value = (None, None)

    exit_code = await print_detail(AppDetailViewModel(42, lookup_service))

    assert exit_code == 1
    assert "No app found for id 42" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_print_detail_failure(lookup_service, capsys):
    lookup_service.fetch_app_detail.return_value = (None, FetchError(42, OSError("offline")))

    exit_code = await print_detail(AppDetailViewModel(42, lookup_service))

    assert exit_code == 1
    assert "offline" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_app_loads_detail_once_on_mount(lookup_service, app_detail):
    lookup_service.fetch_app_detail.return_value = (app_detail, None)
    view_model = AppDetailViewModel(547702041, lookup_service)
    app = AppDetailApp(view_model, Config())

    async with app.run_test() as pilot:
        await view_model.load()
        await pilot.pause()

        assert app.app_state.status is LoadState.LOADED
        assert app.app_state.detail == app_detail
        assert len(app.query(".screenshot")) == 2

    lookup_service.fetch_app_detail.assert_called_once_with(547702041)


@pytest.mark.asyncio
async def test_app_failure_keeps_placeholders(lookup_service):
    lookup_service.fetch_app_detail.return_value = (None, FetchError(1, OSError("offline")))
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    async with app.run_test() as pilot:
        await view_model.load()
        await pilot.pause()

        assert app.app_state.status is LoadState.FAILED
        assert app.app_state.detail is None
        assert len(app.query(".screenshot")) == 0


@pytest.mark.asyncio
async def test_screenshot_viewer_pages_and_dismisses(lookup_service, app_detail):
    lookup_service.fetch_app_detail.return_value = (app_detail, None)
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    async with app.run_test() as pilot:
        await view_model.load()
        await pilot.pause()

        app.query_one(ScreenshotStrip).post_message(ScreenshotStrip.ScreenshotPressed(1))
        await pilot.pause()
        assert isinstance(app.screen, ScreenshotViewer)
        assert app.screen.current_url == "https://example.com/2.png"

        await pilot.press("right")
        assert app.screen.current_url == "https://example.com/1.png"

        await pilot.press("escape")
        await pilot.pause()
        assert not isinstance(app.screen, ScreenshotViewer)


def logged_messages(add_message: MagicMock) -> str:
    return "\n".join(call.args[0] for call in add_message.call_args_list)


@pytest.mark.asyncio
async def test_closing_app_cancels_fetch_in_flight(lookup_service, app_detail):
    release = threading.Event()

    def slow_fetch(track_id):
        release.wait(timeout=5)
        return app_detail, None

    lookup_service.fetch_app_detail.side_effect = slow_fetch
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    try:
        async with app.run_test() as pilot:
            await pilot.pause()
            task = view_model.load()
            assert view_model.state.status is LoadState.LOADING

        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()
        assert view_model.state.status is LoadState.EMPTY
        assert view_model.detail is None
    finally:
        release.set()


@pytest.mark.asyncio
async def test_copy_binding_copies_icon_url(lookup_service, app_detail):
    lookup_service.fetch_app_detail.return_value = (app_detail, None)
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    with patch("main.pyperclip") as clipboard, patch.object(LogPane, "add_message") as add_message:
        async with app.run_test() as pilot:
            await view_model.load()
            await pilot.pause()
            await pilot.press("c")

    clipboard.copy.assert_called_once_with("https://example.com/icon.png")
    assert "Copied icon URL" in logged_messages(add_message)


@pytest.mark.asyncio
async def test_copy_binding_without_loaded_app(lookup_service):
    lookup_service.fetch_app_detail.return_value = (None, None)
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    with patch("main.pyperclip") as clipboard, patch.object(LogPane, "add_message") as add_message:
        async with app.run_test() as pilot:
            await view_model.load()
            await pilot.pause()
            await pilot.press("c")

    clipboard.copy.assert_not_called()
    assert "No app loaded yet" in logged_messages(add_message)


@pytest.mark.asyncio
async def test_copy_binding_without_clipboard_support(lookup_service, app_detail):
    lookup_service.fetch_app_detail.return_value = (app_detail, None)
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    with patch("main.pyperclip", None), patch.object(LogPane, "add_message") as add_message:
        async with app.run_test() as pilot:
            await view_model.load()
            await pilot.pause()
            await pilot.press("c")

    assert "'pyperclip' not installed" in logged_messages(add_message)


@pytest.mark.asyncio
async def test_screenshot_viewer_copies_current_url(lookup_service, app_detail):
    lookup_service.fetch_app_detail.return_value = (app_detail, None)
    view_model = AppDetailViewModel(1, lookup_service)
    app = AppDetailApp(view_model, Config())

    with patch("ui.pyperclip") as clipboard, patch("main.pyperclip") as app_clipboard:
        async with app.run_test() as pilot:
            await view_model.load()
            await pilot.pause()
            app.query_one(ScreenshotStrip).post_message(ScreenshotStrip.ScreenshotPressed(1))
            await pilot.pause()
            assert isinstance(app.screen, ScreenshotViewer)

            await pilot.press("c")

    clipboard.copy.assert_called_once_with("https://example.com/2.png")
    app_clipboard.copy.assert_not_called()


def test_main_reports_bad_configuration(monkeypatch, capsys):
    monkeypatch.setenv("APP_DETAIL_TIMEOUT", "soon")

    assert main(["--print"]) == 2
    assert "APP_DETAIL_TIMEOUT" in capsys.readouterr().err
