# main.py
import argparse
import asyncio
import logging
import sys
from typing import Callable, Optional

try:
    import pyperclip
except ImportError:
    pyperclip = None

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.logging import TextualHandler
from textual.reactive import reactive
from textual.widgets import Footer, Header

from config import Config, ConfigError
from models import AppDetail, AppState, LoadState
from services import AppLookupService
from ui import (AppHeader, DescriptionPane, LogPane, ScreenshotStrip,
                ScreenshotViewer, WhatsNewPane)
from viewmodel import AppDetailViewModel


class AppDetailApp(App):
    BINDINGS = [
        ("d", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
        ("c", "copy_artwork", "Copy Icon URL"),
    ]
    CSS = """
    #detail-scroll { height: 1fr; }
    AppHeader { height: auto; padding: 1 2; }
    WhatsNewPane, DescriptionPane { height: auto; padding: 0 1; }
    ScreenshotStrip { height: auto; padding: 0 2; }
    #screenshot-row { height: 5; }
    .screenshot { width: 40; margin-right: 2; }
    #log { height: 6; border-top: solid $primary; }
    #viewer { align: center middle; padding: 2 4; }
    #close-viewer { dock: top; }
    """

    app_state = reactive(AppState(), always_update=True, init=False)

    def __init__(self, view_model: AppDetailViewModel, config: Config):
        super().__init__()
        self.view_model = view_model
        self.config = config
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="detail-scroll"):
            yield AppHeader(id="app-header")
            yield WhatsNewPane(id="whats-new")
            yield ScreenshotStrip(id="screenshots")
            yield DescriptionPane(id="description")
        yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.view_model.subscribe(self.on_view_model_state)
        self.app_state = self.view_model.state
        self.view_model.load()

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        self.view_model.cancel()

    def on_view_model_state(self, state: AppState) -> None:
        self.app_state = state

    def watch_app_state(self, old_state: AppState, new_state: AppState) -> None:
        """Pushes state changes to child widgets and reports them in the log pane."""
        detail = new_state.detail
        self.query_one(AppHeader).update_details(detail)
        self.query_one(WhatsNewPane).update_details(detail)
        self.query_one(DescriptionPane).update_details(detail)
        if old_state.detail != detail:
            self.query_one(ScreenshotStrip).update_screenshots(detail.screenshot_urls if detail else ())
        if old_state.status != new_state.status:
            self.report_status(new_state)

    def report_status(self, state: AppState) -> None:
        log = self.query_one(LogPane)
        track_id = self.view_model.track_id
        if state.status is LoadState.LOADING:
            log.add_message(f"🔎 Fetching app detail for id {track_id}...")
        elif state.status is LoadState.LOADED:
            self.sub_title = state.detail.track_name
            log.add_message(f"[green]✅ Loaded '[b]{escape(state.detail.track_name)}[/b]'.[/green]")
        elif state.status is LoadState.FAILED:
            log.add_message(f"[red]❌ Failed fetching app detail for id {track_id}.[/red]")
            log.add_message(f"[dim]{escape(str(state.error.cause))}[/dim]")
        elif self.view_model.started:
            log.add_message(f"🤷 No app found for id {track_id}.")

    def on_screenshot_strip_screenshot_pressed(self, message: ScreenshotStrip.ScreenshotPressed) -> None:
        detail = self.app_state.detail
        if detail:
            self.push_screen(ScreenshotViewer(detail.screenshot_urls, message.index))

    def action_copy_artwork(self) -> None:
        log = self.query_one(LogPane)
        if not pyperclip:
            log.add_message("[red]❌ 'pyperclip' not installed.[/red]")
            return
        if self.app_state.detail:
            pyperclip.copy(self.app_state.detail.artwork_url)
            log.add_message(f"📋 Copied icon URL for '[b]{escape(self.app_state.detail.track_name)}[/b]'.")
        else:
            log.add_message("[yellow]⚠️ No app loaded yet.[/yellow]")


def format_detail(detail: AppDetail) -> str:
    """Renders a record as plain text for --print mode."""
    lines = [
        detail.track_name,
        f"by {detail.artist_name}",
        f"Icon: {detail.artwork_url}",
        "",
        "What's New",
        detail.release_notes,
        "",
        "Preview",
        *[f"  {url}" for url in detail.screenshot_urls],
        "",
        "Description",
        detail.description,
    ]
    return "\n".join(lines)


async def print_detail(view_model: AppDetailViewModel) -> int:
    state = await view_model.load()
    if state.status is LoadState.LOADED:
        print(format_detail(state.detail))
        return 0
    if state.status is LoadState.FAILED:
        print(f"Error: {state.error}", file=sys.stderr)
    else:
        print(f"No app found for id {view_model.track_id}.", file=sys.stderr)
    return 1


def parse_args(argv=None, config: Optional[Config] = None) -> argparse.Namespace:
    config = config or Config()
    parser = argparse.ArgumentParser(description="Show App Store details for an application.")
    parser.add_argument("track_id", nargs="?", type=int, default=config.DEFAULT_TRACK_ID,
                        help=f"The App Store application id (default: {config.DEFAULT_TRACK_ID}).")
    parser.add_argument("--print", dest="print_only", action="store_true",
                        help="Fetch once and print the details instead of starting the TUI.")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    try:
        app_config = Config.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    args = parse_args(argv, app_config)

    if args.print_only:
        logging.basicConfig(level=app_config.LOG_LEVEL, stream=sys.stderr,
                            format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=app_config.LOG_LEVEL, handlers=[TextualHandler()])

    lookup_service = AppLookupService(app_config.LOOKUP_URL, timeout=app_config.REQUEST_TIMEOUT)
    view_model = AppDetailViewModel(args.track_id, lookup_service)
    try:
        if args.print_only:
            return asyncio.run(print_detail(view_model))
        AppDetailApp(view_model, app_config).run()
        return 0
    finally:
        lookup_service.close()


if __name__ == "__main__":
    sys.exit(main())
