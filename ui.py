# ui.py
from typing import Optional, Sequence

try:
    import pyperclip
except ImportError:
    pyperclip = None

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import HorizontalScroll, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Label, Markdown, RichLog, Static

from models import AppDetail


class AppHeader(Static):
    """Widget for the icon, title and artist of the app."""
    def compose(self) -> ComposeResult:
        yield Label("", id="artwork-url")
        yield Label("", id="track-name")
        yield Label("", id="artist-name")

    def update_details(self, detail: Optional[AppDetail]) -> None:
        if detail:
            self.query_one("#artwork-url", Label).update(f"🖼  {escape(detail.artwork_url)}")
            self.query_one("#track-name", Label).update(f"[b]{escape(detail.track_name)}[/b]")
            self.query_one("#artist-name", Label).update(escape(detail.artist_name))
        else:
            self.query_one("#artwork-url", Label).update("")
            self.query_one("#track-name", Label).update("[dim]Loading app details...[/dim]")
            self.query_one("#artist-name", Label).update("")


class WhatsNewPane(Static):
    """Widget to display the release notes."""
    def compose(self) -> ComposeResult:
        yield Markdown()

    def on_mount(self) -> None:
        self.update_details(None)

    def update_details(self, detail: Optional[AppDetail]) -> None:
        notes = detail.release_notes if detail else "*Nothing to show yet.*"
        self.query_one(Markdown).update(f"## What's New\n\n{notes}")


class DescriptionPane(Static):
    def compose(self) -> ComposeResult:
        yield Markdown()

    def on_mount(self) -> None:
        self.update_details(None)

    def update_details(self, detail: Optional[AppDetail]) -> None:
        text = detail.description if detail else "*Nothing to show yet.*"
        self.query_one(Markdown).update(f"## Description\n\n{text}")


class ScreenshotStrip(Static):
    """Horizontally scrollable row of screenshots; pressing one opens the viewer."""
    class ScreenshotPressed(Message):
        def __init__(self, index: int) -> None:
            self.index = index
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("[b]Preview[/b]")
        yield HorizontalScroll(id="screenshot-row")

    def update_screenshots(self, urls: Sequence[str]) -> None:
        row = self.query_one("#screenshot-row", HorizontalScroll)
        row.remove_children()
        if urls:
            row.mount(*[Button(escape(url), name=str(i), classes="screenshot") for i, url in enumerate(urls)])

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.has_class("screenshot"):
            event.stop()
            self.post_message(self.ScreenshotPressed(int(event.button.name)))


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)


class ScreenshotViewer(ModalScreen):
    """Full-screen viewer that pages through the screenshot URLs."""
    BINDINGS = [
        ("escape", "dismiss_viewer", "Close"),
        ("left", "previous", "Previous"),
        ("right", "next", "Next"),
        ("c", "copy_url", "Copy URL"),
    ]

    def __init__(self, screenshot_urls: Sequence[str], index: int = 0) -> None:
        super().__init__()
        self.screenshot_urls = list(screenshot_urls)
        self.position = index if 0 <= index < len(self.screenshot_urls) else 0

    @property
    def current_url(self) -> Optional[str]:
        return self.screenshot_urls[self.position] if self.screenshot_urls else None

    def compose(self) -> ComposeResult:
        with Vertical(id="viewer"):
            yield Button("✕", id="close-viewer")
            yield Label("", id="viewer-position")
            yield Label("", id="viewer-url")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        if self.current_url is None:
            self.query_one("#viewer-position", Label).update("No screenshots.")
            self.query_one("#viewer-url", Label).update("")
            return
        self.query_one("#viewer-position", Label).update(f"{self.position + 1} / {len(self.screenshot_urls)}")
        self.query_one("#viewer-url", Label).update(escape(self.current_url))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close-viewer":
            self.dismiss()

    def action_dismiss_viewer(self) -> None:
        self.dismiss()

    def action_previous(self) -> None:
        if self.screenshot_urls:
            self.position = (self.position - 1) % len(self.screenshot_urls)
            self.refresh_view()

    def action_next(self) -> None:
        if self.screenshot_urls:
            self.position = (self.position + 1) % len(self.screenshot_urls)
            self.refresh_view()

    def action_copy_url(self) -> None:
        if not pyperclip:
            self.notify("'pyperclip' not installed.", severity="error")
            return
        if self.current_url:
            pyperclip.copy(self.current_url)
            self.notify("Copied screenshot URL.")
