"""Terminal UI for browsing, adding and deleting words."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, ListItem, ListView, Static, TextArea

from . import config as config_mod
from .catalog import CatalogError, WordCatalog, toggle_tag
from .editor import EntryDraft
from .media import pick_image
from .models import Config, Entry
from .player import AudioPlayer
from .recorder import AudioRecorder
from .wordcloud import DEFAULT_WORDS, WordCloudClient, WordCloudPanel, WordCloudResult

APP_CSS = """
.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

.field-row {
    height: 3;
}

.field-input {
    width: 1fr;
}

#tag-bar {
    height: 3;
    overflow-x: auto;
}

#tag-bar Button {
    min-width: 8;
    margin: 0 1 0 0;
}

#detail {
    height: 8;
}

#button-container {
    height: 3;
    margin: 1 0 0 0;
    align: center middle;
}

Button {
    margin: 0 1;
}
"""


class WordListScreen(Screen):
    """Tag bar above the filtered list of words."""

    BINDINGS = [
        Binding("a", "add_word", "Add"),
        Binding("d", "delete_word", "Delete"),
        Binding("w", "wordcloud", "Word cloud"),
        Binding("q", "app.quit", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(id="tag-bar")
        yield ListView(id="word-list")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    @property
    def catalog(self) -> WordCatalog:
        return self.app.catalog  # type: ignore[attr-defined]

    def refresh_view(self) -> None:
        # A deleted entry can take the last use of a selected tag with it.
        self.app.selected_tags &= self.catalog.all_tags()  # type: ignore[attr-defined]
        selected: Set[str] = self.app.selected_tags  # type: ignore[attr-defined]

        tag_bar = self.query_one("#tag-bar", Horizontal)
        tag_bar.remove_children()
        tag_bar.mount_all(
            Button(
                Text(tag),
                name=tag,
                classes="tag",
                variant="primary" if tag in selected else "default",
            )
            for tag in sorted(self.catalog.all_tags())
        )

        list_view = self.query_one("#word-list", ListView)
        list_view.clear()
        list_view.extend(_entry_items(self.catalog.filtered_entries(selected)))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.has_class("tag") and event.button.name is not None:
            self.app.selected_tags = toggle_tag(self.app.selected_tags, event.button.name)  # type: ignore[attr-defined]
            self.refresh_view()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.item.name is None:
            return
        try:
            entry = self.catalog.get(event.item.name)
        except CatalogError as exc:
            logging.warning("Selected word is gone: %s", exc)
            return
        self.app.push_screen(WordDetailScreen(entry, self.app.player))  # type: ignore[attr-defined]

    def action_add_word(self) -> None:
        self.app.push_screen(
            AddWordScreen(self.catalog, self.app.recorder),  # type: ignore[attr-defined]
            callback=self._on_entry_saved,
        )

    def action_delete_word(self) -> None:
        item = self.query_one("#word-list", ListView).highlighted_child
        if item is None or item.name is None:
            return
        try:
            self.catalog.remove_entry(self.catalog.index_of(item.name))
        except CatalogError as exc:
            logging.warning("Failed to delete word: %s", exc)
            self.notify(str(exc), severity="warning")
            return
        self.refresh_view()

    def action_wordcloud(self) -> None:
        self.app.push_screen(
            WordCloudScreen(
                self.app.wordcloud_client,  # type: ignore[attr-defined]
                config_mod.wordcloud_output(self.app.user_config),  # type: ignore[attr-defined]
            )
        )

    def _on_entry_saved(self, entry: Optional[Entry]) -> None:
        if entry is None:
            return
        self.refresh_view()


def _entry_items(entries: Iterable[Entry]) -> List[ListItem]:
    items = []
    for entry in entries:
        marker = ("● ", "cyan") if entry.has_image else ("○ ", "grey50")
        items.append(ListItem(Label(Text.assemble(marker, entry.title)), name=entry.id))
    return items


class AddWordScreen(Screen[Optional[Entry]]):
    """Form for a new word.

    Saving appends the entry to the catalog and dismisses with it; cancelling
    dismisses with ``None``.
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, catalog: WordCatalog, recorder: AudioRecorder) -> None:
        super().__init__()
        self.draft = EntryDraft()
        self._catalog = catalog
        self._recorder = recorder

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="form"):
            yield Static("Word", classes="section-title")
            yield Input(placeholder="Enter a word", id="title")

            yield Static("Tags", classes="section-title")
            with Horizontal(classes="field-row"):
                yield Input(placeholder="Add a tag", id="new-tag", classes="field-input")
                yield Button("+", id="add-tag")
            yield Static("", id="tag-list")

            yield Static("Detail", classes="section-title")
            yield TextArea(id="detail")

            yield Static("Image", classes="section-title")
            with Horizontal(classes="field-row"):
                yield Input(placeholder="Path to an image", id="image-path", classes="field-input")
                yield Button("Select", id="select-image")
            yield Static("No image selected", id="image-status")

            yield Static("Voice recording", classes="section-title")
            with Horizontal(classes="field-row"):
                yield Button("Record", id="record")
                yield Static("Start recording", id="record-status")

            yield Static("Related URL", classes="section-title")
            yield Input(placeholder="https://", id="url")

            yield Static("Date", classes="section-title")
            yield Input(value=self.draft.date.isoformat(), placeholder="YYYY-MM-DD", id="date")

            with Horizontal(id="button-container"):
                yield Button("Save", variant="primary", id="save-button")
                yield Button("Cancel", variant="default", id="cancel-button")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "add-tag":
            self.add_tag()
        elif button_id == "select-image":
            self.select_image()
        elif button_id == "record":
            self.toggle_recording()
        elif button_id == "save-button":
            self.action_save()
        elif button_id == "cancel-button":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "new-tag":
            self.add_tag()
        elif event.input.id == "image-path":
            self.select_image()

    def add_tag(self) -> None:
        tag_input = self.query_one("#new-tag", Input)
        if self.draft.add_tag(tag_input.value):
            tag_input.value = ""
            self.query_one("#tag-list", Static).update(Text("  ".join(self.draft.tags), style="bold blue"))

    def select_image(self) -> None:
        raw = self.query_one("#image-path", Input).value.strip()
        self.draft.attach_image(pick_image(raw))
        status = self.query_one("#image-status", Static)
        if self.draft.image_ref is None:
            status.update("No image selected")
            if raw:
                self.notify(f"Could not open image {raw}", severity="warning")
        else:
            status.update(Text(f"Image: {Path(self.draft.image_ref).name}"))

    def toggle_recording(self) -> None:
        button = self.query_one("#record", Button)
        status = self.query_one("#record-status", Static)
        if self._recorder.is_recording:
            path = self._recorder.stop()
            button.label = "Record"
            if path is None:
                status.update("Start recording")
                return
            self.draft.attach_recording(path)
            status.update(Text(f"Recording saved: {path.name}"))
            return

        if self._recorder.start() is None:
            status.update("Start recording")
            return
        button.label = "Stop"
        status.update("Recording...")

    def action_save(self) -> None:
        if self._recorder.is_recording:
            path = self._recorder.stop()
            if path is not None:
                self.draft.attach_recording(path)

        raw_date = self.query_one("#date", Input).value.strip()
        try:
            self.draft.date = datetime.date.fromisoformat(raw_date) if raw_date else datetime.date.today()
        except ValueError:
            self.notify(f"Invalid date: {raw_date}", severity="error")
            return

        self.draft.title = self.query_one("#title", Input).value
        self.draft.detail = self.query_one("#detail", TextArea).text
        self.draft.link_url = self.query_one("#url", Input).value
        self.dismiss(self.draft.save_to(self._catalog))

    def action_cancel(self) -> None:
        if self._recorder.is_recording:
            self._recorder.stop()
        self.dismiss(None)


class WordDetailScreen(Screen):
    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back"),
        Binding("p", "play", "Play"),
    ]

    def __init__(self, entry: Entry, player: AudioPlayer) -> None:
        super().__init__()
        self.entry = entry
        self._player = player

    def compose(self) -> ComposeResult:
        entry = self.entry
        yield Header()
        with VerticalScroll():
            yield Static(Text(f"Title: {entry.title}", style="bold"))
            yield Static(Text(f"Detail: {entry.detail}"))
            if entry.tags:
                yield Static(Text("Tags: " + ", ".join(entry.tags)))
            if entry.has_image:
                yield Static(Text(f"Image: {entry.image_ref}"))
            if entry.has_audio:
                yield Button("Play recording", id="play-button")
            if entry.has_link:
                yield Static(Text(f"Related URL: {entry.link_url}"))
            yield Static(Text(f"Date: {entry.date.isoformat()}"))
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "play-button":
            self.action_play()

    def action_play(self) -> None:
        if not self.entry.has_audio:
            return
        if not self._player.play(self.entry.audio_ref):
            self.notify("Could not play the recording.", severity="warning")

    def on_unmount(self) -> None:
        self._player.stop()


class WordCloudScreen(Screen):
    BINDINGS = [
        Binding("escape", "app.pop_screen", "Back"),
        Binding("g", "generate", "Generate"),
    ]

    def __init__(self, client: WordCloudClient, output: Path) -> None:
        super().__init__()
        self.panel = WordCloudPanel()
        self._client = client
        self._output = output

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Word Cloud Generator", classes="section-title")
        yield Static("No image generated", id="wordcloud-status")
        yield Button("Generate Word Cloud", variant="primary", id="generate-button")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "generate-button":
            self.action_generate()

    def action_generate(self) -> None:
        self._client.generate_in_background(DEFAULT_WORDS, self._on_result, dispatch=self.app.call_from_thread)

    def _on_result(self, result: WordCloudResult) -> None:
        if not self.panel.apply(result) or self.panel.image is None:
            return
        image = self.panel.image
        try:
            self._output.parent.mkdir(parents=True, exist_ok=True)
            image.save(self._output, format="PNG")
            message = f"Word cloud {image.width}x{image.height} saved to {self._output}"
        except OSError as exc:
            logging.warning("Failed to save word cloud: %s", exc)
            message = f"Word cloud {image.width}x{image.height} generated"
        try:
            self.query_one("#wordcloud-status", Static).update(Text(message))
        except NoMatches:
            logging.debug("Word cloud screen closed before the result arrived.")


class WordListApp(App):
    TITLE = "Word List"
    CSS = APP_CSS

    def __init__(self, config: Optional[Config] = None, catalog: Optional[WordCatalog] = None) -> None:
        super().__init__()
        self.user_config = config or config_mod.load_config()
        self.catalog = catalog if catalog is not None else WordCatalog()
        self.selected_tags: Set[str] = set()
        self.recorder = AudioRecorder(
            config_mod.recordings_dir(self.user_config),
            samplerate=self.user_config.sample_rate,
            channels=self.user_config.channels,
        )
        self.player = AudioPlayer()
        self.wordcloud_client = WordCloudClient(
            self.user_config.wordcloud_url,
            timeout=self.user_config.api_timeout,
            verify=self.user_config.verify_ssl,
        )

    def on_mount(self) -> None:
        self.push_screen(WordListScreen())


def run_app() -> None:  # pragma: no cover - interactive
    app = WordListApp()
    app.run()
