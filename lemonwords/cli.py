"""Command line interface for the lemonwords application."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

import typer

from . import __version__
from . import config as config_mod
from .config import ConfigError
from .player import AudioPlayer
from .recorder import AudioRecorder
from .wordcloud import DEFAULT_WORDS, WordCloudClient, WordCloudError

app = typer.Typer(add_completion=False, help="Word notes with tags, recordings and word clouds.")


def _parse_words(raw: List[str]) -> Dict[str, int]:
    words: Dict[str, int] = {}
    for item in raw:
        name, sep, score = item.rpartition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected NAME=SCORE, got {item!r}.", param_hint="--word")
        try:
            words[name] = int(score)
        except ValueError as exc:
            raise typer.BadParameter(f"Score for {name!r} must be an integer.", param_hint="--word") from exc
    return words


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if version:
        typer.echo(f"lemonwords v{__version__}")
        raise typer.Exit()

    try:
        cfg = config_mod.load_config()
    except ConfigError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    config_mod.configure_logging(cfg, verbose=verbose)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def browse() -> None:  # pragma: no cover - interactive
    """Open the word list in the terminal UI."""

    from .app import run_app

    run_app()


@app.command()
def wordcloud(
    word: List[str] = typer.Option([], "--word", "-w", help="Word score as NAME=SCORE. Repeatable."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write the image."),
    server_url: Optional[str] = typer.Option(None, "--server-url", help="Override the word cloud service URL."),
) -> None:
    """Render a word cloud through the remote service."""

    cfg = config_mod.load_config()
    words = _parse_words(word) if word else dict(DEFAULT_WORDS)
    destination = output or config_mod.wordcloud_output(cfg)

    client = WordCloudClient(
        server_url or cfg.wordcloud_url,
        timeout=cfg.api_timeout,
        verify=cfg.verify_ssl,
    )
    try:
        image = client.generate(words)
    except WordCloudError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        image.save(destination, format="PNG")
    except OSError as exc:
        typer.secho(f"Failed to write {destination}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.secho(f"Word cloud saved to {destination} ({image.width}x{image.height}).", fg=typer.colors.GREEN)


@app.command()
def record() -> None:  # pragma: no cover - interactive
    """Record from the microphone until Enter is pressed."""

    cfg = config_mod.load_config()
    recorder = AudioRecorder(
        config_mod.recordings_dir(cfg),
        samplerate=cfg.sample_rate,
        channels=cfg.channels,
    )
    if recorder.start() is None:
        typer.secho("Could not start recording.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.prompt("Recording... press Enter to stop", default="", show_default=False)
    path = recorder.stop()
    if path is None:
        typer.secho("No audio was captured.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"Recording saved to {path}", fg=typer.colors.BLUE)


@app.command()
def play(locator: str = typer.Argument(..., help="Path or file:// URL of the recording.")) -> None:
    """Play a recorded audio file."""

    player = AudioPlayer()
    if not player.play(locator):
        typer.secho(f"Failed to play {locator}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    player.wait()


@app.command()
def config(
    wordcloud_url: Optional[str] = typer.Option(None, help="Base URL of the word cloud service."),
    api_timeout: Optional[float] = typer.Option(None, help="HTTP timeout (seconds) for the word cloud service."),
    verify_ssl: Optional[bool] = typer.Option(
        None,
        "--verify-ssl/--no-verify-ssl",
        help="Toggle TLS certificate verification for API calls.",
    ),
    recordings_dir: Optional[str] = typer.Option(None, help="Directory holding the recording file."),
    sample_rate: Optional[int] = typer.Option(None, help="Recording sample rate in Hz."),
    channels: Optional[int] = typer.Option(None, help="Number of recording channels."),
    wordcloud_output: Optional[str] = typer.Option(None, help="Where generated word clouds are written."),
    log_level: Optional[str] = typer.Option(None, help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
    show: bool = typer.Option(False, "--show", help="Display the active configuration."),
) -> None:
    """Update or inspect configuration settings."""

    updates: Dict[str, object] = {
        key: value
        for key, value in {
            "wordcloud_url": wordcloud_url,
            "api_timeout": api_timeout,
            "verify_ssl": verify_ssl,
            "recordings_dir": recordings_dir,
            "sample_rate": sample_rate,
            "channels": channels,
            "wordcloud_output": wordcloud_output,
            "log_level": log_level,
        }.items()
        if value is not None
    }

    if show or not updates:
        cfg = config_mod.load_config()
        typer.echo(json.dumps(asdict(cfg), indent=2, default=str))
        return

    try:
        config_mod.update_config(**updates)
    except ConfigError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.secho("Configuration updated.", fg=typer.colors.BLUE)


if __name__ == "__main__":  # pragma: no cover
    app()
