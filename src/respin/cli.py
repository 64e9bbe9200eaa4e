"""CLI commands for respin."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from respin.config import (
    RespinConfig,
    load_config,
    load_env_files,
    missing_credentials,
    redacted,
    set_config_value,
)
from respin.errors import ConfigurationError, StageError
from respin.models import AnalysisResult, FileSource, UrlSource

app = typer.Typer(
    name="respin",
    help="Transcribe a video and rewrite it into a fresh short-form script.",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage configuration.")
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _get_config() -> RespinConfig:
    load_env_files()
    try:
        return load_config()
    except ConfigurationError as e:
        raise _fail(str(e)) from e


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(1)


def _apply_options(
    config: RespinConfig,
    output: str | None,
    language: str | None,
    mode: str | None,
    text_only: bool | None,
) -> RespinConfig:
    general = config.general
    if output:
        general = replace(general, output_dir=output)
    if language:
        general = replace(general, language=language)
    supadata = config.supadata
    if mode:
        supadata = replace(supadata, mode=mode)
    if text_only is not None:
        supadata = replace(supadata, text_only=text_only)
    return replace(config, general=general, supadata=supadata)


def _print_test_mode(
    source: UrlSource | FileSource,
    config: RespinConfig,
    rewrite: bool,
    describe: bool,
) -> None:
    console.print("[bold]=== TEST MODE ===[/bold]")
    console.print(f"Source ({source.kind}): {source.describe()}", markup=False)
    if isinstance(source, FileSource):
        console.print(
            f"Audio extraction needed: {source.needs_audio_extraction}"
        )
        console.print(
            f"Visual description: {describe and source.video_path is not None}"
        )
    console.print(f"Rewrite enabled: {rewrite}")
    console.print()

    for name, values in redacted(config).items():
        console.print(f"[bold cyan]{escape(f'[{name}]')}[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key} = {value}", markup=False)
        console.print()

    missing = missing_credentials(
        config, source, rewrite=rewrite, describe=describe
    )
    if missing:
        console.print(
            f"[yellow]A full run would need: {', '.join(missing)}[/yellow]"
        )
    console.print("[green]Test completed successfully.[/green]")


def _show_transcript(transcript: str) -> None:
    console.print("\n[bold]Transcript[/bold]")
    console.print(transcript, markup=False)


def _show_result(result: AnalysisResult) -> None:
    if result.visual_description:
        console.print("\n[bold]Visual description[/bold]")
        console.print(result.visual_description, markup=False)
    if result.topic_suggestion:
        console.print("\n[bold]Topic suggestion[/bold]")
        console.print(result.topic_suggestion, markup=False)
    content = result.rewritten_content
    if content is not None:
        for title, text in (
            ("Caption", content.caption),
            ("Script", content.script),
            ("Overlay", content.overlay),
        ):
            console.print(f"\n[bold]{title}[/bold]")
            console.print(text, markup=False)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Transcribe a video and rewrite it into a fresh short-form script."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def analyze(
    source: Annotated[
        str, typer.Argument(help="Video URL, or path to a video/audio file")
    ],
    audio: Annotated[
        str | None,
        typer.Argument(help="Audio file to use instead of the video's track"),
    ] = None,
    rewrite: Annotated[
        bool,
        typer.Option("--rewrite", help="Suggest a new topic and rewrite the script"),
    ] = False,
    test: Annotated[
        bool,
        typer.Option("--test", help="Check configuration without calling any API"),
    ] = False,
    vision: Annotated[
        bool,
        typer.Option(
            "--vision/--no-vision",
            help="Describe a frame of the video (video files only)",
        ),
    ] = True,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output directory")
    ] = None,
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Transcript language code"),
    ] = None,
    mode: Annotated[
        str | None,
        typer.Option("--mode", help="Transcription mode: auto, native, generate"),
    ] = None,
    text_only: Annotated[
        bool | None,
        typer.Option(
            "--text-only/--timed",
            help="Ask the URL service for plain text or timed chunks",
        ),
    ] = None,
) -> None:
    """Transcribe a video and optionally rewrite it."""
    from respin.output.files import save_result
    from respin.pipeline import run_pipeline
    from respin.sources import resolve_source

    config = _apply_options(_get_config(), output, language, mode, text_only)

    try:
        resolved = resolve_source(source, audio)
    except ConfigurationError as e:
        raise _fail(str(e)) from e

    logger.debug("Resolved source: %s", resolved)

    if test:
        _print_test_mode(resolved, config, rewrite, vision)
        return

    missing = missing_credentials(
        config, resolved, rewrite=rewrite, describe=vision
    )
    if missing:
        raise _fail(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    console.print(f"[bold]Analyzing {escape(resolved.describe())}...[/bold]")
    transcript_seen = False

    def on_transcript(text: str) -> None:
        nonlocal transcript_seen
        transcript_seen = True
        _show_transcript(text)

    try:
        result = run_pipeline(
            resolved,
            config,
            rewrite=rewrite,
            describe=vision,
            on_transcript=on_transcript,
        )
    except StageError as e:
        if transcript_seen:
            err_console.print(
                "[yellow]The transcript above was acquired before the "
                "failure and has not been saved.[/yellow]"
            )
        raise _fail(str(e)) from e

    _show_result(result)

    saved = save_result(result, Path(config.general.output_dir).expanduser())
    console.print(f"\n[green]Results saved to {saved.result_json}[/green]")
    console.print(f"[green]Transcript saved to {saved.transcript_text}[/green]")
    if saved.oral_script is not None:
        console.print(f"[green]Oral script saved to {saved.oral_script}[/green]")
        console.print(f"[green]Script saved to {saved.script}[/green]")
        console.print(f"[green]Caption saved to {saved.caption}[/green]")
        console.print(f"[green]Overlay saved to {saved.overlay}[/green]")


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = _get_config()
    console.print("[bold]Current Configuration[/bold]\n")

    for name, values in redacted(config).items():
        console.print(f"[bold cyan]{escape(f'[{name}]')}[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key} = {value}", markup=False)
        console.print()


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Config key (e.g., supadata.mode)")],
    value: Annotated[str, typer.Argument(help="Value to set")],
) -> None:
    """Set a configuration value."""
    try:
        set_config_value(key, value)
        console.print(f"[green]Set {key} = {value}[/green]")
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
