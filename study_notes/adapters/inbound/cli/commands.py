"""CLI interface for AI Study Notes."""

import json
import mimetypes
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ....config.settings import settings
from ....core.domain import ContentEvent, ErrorEvent, SourcesEvent
from ....core.domain.utils import chunk_text
from ...common.debug import OPENROUTER_KEY_PREFIX, credential_status
from ...common.exception_handler import format_exception_json

app = typer.Typer(
    name="study-notes",
    help="AI Study Notes - turn course documents into study notes and chat with them",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)

DEBUG_MODE = settings.debug

EXTENSION_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".ppt": "application/vnd.ms-powerpoint",
    ".doc": "application/msword",
    ".txt": "text/plain",
}


def handle_cli_error(exc: Exception) -> None:
    """Handle and display errors in CLI with structured format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
    else:
        error_type = error_data["error"]["type"]
        error_msg = error_data["error"]["message"]
        error_code = error_data["error"].get("code", "UNKNOWN")
        location = error_data.get("location", {})

        console.print(f"\n[red]Error [{error_code}]:[/] {error_msg}")
        console.print(f"[dim]Type: {error_type}[/]")

        if location:
            loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
            console.print(f"[dim]Location: {loc_str}[/]")

        console.print("[dim]Set DEBUG=true for full details[/]")


def guess_content_type(path: Path) -> str:
    """MIME type from the file extension."""
    suffix = path.suffix.lower()
    if suffix in EXTENSION_TYPES:
        return EXTENSION_TYPES[suffix]
    return mimetypes.guess_type(path.name)[0] or ""


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    console.print(f"[bold]AI Study Notes API[/] on http://{host}:{port} (docs at /docs)")
    uvicorn.run(
        "study_notes.adapters.inbound.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def extract(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document to extract"),
    content_type: str | None = typer.Option(None, "--content-type", help="Override the MIME type"),
    show: int = typer.Option(500, help="Characters of text to preview"),
) -> None:
    """Extract text from a document and show how it would be chunked."""
    from ....composition.container import get_text_extractor

    mime = content_type or guess_content_type(file)
    try:
        text = get_text_extractor().extract(file.read_bytes(), mime, file.name)
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    chunks = chunk_text(text, settings.chunk_size, settings.chunk_overlap)

    table = Table(show_header=False, box=None)
    table.add_row("File", file.name)
    table.add_row("Type", mime or "[dim]unknown[/]")
    table.add_row("Characters", str(len(text)))
    table.add_row("Chunks", f"{len(chunks)} (size {settings.chunk_size}, overlap {settings.chunk_overlap})")
    console.print(table)

    preview = text[:show] + ("..." if len(text) > show else "")
    console.print(Panel(preview or "[dim](empty)[/]", title="[bold]Extracted text[/]", border_style="blue"))


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to ask"),
    context_file: Path | None = typer.Option(
        None, "--context-file", exists=True, dir_okay=False, help="Text file to use as context"
    ),
) -> None:
    """Stream an answer from the chat model, optionally grounded in a text file."""
    from ....composition.container import get_chat_streamer

    context = ""
    sources: list[str] = []
    if context_file is not None:
        context = context_file.read_text(encoding="utf-8", errors="replace")
        sources = [context_file.name]

    failed = False
    try:
        for event in get_chat_streamer().stream_answer(question, context, sources):
            if isinstance(event, ContentEvent):
                console.print(event.content, end="", markup=False, highlight=False)
            elif isinstance(event, ErrorEvent):
                console.print(f"\n[red]{event.error}[/]")
                failed = True
            elif isinstance(event, SourcesEvent) and event.sources:
                console.print("\n\n[dim]Sources:[/]")
                for source in event.sources:
                    console.print(f"  [dim]{source}[/]")
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print()
    if failed:
        raise typer.Exit(1)


@app.command("check-config")
def check_config(
    live: bool = typer.Option(False, "--live", help="Also send one test completion to OpenRouter"),
) -> None:
    """Show which credentials are configured (values masked)."""
    console.print("[bold]AI Study Notes Configuration[/]\n")

    openrouter = credential_status(settings.openrouter_api_key, OPENROUTER_KEY_PREFIX)
    if openrouter["exists"]:
        console.print(f"[green]OK[/] OpenRouter API key: {openrouter['preview']} ({openrouter['length']} chars)")
        if not openrouter["starts_with_expected_prefix"]:
            console.print(f"  [yellow]Key does not start with '{OPENROUTER_KEY_PREFIX}'[/]")
    else:
        console.print("[red]MISSING[/] OpenRouter API key (set OPENROUTER_API_KEY in .env)")

    openai = credential_status(settings.effective_openai_api_key)
    if openai["exists"]:
        console.print(f"[green]OK[/] OpenAI API key: {openai['preview']}")
    else:
        console.print("[yellow]FALLBACK[/] OpenAI API key not set; embeddings are synthetic")

    if settings.backend_configured:
        console.print(f"[green]OK[/] Supabase: {settings.supabase_url}")
    else:
        console.print("[red]MISSING[/] Supabase (set SUPABASE_URL and SUPABASE_ANON_KEY in .env)")

    if live:
        from ....composition.container import get_llm

        try:
            result = get_llm().check_key()
        except Exception as exc:
            handle_cli_error(exc)
            raise typer.Exit(1)

        style = "green" if result["ok"] else "red"
        console.print(f"\n[{style}]OpenRouter test request: {result['status']} {result['status_text']}[/]")
        console.print(result["response"], markup=False, highlight=False)
        if not result["ok"]:
            raise typer.Exit(1)


if __name__ == "__main__":
    app()
