"""Command-line interface using Typer."""

import asyncio
import base64
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional, TypeVar

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from contentforge import __version__
from contentforge.client.api import ApiError, ContentForgeClient
from contentforge.client.polling import (
    LoopState,
    ModalityFlow,
    Notice,
    PollingLoop,
    PollState,
    avatar_flow,
    video_flow,
)
from contentforge.config import settings
from contentforge.domain.models import JobHandle
from contentforge.logging import setup_logging

# Setup logging
setup_logging()

app = typer.Typer(
    name="contentforge",
    help="ContentForge - AI content generation CLI",
    add_completion=False,
)

# Subcommand groups
generate_app = typer.Typer(help="Generate content through the API")
poll_app = typer.Typer(help="Re-attach to a running video or avatar job")
app.add_typer(generate_app, name="generate")
app.add_typer(poll_app, name="poll")

console = Console()

T = TypeVar("T")

NOTICE_STYLES = {
    "info": "blue",
    "success": "bold green",
    "warning": "yellow",
    "error": "bold red",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ContentForge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """ContentForge - Generate text, images, voice, video and avatars."""
    pass


def _run_with_client(
    token: Optional[str],
    action: Callable[[ContentForgeClient], Awaitable[T]],
) -> T:
    """Run an async action against the API, mapping failures to exit codes."""

    async def runner() -> T:
        async with httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.provider_timeout_seconds,
        ) as http_client:
            return await action(ContentForgeClient(http_client, token or settings.api_token))

    try:
        return asyncio.run(runner())
    except ApiError as e:
        console.print(f"[bold red]✗ {e.message}[/bold red] [dim]({e.code.value})[/dim]")
        if e.details:
            console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        console.print(f"[bold red]Cannot connect to API: {e}[/bold red]")
        console.print("[dim]Is the API server running?[/dim]")
        raise typer.Exit(code=1)


def _print_notice(notice: Notice) -> None:
    style = NOTICE_STYLES.get(notice.level, "white")
    console.print(f"[{style}]{notice.message}[/{style}]")


async def _drive_loop(flow: ModalityFlow, handle: JobHandle | None = None) -> PollState:
    """Submit (or attach to) a job and render its progress until it settles."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TextColumn("[dim]{task.fields[status]}"),
        console=console,
    ) as progress:
        task_id = progress.add_task(flow.label, total=100, status="submitting")

        def on_change(state: PollState) -> None:
            status = state.status.value if state.status else state.state.value
            progress.update(
                task_id,
                completed=state.progress,
                status=f"{status} (attempt {state.attempts}/{flow.policy.max_attempts})",
            )

        loop = PollingLoop(flow, on_notice=_print_notice, on_change=on_change)
        if handle is None:
            await loop.submit()
            if loop.state.job is not None:
                console.print(
                    f"[dim]Job: {loop.state.job.job_id} "
                    f"(generation {loop.state.job.generation_id})[/dim]"
                )
        else:
            loop.attach(handle)
        return await loop.wait()


def _report_job(state: PollState, command: str) -> None:
    if state.state is LoopState.COMPLETED:
        console.print(Panel.fit(f"[green]{state.artifact_url}[/green]", title="Result"))
        return
    console.print(f"[bold red]✗ {state.error or 'Generation did not finish'}[/bold red]")
    if state.job is not None:
        resume = f"contentforge poll {command} {state.job.job_id}"
        if state.job.generation_id:
            resume += f" -g {state.job.generation_id}"
        console.print(f"[dim]Resume later with: {resume}[/dim]")
    raise typer.Exit(code=1)


TokenOption = typer.Option(None, "--token", help="Bearer token (defaults to API_TOKEN)")
ProjectOption = typer.Option(None, "--project", "-p", help="Project ID to file the content under")


# =============================================================================
# Generate commands
# =============================================================================


@generate_app.command("text")
def generate_text(
    prompt: str = typer.Argument(..., help="What to write about"),
    content_type: str = typer.Option("POST", "--type", "-t", help="POST, STORY, REEL, VIDEO or BLOG"),
    tone: str = typer.Option("professional", "--tone", help="Writing tone"),
    length: str = typer.Option("medium", "--length", "-l", help="short, medium or long"),
    content_id: Optional[str] = typer.Option(None, "--content", help="Add a version to existing content"),
    project: Optional[str] = ProjectOption,
    token: Optional[str] = TokenOption,
) -> None:
    """Generate written content."""
    body: dict[str, Any] = {
        "prompt": prompt,
        "contentType": content_type,
        "tone": tone,
        "length": length,
        "projectId": project,
        "contentId": content_id,
    }
    data = _run_with_client(token, lambda c: c.generate_text(**body))

    console.print(Panel(data["result"], title=f"{content_type} · {data['tokensUsed']} tokens"))
    console.print(f"[dim]Content: {data['contentId']}  Cost: ${data['cost']:.4f}[/dim]")


@generate_app.command("image")
def generate_image(
    prompt: str = typer.Argument(..., help="Image description"),
    size: str = typer.Option("1024x1024", "--size", help="1024x1024, 1792x1024 or 1024x1792"),
    quality: str = typer.Option("standard", "--quality", help="standard or hd"),
    style: str = typer.Option("vivid", "--style", help="vivid or natural"),
    project: Optional[str] = ProjectOption,
    token: Optional[str] = TokenOption,
) -> None:
    """Generate an image."""
    body = {"prompt": prompt, "size": size, "quality": quality, "style": style, "projectId": project}
    console.print("[bold blue]Generating image...[/bold blue]")
    data = _run_with_client(token, lambda c: c.generate_image(**body))

    console.print(f"[green]{data['imageUrl']}[/green]")
    console.print(f"[dim]Revised prompt: {data['revisedPrompt']}[/dim]")
    console.print(f"[dim]Cost: ${data['cost']:.2f}[/dim]")


@generate_app.command("voice")
def generate_voice(
    text: str = typer.Argument(..., help="Text to speak"),
    voice_id: str = typer.Option("21m00Tcm4TlvDq8ikWAM", "--voice", help="Voice ID"),
    model_id: Optional[str] = typer.Option(None, "--model", help="Voice model ID"),
    output: Path = typer.Option(Path("voice.mp3"), "--output", "-o", help="Where to write the audio"),
    project: Optional[str] = ProjectOption,
    token: Optional[str] = TokenOption,
) -> None:
    """Synthesize speech and save it as MP3."""
    body = {"text": text, "voiceId": voice_id, "modelId": model_id, "projectId": project}
    console.print("[bold blue]Generating voice...[/bold blue]")
    data = _run_with_client(token, lambda c: c.generate_voice(**body))

    output.write_bytes(base64.b64decode(data["audioBase64"]))
    console.print(f"[green]Saved {output} (~{data['durationSeconds']}s)[/green]")
    console.print(f"[dim]Cost: ${data['cost']:.4f}[/dim]")


@generate_app.command("video")
def generate_video(
    prompt: str = typer.Argument(..., help="Video description"),
    model: str = typer.Option("gen3a_turbo", "--model", help="gen3a_turbo or gen4_turbo"),
    ratio: str = typer.Option("1280:720", "--ratio", help="Aspect ratio"),
    duration: int = typer.Option(5, "--duration", "-d", help="5 or 10 seconds"),
    project: Optional[str] = ProjectOption,
    token: Optional[str] = TokenOption,
) -> None:
    """Submit a video job and wait for it."""
    body = {"prompt": prompt, "model": model, "ratio": ratio, "duration": duration, "projectId": project}
    state = _run_with_client(token, lambda c: _drive_loop(video_flow(c, body)))
    _report_job(state, "video")


@generate_app.command("avatar")
def generate_avatar(
    text: str = typer.Argument(..., help="Script for the avatar"),
    avatar_id: str = typer.Option("Anna_public_3_20240108", "--avatar", help="Avatar ID"),
    voice_id: str = typer.Option(..., "--voice", help="Voice ID"),
    dimension: str = typer.Option("16:9", "--dimension", help="16:9, 9:16 or 1:1"),
    project: Optional[str] = ProjectOption,
    token: Optional[str] = TokenOption,
) -> None:
    """Submit an avatar render and wait for it."""
    body = {
        "text": text,
        "avatarId": avatar_id,
        "voiceId": voice_id,
        "dimension": dimension,
        "projectId": project,
    }
    state = _run_with_client(token, lambda c: _drive_loop(avatar_flow(c, body)))
    _report_job(state, "avatar")


# =============================================================================
# Poll commands
# =============================================================================


@poll_app.command("video")
def poll_video(
    task_id: str = typer.Argument(..., help="Runway task ID"),
    generation_id: Optional[str] = typer.Option(None, "--generation", "-g", help="Generation to update"),
    token: Optional[str] = TokenOption,
) -> None:
    """Resume polling a video job."""
    handle = JobHandle(job_id=task_id, generation_id=generation_id)
    state = _run_with_client(token, lambda c: _drive_loop(video_flow(c), handle))
    _report_job(state, "video")


@poll_app.command("avatar")
def poll_avatar(
    video_id: str = typer.Argument(..., help="HeyGen video ID"),
    generation_id: Optional[str] = typer.Option(None, "--generation", "-g", help="Generation to update"),
    token: Optional[str] = TokenOption,
) -> None:
    """Resume polling an avatar job."""
    handle = JobHandle(job_id=video_id, generation_id=generation_id)
    state = _run_with_client(token, lambda c: _drive_loop(avatar_flow(c), handle))
    _report_job(state, "avatar")


# =============================================================================
# Library commands
# =============================================================================


@app.command()
def stats(token: Optional[str] = TokenOption) -> None:
    """Show library totals and recent content."""
    data = _run_with_client(token, lambda c: c.get_dashboard_stats())

    console.print(
        f"[bold]Content:[/bold] {data['contentCount']}  "
        f"[bold]Projects:[/bold] {data['projectCount']}  "
        f"[bold]Generations:[/bold] {data['generationCount']}  "
        f"[bold]Spend:[/bold] ${data['totalCost']:.2f}"
    )

    table = Table(title="Recent content")
    table.add_column("Title", style="cyan")
    table.add_column("Type")
    table.add_column("Latest", style="green")
    table.add_column("Versions", justify="right")
    for item in data["recent"]:
        table.add_row(item["title"], item["type"], item.get("latestKind") or "-", str(item["generationCount"]))
    console.print(table)


# =============================================================================
# Server commands
# =============================================================================


@app.command()
def health() -> None:
    """Check API health."""
    try:
        response = httpx.get(f"{settings.api_base_url}/health", timeout=10)
        data = response.json()

        table = Table(title="Providers")
        table.add_column("Modality", style="cyan")
        table.add_column("Provider", style="green")
        for modality, provider in (data.get("providers") or {}).items():
            table.add_row(modality, provider)

        console.print(f"[bold]API:[/bold] {data.get('status')} (v{data.get('version')})")
        console.print(table)
    except httpx.HTTPError as e:
        console.print(f"[bold red]Cannot connect to API: {e}[/bold red]")
        console.print("[dim]Is the API server running?[/dim]")
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.api_port, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(settings.api_reload, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print(f"[bold blue]Starting API server on {host}:{port}...[/bold blue]")
    uvicorn.run("contentforge.main:app", host=host, port=port, reload=reload)


@app.command("init-db")
def init_database() -> None:
    """Create database tables (development only, use Alembic in production)."""
    from contentforge.db.session import init_db

    init_db()
    console.print("[green]Database tables created[/green]")


if __name__ == "__main__":
    app()
