"""Typer CLI for Nightshift."""

import asyncio
from pathlib import Path

import logfire
import typer
from dotenv import load_dotenv

from .chat import run_chat_session
from .config import get_data_dir
from .design_doc import (
    DesignDocInterview,
    SectionContentAdded,
    create_design_doc_plan,
    create_intro_message,
    get_step,
    parse_design_doc,
    reduce_document,
)
from .design_doc.plan import PlanContext
from .exceptions import ProjectNotFoundError
from .projects import create_project, list_projects, open_project, save_document

# Load environment variables from .env file
load_dotenv()

# Configure logfire (disable console output to avoid cluttering chat)
logfire.configure(console=False, send_to_logfire=False)
logfire.instrument_pydantic_ai()

app = typer.Typer(
    name="nightshift",
    help="Co-author a design document with a chat assistant",
)


def _open(data_dir: Path, name: str) -> tuple[PlanContext, str]:
    """Open a project or exit with an error."""
    try:
        return open_project(data_dir, name)
    except ProjectNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def init(
    name: str,
    summary: str = typer.Option(None, "--summary", "-s", help="One-line project pitch"),
    focus: str = typer.Option(None, "--focus", "-f", help="Theme to keep an eye on"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing document"),
) -> None:
    """Create a new design document from the template."""
    data_dir = get_data_dir()
    context = PlanContext(project_name=name, project_summary=summary, project_focus=focus)

    try:
        path = create_project(data_dir, context, overwrite=force)
    except FileExistsError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo("Use --force to start over.", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"Created {path}")
    typer.echo("\nNext steps:")
    typer.echo(f"  nightshift interview '{name}'  # answer guided questions")
    typer.echo(f"  nightshift chat '{name}'       # free-form chat with the assistant")


@app.command()
def projects() -> None:
    """List all projects."""
    names = list_projects(get_data_dir())

    if not names:
        typer.echo("No projects found.")
        typer.echo("\nCreate one with: nightshift init 'Project name'")
        return

    typer.echo("Projects:")
    for name in names:
        typer.echo(f"  {name}")


@app.command()
def show(name: str) -> None:
    """Print a project's design document."""
    _, document = _open(get_data_dir(), name)
    typer.echo(document, nl=False)


@app.command()
def sections(name: str) -> None:
    """Show which sections have content."""
    from rich.console import Console
    from rich.table import Table

    context, document = _open(get_data_dir(), name)
    plan = create_design_doc_plan(context)
    parsed = parse_design_doc(document, plan)

    table = Table(title=parsed.title)
    table.add_column("Key", style="bold")
    table.add_column("Heading")
    table.add_column("Status")
    table.add_column("Preview", overflow="ellipsis", max_width=50)

    for step in plan:
        content = parsed.sections.get(step.key, "").strip()
        if not content or content == step.placeholder.strip():
            table.add_row(step.key, step.heading, "[yellow]empty[/yellow]", "")
        else:
            table.add_row(step.key, step.heading, "[green]filled[/green]", content.split("\n")[0])

    if parsed.appendix:
        table.caption = "Extra sections are kept at the end of the document."

    Console().print(table)


@app.command()
def add(
    name: str,
    key: str = typer.Argument(..., help="Section key, e.g. vision or roadmap"),
    content: str = typer.Argument(None, help="Content to merge into the section"),
    file: Path = typer.Option(
        None, "--file", "-i", help="Read the content from a file (e.g. a pasted model reply)"
    ),
) -> None:
    """Merge content into one section of a design document.

    Examples:
        nightshift add aurora vision "We help teams ship nightly."
        nightshift add aurora roadmap --file reply.md
    """
    data_dir = get_data_dir()
    context, document = _open(data_dir, name)
    plan = create_design_doc_plan(context)

    if get_step(plan, key) is None:
        keys = ", ".join(step.key for step in plan)
        typer.echo(f"Error: Unknown section '{key}'. Choose one of: {keys}", err=True)
        raise typer.Exit(1)

    if file is not None:
        if not file.exists():
            typer.echo(f"Error: Path does not exist: {file}", err=True)
            raise typer.Exit(1)
        content = file.read_text(encoding="utf-8")

    if not content or not content.strip():
        typer.echo("Error: Nothing to add. Pass CONTENT or --file.", err=True)
        raise typer.Exit(1)

    updated = reduce_document(document, SectionContentAdded(key=key, content=content), plan)
    if updated == document:
        typer.echo("No changes made.")
        return

    save_document(data_dir, name, updated)
    logfire.info("Section updated from CLI", project=name, key=key)
    typer.echo(f"Updated section: {get_step(plan, key).heading}")


@app.command()
def interview(name: str) -> None:
    """Answer guided questions, one per section."""
    data_dir = get_data_dir()
    context, document = _open(data_dir, name)
    plan = create_design_doc_plan(context)
    session = DesignDocInterview(plan=plan, context=context, document=document)

    typer.echo(create_intro_message(context))
    question = session.first_question()

    while question is not None:
        typer.echo(f"\n{question.text}")
        answer = typer.prompt(">", default="", show_default=False)
        if answer.strip().lower() in ("/quit", "/exit"):
            break

        turn = session.submit_answer(answer)
        if turn is None:
            continue

        save_document(data_dir, name, session.document)
        if turn.acknowledgement:
            typer.echo(turn.acknowledgement)
        if turn.completion:
            typer.echo(f"\n{turn.completion}")
        question = turn.next_question

    typer.echo(f"\nSaved {name}.")


@app.command()
def chat(name: str) -> None:
    """Chat with the assistant about a project's design document."""
    data_dir = get_data_dir()
    _open(data_dir, name)
    asyncio.run(run_chat_session(data_dir, name))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
