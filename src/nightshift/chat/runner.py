"""Interactive CLI chat runner for a project's design document."""

from datetime import datetime
from pathlib import Path

import logfire

from ..design_doc import create_design_doc_plan
from ..exceptions import CompletionError
from ..projects import open_project, save_document
from .session import DesignDocumentSession


async def run_chat_session(data_dir: Path, project_name: str) -> None:
    """Run an interactive chat that edits one project's design document.

    This is designed to be called from the CLI. The document is saved after
    every turn that changes it.
    """
    from prompt_toolkit import PromptSession
    from prompt_toolkit.formatted_text import HTML
    from prompt_toolkit.patch_stdout import patch_stdout
    from rich.console import Console
    from rich.markdown import Markdown
    from rich.panel import Panel

    context, document = open_project(data_dir, project_name)
    plan = create_design_doc_plan(context)
    session = DesignDocumentSession.for_plan(context, plan, document=document)
    console = Console()
    prompt_session = PromptSession()

    console.print(
        Panel(
            f"[bold green]Nightshift[/bold green] · {session.project_name}\n\n"
            "Commands:\n"
            "  [bold]/show[/bold] - Print the current document\n"
            "  [bold]/done[/bold] - Mark the document complete and exit\n"
            "  [bold]/reset[/bold] - Start over from the template\n"
            "  [bold]/quit[/bold] - Exit\n\n"
            "Anything else is sent to the assistant.",
            title="Welcome",
            border_style="green",
        )
    )
    console.print(Markdown(session.messages[0].content))

    while True:
        try:
            with patch_stdout():
                user_input = await prompt_session.prompt_async(
                    HTML("<ansiblue><b>></b></ansiblue> "),
                    multiline=False,
                )
            user_input = user_input.strip()
        except (EOFError, KeyboardInterrupt):
            console.print("[dim]Goodbye![/dim]")
            break

        if not user_input:
            continue

        command = user_input.lower()
        if command == "/quit":
            console.print("[dim]Goodbye![/dim]")
            break

        if command == "/show":
            console.print(session.document, markup=False)
            continue

        if command == "/done":
            session.finalize(datetime.now())
            save_document(data_dir, project_name, session.document)
            console.print("[green]Design document marked complete.[/green]")
            break

        if command == "/reset":
            session.reset()
            save_document(data_dir, project_name, session.document)
            console.print("[dim]Started over from the template.[/dim]")
            continue

        previous = session.document
        try:
            with console.status("Thinking..."):
                reply = await session.send_message(user_input)
        except CompletionError as e:
            logfire.error("Chat turn failed", error=str(e))
            console.print(f"[red]Error: {e}[/red]")
            continue

        if reply is not None:
            console.print(Markdown(reply.content))

        if session.document != previous:
            save_document(data_dir, project_name, session.document)
            session.mark_saved(datetime.now())
            console.print("[dim]Document updated.[/dim]")
