"""Project utilities for creating, listing, loading and saving design docs.

Each project is a markdown document at `projects/<slug>.md` with its plan
context alongside in `projects/<slug>.json`.
"""

import re
from pathlib import Path

from .design_doc import create_design_doc_plan, create_design_doc_template
from .design_doc.plan import PlanContext
from .exceptions import ProjectNotFoundError

PROJECTS_DIR = "projects"


def slugify(text: str) -> str:
    """Convert a project name to a filename-safe slug."""
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-") or "untitled"


def _document_path(data_dir: Path, project_name: str) -> Path:
    return data_dir / PROJECTS_DIR / f"{slugify(project_name)}.md"


def _context_path(data_dir: Path, project_name: str) -> Path:
    return data_dir / PROJECTS_DIR / f"{slugify(project_name)}.json"


def list_projects(data_dir: Path) -> list[str]:
    """List available project slugs."""
    projects_dir = data_dir / PROJECTS_DIR
    if not projects_dir.exists():
        return []
    return sorted(path.stem for path in projects_dir.glob("*.md"))


def project_exists(data_dir: Path, project_name: str) -> bool:
    """Check if a project exists."""
    return _document_path(data_dir, project_name).exists()


def create_project(data_dir: Path, context: PlanContext, overwrite: bool = False) -> Path:
    """Write a fresh design doc template and its context.

    Args:
        data_dir: Root data directory
        context: Project context the plan and template are derived from
        overwrite: Replace an existing document instead of failing

    Returns:
        Path to the new document

    Raises:
        FileExistsError: If the project exists and overwrite is False.
    """
    path = _document_path(data_dir, context.project_name)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Project '{context.project_name}' already exists at {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    plan = create_design_doc_plan(context)
    path.write_text(create_design_doc_template(plan, context), encoding="utf-8")
    _context_path(data_dir, context.project_name).write_text(
        context.model_dump_json(indent=2), encoding="utf-8"
    )
    return path


def load_project(data_dir: Path, project_name: str) -> str | None:
    """Load a project document by name."""
    path = _document_path(data_dir, project_name)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def load_context(data_dir: Path, project_name: str) -> PlanContext:
    """Load a project's plan context, falling back to just its name."""
    path = _context_path(data_dir, project_name)
    if not path.exists():
        return PlanContext(project_name=project_name)
    return PlanContext.model_validate_json(path.read_text(encoding="utf-8"))


def open_project(data_dir: Path, project_name: str) -> tuple[PlanContext, str]:
    """Load a project's context and document.

    Raises:
        ProjectNotFoundError: If the project has no document.
    """
    document = load_project(data_dir, project_name)
    if document is None:
        raise ProjectNotFoundError(project_name)
    return load_context(data_dir, project_name), document


def save_document(data_dir: Path, project_name: str, document: str) -> Path:
    """Write a project's document."""
    path = _document_path(data_dir, project_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document if document.endswith("\n") else document + "\n", encoding="utf-8")
    return path
