"""Nightshift - chat-driven design document companion."""

from .chat import DesignDocumentSession, run_chat_session
from .design_doc import (
    DesignDocInterview,
    ParsedDesignDoc,
    PlanContext,
    SectionDefinition,
    append_section_content,
    build_design_doc,
    create_design_doc_plan,
    create_design_doc_template,
    extract_section_content,
    merge_section_content,
    parse_design_doc,
    reduce_document,
)
from .exceptions import CompletionError, PlanError, ProjectNotFoundError, SessionBusyError
from .workflow import create_workflow, run_turn

__all__ = [
    "DesignDocumentSession",
    "run_chat_session",
    "DesignDocInterview",
    "ParsedDesignDoc",
    "PlanContext",
    "SectionDefinition",
    "append_section_content",
    "build_design_doc",
    "create_design_doc_plan",
    "create_design_doc_template",
    "extract_section_content",
    "merge_section_content",
    "parse_design_doc",
    "reduce_document",
    "create_workflow",
    "run_turn",
    "CompletionError",
    "PlanError",
    "ProjectNotFoundError",
    "SessionBusyError",
]
