"""Markdown design document merge engine."""

from .blocks import dedupe_blocks, normalize_block, normalize_content, split_blocks
from .builder import DEFAULT_PLACEHOLDER, build_design_doc, create_design_doc_template
from .headings import normalize_heading
from .interview import DesignDocInterview, InterviewTurn, Question, create_intro_message
from .merger import (
    append_section_content,
    extract_section_content,
    merge_document_sections,
    merge_extra_sections,
    merge_section_content,
)
from .parser import ParsedDesignDoc, parse_design_doc
from .plan import Plan, PlanContext, SectionDefinition, create_design_doc_plan, get_step, validate_plan
from .reducer import (
    AssistantDocumentReceived,
    DocumentEdited,
    DocumentEvent,
    DocumentReset,
    SectionContentAdded,
    reduce_document,
)

__all__ = [
    "DEFAULT_PLACEHOLDER",
    "AssistantDocumentReceived",
    "DesignDocInterview",
    "DocumentEdited",
    "DocumentEvent",
    "DocumentReset",
    "InterviewTurn",
    "ParsedDesignDoc",
    "Plan",
    "PlanContext",
    "Question",
    "SectionContentAdded",
    "SectionDefinition",
    "append_section_content",
    "build_design_doc",
    "create_design_doc_plan",
    "create_design_doc_template",
    "create_intro_message",
    "dedupe_blocks",
    "extract_section_content",
    "get_step",
    "merge_document_sections",
    "merge_extra_sections",
    "merge_section_content",
    "normalize_block",
    "normalize_content",
    "normalize_heading",
    "parse_design_doc",
    "reduce_document",
    "split_blocks",
    "validate_plan",
]
