"""
Test configuration and fixtures
"""
import logfire
import pytest

from nightshift.design_doc import SectionDefinition, create_design_doc_plan
from nightshift.design_doc.plan import PlanContext


@pytest.fixture(scope="session", autouse=True)
def configure_logfire():
    """Keep logfire local and quiet during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def offline_model(monkeypatch):
    """Make sure no test reaches a real model."""
    monkeypatch.delenv("MODEL", raising=False)


@pytest.fixture
def context():
    """Project context for the Aurora sample project."""
    return PlanContext(
        project_name="Aurora",
        project_summary="A collaborative design workspace.",
        project_focus="fast onboarding",
    )


@pytest.fixture
def plan(context):
    """The standard seven-section plan."""
    return create_design_doc_plan(context)


@pytest.fixture
def small_plan():
    """A two-section plan with short placeholders."""
    return [
        SectionDefinition(key="vision", heading="Product Vision", placeholder="_TBD_"),
        SectionDefinition(
            key="metrics", heading="Success Metrics", placeholder="_Track signals._"
        ),
    ]
