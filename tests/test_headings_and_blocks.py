"""
Tests for heading normalization and block splitting
"""
import pytest

from nightshift.design_doc import (
    dedupe_blocks,
    normalize_block,
    normalize_content,
    normalize_heading,
    split_blocks,
)
from nightshift.design_doc.blocks import strip_placeholder_blocks


class TestNormalizeHeading:
    """Test heading canonicalization."""

    @pytest.mark.parametrize(
        "raw",
        [
            "## **Product Vision**:",
            "> ###  Product   Vision -",
            "Product Vision",
            "`product vision`",
            "  ## _Product_ ~~Vision~~ : ",
        ],
    )
    def test_variants_match(self, raw):
        """Emphasis, prefixes and trailing punctuation are ignored."""
        assert normalize_heading(raw) == "product vision"

    @pytest.mark.parametrize(
        "raw",
        ["## **Risks & Open Questions**:", "> # Target Users --", "** ## Launch:", ""],
    )
    def test_idempotent(self, raw):
        """Normalizing twice gives the same key."""
        once = normalize_heading(raw)
        assert normalize_heading(once) == once

    def test_keeps_inner_punctuation(self):
        """Only trailing colons and dashes are dropped."""
        assert normalize_heading("## Risks & Open Questions") == "risks & open questions"
        assert normalize_heading("Jobs-to-be-done:") == "jobs-to-be-done"


class TestBlocks:
    """Test blank-line block handling."""

    def test_split_blocks_on_blank_lines(self):
        """Runs of blank lines split blocks, empty blocks are dropped."""
        text = "\n\nFirst line\nstill first\n\n\n\nSecond\n\n  \n\nThird  \n"
        assert split_blocks(text) == ["First line\nstill first", "Second", "Third"]

    def test_split_blocks_keeps_tables_together(self):
        """Multi-line constructs stay a single block."""
        table = "| a | b |\n| - | - |\n| 1 | 2 |"
        assert split_blocks(f"Intro\n\n{table}") == ["Intro", table]

    def test_split_blocks_keeps_code_fences_together(self):
        """Blank lines inside a fence do not split it."""
        code = "```\na = 1\n\n\nb = 2\n```"
        assert split_blocks(f"Intro\n\n{code}\n\nAfter") == ["Intro", code, "After"]

    def test_split_blocks_empty(self):
        """Blank input has no blocks."""
        assert split_blocks("") == []
        assert split_blocks("\n\n\n") == []

    def test_normalize_block(self):
        """Dedup keys ignore case and whitespace layout."""
        assert normalize_block("  Ship\n   Nightly ") == "ship nightly"
        assert normalize_block("**Bold**") == "**bold**"

    def test_normalize_content_drops_markers(self):
        """Meaning-level comparison ignores emphasis."""
        assert normalize_content("**North star**\n\n_Ship_ `fast`") == "north star ship fast"

    def test_dedupe_blocks_keeps_first(self):
        """Repeated blocks are removed, order is kept."""
        assert dedupe_blocks("One\n\ntwo\n\nONE\n\nthree") == "One\n\ntwo\n\nthree"

    def test_strip_placeholder_blocks(self):
        """Placeholder echoes are removed wherever they appear."""
        text = "_TBD_\n\nReal content\n\nTBD"
        assert strip_placeholder_blocks(text, "_TBD_") == "Real content"
        assert strip_placeholder_blocks("   ", "_TBD_") == ""
