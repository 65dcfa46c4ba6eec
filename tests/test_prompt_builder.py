"""Tests for generation prompts."""

import pytest

from cymage.core.prompt_builder import (
    APPEND_INSTRUCTION,
    INITIAL_INSTRUCTION,
    SYSTEM_PROMPT,
    build_prompt,
)


@pytest.mark.unit
class TestBuildPrompt:
    """Tests for build_prompt function."""

    def test_includes_plan_and_bug(self) -> None:
        prompt = build_prompt("1. Go to patrons\n2. Click Save\n", "20956")
        assert prompt.startswith("Given this Koha bug test plan for Bug 20956:")
        assert "1. Go to patrons\n2. Click Save" in prompt

    def test_initial_instruction(self) -> None:
        prompt = build_prompt("1. A\n", "1")
        assert INITIAL_INSTRUCTION in prompt
        assert APPEND_INSTRUCTION not in prompt

    def test_append_instruction(self) -> None:
        prompt = build_prompt("4. D\n", "1", is_append=True)
        assert APPEND_INSTRUCTION in prompt
        assert "Do NOT call cy.login()" in prompt

    def test_context_follows_plan(self) -> None:
        context = "\n\nRELEVANT SCRIPT FILES FROM KOHA REPOSITORY:\n\nFile: a.tt\n```\n<form>\n```\n\n"
        prompt = build_prompt("1. A\n", "1", context)
        assert prompt.index("1. A") < prompt.index("File: a.tt") < prompt.index(INITIAL_INSTRUCTION)

    def test_guidelines_present(self) -> None:
        prompt = build_prompt("1. A\n", "1")
        assert "Koha Cypress Plugin Tasks" in prompt
        assert "patron.patron_id" in prompt

    def test_system_prompt_mentions_koha(self) -> None:
        assert "Koha" in SYSTEM_PROMPT
        assert "Cypress" in SYSTEM_PROMPT
