"""Tests for the retrieve-then-generate chat flow."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from kb_proxy.modules.errors import ConfigurationError, GenerationError, TransportError
from kb_proxy.modules.knowledge import KnowledgeClient
from kb_proxy.modules.orchestration import (
    NO_RESULTS_ANSWER,
    answer_query,
    build_context,
    build_prompt,
)


def make_knowledge(chunks=None, error=None) -> MagicMock:
    knowledge = MagicMock(spec=KnowledgeClient)
    knowledge.retrieve = AsyncMock(return_value=chunks or [], side_effect=error)
    return knowledge


class TestBuildContext:
    """Tests for build_context."""

    def test_joins_with_blank_line(self):
        """Should separate chunks with exactly one blank line."""
        assert build_context(["A is X.", "B is Y."]) == "A is X.\n\nB is Y."

    def test_trims_each_chunk(self):
        """Should strip surrounding whitespace from every chunk."""
        chunks = ["  first\n", "\n\nsecond  ", "\tthird"]

        assert build_context(chunks) == "first\n\nsecond\n\nthird"

    def test_preserves_order(self):
        """Should keep retrieval order, no re-ranking."""
        chunks = ["c", "a", "b"]

        assert build_context(chunks).split("\n\n") == ["c", "a", "b"]

    def test_keeps_inner_whitespace(self):
        """Only the ends are trimmed."""
        assert build_context(["line one\n\nline two "]) == "line one\n\nline two"


class TestBuildPrompt:
    """Tests for build_prompt."""

    def test_embeds_context_and_query(self):
        prompt = build_prompt("A is X.", "What is X?")

        assert "Use the following context to answer clearly and concisely." in prompt
        assert "Context:\nA is X.\n" in prompt
        assert "Question:\nWhat is X?\n" in prompt

    def test_braces_in_content_are_literal(self):
        """Chunk text with braces must not break formatting."""
        prompt = build_prompt("config {key}", "What is {key}?")

        assert "config {key}" in prompt
        assert "What is {key}?" in prompt


class TestAnswerQuery:
    """Tests for answer_query."""

    async def test_empty_retrieval_short_circuits(self, settings, generator):
        """Should return the canned answer without calling the model."""
        knowledge = make_knowledge(chunks=[])

        exchange = await answer_query("What is X?", settings, knowledge, generator)

        assert exchange.answer == NO_RESULTS_ANSWER
        assert exchange.answer == "No relevant information found."
        assert not exchange.generated
        assert generator.generate.await_count == 0

    async def test_generates_from_retrieved_chunks(self, settings, generator):
        """Prompt should hold the trimmed chunks in order and the query."""
        knowledge = make_knowledge(chunks=["A is X. ", " B is Y."])

        exchange = await answer_query("What is X?", settings, knowledge, generator)

        assert exchange.answer == "Generated answer"
        assert exchange.chunks_used == 2
        knowledge.retrieve.assert_awaited_once_with("kb-123", "What is X?", top_k=5)

        prompt, model = generator.generate.await_args.args
        assert model == "gemini-2.5-flash"
        assert "A is X.\n\nB is Y." in prompt
        assert prompt.index("A is X.") < prompt.index("B is Y.")
        assert "Question:\nWhat is X?" in prompt

    @pytest.mark.parametrize("missing", ["api_key", "knowledge_base_id", "gemini_api_key"])
    async def test_missing_settings_fail_fast(self, settings, generator, missing):
        """Should raise before any network call when a setting is absent."""
        knowledge = make_knowledge(chunks=["unused"])
        broken = settings.model_copy(update={missing: ""})

        with pytest.raises(ConfigurationError) as exc_info:
            await answer_query("q", broken, knowledge, generator)

        assert exc_info.value.missing == [missing.upper()]
        assert knowledge.retrieve.await_count == 0
        assert generator.generate.await_count == 0

    async def test_retrieval_failure_propagates(self, settings, generator):
        """Retrieval errors reach the caller; generation is skipped."""
        knowledge = make_knowledge(error=TransportError("timed out"))

        with pytest.raises(TransportError):
            await answer_query("q", settings, knowledge, generator)

        assert generator.generate.await_count == 0

    async def test_generation_failure_propagates(self, settings, generator):
        """A generation failure after a successful retrieval is raised as-is."""
        knowledge = make_knowledge(chunks=["A is X."])
        generator.generate.side_effect = GenerationError("quota exceeded")

        with pytest.raises(GenerationError):
            await answer_query("q", settings, knowledge, generator)

        knowledge.retrieve.assert_awaited_once()

    async def test_chunk_previews_logged_at_info(self, settings, generator):
        """Each retrieved chunk is previewed in the default-level log."""
        knowledge = make_knowledge(chunks=["A" * 200, "B is Y."])

        with patch("kb_proxy.modules.orchestration.rag_flow.logger") as logger:
            await answer_query("q", settings, knowledge, generator)

        previews = [
            c.kwargs for c in logger.info.call_args_list if c.args == ("Retrieved chunk",)
        ]
        assert previews == [
            {"rank": 1, "preview": "A" * 80},
            {"rank": 2, "preview": "B is Y."},
        ]
