"""Pipeline tests for ChatService with fake clients."""
from __future__ import annotations

import asyncio

import pytest

from ayurbot.infra.errors import UpstreamServiceError
from ayurbot.retrieval.errors import StageTimeoutError
from ayurbot.retrieval.models import ConversationTurn
from ayurbot.retrieval.prompts.ayurbot import (
    FALLBACK_ANSWER,
    NO_CONTEXT_PLACEHOLDER,
    NO_QUESTION_PLACEHOLDER,
    REWRITE_INSTRUCTION,
)
from ayurbot.retrieval.services.chat_service import ChatService, PipelineConfig

from fakes import FakeEmbeddingClient, FakeGeminiClient, FakePineconeClient


def _service(gemini, pinecone, **config):
    return ChatService(
        gemini_client=gemini,
        embedding_client=FakeEmbeddingClient(),
        pinecone_client=pinecone,
        config=PipelineConfig(initial_delay=0.0, **config),
    )


@pytest.mark.asyncio
async def test_first_question_flows_through_all_stages():
    gemini = FakeGeminiClient(["What helps with stress?", "Try gentle pranayama and warm milk."])
    pinecone = FakePineconeClient(["Pranayama calms the mind.", "Warm milk with nutmeg aids sleep."])
    service = _service(gemini, pinecone)

    result = await service.answer("What helps with stress?", [])

    assert result.answer == "Try gentle pranayama and warm milk."
    assert result.history == [ConversationTurn("user", "What helps with stress?")]
    rewrite_call, answer_call = gemini.calls
    assert rewrite_call["system_instruction"] == REWRITE_INSTRUCTION
    assert rewrite_call["contents"][0]["parts"][0]["text"].endswith("Follow-up question: What helps with stress?")
    assert answer_call["temperature"] == 0.7
    assert answer_call["contents"] == [{"role": "user", "parts": [{"text": "What helps with stress?"}]}]
    assert "Pranayama calms the mind.\n\n---\n\nWarm milk with nutmeg aids sleep." in answer_call["system_instruction"]
    assert pinecone.calls[0]["top_k"] == 10


@pytest.mark.asyncio
async def test_follow_up_uses_prior_user_turns_and_replaces_last_turn():
    gemini = FakeGeminiClient(["Which herbs support sleep for Vata types?", "Ashwagandha and nutmeg."])
    service = _service(gemini, FakePineconeClient(["Ashwagandha supports sleep."]))
    history = [
        {"role": "user", "parts": [{"text": "I am a Vata type."}]},
        {"role": "model", "parts": [{"text": "Lovely, tell me more."}]},
        {"role": "user", "parts": [{"text": "what about sleep?"}]},
    ]

    result = await service.answer("what about sleep?", history)

    prompt = gemini.calls[0]["contents"][0]["parts"][0]["text"]
    assert prompt == (
        "Previous user messages:\nI am a Vata type.\nwhat about sleep?\n"
        "Follow-up question: what about sleep?"
    )
    assert len(result.history) == 3
    assert result.history[-1] == ConversationTurn("user", "Which herbs support sleep for Vata types?")
    assert gemini.calls[1]["contents"][-1]["parts"][0]["text"] == "Which herbs support sleep for Vata types?"


@pytest.mark.asyncio
async def test_empty_rewrite_falls_back_to_question_then_placeholder():
    gemini = FakeGeminiClient([None, "answer"])
    result = await _service(gemini, FakePineconeClient(["ctx"])).answer("Is ghee healthy?", [])
    assert result.standalone_question == "Is ghee healthy?"

    gemini = FakeGeminiClient(["   ", "answer"])
    result = await _service(gemini, FakePineconeClient(["ctx"])).answer("", [])
    assert result.standalone_question == NO_QUESTION_PLACEHOLDER


@pytest.mark.asyncio
async def test_no_context_uses_placeholder_and_fallback_answer():
    gemini = FakeGeminiClient(["What is Kapha?", None])
    pinecone = FakePineconeClient(["", "   "])

    result = await _service(gemini, pinecone).answer("What is Kapha?", [])

    assert f"Context: {NO_CONTEXT_PLACEHOLDER}" in gemini.calls[1]["system_instruction"]
    assert result.answer == FALLBACK_ANSWER
    assert result.snippets == []


@pytest.mark.asyncio
async def test_transient_generation_failure_is_retried():
    overloaded = UpstreamServiceError("gemini", 503, "The model is overloaded")
    gemini = FakeGeminiClient(["q", overloaded, overloaded, "Namaste"])

    result = await _service(gemini, FakePineconeClient(["ctx"])).answer("q", [])

    assert result.answer == "Namaste"
    assert len(gemini.calls) == 4


@pytest.mark.asyncio
async def test_quota_failure_propagates_without_retry():
    quota = UpstreamServiceError("gemini", 429, "Resource has been exhausted (e.g. check quota).")
    gemini = FakeGeminiClient(["q", quota, "never used"])

    with pytest.raises(UpstreamServiceError) as excinfo:
        await _service(gemini, FakePineconeClient(["ctx"])).answer("q", [])

    assert excinfo.value is quota
    assert len(gemini.calls) == 2


class FlakyPineconeClient(FakePineconeClient):
    """Answers 503 on the first query, then behaves normally."""

    async def query(self, vector, *, top_k=10, include_metadata=True):
        if not self.calls:
            self.calls.append({"failed": True})
            raise UpstreamServiceError("pinecone", 503, "index unavailable")
        return await super().query(vector, top_k=top_k, include_metadata=include_metadata)


class HangingEmbeddingClient(FakeEmbeddingClient):
    async def embed_query(self, text):
        self.queries.append(text)
        await asyncio.sleep(10)


@pytest.mark.asyncio
async def test_transient_vector_query_failure_is_retried():
    gemini = FakeGeminiClient(["What calms Pitta?", "Coconut water and moonlight walks."])
    pinecone = FlakyPineconeClient(["Cooling foods calm Pitta."])

    result = await _service(gemini, pinecone).answer("What calms Pitta?", [])

    assert result.answer == "Coconut water and moonlight walks."
    assert len(pinecone.calls) == 2
    assert [s.text for s in result.snippets] == ["Cooling foods calm Pitta."]


@pytest.mark.asyncio
async def test_hanging_embedding_call_times_out():
    embedding = HangingEmbeddingClient()
    service = ChatService(
        gemini_client=FakeGeminiClient(["What is Ojas?", "unused"]),
        embedding_client=embedding,
        pinecone_client=FakePineconeClient(["ctx"]),
        config=PipelineConfig(initial_delay=0.0, stage_timeout=0.05),
    )

    with pytest.raises(StageTimeoutError) as excinfo:
        await service.answer("What is Ojas?", [])

    assert excinfo.value.stage == "embed"
    assert embedding.queries == ["What is Ojas?"]
