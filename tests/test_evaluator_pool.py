"""Tests for the concurrent evaluator pool."""

import asyncio
import threading
import time

import pytest
from agents.evaluator_pool import EvaluatorPool, OrchestrationError
from agents.evaluator_roles import (
    DEFAULT_EVALUATOR_ROLES,
    ROMANCE_EXPERT,
    ACTION_HERO_EXPERT,
    CLASSIC_CINEMA_EXPERT,
    build_evaluator_prompt,
)
from llm.base_client import BaseLLMClient, LLMResponse


class ScriptedLLMClient(BaseLLMClient):
    """Answers per evaluator, keyed by a phrase in the system prompt."""

    def __init__(self, script, delays=None, configured=True):
        self.script = script
        self.delays = delays or {}
        self.configured = configured
        self.calls = []
        self._lock = threading.Lock()

    def _role_for(self, messages):
        system = messages[0].content
        for key in self.script:
            if key in system:
                return key
        raise KeyError(system)

    def chat(self, messages, temperature=0.7, max_tokens=4000):
        key = self._role_for(messages)
        with self._lock:
            self.calls.append((key, temperature, max_tokens))
        time.sleep(self.delays.get(key, 0))
        answer = self.script[key]
        if isinstance(answer, Exception):
            raise answer
        return LLMResponse(content=answer)

    def get_provider_name(self):
        return "scripted"

    def get_model_name(self):
        return "scripted-model"

    def is_configured(self):
        return self.configured


class TestEvaluatorPool:
    """Test evaluator fan-out and fan-in."""

    def setup_method(self):
        """Set up test fixtures."""
        self.prompt = build_evaluator_prompt("User Age: 30\nAvailable Movies:\n")

    def test_collects_every_answer(self):
        client = ScriptedLLMClient({"romance": "11", "action": "12", "classic": "13"})
        pool = EvaluatorPool(client)

        responses = asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

        assert sorted(r.content for r in responses) == ["11", "12", "13"]
        assert len(client.calls) == 3

    def test_answers_in_arrival_order(self):
        client = ScriptedLLMClient(
            {"romance": "11", "action": "12", "classic": "13"},
            delays={"romance": 0.3, "action": 0.0, "classic": 0.15},
        )
        pool = EvaluatorPool(client)

        responses = asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

        assert [r.role_name for r in responses] == [
            "ActionHeroExpert", "ClassicCinemaExpert", "RomanceExpert"
        ]

    def test_roles_run_concurrently(self):
        client = ScriptedLLMClient(
            {"romance": "11", "action": "12", "classic": "13"},
            delays={"romance": 0.3, "action": 0.3, "classic": 0.3},
        )
        pool = EvaluatorPool(client)

        start = time.monotonic()
        asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))
        elapsed = time.monotonic() - start

        assert elapsed < 0.8

    def test_single_failure_is_tolerated(self):
        client = ScriptedLLMClient({
            "romance": RuntimeError("rate limited"),
            "action": "12",
            "classic": "13",
        })
        pool = EvaluatorPool(client)

        responses = asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

        assert {r.role_name for r in responses} == {"ActionHeroExpert", "ClassicCinemaExpert"}

    def test_empty_answers_are_dropped(self):
        client = ScriptedLLMClient({"romance": "   ", "action": "12", "classic": ""})
        pool = EvaluatorPool(client)

        responses = asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

        assert [r.content for r in responses] == ["12"]

    def test_slow_evaluator_times_out(self):
        client = ScriptedLLMClient(
            {"romance": "11", "action": "12", "classic": "13"},
            delays={"classic": 1.0},
        )
        pool = EvaluatorPool(client, timeout_seconds=0.2)

        responses = asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

        assert {r.role_name for r in responses} == {"RomanceExpert", "ActionHeroExpert"}

    def test_role_tuning_is_passed_through(self):
        client = ScriptedLLMClient({"romance": "11", "action": "12"})
        pool = EvaluatorPool(client)

        asyncio.run(pool.dispatch([ROMANCE_EXPERT, ACTION_HERO_EXPERT], self.prompt))

        calls = {key: (temperature, max_tokens) for key, temperature, max_tokens in client.calls}
        assert calls["romance"] == (0.4, 4096)
        assert calls["action"] == (0.7, 4000)

    def test_no_client_is_orchestration_failure(self):
        pool = EvaluatorPool(None)

        with pytest.raises(OrchestrationError):
            asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

    def test_unconfigured_client_is_orchestration_failure(self):
        pool = EvaluatorPool(ScriptedLLMClient({}, configured=False))

        with pytest.raises(OrchestrationError):
            asyncio.run(pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt))

    def test_no_roles_is_orchestration_failure(self):
        pool = EvaluatorPool(ScriptedLLMClient({}))

        with pytest.raises(OrchestrationError):
            asyncio.run(pool.dispatch([], self.prompt))

    def test_cancel_keeps_completed_answers(self):
        client = ScriptedLLMClient(
            {"romance": "11", "action": "12", "classic": "13"},
            delays={"romance": 0.0, "action": 1.0, "classic": 1.0},
        )
        pool = EvaluatorPool(client)

        async def run():
            cancel = asyncio.Event()
            dispatch = asyncio.create_task(
                pool.dispatch(DEFAULT_EVALUATOR_ROLES, self.prompt, cancel=cancel)
            )
            await asyncio.sleep(0.2)
            cancel.set()
            return await dispatch

        responses = asyncio.run(run())

        assert [r.role_name for r in responses] == ["RomanceExpert"]

    def test_prompt_frames_catalog(self):
        assert self.prompt.startswith("Suggest a movie to watch based on the catalog:\n")
        assert "User Age: 30" in self.prompt

    def test_default_roles_are_distinct(self):
        kinds = {role.kind for role in DEFAULT_EVALUATOR_ROLES}
        assert len(kinds) == 3
        assert CLASSIC_CINEMA_EXPERT in DEFAULT_EVALUATOR_ROLES
