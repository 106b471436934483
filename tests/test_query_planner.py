from __future__ import annotations

import pytest

from app.agents import query_planner
from app.agents.query_planner import QueryPlanner, fallback_queries, parse_queries
from app.models.errors import PlannerOutputError
from app.models.pipeline import Deadline


def test_parse_queries_strips_fences_and_dedupes():
    text = '```json\n["SalesRobot pricing 2025", "salesrobot  pricing 2025", " ", 7, "LinkedIn limits"]\n```'
    assert parse_queries(text, max_queries=8) == ["SalesRobot pricing 2025", "LinkedIn limits"]


def test_parse_queries_truncates_to_max():
    text = str([f"query {i}" for i in range(12)]).replace("'", '"')
    assert len(parse_queries(text, max_queries=8)) == 8


@pytest.mark.parametrize("text", ["not valid json", "[]", '{"queries": "a"}', '["", "  "]'])
def test_parse_queries_rejects_unusable_output(text):
    with pytest.raises(PlannerOutputError):
        parse_queries(text, max_queries=8)


def test_fallback_queries_use_title_and_year():
    queries = fallback_queries("<p>body</p>", "SalesRobot", year=2025)
    assert queries[0] == "SalesRobot pricing 2025"
    assert "SalesRobot features comparison" in queries
    assert any("limits" in q for q in queries)
    assert 1 <= len(queries) <= 8


def test_fallback_queries_without_title_use_content_words():
    queries = fallback_queries("<h1>Acme CRM review</h1><p>text</p>", "  ", year=2025)
    assert queries[0] == "Acme CRM review text pricing 2025"


def test_fallback_queries_never_empty():
    assert fallback_queries("", "", year=2025)[0] == "blog post pricing 2025"


class TestQueryPlanner:
    @pytest.mark.asyncio
    async def test_primary_path_counts_one_call(self, make_llm):
        client = make_llm('["q1", "q2", "q3", "q4", "q5"]')
        planner = QueryPlanner(client, model="test-model")

        plan = await planner.generate_queries("<p>content</p>", "Title", "check pricing")

        assert plan.queries == ["q1", "q2", "q3", "q4", "q5"]
        assert plan.llm_calls == 1
        assert plan.used_fallback is False
        call = client.messages.calls[0]
        assert call["model"] == "test-model"
        assert "check pricing" in call["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_content_sample_is_bounded(self, make_llm):
        client = make_llm('["q1"]')
        planner = QueryPlanner(client, model="test-model")
        content = "a" * planner.sample_chars + "TAIL_MARKER"

        await planner.generate_queries(content, "Title")

        assert "TAIL_MARKER" not in client.messages.calls[0]["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_malformed_output_falls_back_without_extra_calls(self, make_llm):
        client = make_llm("Sure! Here are some ideas: pricing, features")
        planner = QueryPlanner(client, model="test-model")

        plan = await planner.generate_queries("<p>content</p>", "SalesRobot")

        assert plan.used_fallback is True
        assert plan.llm_calls == 0
        assert plan.queries == fallback_queries("<p>content</p>", "SalesRobot")
        assert len(client.messages.calls) == 1

    @pytest.mark.asyncio
    async def test_call_failure_falls_back(self, make_llm):
        client = make_llm(RuntimeError("401 invalid x-api-key"))
        planner = QueryPlanner(client, model="test-model")

        plan = await planner.generate_queries("<p>content</p>", "SalesRobot")

        assert plan.used_fallback is True
        assert 1 <= len(plan.queries) <= 8

    @pytest.mark.asyncio
    async def test_respects_configured_max_queries(self, make_llm):
        client = make_llm(str([f"q{i}" for i in range(10)]).replace("'", '"'))
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr(query_planner.settings, "max_search_queries", 3)
            planner = QueryPlanner(client, model="test-model")
            plan = await planner.generate_queries("<p>content</p>", "Title")

        assert plan.queries == ["q0", "q1", "q2"]

    @pytest.mark.asyncio
    async def test_call_timeout_follows_the_deadline(self, make_llm, clock):
        client = make_llm('["q1"]')
        planner = QueryPlanner(client, model="test-model")
        deadline = Deadline.start(240, clock=clock)
        clock.advance(40)

        await planner.generate_queries("<p>content</p>", "Title", deadline=deadline)

        assert client.messages.calls[0]["timeout"] == 200

    @pytest.mark.asyncio
    async def test_call_timeout_without_deadline_uses_pipeline_budget(self, make_llm):
        client = make_llm('["q1"]')
        planner = QueryPlanner(client, model="test-model")

        await planner.generate_queries("<p>content</p>", "Title")

        timeout = client.messages.calls[0]["timeout"]
        assert 0 < timeout <= query_planner.settings.pipeline_budget_seconds
