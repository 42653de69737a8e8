"""
Retry step tests - bounded refetching, short-circuit and exhaustion.
"""

import pytest

from helpers import StubTransport, fail, ok
from requestify import (
    PipelineRegistry,
    ResponsePipeline,
    RetryCoordinator,
    json_step,
    refetch_scope,
    retry_step,
)


@pytest.mark.asyncio
async def test_retry_returns_first_success(make_client):
    transport = StubTransport([fail(), fail(), ok({"done": True})])
    api = make_client(transport).register_step(retry_step(2))

    response = await api.get("/retry")

    assert response.is_success
    assert response.json() == {"done": True}
    # initial call + 2 refetches
    assert transport.call_count == 3


@pytest.mark.asyncio
async def test_retry_exhaustion_returns_last_result_without_raising(make_client):
    transport = StubTransport([fail(500, {"n": 1}), fail(502, {"n": 2}), fail(503, {"n": 3})])
    api = make_client(transport).register_step(retry_step(2))

    response = await api.get("/retry-fail")

    assert response.status_code == 503
    assert response.json() == {"n": 3}
    assert transport.call_count == 3


@pytest.mark.asyncio
async def test_retry_short_circuits_before_budget_is_spent(make_client):
    transport = StubTransport([fail(), ok()])
    api = make_client(transport).register_step(retry_step(5))

    response = await api.get("/flaky")

    assert response.is_success
    assert transport.call_count == 2


@pytest.mark.asyncio
async def test_success_is_passed_through_without_refetch(make_client):
    transport = StubTransport([ok({"first": True})])
    api = make_client(transport).register_step(retry_step(3))

    response = await api.get("/fine")

    assert response.json() == {"first": True}
    assert transport.call_count == 1


@pytest.mark.asyncio
async def test_zero_attempts_never_refetches(make_client):
    transport = StubTransport([fail()])
    api = make_client(transport).register_step(retry_step(0))

    response = await api.get("/once")

    assert response.status_code == 500
    assert transport.call_count == 1


@pytest.mark.asyncio
async def test_refetch_reuses_the_final_request(make_client):
    transport = StubTransport([fail(), ok()])
    api = make_client(transport).register_step(retry_step(1))

    await api.get("/items", {"params": {"page": 2}, "headers": {"X-Trace": "t1"}})

    (m1, url1, cfg1), (m2, url2, cfg2) = transport.calls
    assert (m1, url1) == (m2, url2) == ("GET", "https://api.test/items?page=2")
    assert cfg1 is cfg2
    assert cfg2.headers["X-Trace"] == "t1"


@pytest.mark.asyncio
async def test_retry_before_parsing_feeds_parsed_success(make_client):
    transport = StubTransport([fail(), ok({"id": 7})])
    api = make_client(transport).register_step(retry_step(1)).register_step(json_step())

    assert await api.get("/thing") == {"id": 7}


@pytest.mark.asyncio
async def test_without_refetch_capability_result_falls_through():
    registry = PipelineRegistry([retry_step(3)])
    failed = fail(404)

    result = await ResponsePipeline(registry).run(failed)

    assert result is failed


@pytest.mark.asyncio
async def test_refetch_scope_counts_invocations():
    calls = []

    async def refetch():
        calls.append(1)
        return fail()

    registry = PipelineRegistry([retry_step(4)])
    with refetch_scope(refetch):
        result = await ResponsePipeline(registry).run(fail())

    assert len(calls) == 4
    assert result.status_code == 500


@pytest.mark.asyncio
async def test_custom_success_predicate():
    async def refetch():
        return {"ok": True}

    step = retry_step(1, success=lambda value: value.get("ok", False))
    with refetch_scope(refetch):
        assert await step.after({"ok": False}) == {"ok": True}


@pytest.mark.asyncio
async def test_backoff_delay_sleeps_between_attempts(monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr("requestify.steps.retry.asyncio.sleep", fake_sleep)

    async def refetch():
        return fail()

    step = retry_step(3, delay=0.1)
    with refetch_scope(refetch):
        await step.after(fail())

    assert len(delays) == 3
    assert 0.1 <= delays[0] <= 0.15
    assert 0.4 <= delays[2] <= 0.45


def test_negative_attempts_rejected():
    with pytest.raises(ValueError):
        RetryCoordinator(-1)


def test_retry_step_defaults():
    step = retry_step()
    assert step.name == "retry"
    assert step.max_attempts == 3
    assert step.before is None


def test_step_name_is_read_only():
    step = RetryCoordinator(1, name="retry_once")

    with pytest.raises(AttributeError):
        step.name = "renamed"
    assert step.name == "retry_once"
