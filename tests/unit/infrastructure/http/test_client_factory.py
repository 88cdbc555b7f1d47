import dataclasses
import httpx
import pytest

from catfacts.domain.events.api_events import FactFetched
from catfacts.infrastructure.http.client_factory import (
    ClientSettings,
    HttpClientFactory,
    transient_http_error_policy,
)
from catfacts.infrastructure.monitoring.policy_observers import EventRecorder

BASE_URL = "https://catfact.ninja/"

def make_factory(server, policy=None, event_sink=None):
    factory = HttpClientFactory(transport=httpx.MockTransport(server), event_sink=event_sink)
    factory.register("CatFacts", ClientSettings(base_url=BASE_URL, policy=policy))
    return factory

@pytest.mark.asyncio
async def test_get_string_resolves_path_against_base_url(fake_server):
    async with make_factory(fake_server).create_client("CatFacts") as client:
        payload = await client.get_string("fact")

    assert "Cats sleep 70% of their lives." in payload
    assert str(fake_server.requests[0].url) == "https://catfact.ninja/fact"
    assert fake_server.requests[0].headers["Accept"] == "application/json"

@pytest.mark.asyncio
async def test_non_success_status_raises_without_policy(make_server):
    server = make_server(fail_times=1, status_code=503)
    async with make_factory(server).create_client("CatFacts") as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_string("fact")
    assert len(server.requests) == 1

@pytest.mark.asyncio
async def test_transient_policy_retries_server_errors_with_fixed_delay(make_server, recording_sleep):
    server = make_server(fail_times=3, status_code=503)
    policy = transient_http_error_policy(retry_count=5, delay_seconds=0.5, sleep=recording_sleep)

    async with make_factory(server, policy).create_client("CatFacts") as client:
        payload = await client.get_string("fact")

    assert "Cats sleep" in payload
    assert len(server.requests) == 4
    assert recording_sleep.waits == [0.5, 0.5, 0.5]

@pytest.mark.asyncio
async def test_transient_policy_gives_up_after_retry_count(make_server, recording_sleep):
    server = make_server(fail_times=100, status_code=500)
    policy = transient_http_error_policy(retry_count=5, delay_seconds=0.5, sleep=recording_sleep)

    async with make_factory(server, policy).create_client("CatFacts") as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_string("fact")

    assert len(server.requests) == 6

@pytest.mark.asyncio
async def test_client_errors_are_not_retried(make_server, recording_sleep):
    server = make_server(fail_times=100, status_code=404)
    policy = transient_http_error_policy(retry_count=5, delay_seconds=0.5, sleep=recording_sleep)

    async with make_factory(server, policy).create_client("CatFacts") as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_string("fact")

    assert len(server.requests) == 1
    assert recording_sleep.waits == []

@pytest.mark.asyncio
async def test_successful_fetch_emits_event(fake_server):
    recorder = EventRecorder()
    async with make_factory(fake_server, event_sink=recorder).create_client("CatFacts") as client:
        payload = await client.get_string("fact")

    events = recorder.of_type(FactFetched)
    assert len(events) == 1
    assert events[0].client_name == "CatFacts"
    assert events[0].path == "fact"
    assert events[0].payload_length == len(payload)
    assert [f.name for f in dataclasses.fields(events[0])] == [
        "client_name", "path", "latency_ms", "payload_length", "timestamp",
    ]

def test_unknown_client_name_raises_key_error():
    with pytest.raises(KeyError, match="Nope"):
        HttpClientFactory().create_client("Nope")

def test_negative_retry_count_rejected():
    with pytest.raises(ValueError):
        transient_http_error_policy(retry_count=-1, delay_seconds=0.5)
