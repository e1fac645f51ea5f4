from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import route_by_host
from core.domain.models import Coordinates, PassWindow
from core.errors import TransportError, UpstreamError
from core.interfaces.lookups import GeolocationResolver, IPResolver, PassPredictor
from core.services.flyover_pipeline import FlyoverPipeline, PipelineHooks, PipelineStage

VANCOUVER = Coordinates(latitude="49.27670", longitude="-123.13000")


class FakeIP:
    def __init__(self, calls: list[str], result: str = "162.245.144.188", error: Exception | None = None) -> None:
        self.calls, self.result, self.error = calls, result, error

    async def resolve_my_ip(self) -> str:
        self.calls.append("ip")
        if self.error:
            raise self.error
        return self.result


class FakeGeo:
    def __init__(self, calls: list[str], error: Exception | None = None) -> None:
        self.calls, self.error = calls, error
        self.received: list[str] = []

    async def resolve_coordinates(self, ip: str) -> Coordinates:
        self.calls.append("geo")
        self.received.append(ip)
        if self.error:
            raise self.error
        return VANCOUVER


class FakePasses:
    def __init__(self, calls: list[str], passes: list[PassWindow] | None = None, error: Exception | None = None) -> None:
        self.calls, self.error = calls, error
        self.passes = passes if passes is not None else [PassWindow(risetime=134564234, duration=600)]
        self.received: list[Coordinates] = []

    async def predict_passes(self, coords: Coordinates) -> list[PassWindow]:
        self.calls.append("passes")
        self.received.append(coords)
        if self.error:
            raise self.error
        return self.passes


def test_fakes_satisfy_protocols():
    calls: list[str] = []
    assert isinstance(FakeIP(calls), IPResolver)
    assert isinstance(FakeGeo(calls), GeolocationResolver)
    assert isinstance(FakePasses(calls), PassPredictor)


async def test_steps_run_in_order_and_feed_each_other():
    calls: list[str] = []
    geo, passes = FakeGeo(calls), FakePasses(calls)
    pipeline = FlyoverPipeline(FakeIP(calls), geo, passes)

    await pipeline.run()

    assert calls == ["ip", "geo", "passes"]
    assert geo.received == ["162.245.144.188"]
    assert passes.received == [VANCOUVER]


async def test_success_returns_predictor_list_unchanged():
    calls: list[str] = []
    windows = [PassWindow(risetime=300, duration=1), PassWindow(risetime=100, duration=2)]
    pipeline = FlyoverPipeline(FakeIP(calls), FakeGeo(calls), FakePasses(calls, passes=windows))

    result = await pipeline.run()

    assert result == windows
    assert [w.risetime for w in result] == [300, 100]


async def test_ip_failure_short_circuits_with_same_error():
    calls: list[str] = []
    error = UpstreamError("boom", status_code=503, body="boom")
    pipeline = FlyoverPipeline(FakeIP(calls, error=error), FakeGeo(calls), FakePasses(calls))

    with pytest.raises(UpstreamError) as info:
        await pipeline.run()

    assert info.value is error
    assert calls == ["ip"]


async def test_geolocation_failure_skips_predictor():
    calls: list[str] = []
    error = TransportError("down", cause=OSError("refused"))
    pipeline = FlyoverPipeline(FakeIP(calls), FakeGeo(calls, error=error), FakePasses(calls))

    with pytest.raises(TransportError) as info:
        await pipeline.run()

    assert info.value is error
    assert calls == ["ip", "geo"]


async def test_predictor_failure_is_not_wrapped():
    calls: list[str] = []
    error = UpstreamError("Status Code 502", status_code=502, body="")
    pipeline = FlyoverPipeline(FakeIP(calls), FakeGeo(calls), FakePasses(calls, error=error))

    with pytest.raises(UpstreamError) as info:
        await pipeline.run()

    assert info.value is error
    assert info.value.__cause__ is None


async def test_stage_hook_sees_each_stage_once():
    calls: list[str] = []
    stages: list[PipelineStage] = []
    pipeline = FlyoverPipeline(
        FakeIP(calls), FakeGeo(calls), FakePasses(calls), hooks=PipelineHooks(stage_changed=stages.append)
    )

    await pipeline.run()

    assert stages == [
        PipelineStage.AWAITING_IP,
        PipelineStage.AWAITING_COORDINATES,
        PipelineStage.AWAITING_PASSES,
        PipelineStage.DONE,
    ]


async def test_stage_hook_ends_in_failed():
    calls: list[str] = []
    stages: list[PipelineStage] = []
    error = UpstreamError("x", status_code=500, body="x")
    pipeline = FlyoverPipeline(
        FakeIP(calls), FakeGeo(calls, error=error), FakePasses(calls), hooks=PipelineHooks(stage_changed=stages.append)
    )

    with pytest.raises(UpstreamError):
        await pipeline.run()

    assert stages == [PipelineStage.AWAITING_IP, PipelineStage.AWAITING_COORDINATES, PipelineStage.FAILED]
    assert stages[-1].is_terminal


async def test_run_report_keeps_intermediate_values():
    calls: list[str] = []
    report = await FlyoverPipeline(FakeIP(calls), FakeGeo(calls), FakePasses(calls)).run_report()

    assert report.ip == "162.245.144.188"
    assert report.coordinates == VANCOUVER
    assert [p.model_dump() for p in report.passes] == [{"risetime": 134564234, "duration": 600}]


async def test_concurrent_runs_are_independent():
    def build(ip: str) -> FlyoverPipeline:
        calls: list[str] = []
        return FlyoverPipeline(FakeIP(calls, result=ip), FakeGeo(calls), FakePasses(calls))

    first, second = build("1.1.1.1"), build("2.2.2.2")
    results = await asyncio.gather(first.run_report(), second.run_report())

    assert [r.ip for r in results] == ["1.1.1.1", "2.2.2.2"]


class TestOverHttp:
    async def test_vancouver_scenario(self, settings, make_client, scenario_routes):
        seen: list[httpx.Request] = []
        async with make_client(route_by_host(scenario_routes, seen)) as client:
            passes = await FlyoverPipeline.from_settings(settings, client=client).run()

        assert [p.model_dump() for p in passes] == [{"risetime": 134564234, "duration": 600}]
        assert [r.url.host for r in seen] == ["ip.test", "geo.test", "passes.test"]
        assert seen[1].url.path == "/json/162.245.144.188"
        assert seen[2].url.params["lat"] == "49.27670"
        assert seen[2].url.params["lon"] == "-123.13000"

    async def test_ip_service_500_stops_the_chain(self, settings, make_client, scenario_routes):
        seen: list[httpx.Request] = []
        scenario_routes["ip.test"] = httpx.Response(500, text="server error")
        async with make_client(route_by_host(scenario_routes, seen)) as client:
            with pytest.raises(UpstreamError) as info:
                await FlyoverPipeline.from_settings(settings, client=client).run()

        assert info.value.status_code == 500
        assert "server error" in str(info.value)
        assert [r.url.host for r in seen] == ["ip.test"]

    async def test_geolocation_connection_refused(self, settings, make_client, scenario_routes):
        seen: list[httpx.Request] = []

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        scenario_routes["geo.test"] = refuse
        async with make_client(route_by_host(scenario_routes, seen)) as client:
            with pytest.raises(TransportError) as info:
                await FlyoverPipeline.from_settings(settings, client=client).run()

        assert isinstance(info.value.cause, httpx.ConnectError)
        assert [r.url.host for r in seen] == ["ip.test", "geo.test"]

    async def test_ip_with_trailing_newline_stays_in_error_taxonomy(self, settings, make_client, scenario_routes):
        seen: list[httpx.Request] = []
        scenario_routes["ip.test"] = httpx.Response(200, json={"ip": "162.245.144.188\n"})
        async with make_client(route_by_host(scenario_routes, seen)) as client:
            with pytest.raises(TransportError) as info:
                await FlyoverPipeline.from_settings(settings, client=client).run()

        assert isinstance(info.value.cause, httpx.InvalidURL)
        assert [r.url.host for r in seen] == ["ip.test"]
