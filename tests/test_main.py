from __future__ import annotations

import httpx
import pytest

from fakes import RecordingHandler, autocomplete_payload, prediction
from placefinder import main as main_module


@pytest.fixture
def configured_env(monkeypatch):
    monkeypatch.setenv("PLACEFINDER_GOOGLE__API_KEY", "cli-key")
    monkeypatch.setattr(main_module, "configure_logging", lambda level: None)
    main_module.get_settings.cache_clear()
    yield
    main_module.get_settings.cache_clear()


def _output_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if "\t" in line]


@pytest.mark.asyncio
async def test_main_prints_matches(configured_env, capsys):
    handler = RecordingHandler(
        httpx.Response(
            200,
            json=autocomplete_payload(prediction("p1", "Springfield", "IL, USA"), prediction("p2", "Springfield", "MO, USA")),
        )
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        code = await main_module.main(["springfield", "--language", "it"], client=client)

    assert code == 0
    assert _output_lines(capsys.readouterr().out) == ["Springfield\tIL, USA", "Springfield\tMO, USA"]
    assert handler.requests[0].url.params["language"] == "it"
    assert handler.requests[0].url.params["key"] == "cli-key"


@pytest.mark.asyncio
async def test_main_resolves_details(configured_env, capsys):
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/autocomplete/json"):
            return httpx.Response(200, json=autocomplete_payload(prediction("p1", "Springfield", "IL")))
        return httpx.Response(200, json={"status": "OK", "result": {"name": "Springfield", "place_id": "p1"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(RecordingHandler(respond))) as client:
        code = await main_module.main(["springfield", "--details"], client=client)

    assert code == 0
    assert '"place_id":"p1"' in capsys.readouterr().out


@pytest.mark.asyncio
async def test_main_reports_errors(configured_env, capsys):
    handler = RecordingHandler(httpx.Response(200, json=autocomplete_payload(status="ZERO_RESULTS")))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        code = await main_module.main(["nowhere"], client=client)

    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_parser_rejects_unknown_language():
    with pytest.raises(SystemExit):
        main_module.build_parser().parse_args(["x", "--language", "klingon"])
