"""
Unit tests for the reference rate module.
Covers payload extraction, annual-to-monthly conversion and provider failures.
"""
import httpx
import pytest

from app.core.config import settings
from app.taxas.schemas import RateQuoteFailure, RateQuoteSuccess
from app.taxas.service import annual_percent_to_monthly, extract_rate, fetch_reference_rate

BRASILAPI_PAYLOAD = [
    {"nome": "Selic", "valor": 13.75},
    {"nome": "CDI", "valor": 13.65},
    {"nome": "IPCA", "valor": 4.62},
]


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("payload, expected", [
    ([{"taxa": 13.75}], 13.75),
    ([{"foo": "bar", "x": 5}], 5.0),
    (BRASILAPI_PAYLOAD, 13.75),
    (13.75, 13.75),
    ("10.5", 10.5),
    ([{"nome": "Selic", "numero": 3, "percentual": 9.5}], 9.5),   # key priority beats position
    ([{"nome": "Selic", "valor": "12,5", "taxa": 11}], 11.0),      # non-numeric preferred key is skipped
    ([{"nome": "a"}, "scalar", {"nome": "b", "valor": "14.25"}], 14.25),
    ([{"ativo": True, "valor": None, "x": 2}], 2.0),               # booleans and nulls are not numbers
    ({"selic": {"valor": 10.5}}, 10.5),
])
def test_extract_rate(payload, expected):
    assert extract_rate(payload) == expected


@pytest.mark.parametrize("payload", [
    "not json",
    [],
    [{"nome": "Selic"}],
    [1, 2, 3],
    {"taxa": 13.75},
    None,
    True,
])
def test_extract_rate_without_number(payload):
    assert extract_rate(payload) is None


def test_extract_rate_stops_at_first_match():
    payload = [{"nome": "primeiro", "x": 1}, {"valor": 99}]
    assert extract_rate(payload) == 1.0


def test_annual_to_monthly_zero():
    assert annual_percent_to_monthly(0) == 0


def test_annual_to_monthly_compounds_back():
    monthly = annual_percent_to_monthly(13.75)

    assert monthly == pytest.approx(1.0794, abs=1e-4)
    assert (1 + monthly / 100) ** 12 == pytest.approx(1.1375)


def test_annual_to_monthly_is_increasing():
    inputs = [-99.9, -50.0, -1.0, 0.0, 0.5, 10.0, 13.75, 100.0, 1000.0]
    outputs = [annual_percent_to_monthly(v) for v in inputs]

    assert outputs == sorted(outputs)
    assert len(set(outputs)) == len(outputs)


def test_annual_to_monthly_rejects_non_positive_base():
    with pytest.raises(ValueError):
        annual_percent_to_monthly(-100)


def test_fetch_success_sends_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["accept"] = request.headers.get("accept")
        seen["user_agent"] = request.headers.get("user-agent")
        return httpx.Response(200, json=BRASILAPI_PAYLOAD)

    with _client(handler) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteSuccess)
    assert result.ok is True
    assert result.valor == 13.75
    assert result.raw == BRASILAPI_PAYLOAD
    assert seen["url"] == settings.RATE_API_URL
    assert seen["accept"] == "application/json"
    assert seen["user_agent"] == settings.RATE_API_USER_AGENT


def test_fetch_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    with _client(handler) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.ok is False
    assert result.message == "Erro ao conectar na API: Name or service not known"


def test_fetch_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _client(handler) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message.startswith("Erro ao conectar na API")


def test_fetch_http_error_status():
    with _client(lambda request: httpx.Response(503, text="unavailable")) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message.startswith("Erro ao conectar na API")


def test_fetch_empty_body():
    with _client(lambda request: httpx.Response(200, content=b"")) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message.startswith("Erro ao conectar na API")


def test_fetch_invalid_json():
    with _client(lambda request: httpx.Response(200, text="not json")) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message == "Resposta inválida da API"


def test_fetch_null_body_is_invalid():
    with _client(lambda request: httpx.Response(200, text="null")) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message == "Resposta inválida da API"


def test_fetch_integer_beyond_float_range():
    body = b'[{"nome": "Selic", "valor": 1' + b"0" * 400 + b"}]"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"Content-Type": "application/json"})

    with _client(handler) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message == "Não foi possível extrair taxa da resposta da API"


def test_extract_rate_skips_integers_beyond_float_range():
    assert extract_rate([{"valor": 10 ** 400, "x": 2}]) == 2.0


def test_fetch_without_rate():
    with _client(lambda request: httpx.Response(200, json=[{"nome": "Selic"}])) as client:
        result = fetch_reference_rate(client)

    assert isinstance(result, RateQuoteFailure)
    assert result.message == "Não foi possível extrair taxa da resposta da API"


def test_quote_wire_format():
    success = RateQuoteSuccess(valor=13.75, raw=[{"valor": 13.75}])
    failure = RateQuoteFailure(message="Resposta inválida da API")

    assert success.model_dump() == {"ok": True, "valor": 13.75, "raw": [{"valor": 13.75}]}
    assert failure.model_dump() == {"ok": False, "message": "Resposta inválida da API"}
