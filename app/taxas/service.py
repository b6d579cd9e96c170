"""
Reference rate resolution.
Fetches the current annual rate from the public rate provider and converts
annual percentages into equivalent monthly compound rates.
"""
import math
import re
from typing import Any, Iterator, Optional

import httpx

from app.core.config import settings
from app.core.logger import logger
from app.taxas.schemas import RateQuoteFailure, RateQuoteResult, RateQuoteSuccess

# Keys most likely to hold the rate, in lookup order
CANDIDATE_KEYS = ("valor", "taxa", "percentual", "numero")

_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def _as_number(value: Any) -> Optional[float]:
    """Returns the value as float when it is a finite number or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str) and _NUMERIC_STRING.match(value):
        number = float(value)
    else:
        return None
    return number if math.isfinite(number) else None


def _element_candidates(element: Any) -> Iterator[Any]:
    """Candidate values of one element: preferred keys first, then every value in order."""
    if isinstance(element, dict):
        for key in CANDIDATE_KEYS:
            if key in element and _as_number(element[key]) is not None:
                yield element[key]
        yield from element.values()
    elif isinstance(element, list):
        yield from element


def _candidates(payload: Any) -> Iterator[Any]:
    if isinstance(payload, dict):
        elements = payload.values()
    elif isinstance(payload, list):
        elements = payload
    else:
        yield payload
        return

    for element in elements:
        yield from _element_candidates(element)


def extract_rate(payload: Any) -> Optional[float]:
    """
    Finds the rate inside a provider payload.

    A bare number is used directly. For a list (or object) of records, each record
    is checked for the keys valor, taxa, percentual and numero, then its values are
    scanned in order. The first numeric value found anywhere wins.
    """
    for candidate in _candidates(payload):
        number = _as_number(candidate)
        if number is not None:
            return number
    return None


def fetch_reference_rate(client: Optional[httpx.Client] = None) -> RateQuoteResult:
    """
    Queries the rate provider and returns a tagged result.
    Never raises: transport and parsing problems become RateQuoteFailure.
    """
    headers = {
        "Accept": "application/json",
        "User-Agent": settings.RATE_API_USER_AGENT,
    }

    try:
        if client is None:
            with httpx.Client(timeout=settings.RATE_API_TIMEOUT) as own_client:
                response = own_client.get(settings.RATE_API_URL, headers=headers)
        else:
            response = client.get(settings.RATE_API_URL, headers=headers, timeout=settings.RATE_API_TIMEOUT)
        response.raise_for_status()
    except httpx.HTTPError as e:
        reason = str(e) or e.__class__.__name__
        logger.warning(f"Rate provider request failed: {reason}")
        return RateQuoteFailure(message=f"Erro ao conectar na API: {reason}")

    if not response.content:
        logger.warning("Rate provider returned an empty body")
        return RateQuoteFailure(message="Erro ao conectar na API: resposta vazia")

    try:
        data = response.json()
    except ValueError:
        data = None

    # A literal null body is as unusable as malformed JSON
    if data is None:
        logger.warning("Rate provider returned invalid JSON")
        return RateQuoteFailure(message="Resposta inválida da API")

    valor = extract_rate(data)
    if valor is None:
        logger.warning("No numeric rate found in provider response")
        return RateQuoteFailure(message="Não foi possível extrair taxa da resposta da API")

    logger.info(f"Reference rate fetched: {valor}% a.a.")
    return RateQuoteSuccess(valor=valor, raw=data)


def annual_percent_to_monthly(annual_percent: float) -> float:
    """
    Equivalent monthly compound rate, in percent.

    Formula: i_m = (1 + i_a)^(1/12) - 1
    """
    if annual_percent <= -100:
        raise ValueError("Annual rate must be greater than -100%")

    monthly = (1 + annual_percent / 100.0) ** (1 / 12) - 1
    return monthly * 100
