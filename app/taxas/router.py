"""
FastAPI Router for reference rate queries.
"""
from typing import Annotated, Optional
from uuid import uuid4

from fastapi import APIRouter, Header

from app.core.logger import audit_log, get_logger_with_correlation
from app.taxas.schemas import RateQuoteResult
from app.taxas import service

router = APIRouter(tags=["Rates"])


@router.get("/referencia", response_model=RateQuoteResult)
def get_reference_rate(
    x_correlation_id: Annotated[Optional[str], Header()] = None
) -> RateQuoteResult:
    """
    Fetches the current reference rate from BrasilAPI.

    **Returns:**
    - `{"ok": true, "valor": <annual %>, "raw": <provider payload>}` on success
    - `{"ok": false, "message": "..."}` when the provider is unavailable
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    result = service.fetch_reference_rate()
    logger.info(f"Reference rate query finished: ok={result.ok}")

    audit_log(
        action="reference_rate_query",
        user="anonymous",
        resource="taxas",
        details={"correlation_id": correlation_id, "ok": result.ok}
    )

    return result
