from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from app.core.config import settings
from app.core.logger import get_logger_with_correlation
from app.core.templating import templates
from app.financiamento.service import (
    LoanValidationError,
    RateUnavailableError,
    build_loan_request,
    simulate,
)
from app.sitemap.service import render_sitemap
from app.taxas import service as taxas_service

router = APIRouter()

FORM_DEFAULTS: Dict[str, str] = {"pv": "20000", "entrada": "", "parcelas": "12", "juros": ""}


def _site_url(request: Request) -> str:
    return (settings.SITE_URL or str(request.base_url)).rstrip("/")


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


def _render_page(
    request: Request,
    form: Dict[str, str],
    error: Optional[str] = None,
    result: Any = None
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "financiamento.html",
        {
            "page": "financiamento",
            "app_name": settings.APP_NAME,
            "canonical_url": f"{_site_url(request)}/",
            "form": form,
            "error": error,
            "result": result,
        }
    )


@router.get("/", response_class=HTMLResponse)
def financing_page(request: Request, acao: Optional[str] = None):
    """Calculator page. With ?acao=taxa the reference rate is returned as JSON instead."""
    if acao == "taxa":
        logger = get_logger_with_correlation(_correlation_id(request))
        quote = taxas_service.fetch_reference_rate()
        logger.info(f"Rate query via page action: ok={quote.ok}")
        return JSONResponse(content=quote.model_dump(mode="json"))

    return _render_page(request, dict(FORM_DEFAULTS))


@router.post("/", response_class=HTMLResponse)
def financing_submit(
    request: Request,
    pv: Optional[str] = Form(None),
    entrada: Optional[str] = Form(None),
    parcelas: Optional[str] = Form(None),
    juros: Optional[str] = Form(None)
):
    """Processes the calculator form and renders the schedule or the error message."""
    correlation_id = _correlation_id(request)
    logger = get_logger_with_correlation(correlation_id)

    form = {
        "pv": pv if pv is not None else FORM_DEFAULTS["pv"],
        "entrada": entrada or "",
        "parcelas": parcelas if parcelas is not None else FORM_DEFAULTS["parcelas"],
        "juros": juros or "",
    }

    try:
        loan = build_loan_request(pv, entrada, parcelas, juros)
        result = simulate(loan, correlation_id)
    except LoanValidationError as e:
        logger.info(f"Form rejected: {e.message}")
        return _render_page(request, form, error=e.message)
    except RateUnavailableError as e:
        logger.warning(f"Rate unavailable: {e.message}")
        return _render_page(request, form, error=e.message)

    return _render_page(request, form, result=result)


@router.get("/sitemap.xml")
def sitemap(request: Request) -> Response:
    """XML sitemap listing the public pages."""
    xml = render_sitemap(_site_url(request))
    return Response(content=xml, media_type="application/xml")
