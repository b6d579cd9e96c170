"""
FastAPI Router for financing simulation endpoints.
Exposes the Price Table calculator as a JSON API.
"""
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Header

from app.financiamento.schemas import AmortizationResult, SimulationRequest
from app.financiamento.service import (
    LoanValidationError,
    RateUnavailableError,
    build_loan_request,
    simulate,
)
from app.core.logger import get_logger_with_correlation

router = APIRouter(tags=["Financing"])


@router.post("/simular", response_model=AmortizationResult)
def simulate_financing(
    data: SimulationRequest,
    x_correlation_id: str = Header(default=None)
) -> AmortizationResult:
    """
    **Price Table financing simulation**

    - **pv**: Financed amount (R$)
    - **entrada**: Down payment (R$), optional
    - **parcelas**: Number of installments
    - **juros**: Monthly rate (%), optional. When omitted the current reference
      rate is fetched (annual) and converted to its monthly equivalent.

    **Returns:**
    - Fixed installment value
    - Total paid and total interest
    - Full amortization schedule
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    logger.info(f"Starting simulation: {data.model_dump()}")

    try:
        loan = build_loan_request(data.pv, data.entrada, data.parcelas, data.juros)
        return simulate(loan, correlation_id)
    except LoanValidationError as e:
        logger.info(f"Simulation rejected: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except RateUnavailableError as e:
        logger.warning(f"Simulation aborted: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)
