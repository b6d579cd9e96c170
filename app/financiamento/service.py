"""
Business logic for Price Table financing.
Validates the loan input, resolves the monthly rate and builds the amortization schedule.
"""
import math
import re
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from app.core.logger import audit_log, get_logger_with_correlation, logger
from app.financiamento.schemas import AmortizationResult, AmortizationRow, LoanRequest, RateSource
from app.taxas.schemas import RateQuoteFailure
from app.taxas.service import annual_percent_to_monthly, fetch_reference_rate

INVALID_INPUT_MESSAGE = "Informe o valor do principal, entrada e o número de parcelas válidos."

_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_INTEGER = re.compile(r"^[+-]?\d+$")


class LoanValidationError(ValueError):
    """Loan input is malformed or out of range. The message is safe to show to users."""

    def __init__(self, message: str = INVALID_INPUT_MESSAGE):
        super().__init__(message)
        self.message = message


class RateUnavailableError(RuntimeError):
    """No rate was informed and the reference rate could not be resolved."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def parse_decimal(raw: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Parses a form decimal. Accepts comma or dot as separator ("1500,50", "1500.50").
    Empty or missing input returns the default.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise LoanValidationError()
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if text == "":
            return default
        text = text.replace(",", ".")
        if not _DECIMAL.match(text):
            raise LoanValidationError()
        value = float(text)

    if not math.isfinite(value):
        raise LoanValidationError()
    return value


def parse_installments(raw: Any) -> int:
    """Parses the installment count. Only whole numbers are accepted."""
    if isinstance(raw, bool) or raw is None:
        raise LoanValidationError()
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not raw.is_integer():
            raise LoanValidationError()
        return int(raw)

    text = str(raw).strip()
    if not _INTEGER.match(text):
        raise LoanValidationError()
    return int(text)


def build_loan_request(pv: Any, entrada: Any, parcelas: Any, juros: Any) -> LoanRequest:
    """
    Builds a LoanRequest from raw form values.
    An empty or missing rate means "resolve automatically"; an explicit 0 is kept.
    """
    try:
        return LoanRequest(
            principal=parse_decimal(pv, default=0.0),
            down_payment=parse_decimal(entrada, default=0.0),
            installment_count=parse_installments(parcelas),
            monthly_rate_percent=parse_decimal(juros, default=None),
        )
    except ValidationError:
        raise LoanValidationError()


def validate_loan_request(request: LoanRequest) -> None:
    """
    Enforces the loan invariants. Must run before any rate lookup or calculation.

    Rules: principal > 0, installments > 0, down payment >= 0 and strictly below the principal.
    """
    if (
        request.principal <= 0
        or request.installment_count <= 0
        or request.down_payment < 0
        or request.down_payment >= request.principal
    ):
        raise LoanValidationError()


def resolve_monthly_rate(request: LoanRequest) -> Tuple[float, RateSource]:
    """
    Picks the monthly rate: the informed one wins (zero included), otherwise the
    annual reference rate is fetched and converted to its monthly equivalent.
    """
    if request.monthly_rate_percent is not None:
        return request.monthly_rate_percent, RateSource.USER_PROVIDED

    quote = fetch_reference_rate()
    if isinstance(quote, RateQuoteFailure):
        raise RateUnavailableError(f"Não foi possível obter taxa da API: {quote.message}")

    try:
        monthly = annual_percent_to_monthly(quote.valor)
    except ValueError:
        raise RateUnavailableError("Não foi possível obter taxa da API: taxa fora do intervalo válido")

    logger.info(f"Reference rate {quote.valor}% a.a. converted to {monthly:.6f}% a.m.")
    return monthly, RateSource.EXTERNAL_API


def compute_schedule(
    request: LoanRequest,
    monthly_rate_percent: float,
    rate_source: RateSource
) -> AmortizationResult:
    """
    Calculates the amortization schedule using the Price Table method.

    PMT, by case:
    - i == 0: PMT = PV / n (the down payment is not netted out here)
    - entrada > 0: PMT = (PV - entrada) * [i(1+i)^n] / [(1+i)^n - 1]
    - otherwise: PMT = PV * i / [1 - (1+i)^-n]

    The schedule always starts from PV - entrada. The input must already be validated.
    """
    i = monthly_rate_percent / 100.0
    pv = request.principal
    down_payment = request.down_payment
    n = request.installment_count

    if i == 0:
        installment = pv / n
    elif down_payment > 0:
        factor = (1 + i) ** n
        installment = (pv - down_payment) * (i * factor) / (factor - 1)
    else:
        installment = (pv * i) / (1 - (1 + i) ** (-n))

    rows: List[AmortizationRow] = []
    balance = pv - down_payment
    total_paid = 0.0
    total_interest = 0.0

    for month in range(1, n + 1):
        interest = balance * i
        principal = installment - interest
        # Clamp rounding residue at the end of the schedule
        balance = max(0.0, balance - principal)

        rows.append(AmortizationRow(
            installment_index=month,
            installment_amount=installment,
            interest_portion=interest,
            principal_portion=principal,
            remaining_balance=balance
        ))
        total_paid += installment
        total_interest += interest

    return AmortizationResult(
        principal=pv,
        down_payment=down_payment,
        installment_count=n,
        monthly_rate_percent=monthly_rate_percent,
        rate_source=rate_source,
        installment_amount=installment,
        rows=rows,
        total_paid=total_paid,
        total_interest=total_interest
    )


def simulate(request: LoanRequest, correlation_id: Optional[str] = None) -> AmortizationResult:
    """Validates the request, resolves the rate and computes the schedule."""
    log = get_logger_with_correlation(correlation_id or "N/A")

    validate_loan_request(request)
    monthly_rate_percent, rate_source = resolve_monthly_rate(request)

    try:
        result = compute_schedule(request, monthly_rate_percent, rate_source)
    except (OverflowError, ZeroDivisionError):
        log.warning(f"Schedule overflow: rate={monthly_rate_percent}, installments={request.installment_count}")
        raise LoanValidationError("Os valores informados geram uma prestação fora do intervalo calculável.")

    log.info(
        f"Simulation calculated: principal={request.principal}, installments={request.installment_count}, "
        f"installment={round(result.installment_amount, 2)}, source={rate_source.value}"
    )

    audit_log(
        action="financing_simulation",
        user="anonymous",
        resource="financiamento",
        details={
            "correlation_id": correlation_id,
            "principal": request.principal,
            "installments": request.installment_count,
            "rate_source": rate_source.value
        }
    )

    return result
