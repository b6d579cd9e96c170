"""
Pydantic schemas for Price Table financing.
Models the loan input, the amortization schedule and the JSON API payload.
"""
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class RateSource(str, Enum):
    """Origin of the monthly rate used in a simulation."""
    USER_PROVIDED = "user_provided"
    EXTERNAL_API = "external_api"

    @property
    def label(self) -> str:
        if self is RateSource.EXTERNAL_API:
            return "API (assumida anual → convertida para mensal)"
        return "Entrada do usuário (mensal)"


class LoanRequest(BaseModel):
    """Financing input. Range checks live in service.validate_loan_request."""
    principal: float = Field(..., description="Financed amount (R$)")
    down_payment: float = Field(default=0.0, description="Down payment (R$)")
    installment_count: int = Field(..., description="Number of monthly installments")
    monthly_rate_percent: Optional[float] = Field(
        default=None,
        description="Monthly rate in percent; None means resolve from the rate provider"
    )

    model_config = ConfigDict(allow_inf_nan=False)


class AmortizationRow(BaseModel):
    """Represents a single row in the amortization schedule."""
    installment_index: int = Field(..., ge=1, description="Installment number (1-based)")
    installment_amount: float = Field(..., description="Fixed installment value")
    interest_portion: float = Field(..., description="Interest paid in this installment")
    principal_portion: float = Field(..., description="Principal amortized in this installment")
    remaining_balance: float = Field(..., ge=0, description="Outstanding balance after payment")


class AmortizationResult(BaseModel):
    """Complete simulation result, echoing the inputs it was computed from."""
    principal: float
    down_payment: float
    installment_count: int
    monthly_rate_percent: float
    rate_source: RateSource
    installment_amount: float = Field(..., description="Fixed installment (PMT)")
    rows: List[AmortizationRow] = Field(..., description="Full amortization schedule")
    total_paid: float
    total_interest: float


class SimulationRequest(BaseModel):
    """
    JSON simulation payload. Field names mirror the HTML form; decimal strings
    may use comma or dot as separator.
    """
    pv: Union[float, str] = Field(..., description="Financed amount (R$)")
    entrada: Optional[Union[float, str]] = Field(default=None, description="Down payment (R$), defaults to 0")
    parcelas: Union[int, str] = Field(..., description="Number of installments")
    juros: Optional[Union[float, str]] = Field(
        default=None,
        description="Monthly rate (%). Omit or send empty to use the current reference rate"
    )
