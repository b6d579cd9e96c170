"""
Pydantic schemas for reference rate quotes.
The serialized form is the public contract of the rate query endpoint.
"""
from typing import Any, Literal, Union
from pydantic import BaseModel, Field


class RateQuoteSuccess(BaseModel):
    """Rate successfully extracted from the provider response."""
    ok: Literal[True] = True
    valor: float = Field(..., description="Annual rate in percent (e.g. 13.75)")
    raw: Any = Field(None, description="Full parsed provider payload")


class RateQuoteFailure(BaseModel):
    """Provider unreachable or response unusable."""
    ok: Literal[False] = False
    message: str = Field(..., description="Human readable failure reason")


RateQuoteResult = Union[RateQuoteSuccess, RateQuoteFailure]
