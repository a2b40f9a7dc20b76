"""Provider response DTOs.

Framework-agnostic, immutable pydantic models for the provider's order
status payload.  The provider speaks camelCase; fields are exposed in
snake_case through aliases.  The verbatim payload is kept in ``raw`` so
operators can see exactly what the provider returned.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderStatusResponse(BaseModel):
    """One order's status as reported by the provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    status: str = ""
    simplified_status: Optional[str] = Field(default=None, alias="simplifiedStatus")
    account_check: Optional[str] = Field(default=None, alias="accountCheck")
    account_check_long: Optional[str] = Field(default=None, alias="accountCheckLong")
    economy_state: Optional[str] = Field(default=None, alias="economyState")
    economy_state_long: Optional[str] = Field(default=None, alias="economyStateLong")
    to_pay: Optional[Decimal] = Field(default=None, alias="toPay")
    amount: Optional[Decimal] = None
    amount_ordered: Optional[Decimal] = Field(default=None, alias="amountOrdered")
    external_order_id: Optional[str] = Field(default=None, alias="externalOrderID")
    was_aborted: bool = Field(default=False, alias="wasAborted")
    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @field_validator(
        "simplified_status",
        "account_check",
        "account_check_long",
        "economy_state",
        "economy_state_long",
        "external_order_id",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("status", mode="before")
    @classmethod
    def status_to_str(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("to_pay", "amount", "amount_ordered", mode="before")
    @classmethod
    def blank_number_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("was_aborted", mode="before")
    @classmethod
    def flag_to_bool(cls, v: Any) -> bool:
        return bool(v) and v not in ("0", "false", "False")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> ProviderStatusResponse:
        """Validate a provider JSON object and keep the verbatim copy."""
        return cls.model_validate({**payload, "raw": dict(payload)})

    @property
    def status_detail(self) -> str:
        """Most descriptive diagnostic text the provider gave."""
        return self.economy_state_long or self.economy_state or self.status
