"""SimpleFIN Account Set response objects. Use with caution."""

# ruff: noqa: D101  # Missing docstring in public class

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from .simplefin import SimpleFINError


class OrganizationModel(BaseModel):
    domain: str | None = None
    sfin_url: str = Field(alias="sfin-url")
    name: str | None = None
    url: str | None = None
    id: str | None = None


class TransactionModel(BaseModel):
    """Single transaction in an account."""

    id: str
    posted: int
    """Epoch seconds; 0 while pending."""
    amount: str
    """Decimal string, negative for money leaving the account."""
    description: str
    transacted_at: int | None = None
    pending: bool = False


class AccountModel(BaseModel):
    """Single account in an Account Set."""

    org: OrganizationModel
    id: str
    name: str
    currency: str
    balance: str
    available_balance: str | None = Field(default=None, alias="available-balance")
    balance_date: int = Field(alias="balance-date")
    transactions: list[TransactionModel] = []


class AccountSetModel(BaseModel):
    """SimpleFIN response to GET /accounts."""

    errors: list[str] = []
    accounts: list[AccountModel] = []


def parse_account_set(resp_json: object) -> AccountSetModel:
    """Validate a `get_accounts` response.

    Args:
        resp_json: JSON value returned by `SimpleFIN.get_accounts`.

    Returns:
        The validated account set.

    Raises:
        SimpleFINError: if the response does not match the Account Set format.

    """
    try:
        return AccountSetModel.model_validate(resp_json)
    except ValidationError as e:
        msg = "Failed to parse get_accounts response"
        raise SimpleFINError(msg) from e
