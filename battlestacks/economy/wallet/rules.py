from __future__ import annotations

import re

from battlestacks.economy.wallet.errors import (
    WalletInsufficientBalanceError,
    WalletValidationError,
)

REDEEM_STATUS_PENDING = "Pending"
REDEEM_STATUS_COMPLETED = "Completed"

PHONE_NUMBER_RE = re.compile(r"^[0-9]{10}$")


def validate_redeem_amount(*, amount: int, wallet_balance: int) -> None:
    if amount <= 0:
        raise WalletValidationError("redeem amount must be positive")
    if amount > wallet_balance:
        raise WalletInsufficientBalanceError


def validate_phone_number(phone_number: str) -> str:
    normalized = phone_number.strip()
    if PHONE_NUMBER_RE.fullmatch(normalized) is None:
        raise WalletValidationError("phone number must have exactly 10 digits")
    return normalized


def validate_upi_id(upi_id: str) -> str:
    normalized = upi_id.strip()
    if len(normalized) < 3 or "@" not in normalized:
        raise WalletValidationError("UPI id must contain '@'")
    return normalized


def apply_payout(*, wallet_balance: int, amount: int) -> int:
    remaining = wallet_balance - amount
    if remaining < 0:
        raise WalletInsufficientBalanceError
    return remaining
