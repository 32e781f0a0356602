"""Order confirmation checks, reported as data."""

from __future__ import annotations

import re
from decimal import Decimal

from pydantic import BaseModel

from order_cart.core.config import settings
from order_cart.schemas.form import OrderFormState, OrderType
from order_cart.schemas.session import OrderSession
from order_cart.services.pricing import compute_order_totals, sanitize_price

EMPTY_CART = "The cart is empty."
PREPAYMENT_EXCEEDS_TOTAL = "The prepayment exceeds the order total. Edit the payment before continuing."
TABLE_REQUIRED = "Select a table."
TEMPORARY_TABLE_NAME_REQUIRED = "Enter a name for the temporary table."
TEMPORARY_TABLE_AREA_REQUIRED = "Select an area for the temporary table."
ADDRESS_REQUIRED = "Enter the delivery address."
DELIVERY_PHONE_REQUIRED = "Enter the recipient phone number."
CUSTOMER_NAME_REQUIRED = "Enter the customer name."
PHONE_TOO_SHORT = "The phone number must have at least {digits} digits."

_NON_DIGITS = re.compile(r"\D")


class ValidationResult(BaseModel):
    is_valid: bool
    error_message: str | None = None


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


def _phone_error(phone: str | None) -> str | None:
    if _blank(phone):
        return None
    digits = _NON_DIGITS.sub("", phone or "")
    if len(digits) < settings.min_phone_digits:
        return PHONE_TOO_SHORT.format(digits=settings.min_phone_digits)
    return None


def _form_errors(form: OrderFormState) -> list[str]:
    errors: list[str] = []
    info = form.delivery_info
    if form.order_type == OrderType.DINE_IN:
        if not form.is_temporary_table and not form.selected_table_id:
            errors.append(TABLE_REQUIRED)
        if form.is_temporary_table and _blank(form.temporary_table_name):
            errors.append(TEMPORARY_TABLE_NAME_REQUIRED)
        if form.is_temporary_table and not form.selected_area_id:
            errors.append(TEMPORARY_TABLE_AREA_REQUIRED)
    elif form.order_type == OrderType.DELIVERY:
        if _blank(info.full_address):
            errors.append(ADDRESS_REQUIRED)
        if _blank(info.recipient_phone):
            errors.append(DELIVERY_PHONE_REQUIRED)
        phone_error = _phone_error(info.recipient_phone)
        if phone_error:
            errors.append(phone_error)
    elif form.order_type == OrderType.TAKE_AWAY:
        if _blank(info.recipient_name):
            errors.append(CUSTOMER_NAME_REQUIRED)
        phone_error = _phone_error(info.recipient_phone)
        if phone_error:
            errors.append(phone_error)
    return errors


def _prepayment_error(session: OrderSession) -> str | None:
    if session.is_edit_mode or session.prepayment is None:
        return None
    total = compute_order_totals(session.items, session.adjustments).total
    if Decimal(str(sanitize_price(session.prepayment.amount))) > Decimal(str(total)):
        return PREPAYMENT_EXCEEDS_TOTAL
    return None


def get_validation_errors(session: OrderSession) -> list[str]:
    """Return every reason the order cannot be confirmed yet."""
    errors: list[str] = []
    if not session.items:
        errors.append(EMPTY_CART)
    prepayment_error = _prepayment_error(session)
    if prepayment_error:
        errors.append(prepayment_error)
    errors.extend(_form_errors(session.form))
    return errors


def validate_order_for_confirmation(session: OrderSession) -> ValidationResult:
    """Check the order and report the first failure."""
    errors = get_validation_errors(session)
    if errors:
        return ValidationResult(is_valid=False, error_message=errors[0])
    return ValidationResult(is_valid=True)
