"""Per-session holder of order state and the confirmation flow."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel

from order_cart.core.config import settings
from order_cart.schemas.menu import MenuCategory
from order_cart.schemas.order import OrderPayload, OrderSnapshot
from order_cart.schemas.session import OrderSession, SessionUpdate
from order_cart.services import order_session
from order_cart.services.payload_service import prepare_order_payload
from order_cart.services.validation import validate_order_for_confirmation

logger = logging.getLogger(__name__)

NON_POSITIVE_TOTAL = "The order total must be greater than 0."

SubmitOrder = Callable[[OrderPayload], Any]


class OrderCartError(Exception):
    """Base error for the order-cart engine."""


class ConfirmInProgressError(OrderCartError):
    """Raised when a confirmation is requested while another one is running."""


class MissingUserError(OrderCartError):
    """Raised when an order is confirmed without a user id."""


class ConfirmPhase(str, Enum):
    IDLE = "IDLE"
    CONFIRMING = "CONFIRMING"


class ConfirmResult(BaseModel):
    confirmed: bool
    error_message: str | None = None
    payload: OrderPayload | None = None


class OrderContext:
    """Current state of one open order.

    Reducers from ``order_session`` are pure; the context only swaps the state
    record they return. Several contexts may coexist, one per open order.
    """

    def __init__(self, state: OrderSession | None = None, catalog: Sequence[MenuCategory] | None = None) -> None:
        self._state: OrderSession = state or order_session.new_session()
        self.catalog = catalog
        self._confirm_lock = threading.Lock()

    @property
    def state(self) -> OrderSession:
        return self._state

    @property
    def phase(self) -> ConfirmPhase:
        return ConfirmPhase.CONFIRMING if self._confirm_lock.locked() else ConfirmPhase.IDLE

    @property
    def has_unsaved_changes(self) -> bool:
        return self._state.has_unsaved_changes

    def apply(self, reducer: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a session reducer against the current state and keep its result.

        Returns the reducer's result: the new session, or a ``SessionUpdate``
        for cart operations that may be refused.
        """
        result = reducer(self._state, *args, **kwargs)
        if isinstance(result, SessionUpdate):
            self._state = result.state
        else:
            self._state = result
        return result

    def load_order_for_editing(self, order: OrderSnapshot | Mapping[str, Any]) -> OrderSession:
        self._state = order_session.load_order_for_editing(order, self.catalog)
        return self._state

    def reset_order(self) -> OrderSession:
        self._state = order_session.reset_order()
        return self._state

    def confirm_order(self, user_id: str | None, submit: SubmitOrder) -> ConfirmResult:
        """Validate, build and submit the order; only one confirmation may run at a time.

        Exceptions raised by ``submit`` propagate unchanged and leave the state
        untouched. When ``submit`` returns the saved order while editing, the
        session is reloaded from it; otherwise the current state becomes the
        new baseline.
        """
        if not self._confirm_lock.acquire(blocking=False):
            raise ConfirmInProgressError("An order confirmation is already in progress.")
        try:
            if not user_id:
                raise MissingUserError("A user id is required to confirm an order.")

            validation = validate_order_for_confirmation(self._state)
            if not validation.is_valid:
                return ConfirmResult(confirmed=False, error_message=validation.error_message)

            payload = prepare_order_payload(self._state)
            if payload is None:
                return ConfirmResult(confirmed=False, error_message=validation.error_message)
            if settings.reject_zero_total and payload.total <= 0:
                logger.warning("[CONFIRM] Rejected order %s with total %.2f.", self._state.order_id, payload.total)
                return ConfirmResult(confirmed=False, error_message=NON_POSITIVE_TOTAL)

            payload = payload.model_copy(update={"user_id": user_id})
            saved = submit(payload)

            if self._state.is_edit_mode:
                if saved is not None:
                    self._state = order_session.load_order_for_editing(saved, self.catalog)
                else:
                    self._state = order_session.mark_saved(self._state)
            else:
                self._state = order_session.reset_order()
            logger.info("[CONFIRM] Order confirmed by user %s (%s rows).", user_id, len(payload.items))
            return ConfirmResult(confirmed=True, payload=payload)
        finally:
            self._confirm_lock.release()
