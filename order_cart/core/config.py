"""Engine configuration."""

from decimal import Decimal
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the order-cart engine."""

    temp_item_prefix: str = getenv("CART_TEMP_ITEM_PREFIX", "new-")
    temp_adjustment_prefix: str = getenv("CART_TEMP_ADJUSTMENT_PREFIX", "new-adjustment-")
    max_item_quantity: int = int(getenv("CART_MAX_ITEM_QUANTITY", "9999"))
    max_money_amount: Decimal = Decimal(getenv("CART_MAX_MONEY_AMOUNT", "999999.99"))
    min_phone_digits: int = int(getenv("CART_MIN_PHONE_DIGITS", "10"))
    default_preparation_status: str = getenv("CART_DEFAULT_PREPARATION_STATUS", "PENDING")
    fallback_modifier_name: str = getenv("CART_FALLBACK_MODIFIER_NAME", "Modifier")
    fallback_product_name: str = getenv("CART_FALLBACK_PRODUCT_NAME", "Unknown product")
    reject_zero_total: bool = getenv("CART_REJECT_ZERO_TOTAL", "1") == "1"


settings: Settings = Settings()
