"""Tuning knobs for validation, duplicate detection and batch sync."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_bool, env_float, env_int, env_str
from .errors import InvalidSettingError

ENV_PREFIX: Final[str] = "SHEETORDERS_"

DEFAULT_SUGGESTION_THRESHOLD = 0.6
DEFAULT_SUGGESTION_LIMIT = 5
DEFAULT_PRODUCT_SCAN_LIMIT = 50
DEFAULT_FLAG_THRESHOLD = 0.85
DEFAULT_EXTENDED_WINDOW_DAYS = 1
DEFAULT_PRICE_VARIANCE_THRESHOLD = 0.20
DEFAULT_MESSAGE_MAX_LENGTH = 500
DEFAULT_BATCH_SIZE = 50
DEFAULT_VALIDATION_WORKERS = 8
DEFAULT_ORDER_NUMBER_RETRIES = 3
DEFAULT_LOCALE = "en"


@dataclass(frozen=True, slots=True)
class IngestSettings:
    suggestion_threshold: float = DEFAULT_SUGGESTION_THRESHOLD
    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT
    product_scan_limit: int = DEFAULT_PRODUCT_SCAN_LIMIT
    flag_threshold: float = DEFAULT_FLAG_THRESHOLD
    extended_window_days: int = DEFAULT_EXTENDED_WINDOW_DAYS
    price_variance_threshold: float = DEFAULT_PRICE_VARIANCE_THRESHOLD
    message_max_length: int = DEFAULT_MESSAGE_MAX_LENGTH
    batch_size: int = DEFAULT_BATCH_SIZE
    validation_workers: int = DEFAULT_VALIDATION_WORKERS
    order_number_retries: int = DEFAULT_ORDER_NUMBER_RETRIES
    auto_create_products: bool = True
    default_locale: str = DEFAULT_LOCALE

    def __post_init__(self) -> None:
        for name in ("suggestion_threshold", "flag_threshold", "price_variance_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidSettingError(name, value, "within [0, 1]")
        for name in (
            "suggestion_limit",
            "product_scan_limit",
            "batch_size",
            "validation_workers",
            "order_number_retries",
        ):
            if getattr(self, name) < 1:
                raise InvalidSettingError(name, getattr(self, name), "positive")
        if self.extended_window_days < 0:
            raise InvalidSettingError(
                "extended_window_days", self.extended_window_days, "non-negative"
            )
        # room for the "..." truncation marker
        if self.message_max_length < 4:
            raise InvalidSettingError("message_max_length", self.message_max_length, "at least 4")


def get_ingest_settings() -> IngestSettings:
    """Build settings from ``SHEETORDERS_*`` environment overrides."""

    return IngestSettings(
        suggestion_threshold=env_float(
            f"{ENV_PREFIX}SUGGESTION_THRESHOLD", DEFAULT_SUGGESTION_THRESHOLD
        ),
        suggestion_limit=env_int(f"{ENV_PREFIX}SUGGESTION_LIMIT", DEFAULT_SUGGESTION_LIMIT),
        product_scan_limit=env_int(f"{ENV_PREFIX}PRODUCT_SCAN_LIMIT", DEFAULT_PRODUCT_SCAN_LIMIT),
        flag_threshold=env_float(f"{ENV_PREFIX}FLAG_THRESHOLD", DEFAULT_FLAG_THRESHOLD),
        extended_window_days=env_int(
            f"{ENV_PREFIX}EXTENDED_WINDOW_DAYS", DEFAULT_EXTENDED_WINDOW_DAYS
        ),
        price_variance_threshold=env_float(
            f"{ENV_PREFIX}PRICE_VARIANCE_THRESHOLD", DEFAULT_PRICE_VARIANCE_THRESHOLD
        ),
        message_max_length=env_int(f"{ENV_PREFIX}MESSAGE_MAX_LENGTH", DEFAULT_MESSAGE_MAX_LENGTH),
        batch_size=env_int(f"{ENV_PREFIX}BATCH_SIZE", DEFAULT_BATCH_SIZE),
        validation_workers=env_int(f"{ENV_PREFIX}VALIDATION_WORKERS", DEFAULT_VALIDATION_WORKERS),
        order_number_retries=env_int(
            f"{ENV_PREFIX}ORDER_NUMBER_RETRIES", DEFAULT_ORDER_NUMBER_RETRIES
        ),
        auto_create_products=env_bool(f"{ENV_PREFIX}AUTO_CREATE_PRODUCTS", True),
        default_locale=env_str(f"{ENV_PREFIX}DEFAULT_LOCALE", DEFAULT_LOCALE),
    )
