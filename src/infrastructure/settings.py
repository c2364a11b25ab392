"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.domain.constants import DEFAULT_PAYMENT_PAGE_SIZE, GROUND_FLOOR
from src.domain.services.normalization import normalize_floor
from src.infrastructure.logging.logger import get_app_logger

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ApiSettings:
    """Settings for reaching the dashboard API.

    Attributes:
        base_url: Root URL of the API, without a trailing slash.
        token: Optional bearer token sent on every request.
        timeout: Request timeout in seconds.
        page_size: Payments pulled per floor and mode for the payment index.
        floor: Floor whose payments back the record-payment flow.
    """

    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    page_size: int = DEFAULT_PAYMENT_PAGE_SIZE
    floor: str = GROUND_FLOOR

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Build settings from environment variables and an optional .env.

        Returns:
            ApiSettings: Settings sourced from environment variables.

        Raises:
            ValueError: If LEDGER_FLOOR names an unknown floor.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        base_url = (
            os.getenv("LEDGER_API_BASE_URL", "").strip() or DEFAULT_BASE_URL
        )
        token = os.getenv("LEDGER_API_TOKEN", "").strip() or None
        timeout = cls._read_positive(
            "LEDGER_API_TIMEOUT",
            float,
            DEFAULT_TIMEOUT_SECONDS,
            logger=logger,
        )
        page_size = cls._read_positive(
            "PAYMENT_INDEX_PAGE_SIZE",
            int,
            DEFAULT_PAYMENT_PAGE_SIZE,
            logger=logger,
        )
        floor = normalize_floor(os.getenv("LEDGER_FLOOR") or GROUND_FLOOR)
        return cls(
            base_url=base_url.rstrip("/"),
            token=token,
            timeout=timeout,
            page_size=page_size,
            floor=floor,
        )

    def auth_headers(self) -> dict[str, str]:
        """Return the Authorization header when a token is configured."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    @staticmethod
    def _read_positive(name: str, parse, default, logger):
        """Read a positive number, falling back to the default.

        Args:
            name: Environment variable name.
            parse: Callable converting the raw string (int or float).
            default: Value used when unset or invalid.
            logger: Logger used for warnings.

        Returns:
            Parsed value or the default.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = parse(raw.strip())
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if value <= 0:
            logger.warning(f"{name} must be positive; using {default}")
            return default
        return value


__all__ = ["ApiSettings"]
