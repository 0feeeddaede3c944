from dataclasses import dataclass
import logging
import os
from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)

TREND_ORDERS = ("lexical", "natural")


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    strict_grades: bool = _env_flag("GPA_STRICT_GRADES", "1")
    trend_order: str = os.getenv("GPA_TREND_ORDER", "lexical").strip().lower()
    log_level: str = os.getenv("GPA_LOG_LEVEL", "INFO").strip().upper()

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

    def __post_init__(self) -> None:
        if self.trend_order not in TREND_ORDERS:
            logger.warning(
                "Unsupported GPA_TREND_ORDER %r, falling back to lexical. Use %s.",
                self.trend_order,
                " or ".join(TREND_ORDERS),
            )
            object.__setattr__(self, "trend_order", "lexical")


settings = Settings()
