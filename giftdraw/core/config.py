import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    log_level: str
    log_path: str
    max_attempts: int


def load_settings() -> Settings:
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_path = os.getenv("LOG_PATH", "logs/giftdraw.log")
    raw_max_attempts = os.getenv("DRAW_MAX_ATTEMPTS", "1000")

    try:
        max_attempts = int(raw_max_attempts)
    except ValueError:
        raise ValueError(
            f"DRAW_MAX_ATTEMPTS must be an integer, got {raw_max_attempts!r}. Fix it in the environment or .env file."
        ) from None
    if max_attempts < 1:
        raise ValueError("DRAW_MAX_ATTEMPTS must be a positive integer. Fix it in the environment or .env file.")

    return Settings(
        log_level=log_level.upper(),
        log_path=log_path,
        max_attempts=max_attempts,
    )
