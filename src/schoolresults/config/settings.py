from dataclasses import dataclass, field
import os
from dotenv import load_dotenv


load_dotenv()


class SettingsError(Exception):
    pass


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SettingsError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise SettingsError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    log_level: str = field(default_factory=lambda: os.getenv("SCHOOLRESULTS_LOG_LEVEL", "INFO").upper())
    performer_count: int = field(default_factory=lambda: _int_env("SCHOOLRESULTS_PERFORMER_COUNT", 5))
    pass_mark: float = field(default_factory=lambda: _float_env("SCHOOLRESULTS_PASS_MARK", 40.0))


settings = Settings()
