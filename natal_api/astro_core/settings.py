import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """
    Engine settings, read from ASTRO_* environment variables.
    """

    log_level: str = Field(default="INFO", description="Root logging level")
    pole_latitude_limit: float = Field(
        default=89.9, gt=0, lt=90,
        description="Latitudes beyond +/- this band are clamped (or rejected in strict mode)",
    )
    strict_poles: bool = Field(
        default=False,
        description="Raise DegenerateLatitudeError instead of clamping",
    )
    transit_months: int = Field(default=12, ge=1, description="Months in a transit matrix")

    model_config = SettingsConfigDict(env_prefix="ASTRO_", frozen=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level '{v}' is not a logging level")
        return level


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()


def init_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging once for the process.
    Call at application startup, not at import.
    """
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level)
