from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


def parse_team_list(v: Any) -> list[str]:
    if isinstance(v, str):
        return [i.strip().upper() for i in v.split(",") if i.strip()]
    if isinstance(v, list):
        return [str(i).strip().upper() for i in v]
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "Bay Scheduler"
    API_V1_STR: str = "/api/v1"
    FRONTEND_HOST: str = "http://localhost:5173"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Bay layout
    TRACKS_PER_BAY: int = Field(default=4, ge=1)
    DEFAULT_HOURS_PER_PERSON_PER_WEEK: int = Field(default=40, ge=0)

    # Reschedule protocol
    COMMIT_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    OPTIMISTIC_UPDATES: bool = True

    # Utilization reporting
    UTILIZATION_EXCLUDED_TEAMS: Annotated[
        list[str] | str, BeforeValidator(parse_team_list)
    ] = ["LIBBY"]
    UTILIZATION_DEFAULT_WEEKS: int = Field(default=26, ge=1)

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # "json" or "console"
    ENABLE_METRICS: bool = True
    METRICS_PORT: int = 8001


settings = Settings()  # type: ignore
