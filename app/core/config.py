from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

REDIRECT_STATUS_CODES = {301, 302, 303, 307, 308}


def _split_csv(value: str) -> list[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Redirect Guard"
    env: str = "dev"

    host: str = "127.0.0.1"
    port: int = 4000

    allowed_redirect_hosts: str = "trusted.com,example.com,ygi.li"
    allowed_redirect_schemes: str = ""
    enforce_allow_list: bool = True
    redirect_status_code: int = 302
    observability_enabled: bool = True

    @property
    def allowed_redirect_host_set(self) -> frozenset[str]:
        return frozenset(_split_csv(self.allowed_redirect_hosts))

    @property
    def allowed_redirect_scheme_set(self) -> frozenset[str]:
        return frozenset(_split_csv(self.allowed_redirect_schemes))

    @model_validator(mode="after")
    def validate_redirect_policy(self) -> "Settings":
        if self.redirect_status_code not in REDIRECT_STATUS_CODES:
            raise ValueError(
                f"redirect_status_code must be one of {sorted(REDIRECT_STATUS_CODES)}"
            )
        if not self.enforce_allow_list and self.env == "prod":
            raise ValueError("enforce_allow_list=false is not permitted when env=prod")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
