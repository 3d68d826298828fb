from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "X-clone"
    app_env: str = "local"  # local, dev or prod

    server_host: str = "0.0.0.0"
    server_port: int = 8000

    db_host: str = "localhost"
    db_port: str = "5432"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "xclone"
    db_sslmode: str = "disable"
    database_url: Optional[str] = None

    jwt_secret: str = "change-me"
    access_token_ttl: timedelta = timedelta(minutes=15)
    bcrypt_rounds: int = 12

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}"
            f"/{self.db_name}?sslmode={self.db_sslmode}"
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
