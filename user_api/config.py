from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    app_name: str = "User API"

    # Either a full SQLAlchemy URL, or the DB_* parts below.
    database_url: Optional[str] = Field(default=None)
    db_driver: str = "sqlite"
    db_user: Optional[str] = None
    db_password: Optional[str] = None
    db_host: Optional[str] = None
    db_port: Optional[int] = None
    db_name: str = "./app.db"
    echo_sql: bool = False

    server_host: str = "127.0.0.1"
    server_port: int = 8010
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def sqlalchemy_url(self) -> str:
        """Return DATABASE_URL when set, otherwise assemble one from DB_*.

        URL.create takes care of escaping credentials, so a password such
        as ``p@ss:word`` does not break the connection string.
        """
        if self.database_url:
            return self.database_url

        url = URL.create(
            drivername=self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
