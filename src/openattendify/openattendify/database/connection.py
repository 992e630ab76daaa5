from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "openattendify")),
        )


class DatabaseConnection:
    """DB connection factory handed to every repository.

    Note: We create short-lived connections per operation (safe for simple Flask apps
    and for the sync worker thread, which never shares a connection with a request).
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
