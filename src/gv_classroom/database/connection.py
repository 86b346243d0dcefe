from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import mysql.connector

logger = logging.getLogger(__name__)

CHARSET = "utf8mb4"
COLLATION = "utf8mb4_unicode_ci"


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "gv_classroom"
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict; missing keys keep the defaults."""

        known = {k: v for k, v in db_config.items() if k in cls.__dataclass_fields__ and v is not None}
        if "port" in known:
            known["port"] = int(known["port"])
        if "connect_timeout" in known:
            known["connect_timeout"] = int(known["connect_timeout"])
        return cls(**known)

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "charset": CHARSET,
            "collation": COLLATION,
            "connection_timeout": self.connect_timeout,
            "use_pure": True,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Process-wide connection factory.

    Every repository call opens its own short-lived connection; nothing is
    pooled or shared between requests.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        return mysql.connector.connect(**self._config.connect_kwargs(with_database=with_database))

    def ping(self) -> bool:
        try:
            conn = self.connect()
        except mysql.connector.Error as exc:
            logger.warning("MySQL no disponible en %s:%s: %s", self._config.host, self._config.port, exc)
            return False
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.fetchall()
            return True
        except mysql.connector.Error as exc:
            logger.warning("Ping a MySQL fallo: %s", exc)
            return False
        finally:
            conn.close()
