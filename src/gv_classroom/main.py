from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .audit.controller import register as register_audit
from .auth.controller import register as register_auth
from .clases.controller import register as register_clases
from .common.http import register_error_handlers
from .common.log_setup import configure_logging
from .container import Container, build_container
from .core.enums import RehomologationPolicy
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .dispositivos.controller import register as register_dispositivos
from .health.controller import register as register_health
from .marcajes.controller import register as register_marcajes
from .perfiles.controller import register as register_perfiles
from .reportes.controller import register as register_reportes
from .sedes.controller import register as register_sedes
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Passing ``container`` skips every database side effect (tests inject
    in-memory repositories this way).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = load_settings(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            session_secret=getattr(settings, "SESSION_SECRET"),
            token_ttl_days=int(getattr(settings, "TOKEN_TTL_DAYS", 7)),
            rehomologation_policy=RehomologationPolicy(getattr(settings, "REHOMOLOGATION_POLICY", "overwrite")),
        )

    app.extensions["gv_classroom.container"] = container
    register_error_handlers(app)

    register_auth(app, container)
    register_users(app, container)
    register_perfiles(app, container)
    register_sedes(app, container)
    register_clases(app, container)
    register_marcajes(app, container)
    register_dispositivos(app, container)
    register_reportes(app, container)
    register_dashboard(app, container)
    register_audit(app, container)
    register_health(app, container)

    return app
