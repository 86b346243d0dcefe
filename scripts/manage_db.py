"""Database maintenance for GV Classroom.

    python scripts/manage_db.py init              # apply database/schema.sql
    python scripts/manage_db.py init seed         # ...then load demo data
    python scripts/manage_db.py reset-passwords --password otra
    python scripts/manage_db.py backup --out-dir backups

Connection settings come from APP_ENV / .env like the web app.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv  # noqa: E402

from config import get_settings_module, load_settings  # noqa: E402
from gv_classroom.common.log_setup import configure_logging  # noqa: E402
from gv_classroom.database.bootstrap import (  # noqa: E402
    DEMO_PASSWORD,
    SUPER_ADMIN_RUT,
    apply_schema,
    apply_seed_sql,
    ensure_demo_users,
    list_tables,
)

DATABASE_DIR = REPO_ROOT / "database"
COMMANDS = ("init", "seed", "reset-passwords", "backup")


def _target(db_config: dict) -> str:
    return (
        f"{db_config.get('user')}@{db_config.get('host')}:"
        f"{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create, seed or back up the GV Classroom database.")
    parser.add_argument("commands", nargs="+", choices=COMMANDS, help="Steps to run, in order")
    parser.add_argument("--env", help="Settings environment (default: APP_ENV)")
    parser.add_argument(
        "--password",
        default=DEMO_PASSWORD,
        help=f"Password given to the demo accounts by seed/reset-passwords (default: {DEMO_PASSWORD})",
    )
    parser.add_argument("--out-dir", default=str(REPO_ROOT / "backups"), help="Where backup writes its dump")
    return parser.parse_args()


def _init(db_config: dict) -> None:
    apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
    print(f"OK: schema applied -> {_target(db_config)} (tables={len(list_tables(db_config))})")


def _seed(db_config: dict, password: str) -> None:
    apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
    updated = ensure_demo_users(db_config, password=password)
    print(f"OK: demo data loaded -> {_target(db_config)} (demo users={updated}, admin {SUPER_ADMIN_RUT})")


def _reset_passwords(db_config: dict, password: str) -> None:
    updated = ensure_demo_users(db_config, password=password)
    print(f"OK: {updated} demo accounts reset")


def _backup(db_config: dict, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"{db_config['database']}_{datetime.now():%Y%m%d_%H%M%S}.sql"
    cmd = [
        "mysqldump",
        f"--host={db_config['host']}",
        f"--port={db_config.get('port', 3306)}",
        f"--user={db_config['user']}",
        "--single-transaction",
        "--routines",
        db_config["database"],
    ]
    # keeps the password off the process list
    env = {**os.environ, "MYSQL_PWD": db_config.get("password") or ""}
    try:
        with out_file.open("wb") as fh:
            subprocess.run(cmd, stdout=fh, stderr=subprocess.PIPE, check=True, env=env)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("mysqldump not found; install the MySQL client tools.")
    except subprocess.CalledProcessError as exc:
        out_file.unlink(missing_ok=True)
        raise SystemExit(f"mysqldump failed: {exc.stderr.decode(errors='replace').strip()}")
    print(f"OK: backup written to {out_file}")


def main() -> None:
    args = _parse_args()
    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = load_settings(get_settings_module(args.env))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    for command in args.commands:
        if command == "init":
            _init(db_config)
        elif command == "seed":
            _seed(db_config, args.password)
        elif command == "reset-passwords":
            _reset_passwords(db_config, args.password)
        elif command == "backup":
            _backup(db_config, Path(args.out_dir))


if __name__ == "__main__":
    main()
