"""Example: drive the service layer without Flask.

Controllers are thin; the use cases live in the services wired by the container.
Run ``python scripts/manage_db.py init seed`` first.
"""

from config import load_settings

from gv_classroom.clases.model import ClaseFilter
from gv_classroom.container import build_container
from gv_classroom.core.enums import RehomologationPolicy
from gv_classroom.database.bootstrap import DEMO_PASSWORD, SUPER_ADMIN_RUT


def main():
    settings = load_settings()
    container = build_container(
        db_config=settings.DB_CONFIG,
        session_secret=settings.SESSION_SECRET,
        rehomologation_policy=RehomologationPolicy(settings.REHOMOLOGATION_POLICY),
    )

    result = container.auth_service.login(SUPER_ADMIN_RUT, DEMO_PASSWORD)
    print("token:", result.token[:16], "...")

    stats = container.dashboard_service.stats()
    print("stats:", stats)

    for clase in container.clase_service.list_clases(ClaseFilter())[:5]:
        print(clase.fecha, clase.hora_inicio, clase.asignatura, len(clase.marcajes), "marcajes")


if __name__ == "__main__":
    main()
