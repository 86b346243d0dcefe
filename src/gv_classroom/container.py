from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditTrail
from .auth.service import AuthService, PermissionService
from .auth.tokens import TokenService
from .clases.mysql_clase_repository import MySQLClaseRepository
from .clases.repository import ClaseRepository
from .clases.service import ClaseService
from .core.constants import DEFAULT_TOKEN_TTL_DAYS
from .core.enums import RehomologationPolicy
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .dispositivos.mysql_dispositivo_repository import MySQLDispositivoRepository
from .dispositivos.repository import DispositivoRepository
from .dispositivos.service import DispositivoService
from .marcajes.mysql_marcaje_repository import MySQLMarcajeRepository
from .marcajes.repository import MarcajeRepository
from .marcajes.service import MarcajeService
from .perfiles.mysql_perfil_repository import MySQLPerfilRepository
from .perfiles.repository import PerfilRepository
from .perfiles.service import PerfilService
from .reportes.mysql_reporte_repository import MySQLReporteRepository
from .reportes.repository import ReporteRepository
from .reportes.service import ReporteService
from .sedes.mysql_sede_repository import MySQLSedeRepository
from .sedes.repository import SedeRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    sedes_repo: SedeRepository
    perfiles_repo: PerfilRepository
    users_repo: UserRepository
    clases_repo: ClaseRepository
    marcajes_repo: MarcajeRepository
    dispositivos_repo: DispositivoRepository
    reportes_repo: ReporteRepository
    audit_repo: AuditRepository

    tokens: TokenService
    audit_trail: AuditTrail
    auth_service: AuthService
    permission_service: PermissionService
    user_service: UserService
    perfil_service: PerfilService
    clase_service: ClaseService
    marcaje_service: MarcajeService
    dispositivo_service: DispositivoService
    reporte_service: ReporteService
    dashboard_service: DashboardService


def wire_container(
    *,
    sedes_repo: SedeRepository,
    perfiles_repo: PerfilRepository,
    users_repo: UserRepository,
    clases_repo: ClaseRepository,
    marcajes_repo: MarcajeRepository,
    dispositivos_repo: DispositivoRepository,
    reportes_repo: ReporteRepository,
    audit_repo: AuditRepository,
    session_secret: str,
    token_ttl_days: int = DEFAULT_TOKEN_TTL_DAYS,
    rehomologation_policy: RehomologationPolicy = RehomologationPolicy.OVERWRITE,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of any set of repositories (MySQL or in-memory)."""

    tokens = TokenService(session_secret, ttl_days=token_ttl_days)
    audit_trail = AuditTrail(audit_repo)

    return Container(
        conn=conn,
        sedes_repo=sedes_repo,
        perfiles_repo=perfiles_repo,
        users_repo=users_repo,
        clases_repo=clases_repo,
        marcajes_repo=marcajes_repo,
        dispositivos_repo=dispositivos_repo,
        reportes_repo=reportes_repo,
        audit_repo=audit_repo,
        tokens=tokens,
        audit_trail=audit_trail,
        auth_service=AuthService(users_repo, tokens),
        permission_service=PermissionService(users_repo),
        user_service=UserService(users_repo, perfiles_repo, sedes_repo, audit_trail),
        perfil_service=PerfilService(perfiles_repo, audit_trail),
        clase_service=ClaseService(clases_repo),
        marcaje_service=MarcajeService(marcajes_repo, users_repo, clases_repo, audit_trail),
        dispositivo_service=DispositivoService(
            dispositivos_repo, sedes_repo, audit_trail, policy=rehomologation_policy
        ),
        reporte_service=ReporteService(reportes_repo),
        dashboard_service=DashboardService(users_repo, clases_repo, dispositivos_repo),
    )


def build_container(
    *,
    db_config: dict,
    session_secret: str,
    token_ttl_days: int = DEFAULT_TOKEN_TTL_DAYS,
    rehomologation_policy: RehomologationPolicy = RehomologationPolicy.OVERWRITE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        sedes_repo=MySQLSedeRepository(conn),
        perfiles_repo=MySQLPerfilRepository(conn),
        users_repo=MySQLUserRepository(conn),
        clases_repo=MySQLClaseRepository(conn),
        marcajes_repo=MySQLMarcajeRepository(conn),
        dispositivos_repo=MySQLDispositivoRepository(conn),
        reportes_repo=MySQLReporteRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        session_secret=session_secret,
        token_ttl_days=token_ttl_days,
        rehomologation_policy=rehomologation_policy,
        conn=conn,
    )
