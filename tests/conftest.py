from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from gv_classroom.audit.model import AuditEntry
from gv_classroom.clases.model import Clase, Inscripcion
from gv_classroom.container import wire_container
from gv_classroom.core.enums import (
    EstadoClase,
    EstadoDispositivo,
    EstadoMarcaje,
    EstadoResolucion,
    RehomologationPolicy,
    Role,
    TipoDispositivo,
    TipoMarcaje,
)
from gv_classroom.dispositivos.model import Dispositivo, HistorialDispositivo, IncidenciaDispositivo
from gv_classroom.main import create_app
from gv_classroom.marcajes.model import Marcaje
from gv_classroom.perfiles.model import Perfil, Permiso
from gv_classroom.reportes.model import ReporteError
from gv_classroom.sedes.model import Sala, Sede
from gv_classroom.users.model import PersonaResumen, Usuario

PASSWORD = "123456"
PASSWORD_HASH = generate_password_hash(PASSWORD)
TODAY = date(2026, 3, 10)
NOW = datetime(2026, 3, 10, 9, 0, 0)


class FakeSedeRepo:
    def __init__(self):
        self.sedes: dict[str, Sede] = {}
        self.salas: dict[str, Sala] = {}

    def list_sedes(self):
        return sorted(self.sedes.values(), key=lambda s: s.nombre)

    def get_sede(self, sede_id):
        return self.sedes.get(sede_id)

    def list_salas(self, *, sede_id=None):
        salas = [s for s in self.salas.values() if sede_id is None or s.sede_id == sede_id]
        return [replace(s, sede=self.sedes.get(s.sede_id)) for s in sorted(salas, key=lambda s: s.nombre)]

    def get_sala(self, sala_id):
        sala = self.salas.get(sala_id)
        return replace(sala, sede=self.sedes.get(sala.sede_id)) if sala else None


class FakePerfilRepo:
    def __init__(self):
        self.perfiles: dict[str, Perfil] = {}
        self.permisos: dict[str, Permiso] = {}
        self.links: dict[str, set[str]] = {}
        self._next = 1

    def list_all(self):
        return sorted(self.perfiles.values(), key=lambda p: p.nombre)

    def get_by_id(self, perfil_id):
        return self.perfiles.get(perfil_id)

    def create(self, *, nombre, descripcion, permisos):
        perfil_id = f"perfil-new-{self._next}"
        self._next += 1
        self.perfiles[perfil_id] = Perfil(id=perfil_id, nombre=nombre, descripcion=descripcion, permisos=permisos)
        return perfil_id

    def update(self, perfil_id, *, changes):
        if perfil_id not in self.perfiles:
            return False
        self.perfiles[perfil_id] = replace(self.perfiles[perfil_id], **changes)
        return True

    def list_permisos(self):
        return sorted(self.permisos.values(), key=lambda p: (p.modulo, p.codigo))

    def list_linked_permisos(self, perfil_id):
        codes = self.links.get(perfil_id, set())
        return [p for p in self.list_permisos() if p.codigo in codes]

    def replace_linked_permisos(self, perfil_id, codigos):
        known = {p.codigo for p in self.permisos.values()}
        self.links[perfil_id] = {c for c in codigos if c in known}
        return len(self.links[perfil_id])


class FakeUserRepo:
    """Stores bare rows; embeds perfil and sede on read like the SQL join."""

    def __init__(self, perfiles: FakePerfilRepo, sedes: FakeSedeRepo):
        self.rows: dict[str, Usuario] = {}
        self._perfiles = perfiles
        self._sedes = sedes
        self._next = 1

    def _embed(self, u: Optional[Usuario]):
        if not u:
            return None
        return replace(
            u,
            perfil=self._perfiles.get_by_id(u.perfil_id) if u.perfil_id else None,
            sede=self._sedes.get_sede(u.sede_id) if u.sede_id else None,
        )

    def add(self, user: Usuario) -> Usuario:
        self.rows[user.id] = user
        return user

    def get_by_id(self, user_id):
        return self._embed(self.rows.get(user_id))

    def get_by_rut(self, rut):
        return self._embed(next((u for u in self.rows.values() if u.rut == rut), None))

    def list_users(self, *, tipo=None):
        users = [u for u in self.rows.values() if tipo is None or u.tipo == tipo]
        return [self._embed(u) for u in sorted(users, key=lambda u: u.nombre)]

    def create_user(self, *, rut, nombre, email, password_hash, tipo, perfil_id, sede_id, timezone, activo):
        user_id = f"usuario-new-{self._next}"
        self._next += 1
        self.rows[user_id] = Usuario(
            id=user_id,
            rut=rut,
            nombre=nombre,
            email=email,
            password_hash=password_hash,
            tipo=tipo,
            perfil_id=perfil_id,
            sede_id=sede_id,
            timezone=timezone,
            activo=activo,
        )
        return user_id

    def update_user(self, user_id, *, changes):
        if user_id not in self.rows:
            return False
        self.rows[user_id] = replace(self.rows[user_id], **changes)
        return True

    def count(self, *, activo=None):
        return sum(1 for u in self.rows.values() if activo is None or u.activo == activo)


class FakeMarcajeRepo:
    def __init__(self, users: FakeUserRepo):
        self.rows: dict[str, Marcaje] = {}
        self.asignaturas: dict[str, str] = {}
        self._users = users
        self._next = 1
        self.update_calls = 0

    def _embed(self, m: Optional[Marcaje]):
        if not m:
            return None
        alumno = self._users.rows.get(m.alumno_id)
        return replace(
            m,
            alumno=PersonaResumen(id=alumno.id, nombre=alumno.nombre, rut=alumno.rut, email=alumno.email)
            if alumno
            else None,
            clase_asignatura=self.asignaturas.get(m.clase_id),
        )

    def get_by_id(self, marcaje_id):
        return self._embed(self.rows.get(marcaje_id))

    def list_marcajes(self, *, clase_id=None, alumno_id=None):
        rows = [
            m
            for m in self.rows.values()
            if (clase_id is None or m.clase_id == clase_id) and (alumno_id is None or m.alumno_id == alumno_id)
        ]
        return [self._embed(m) for m in sorted(rows, key=lambda m: m.fecha_hora, reverse=True)]

    def create(self, *, clase_id, alumno_id, estado, tipo_marcaje, modificado_por, dispositivo_id=None):
        marcaje_id = f"marcaje-new-{self._next}"
        self._next += 1
        self.rows[marcaje_id] = Marcaje(
            id=marcaje_id,
            clase_id=clase_id,
            alumno_id=alumno_id,
            fecha_hora=NOW,
            estado=estado,
            tipo_marcaje=tipo_marcaje,
            modificado_por=modificado_por,
            dispositivo_id=dispositivo_id,
        )
        return marcaje_id

    def update_status(self, marcaje_id, *, estado, tipo_marcaje, modificado_por):
        self.update_calls += 1
        if marcaje_id not in self.rows:
            return False
        self.rows[marcaje_id] = replace(
            self.rows[marcaje_id], estado=estado, tipo_marcaje=tipo_marcaje, modificado_por=modificado_por
        )
        return True


class FakeClaseRepo:
    def __init__(self, marcajes: FakeMarcajeRepo):
        self.rows: dict[str, Clase] = {}
        self._marcajes = marcajes

    def _with_marcajes(self, c: Clase) -> Clase:
        return replace(c, marcajes=tuple(self._marcajes.list_marcajes(clase_id=c.id)))

    def list_clases(self, criteria, *, newest_first=False, with_marcajes=True):
        desde, hasta = criteria.date_range()
        out = [
            c
            for c in self.rows.values()
            if (criteria.profesor_id is None or c.profesor_id == criteria.profesor_id)
            and (criteria.sala_id is None or c.sala_id == criteria.sala_id)
            and (criteria.estado is None or c.estado.value == criteria.estado)
            and (desde is None or desde <= c.fecha <= hasta)
        ]
        if newest_first:
            out.sort(key=lambda c: c.hora_inicio)
            out.sort(key=lambda c: c.fecha, reverse=True)
        else:
            out.sort(key=lambda c: (c.fecha, c.hora_inicio))
        return [self._with_marcajes(c) if with_marcajes else c for c in out]

    def list_for_alumno(self, alumno_id, *, desde=None, hasta=None):
        out = [
            c
            for c in self.rows.values()
            if any(i.alumno_id == alumno_id for i in c.inscripciones)
            and (desde is None or hasta is None or desde <= c.fecha <= hasta)
        ]
        return sorted(out, key=lambda c: (c.fecha, c.hora_inicio))

    def get_detail(self, clase_id):
        c = self.rows.get(clase_id)
        return self._with_marcajes(c) if c else None

    def list_recent(self, limit):
        return sorted(self.rows.values(), key=lambda c: c.fecha, reverse=True)[:limit]

    def count_on(self, day):
        return sum(1 for c in self.rows.values() if c.fecha == day)


class FakeDispositivoRepo:
    def __init__(self):
        self.dispositivos: dict[str, Dispositivo] = {}
        self.incidencias: dict[str, IncidenciaDispositivo] = {}
        self.historial: list[HistorialDispositivo] = []
        self.resolve_calls = 0

    def list_dispositivos(self, criteria):
        out = [
            d
            for d in self.dispositivos.values()
            if (criteria.sala_id is None or d.sala_id == criteria.sala_id)
            and (criteria.sede_id is None or d.sede_id == criteria.sede_id)
            and (criteria.estado is None or d.estado_conexion == criteria.estado)
        ]
        return sorted(out, key=lambda d: d.serial_number)

    def get_dispositivo(self, dispositivo_id):
        return self.dispositivos.get(dispositivo_id)

    def count_dispositivos(self, *, estado=None):
        return sum(1 for d in self.dispositivos.values() if estado is None or d.estado_conexion == estado)

    def list_incidencias(self, criteria):
        out = [
            i
            for i in self.incidencias.values()
            if (criteria.estado is None or i.estado_resolucion == criteria.estado)
            and (
                criteria.desde is None
                or criteria.hasta is None
                or criteria.desde <= i.created_at.date() <= criteria.hasta
            )
        ]
        return sorted(out, key=lambda i: i.created_at, reverse=True)

    def get_incidencia(self, incidencia_id):
        return self.incidencias.get(incidencia_id)

    def count_incidencias(self, *, estado=None):
        return sum(1 for i in self.incidencias.values() if estado is None or i.estado_resolucion == estado)

    def resolve_incidencia(self, incidencia_id, *, sede_homologada, sala_homologada):
        self.resolve_calls += 1
        if incidencia_id not in self.incidencias:
            return False
        self.incidencias[incidencia_id] = replace(
            self.incidencias[incidencia_id],
            sede_homologada=sede_homologada,
            sala_homologada=sala_homologada,
            estado_resolucion=EstadoResolucion.RESUELTO,
        )
        return True

    def append_historial(self, *, dispositivo_id, accion, **fields):
        historial_id = f"historial-new-{len(self.historial) + 1}"
        self.historial.append(
            HistorialDispositivo(id=historial_id, dispositivo_id=dispositivo_id, accion=accion, created_at=NOW, **fields)
        )
        return historial_id

    def list_historial(self, dispositivo_id):
        return [h for h in reversed(self.historial) if h.dispositivo_id == dispositivo_id]


class FakeReporteRepo:
    def __init__(self, users: FakeUserRepo):
        self.rows: dict[str, ReporteError] = {}
        self._users = users

    def list_reportes(self, criteria):
        out = [
            r
            for r in self.rows.values()
            if (criteria.sede_id is None or r.sede_id == criteria.sede_id)
            and (
                criteria.desde is None
                or criteria.hasta is None
                or criteria.desde <= r.fecha.date() <= criteria.hasta
            )
        ]
        return sorted(out, key=lambda r: r.created_at, reverse=True)

    def get_by_id(self, reporte_id):
        return self.rows.get(reporte_id)

    def create(self, *, profesor_id, sala_id, sede_id, comentario):
        reporte_id = f"reporte-new-{len(self.rows) + 1}"
        u = self._users.rows.get(profesor_id)
        self.rows[reporte_id] = ReporteError(
            id=reporte_id,
            profesor_id=profesor_id,
            sala_id=sala_id,
            sede_id=sede_id,
            fecha=NOW,
            comentario=comentario,
            created_at=NOW,
            profesor=PersonaResumen(id=u.id, nombre=u.nombre, rut=u.rut, email=u.email) if u else None,
        )
        return reporte_id


class FakeAuditRepo:
    def __init__(self):
        self.entries: list[AuditEntry] = []
        self.fail = False

    def append(self, *, actor_id, action, entity, entity_id, before, after):
        if self.fail:
            raise RuntimeError("audit_log no disponible")
        entry_id = f"audit-{len(self.entries) + 1}"
        self.entries.append(
            AuditEntry(
                id=entry_id,
                actor_id=actor_id,
                action=action,
                entity=entity,
                entity_id=entity_id,
                before=before,
                after=after,
                created_at=NOW,
            )
        )
        return entry_id

    def list_entries(self, *, entity=None, entity_id=None, limit=500):
        out = [
            e
            for e in reversed(self.entries)
            if (entity is None or e.entity == entity) and (entity_id is None or e.entity_id == entity_id)
        ]
        return out[:limit]


@dataclass
class World:
    sedes: FakeSedeRepo
    perfiles: FakePerfilRepo
    users: FakeUserRepo
    marcajes: FakeMarcajeRepo
    clases: FakeClaseRepo
    dispositivos: FakeDispositivoRepo
    reportes: FakeReporteRepo
    audit: FakeAuditRepo


def _user(user_id, rut, nombre, tipo, perfil_id=None, activo=True) -> Usuario:
    return Usuario(
        id=user_id,
        rut=rut,
        nombre=nombre,
        email=f"{user_id}@gvclassroom.cl",
        password_hash=PASSWORD_HASH,
        tipo=tipo,
        perfil_id=perfil_id,
        sede_id="sede-santiago",
        activo=activo,
    )


def build_world() -> World:
    sedes = FakeSedeRepo()
    perfiles = FakePerfilRepo()
    users = FakeUserRepo(perfiles, sedes)
    marcajes = FakeMarcajeRepo(users)
    clases = FakeClaseRepo(marcajes)
    dispositivos = FakeDispositivoRepo()
    reportes = FakeReporteRepo(users)
    audit = FakeAuditRepo()

    sedes.sedes["sede-santiago"] = Sede(id="sede-santiago", codigo="STG", nombre="Santiago Centro")
    sedes.sedes["sede-valparaiso"] = Sede(id="sede-valparaiso", codigo="VLP", nombre="Valparaiso")
    sedes.salas["sala-a101"] = Sala(id="sala-a101", codigo="A101", nombre="Sala A101", sede_id="sede-santiago")
    sedes.salas["sala-v101"] = Sala(id="sala-v101", codigo="V101", nombre="Sala V101", sede_id="sede-valparaiso")

    for codigo, modulo in [
        ("ver_dashboard", "dashboard"),
        ("editar_asistencia", "asistencia"),
        ("ver_auditoria", "auditoria"),
    ]:
        perfiles.permisos[f"permiso-{codigo}"] = Permiso(
            id=f"permiso-{codigo}", codigo=codigo, nombre=codigo.replace("_", " ").title(), modulo=modulo
        )
    perfiles.perfiles["perfil-admin"] = Perfil(
        id="perfil-admin", nombre="Administrador", descripcion="Acceso completo", permisos='["*"]'
    )
    perfiles.perfiles["perfil-docente"] = Perfil(
        id="perfil-docente",
        nombre="Docente",
        descripcion="Calendario propio y asistencia",
        permisos='["ver_dashboard","ver_mi_calendario","editar_asistencia","ver_salas","reportar_errores"]',
    )
    perfiles.perfiles["perfil-lectura"] = Perfil(
        id="perfil-lectura", nombre="Lectura", descripcion=None, permisos='["ver_dashboard"]'
    )
    perfiles.links["perfil-docente"] = {"ver_dashboard"}

    users.add(_user("usuario-admin", "11.111.111-1", "Administrador Sistema", Role.SUPER_ADMIN, "perfil-admin"))
    users.add(_user("usuario-profesor-1", "12.345.678-9", "Maria Elena Gonzalez", Role.PROFESOR, "perfil-docente"))
    users.add(_user("usuario-visor", "15.555.555-5", "Victor Visor", Role.VISUALIZADOR, "perfil-lectura"))
    users.add(_user("usuario-sin-perfil", "16.666.666-6", "Sofia Sin Perfil", Role.PROFESOR))
    users.add(_user("usuario-inactivo", "17.777.777-7", "Ines Inactiva", Role.PROFESOR, "perfil-docente", activo=False))
    users.add(_user("usuario-alumno-1", "20.001.111-1", "Alumno 1 Apellido", Role.ALUMNO))
    users.add(_user("usuario-alumno-2", "20.002.222-2", "Alumno 2 Apellido", Role.ALUMNO))

    profesor = PersonaResumen(id="usuario-profesor-1", nombre="Maria Elena Gonzalez", rut="12.345.678-9")
    alumno_1 = PersonaResumen(id="usuario-alumno-1", nombre="Alumno 1 Apellido", rut="20.001.111-1")
    clases.rows["clase-mat-0"] = Clase(
        id="clase-mat-0",
        codigo="MAT101-0",
        asignatura="Matematicas I",
        profesor_id="usuario-profesor-1",
        sala_id="sala-a101",
        fecha=TODAY,
        hora_inicio="08:30",
        hora_fin="10:00",
        profesor=profesor,
        sala=sedes.get_sala("sala-a101"),
        inscripciones=(
            Inscripcion(id="insc-1", clase_id="clase-mat-0", alumno_id="usuario-alumno-1", alumno=alumno_1),
        ),
    )
    clases.rows["clase-fis-0"] = Clase(
        id="clase-fis-0",
        codigo="FIS101-0",
        asignatura="Fisica General",
        profesor_id="usuario-profesor-2",
        sala_id="sala-v101",
        fecha=date(2026, 3, 9),
        hora_inicio="10:30",
        hora_fin="12:00",
        estado=EstadoClase.COMPLETADA,
    )
    clases.rows["clase-cancelada-1"] = Clase(
        id="clase-cancelada-1",
        codigo="QUI101-C",
        asignatura="Quimica General",
        profesor_id="usuario-profesor-1",
        sala_id="sala-a101",
        fecha=date(2026, 3, 12),
        hora_inicio="16:00",
        hora_fin="17:30",
        estado=EstadoClase.CANCELADA,
        profesor=profesor,
        sala=sedes.get_sala("sala-a101"),
    )

    marcajes.asignaturas = {c.id: c.asignatura for c in clases.rows.values()}
    marcajes.rows["marcaje-0"] = Marcaje(
        id="marcaje-0",
        clase_id="clase-mat-0",
        alumno_id="usuario-alumno-1",
        fecha_hora=datetime(2026, 3, 10, 8, 31, 0),
        estado=EstadoMarcaje.PRESENTE,
        tipo_marcaje=TipoMarcaje.AUTOMATICO,
    )

    dispositivos.dispositivos["disp-tab-001"] = Dispositivo(
        id="disp-tab-001",
        serial_number="TAB-2024-001",
        tipo=TipoDispositivo.TABLET,
        sala_id="sala-a101",
        sede_id="sede-santiago",
        bateria=85,
        estado_conexion=EstadoDispositivo.CONECTADO,
    )
    dispositivos.dispositivos["disp-pda-001"] = Dispositivo(
        id="disp-pda-001",
        serial_number="PDA-2024-001",
        tipo=TipoDispositivo.PDA,
        sala_id=None,
        sede_id="sede-santiago",
        estado_conexion=EstadoDispositivo.DESCONECTADO,
    )
    dispositivos.incidencias["incidencia-1"] = IncidenciaDispositivo(
        id="incidencia-1",
        dispositivo_id="disp-pda-001",
        tipo_incidencia="Sin conexion",
        descripcion="El dispositivo no se ha conectado en 72 horas",
        sede_original="Santiago Centro",
        sala_original=None,
        created_at=datetime(2026, 3, 8, 12, 0, 0),
    )
    dispositivos.incidencias["incidencia-2"] = IncidenciaDispositivo(
        id="incidencia-2",
        dispositivo_id="disp-tab-001",
        tipo_incidencia="Bateria baja",
        descripcion="Bateria por debajo del 20%",
        sede_original="Santiago Centro",
        sala_original="Sala A101",
        created_at=datetime(2026, 3, 9, 12, 0, 0),
    )

    return World(
        sedes=sedes,
        perfiles=perfiles,
        users=users,
        marcajes=marcajes,
        clases=clases,
        dispositivos=dispositivos,
        reportes=reportes,
        audit=audit,
    )


def make_container(world: World, *, policy: RehomologationPolicy = RehomologationPolicy.OVERWRITE):
    return wire_container(
        sedes_repo=world.sedes,
        perfiles_repo=world.perfiles,
        users_repo=world.users,
        clases_repo=world.clases,
        marcajes_repo=world.marcajes,
        dispositivos_repo=world.dispositivos,
        reportes_repo=world.reportes,
        audit_repo=world.audit,
        session_secret="test-session-secret",
        rehomologation_policy=policy,
    )


@pytest.fixture
def world() -> World:
    return build_world()


@pytest.fixture
def container(world):
    return make_container(world)


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="config.testing")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def bearer(container):
    """Authorization header for a seeded user id."""

    def _bearer(user_id: str) -> dict:
        user = container.users_repo.get_by_id(user_id)
        token = container.tokens.issue(user_id=user.id, tipo=user.tipo)
        return {"Authorization": f"Bearer {token}"}

    return _bearer
