import pytest
from werkzeug.security import check_password_hash

from gv_classroom.core.constants import ENTITY_USUARIO
from gv_classroom.core.enums import AuditAction, Role
from gv_classroom.core.exceptions import ConflictError, NotFoundError, ValidationError
from gv_classroom.users.service import parse_role_filter


def _admin(container):
    return container.users_repo.get_by_id("usuario-admin")


def test_role_filter_is_case_insensitive():
    assert parse_role_filter("profesor") == Role.PROFESOR
    assert parse_role_filter("desconocido") is None
    assert parse_role_filter(None) is None


def test_list_users_by_tipo(container):
    users = container.user_service.list_users(tipo="alumno")

    assert [u.id for u in users] == ["usuario-alumno-1", "usuario-alumno-2"]


def test_create_user_hashes_password_and_audits(container, world):
    created = container.user_service.create_user(
        actor=_admin(container),
        data={
            "rut": "18.888.888-8",
            "nombre": "Nuevo Docente",
            "email": "nuevo@gvclassroom.cl",
            "password": "secreto1",
            "tipo": "profesor",
            "perfilId": "perfil-docente",
        },
    )

    assert created.tipo == Role.PROFESOR
    assert created.activo is True
    assert created.perfil.nombre == "Docente"
    assert check_password_hash(world.users.rows[created.id].password_hash, "secreto1")
    entry = world.audit.entries[-1]
    assert (entry.action, entry.entity, entry.entity_id) == (AuditAction.CREATE, ENTITY_USUARIO, created.id)
    assert "passwordHash" not in entry.after


def test_create_user_rejects_duplicate_rut(container):
    with pytest.raises(ConflictError):
        container.user_service.create_user(
            actor=_admin(container),
            data={"rut": "12.345.678-9", "nombre": "Copia", "password": "secreto1", "tipo": "PROFESOR"},
        )


@pytest.mark.parametrize(
    "data, path",
    [
        ({"nombre": "X", "password": "secreto1", "tipo": "ALUMNO"}, "rut"),
        ({"rut": "1-9", "nombre": "X", "tipo": "ALUMNO"}, "password"),
        ({"rut": "1-9", "nombre": "X", "password": "123", "tipo": "ALUMNO"}, "password"),
        ({"rut": "1-9", "nombre": "X", "password": "secreto1", "tipo": "ROOT"}, "tipo"),
        ({"rut": "1-9", "nombre": "X", "password": "secreto1", "tipo": "ALUMNO", "email": "malo"}, "email"),
        ({"rut": "1-9", "nombre": "X", "password": "secreto1", "tipo": "ALUMNO", "perfilId": "p-x"}, "perfilId"),
    ],
)
def test_create_user_validation(container, data, path):
    with pytest.raises(ValidationError) as exc:
        container.user_service.create_user(actor=_admin(container), data=data)

    assert exc.value.details[0]["path"] == path


def test_update_user_partial_and_audited(container, world):
    updated = container.user_service.update_user(
        actor=_admin(container), user_id="usuario-visor", data={"activo": False, "perfilId": "perfil-docente"}
    )

    assert updated.activo is False
    assert updated.perfil_id == "perfil-docente"
    entry = world.audit.entries[-1]
    assert entry.before["activo"] is True
    assert entry.after["activo"] is False


def test_update_user_unknown(container):
    with pytest.raises(NotFoundError):
        container.user_service.update_user(actor=_admin(container), user_id="usuario-x", data={"nombre": "Y"})


def test_users_api_hides_password_hash(client):
    body = client.get("/api/usuarios").get_json()

    assert body
    assert all("passwordHash" not in u for u in body)


def test_users_api_create_requires_permission(client, bearer):
    payload = {"rut": "19.999.999-9", "nombre": "Z", "password": "secreto1", "tipo": "ALUMNO"}

    assert client.post("/api/usuarios", json=payload).status_code == 401
    assert client.post("/api/usuarios", json=payload, headers=bearer("usuario-profesor-1")).status_code == 403
    assert client.post("/api/usuarios", json=payload, headers=bearer("usuario-admin")).status_code == 201
