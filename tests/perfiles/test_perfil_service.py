import json

import pytest

from gv_classroom.core.exceptions import NotFoundError, ValidationError
from gv_classroom.perfiles.service import parse_permisos_input


def _admin(container):
    return container.users_repo.get_by_id("usuario-admin")


def test_parse_permisos_accepts_list_or_json_string():
    assert json.loads(parse_permisos_input(["ver_salas", "ver_dashboard"])) == ["ver_dashboard", "ver_salas"]
    assert json.loads(parse_permisos_input('["*"]')) == ["*"]


@pytest.mark.parametrize("value", ["{nope", {"a": 1}, ["ver_sala"], [1]])
def test_parse_permisos_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        parse_permisos_input(value)


def test_create_perfil_stores_normalized_json(container, world):
    perfil = container.perfil_service.create_perfil(
        actor=_admin(container), data={"nombre": "Soporte", "permisos": ["ver_dispositivos", "homologar_dispositivos"]}
    )

    assert json.loads(perfil.permisos) == ["homologar_dispositivos", "ver_dispositivos"]
    assert world.audit.entries[-1].after["nombre"] == "Soporte"


def test_create_perfil_requires_permisos(container):
    with pytest.raises(ValidationError):
        container.perfil_service.create_perfil(actor=_admin(container), data={"nombre": "Vacio"})


def test_update_perfil_audits_before_after(container, world):
    container.perfil_service.update_perfil(
        actor=_admin(container), perfil_id="perfil-lectura", data={"permisos": ["ver_dashboard", "ver_salas"]}
    )

    entry = world.audit.entries[-1]
    assert entry.before["permisos"] == '["ver_dashboard"]'
    assert json.loads(entry.after["permisos"]) == ["ver_dashboard", "ver_salas"]


def test_update_unknown_perfil(container):
    with pytest.raises(NotFoundError):
        container.perfil_service.update_perfil(actor=_admin(container), perfil_id="perfil-x", data={})


def test_sync_join_table_mirrors_json(container, world):
    linked = container.perfil_service.sync_join_table(actor=_admin(container), perfil_id="perfil-docente")

    # only codes present in the catalog can be linked
    assert sorted(p.codigo for p in linked) == ["editar_asistencia", "ver_dashboard"]
    assert world.audit.entries[-1].before == {"perfilPermisos": ["ver_dashboard"]}


def test_sync_wildcard_links_whole_catalog(container):
    linked = container.perfil_service.sync_join_table(actor=_admin(container), perfil_id="perfil-admin")

    assert len(linked) == 3


def test_perfiles_api_rejects_unknown_code(client, bearer):
    resp = client.post(
        "/api/perfiles", json={"nombre": "Malo", "permisos": ["ver_todo"]}, headers=bearer("usuario-admin")
    )

    assert resp.status_code == 400
    assert "ver_todo" in resp.get_json()["error"]
