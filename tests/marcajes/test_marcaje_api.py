def test_patch_requires_session(client, world):
    resp = client.patch("/api/marcajes/marcaje-0", json={"estado": "AUSENTE"})

    assert resp.status_code == 401
    assert world.marcajes.update_calls == 0


def test_patch_invalid_estado_is_400_and_unchanged(client, bearer, world):
    resp = client.patch("/api/marcajes/marcaje-0", json={"estado": "INVALIDO"}, headers=bearer("usuario-admin"))

    assert resp.status_code == 400
    body = resp.get_json()
    assert "PRESENTE" in body["error"]
    assert body["details"][0]["path"] == "estado"
    assert world.marcajes.rows["marcaje-0"].estado.value == "PRESENTE"
    assert world.audit.entries == []


def test_patch_without_permission_is_403(client, bearer, world):
    for user_id in ("usuario-visor", "usuario-sin-perfil"):
        resp = client.patch("/api/marcajes/marcaje-0", json={"estado": "AUSENTE"}, headers=bearer(user_id))

        assert resp.status_code == 403
        assert resp.get_json()["error"] == "No tiene permiso para editar asistencia"

    assert world.marcajes.update_calls == 0
    assert world.audit.entries == []


def test_patch_unknown_marcaje_is_404(client, bearer):
    resp = client.patch("/api/marcajes/marcaje-404", json={"estado": "AUSENTE"}, headers=bearer("usuario-admin"))

    assert resp.status_code == 404


def test_patch_success_returns_updated_record(client, bearer, world):
    resp = client.patch(
        "/api/marcajes/marcaje-0", json={"estado": "TARDANZA"}, headers=bearer("usuario-profesor-1")
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["estado"] == "TARDANZA"
    assert body["tipoMarcaje"] == "MANUAL"
    assert body["modificadoPor"] == "usuario-profesor-1"
    assert len(world.audit.entries) == 1


def test_patch_audit_failure_is_500_but_applied(client, bearer, world):
    world.audit.fail = True

    resp = client.patch("/api/marcajes/marcaje-0", json={"estado": "AUSENTE"}, headers=bearer("usuario-admin"))

    assert resp.status_code == 500
    assert "auditoria" in resp.get_json()["error"]
    assert world.marcajes.rows["marcaje-0"].estado.value == "AUSENTE"


def test_list_marcajes_by_clase(client):
    resp = client.get("/api/marcajes?claseId=clase-mat-0")

    assert resp.status_code == 200
    body = resp.get_json()
    assert [m["id"] for m in body] == ["marcaje-0"]
    assert body[0]["alumno"]["rut"] == "20.001.111-1"


def test_post_marcaje_requires_permission(client, bearer, world):
    payload = {"claseId": "clase-mat-0", "alumnoId": "usuario-alumno-2", "estado": "PRESENTE"}

    assert client.post("/api/marcajes", json=payload, headers=bearer("usuario-visor")).status_code == 403
    resp = client.post("/api/marcajes", json=payload, headers=bearer("usuario-profesor-1"))

    assert resp.status_code == 201
    assert resp.get_json()["alumnoId"] == "usuario-alumno-2"
    assert len(world.marcajes.rows) == 2
