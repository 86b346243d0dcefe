from gv_classroom.core.enums import Role
from gv_classroom.core.permissions import Permission, PermissionSet, is_allowed, unknown_codes


def test_parse_grants_listed_codes_only():
    perms = PermissionSet.parse('["ver_dashboard", "editar_asistencia"]')

    assert perms.allows(Permission.EDITAR_ASISTENCIA)
    assert perms.allows(Permission.VER_DASHBOARD)
    assert not perms.allows(Permission.VER_AUDITORIA)


def test_wildcard_grants_everything():
    perms = PermissionSet.parse('["*"]')

    assert all(perms.allows(p) for p in Permission)


def test_malformed_json_fails_closed():
    assert PermissionSet.parse("not json") == PermissionSet()
    assert not PermissionSet.parse("{broken").allows(Permission.VER_DASHBOARD)


def test_non_list_payload_fails_closed():
    assert not PermissionSet.parse('{"editar_asistencia": true}').allows(Permission.EDITAR_ASISTENCIA)
    assert not PermissionSet.parse('"*"').allows(Permission.EDITAR_ASISTENCIA)


def test_unknown_and_non_string_codes_are_ignored():
    perms = PermissionSet.parse('["borrar_todo", 42, null, "ver_salas"]')

    assert perms.granted == frozenset({Permission.VER_SALAS})
    assert not perms.wildcard


def test_codes_round_trip_in_stable_order():
    perms = PermissionSet.from_codes(["ver_salas", "*", "ver_dashboard"])

    assert perms.codes() == ["*", "ver_dashboard", "ver_salas"]


def test_super_admin_bypasses_missing_perfil():
    assert is_allowed(Role.SUPER_ADMIN, None, Permission.VER_AUDITORIA)
    assert is_allowed(Role.SUPER_ADMIN, "garbage", Permission.EDITAR_ASISTENCIA)


def test_missing_perfil_denies_other_roles():
    assert not is_allowed(Role.PROFESOR, None, Permission.EDITAR_ASISTENCIA)


def test_role_alone_grants_nothing():
    assert not is_allowed(Role.SOPORTE, "[]", Permission.HOMOLOGAR_DISPOSITIVOS)
    assert is_allowed(Role.SOPORTE, '["homologar_dispositivos"]', Permission.HOMOLOGAR_DISPOSITIVOS)


def test_unknown_codes_reports_typos():
    assert unknown_codes(["ver_salas", "*", "ver_sala", 3]) == ["ver_sala", "3"]
