from itts_community.bootstrap import create_admin_user, seed_rbac
from itts_community.models.rbac import Permission, Role
from itts_community.security.passwords import verify_password


def test_seed_rbac_is_idempotent(app):
    first = seed_rbac()
    second = seed_rbac()

    assert first["admin"].id == second["admin"].id
    assert Permission.query.count() == 48
    assert Role.query.count() == 2
    assert all(role.is_system for role in Role.query.all())


def test_viewer_role_only_reads(app):
    roles = seed_rbac()

    names = {p.name for p in roles["viewer"].permissions}
    assert names
    assert all(name.endswith(":read") for name in names)


def test_create_admin_user(app):
    user, created = create_admin_user("Root@ITTS.test", "bootstrap-secret", name="Root")

    assert created is True
    assert user.email == "root@itts.test"
    assert user.is_super_admin is True
    assert verify_password("bootstrap-secret", user.password_hash)

    again, created_again = create_admin_user("root@itts.test", "other-secret")
    assert created_again is False
    assert again.id == user.id
