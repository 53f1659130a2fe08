import fakeredis
import pytest
from faker import Faker

from itts_community import create_app
from itts_community.bootstrap import seed_rbac
from itts_community.extensions import db
from itts_community.models.rbac import Role
from itts_community.models.user import User, UserRole
from itts_community.security.passwords import hash_password
from itts_community.services.permission_service import PermissionService
from itts_community.services.token_service import TokenService

# Initialize Faker for generating test data
fake = Faker()

DEFAULT_PASSWORD = "correct-horse-battery"


def pytest_configure(config):
    config.addinivalue_line("markers", "auth: mark test as authentication-related")
    config.addinivalue_line("markers", "lock: mark test as exercising the distributed lock")


@pytest.fixture()
def app():
    """Fresh application and in-memory database per test"""
    app = create_app("testing")

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def fake_redis(app):
    """Install an in-process Redis (with Lua, for lock release) on the app"""
    client = fakeredis.FakeRedis()
    app.extensions["redis"] = client
    yield client
    app.extensions["redis"] = None


@pytest.fixture()
def rbac(app):
    """Seeded permission grid; returns {"admin": Role, "viewer": Role}"""
    return seed_rbac()


@pytest.fixture()
def make_user(app):
    def _make_user(email=None, password=DEFAULT_PASSWORD, roles=(), is_super_admin=False,
                   is_active=True, full_name=None):
        user = User(
            email=(email or fake.unique.email()).lower(),
            full_name=full_name or fake.name(),
            password_hash=hash_password(password) if password else None,
            is_active=is_active,
            is_super_admin=is_super_admin,
        )
        db.session.add(user)
        db.session.flush()
        for role in roles:
            role_id = role.id if isinstance(role, Role) else role
            db.session.add(UserRole(user_id=user.id, role_id=role_id))
        db.session.commit()
        return user

    return _make_user


@pytest.fixture()
def auth_headers(app):
    """Bearer headers for a user, with a freshly resolved permission snapshot"""
    def _auth_headers(user):
        token = TokenService.create_access_token(
            user,
            PermissionService.role_names(user),
            PermissionService.resolve_permissions(user),
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def admin_user(rbac, make_user):
    return make_user(email="admin@itts.test", roles=[rbac["admin"]])


@pytest.fixture()
def admin_headers(admin_user, auth_headers):
    return auth_headers(admin_user)


@pytest.fixture()
def viewer_headers(rbac, make_user, auth_headers):
    return auth_headers(make_user(roles=[rbac["viewer"]]))


@pytest.fixture()
def super_admin(make_user):
    return make_user(email="root@itts.test", is_super_admin=True)
