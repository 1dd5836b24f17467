"""Identity directory tests."""
import pytest

from session_auth.models.user import Permission, SysRole, UserStatusEnum
from session_auth.services import user_directory
from session_auth.services.user_directory import UserDirectory
from session_auth.utils.errors import (
    AccountDisabledError, AccountLockedError, InvalidCredentialsError, UserNotFoundError
)


@pytest.fixture
def directory(db_session):
    return UserDirectory(db_session)


@pytest.fixture
def admin_role(db_session):
    query = Permission(name="Users", href="/users", type=1, permission="sys:user:query", sort=1)
    add = Permission(name="Add user", parent_id=1, type=2, permission="sys:user:add", sort=2)
    menu = Permission(name="System", type=1, permission=None, sort=0)
    role = SysRole(name="admin", permissions=[query, add, menu])
    db_session.add(role)
    db_session.commit()
    return role


def test_load_login_user_collects_permissions(directory, admin_role, db_session):
    viewer = SysRole(name="viewer", permissions=[admin_role.permissions[0]])
    db_session.add(viewer)
    db_session.commit()
    directory.create_user("alice", "pw-alice", nickname="Alice", roles=[admin_role, viewer])

    login_user = directory.load_login_user("alice")

    assert login_user.username == "alice"
    assert login_user.nickname == "Alice"
    assert login_user.status == "active"
    assert login_user.token is None
    assert [p.name for p in login_user.permissions] == ["System", "Users", "Add user"]
    assert login_user.authorities == {"sys:user:query", "sys:user:add"}


def test_list_permissions_without_roles(directory):
    user = directory.create_user("bob", "pw-bob")
    assert directory.list_permissions(user.id) == []


def test_unknown_user(directory):
    assert directory.lookup("nobody") is None
    with pytest.raises(UserNotFoundError):
        directory.load_login_user("nobody")


@pytest.mark.parametrize(
    "status, error",
    [(UserStatusEnum.LOCKED, AccountLockedError), (UserStatusEnum.DISABLED, AccountDisabledError)],
)
def test_inactive_accounts_are_rejected(directory, status, error):
    directory.create_user("carol", "pw-carol", status=status)

    with pytest.raises(error):
        directory.load_login_user("carol")
    with pytest.raises(error):
        directory.authenticate("carol", "pw-carol")


def test_authenticate(directory):
    directory.create_user("dave", "pw-dave")

    assert directory.authenticate("dave", "pw-dave").username == "dave"
    with pytest.raises(InvalidCredentialsError):
        directory.authenticate("dave", "wrong")
    with pytest.raises(InvalidCredentialsError):
        directory.authenticate("nobody", "pw-dave")


def test_authenticate_returns_permissions(directory, admin_role):
    directory.create_user("erin", "pw-erin", roles=[admin_role])

    login_user = directory.authenticate("erin", "pw-erin")

    assert login_user.authorities == {"sys:user:query", "sys:user:add"}


def test_unknown_user_still_pays_for_a_hash_check(directory, monkeypatch):
    checked = []
    original_verify = user_directory.verify_password

    def spy(password, password_hash):
        checked.append(password_hash)
        return original_verify(password, password_hash)

    monkeypatch.setattr(user_directory, "verify_password", spy)

    with pytest.raises(InvalidCredentialsError):
        directory.authenticate("nobody", "pw-nobody")
    assert len(checked) == 1
    assert checked[0].startswith("$argon2")
