from datetime import datetime, timedelta, timezone

import pytest
from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.timeclock.timeclock.employees.service import AuthService, EmployeeService
from src.timeclock.timeclock.sessions.service import SessionService
from tests.fakes import InMemorySessions, InMemoryUsers


def test_add_employee_rejects_short_pin():
    svc = EmployeeService(InMemoryUsers())

    with pytest.raises(ValidationError, match="exactly 4 digits"):
        svc.add_employee(name="Ana", pin="12")


def test_add_employee_rejects_duplicate_pin():
    svc = EmployeeService(InMemoryUsers())
    svc.add_employee(name="Ana", pin="1234")

    with pytest.raises(ConflictError, match="PIN already exists"):
        svc.add_employee(name="Ben", pin="1234")


@pytest.mark.parametrize("name", ["", " ", "A", " B "])
def test_add_employee_rejects_short_names(name):
    with pytest.raises(ValidationError):
        EmployeeService(InMemoryUsers()).add_employee(name=name, pin="1234")


def test_add_employee_trims_name_and_dedupes_tags():
    users = InMemoryUsers()
    svc = EmployeeService(users)

    svc.add_employee(name="  Ana  ", pin="1234", tags=["MX", "MX", "Closer"])

    user = users.get_by_pin("1234")
    assert user.name == "Ana"
    assert user.tags == ("MX", "Closer")


@pytest.mark.parametrize("name", [12, ["Ana"], "x" * 121])
def test_add_employee_rejects_non_text_and_overlong_names(name):
    users = InMemoryUsers()

    with pytest.raises(ValidationError):
        EmployeeService(users).add_employee(name=name, pin="1234")
    assert users.get_by_pin("1234") is None


@pytest.mark.parametrize("tags", ["MX", 5, {"MX": True}, [5]])
def test_update_tags_requires_list_of_strings(tags):
    users = InMemoryUsers()
    users.add("Ana", "1234", tags=("Closer",))

    with pytest.raises(ValidationError):
        EmployeeService(users).update_tags(pin="1234", tags=tags)
    assert users.get_by_pin("1234").tags == ("Closer",)


def test_update_tags_rejects_unknown_tag():
    users = InMemoryUsers()
    users.add("Ana", "1234")

    with pytest.raises(ValidationError, match="Unknown tag"):
        EmployeeService(users).update_tags(pin="1234", tags=["Wizard"])


def test_update_tags_unknown_employee():
    with pytest.raises(NotFoundError):
        EmployeeService(InMemoryUsers()).update_tags(pin="1234", tags=["MX"])


def test_delete_employee():
    users = InMemoryUsers()
    users.add("Ana", "1234")
    svc = EmployeeService(users)

    assert svc.delete_employee(pin="1234").name == "Ana"
    assert users.get_by_pin("1234") is None
    with pytest.raises(NotFoundError):
        svc.delete_employee(pin="1234")


def test_list_users_hides_admin_accounts():
    users = InMemoryUsers()
    users.add("Ana", "1234")
    users.create_admin(username="boss", password_hash="x")

    assert [u.name for u in EmployeeService(users).list_users()] == ["Ana"]


def make_auth(users=None, ttl=480):
    users = users or InMemoryUsers()
    sessions = InMemorySessions()
    return AuthService(users, SessionService(sessions, ttl_minutes=ttl)), users, sessions


def test_login_opens_session():
    auth, users, sessions = make_auth()
    auth.create_admin(username="boss", password="secret1")

    session = auth.login("boss", "secret1")

    assert session.token in sessions.items
    assert auth.is_admin(session.token)


def test_login_wrong_password():
    auth, users, _ = make_auth()
    users.create_admin(username="boss", password_hash=generate_password_hash("secret1"))

    with pytest.raises(AuthenticationError):
        auth.login("boss", "nope")
    with pytest.raises(AuthenticationError):
        auth.login("nobody", "secret1")


def test_create_admin_duplicate_and_bootstrap_flag():
    auth, _, _ = make_auth()
    assert auth.needs_bootstrap()

    auth.create_admin(username="boss", password="secret1")

    assert not auth.needs_bootstrap()
    with pytest.raises(ConflictError):
        auth.create_admin(username="boss", password="secret2")
    with pytest.raises(ValidationError):
        auth.create_admin(username="other", password="123")


def test_quick_login_requires_admin_tag():
    auth, users, _ = make_auth()
    users.add("Ana", "1234", tags=("Admin",))
    users.add("Ben", "5678")

    assert auth.is_admin(auth.quick_login("1234").token)
    with pytest.raises(AuthorizationError):
        auth.quick_login("5678")
    with pytest.raises(AuthenticationError):
        auth.quick_login("0000")


def test_expired_session_is_not_admin():
    sessions = InMemorySessions()
    svc = SessionService(sessions, ttl_minutes=30)
    start = datetime(2026, 1, 14, 8, 0, tzinfo=timezone.utc)

    s = svc.open(now=start)

    assert svc.is_admin(s.token, now=start + timedelta(minutes=29))
    assert not svc.is_admin(s.token, now=start + timedelta(minutes=30))
    assert s.token not in sessions.items


def test_logout_closes_session():
    auth, _, sessions = make_auth()
    auth.create_admin(username="boss", password="secret1")
    token = auth.login("boss", "secret1").token

    auth.logout(token)

    assert not auth.is_admin(token)
    assert sessions.items == {}


def test_login_rejects_non_string_credentials():
    auth, _, _ = make_auth()
    auth.create_admin(username="boss", password="secret1")

    with pytest.raises(ValidationError):
        auth.login(42, "secret1")
    with pytest.raises(ValidationError):
        auth.login("boss", 1234567)


def test_create_admin_rejects_overlong_username():
    auth, users, _ = make_auth()

    with pytest.raises(ValidationError, match="at most 80"):
        auth.create_admin(username="a" * 81, password="secret1")
    assert auth.needs_bootstrap()
