import pytest

from smarthourly.core.exceptions import (
    AuthenticationError,
    BusinessRuleViolationError,
    NotFoundError,
)
from smarthourly.repositories.user_repository import UserRepository
from smarthourly.schemas.user import LoginRequest, RegisterRequest
from smarthourly.services.role_service import RoleResolver
from smarthourly.services.user_service import UserService
from smarthourly.utils.security import decode_access_token


def _register(db, email="new.operator@plant.test", name="Nia New"):
    return UserService(db).register(RegisterRequest(email=email, password="secret123", name=name))


def test_register_defaults_to_operator(db):
    user = _register(db)
    assert user.role == "operator"
    assert user.name == "Nia New"


def test_register_duplicate_email(db):
    _register(db)
    with pytest.raises(BusinessRuleViolationError):
        _register(db, email="NEW.operator@plant.test")


def test_login_returns_token(db):
    user = _register(db)
    token = UserService(db).login(LoginRequest(email=user.email, password="secret123"))
    assert decode_access_token(token.access_token) == user.id
    assert token.role == "operator"


def test_login_wrong_password(db):
    user = _register(db)
    with pytest.raises(AuthenticationError):
        UserService(db).login(LoginRequest(email=user.email, password="wrong"))


def test_list_users_search_and_current_flag(db, admin_user, supervisor_user):
    views = UserService(db).list_users(current_user_id=admin_user.id, search="sam")
    assert [v.email for v in views] == [supervisor_user.email]
    assert views[0].is_current_user is False


def test_change_role_applies_immediately(db, operator_user):
    UserService(db).change_role(operator_user.id, "supervisor")
    assert RoleResolver(db).role_of(operator_user.id) == "supervisor"
    assert RoleResolver(db).atl_roster() == ["Olivia Operator"]


def test_cannot_demote_last_admin(db, admin_user):
    with pytest.raises(BusinessRuleViolationError):
        UserService(db).change_role(admin_user.id, "operator")


def test_change_role_unknown_user(db):
    with pytest.raises(NotFoundError):
        UserService(db).change_role(404, "operator")


def test_user_without_role_row_has_no_role(db, operator_user):
    db.delete(operator_user.role_entry)
    db.commit()
    db.refresh(operator_user)
    assert operator_user.role is None
    assert RoleResolver(db).role_of(operator_user.id) is None


def test_register_race_on_same_email_is_business_rule_violation(db, monkeypatch):
    _register(db)
    # the second request passed its existence check before the first committed
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)
    with pytest.raises(BusinessRuleViolationError):
        _register(db)
    monkeypatch.undo()
    assert UserRepository(db).get_by_email("new.operator@plant.test") is not None
