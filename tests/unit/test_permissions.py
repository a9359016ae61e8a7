# -*- coding: utf-8 -*-
import pytest

from constants.roles import Role, normalize_role
from utils.exceptions import AuthenticationError, ErrorKind, ForbiddenError
from utils.permissions import Principal, assert_admin, assert_can_modify


def _principal(user_id=1, role=Role.USER.value):
    return Principal(id=user_id, email=f"u{user_id}@example.com", role=role, email_verified=True)


def test_owner_can_modify():
    assert _principal(1).can_modify(1)
    assert not _principal(1).can_modify(2)


def test_admin_override_is_optional():
    admin = _principal(9, Role.ADMIN.value)

    assert admin.can_modify(2, allow_admin=True)
    assert not admin.can_modify(2, allow_admin=False)


def test_assert_can_modify_raises_forbidden():
    with pytest.raises(ForbiddenError) as exc:
        assert_can_modify(_principal(1), 2)

    assert exc.value.code == 403
    assert exc.value.kind is ErrorKind.FORBIDDEN


def test_missing_principal_is_unauthenticated(app):
    with app.test_request_context("/"):
        with pytest.raises(AuthenticationError) as exc:
            assert_can_modify(None, 1)
    assert exc.value.code == 401


def test_assert_admin():
    assert assert_admin(_principal(1, Role.ADMIN.value)).is_admin
    with pytest.raises(ForbiddenError):
        assert_admin(_principal(1))


def test_role_comparison_is_case_insensitive():
    assert _principal(1, "admin").is_admin


@pytest.mark.parametrize("raw, expected", [(None, "USER"), ("admin", "ADMIN"), (" User ", "USER")])
def test_normalize_role(raw, expected):
    assert normalize_role(raw) == expected


def test_normalize_role_rejects_unknown():
    with pytest.raises(ValueError):
        normalize_role("root")
