import pytest

from logic.work_orders.errors import PermissionDeniedError
from logic.work_orders.models import User
from logic.work_orders.roles import has_role_at_least, require_role_at_least


def test_jerarquia():
    admin = User(user_id=1, role="admin")
    assert has_role_at_least(admin, "user")
    assert has_role_at_least(admin, "admin")
    assert not has_role_at_least(admin, "superadmin")
    assert has_role_at_least(User(user_id=2, role="superadmin"), "admin")


def test_rol_desconocido_o_anonimo():
    assert not has_role_at_least(User(user_id=1, role="invitado"), "user")
    with pytest.raises(PermissionDeniedError):
        require_role_at_least(None, "user")


def test_require_devuelve_el_usuario():
    u = User(user_id=3, role="user")
    assert require_role_at_least(u, "user") is u
