import pytest

from backoffice.core.enums import Role
from backoffice.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from backoffice.users.service import AuthService, UserService


@pytest.fixture
def auth(users_repo):
    return AuthService(users_repo)


def test_sign_up_and_authenticate(auth, users_repo):
    user_id = auth.sign_up(
        username="owner", email="Owner@Shop.test", password="secret1", confirm_password="secret1", role="owner"
    )

    assert users_repo.get_by_id(user_id).email == "owner@shop.test"
    assert users_repo.get_by_id(user_id).password_hash != "secret1"

    s_user = auth.authenticate("owner@shop.test", "secret1")
    assert s_user.user_id == user_id
    assert s_user.role is Role.OWNER


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(username="", email="a@b.c", password="secret1", confirm_password="secret1", role="staff"),
        dict(username="a", email="a@b.c", password="secret1", confirm_password="secret2", role="staff"),
        dict(username="a", email="a@b.c", password="123", confirm_password="123", role="staff"),
        dict(username="a", email="a@b.c", password="secret1", confirm_password="secret1", role="admin"),
    ],
)
def test_sign_up_validation(auth, kwargs):
    with pytest.raises(ValidationError):
        auth.sign_up(**kwargs)


def test_duplicate_email_conflicts(auth, users_repo):
    users_repo.add(username="a", email="a@b.c", password="secret1")
    with pytest.raises(ConflictError):
        auth.sign_up(username="b", email="a@b.c", password="secret1", confirm_password="secret1", role="staff")


def test_bad_credentials_and_inactive_accounts(auth, users_repo):
    users_repo.add(username="a", email="a@b.c", password="secret1")
    users_repo.add(username="b", email="b@b.c", password="secret1", is_active=False)

    with pytest.raises(AuthenticationError):
        auth.authenticate("a@b.c", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate("b@b.c", "secret1")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody@b.c", "secret1")


def test_user_management(users_repo):
    service = UserService(users_repo)
    owner = users_repo.add(username="o", email="o@b.c", password="secret1", role=Role.OWNER)
    other = users_repo.add(username="s", email="s@b.c", password="secret1")

    service.set_active(other.user_id, is_active=False)
    assert service.get_user(other.user_id)["is_active"] is False

    with pytest.raises(ValidationError):
        service.delete_user(current_user_id=owner.user_id, user_id=owner.user_id)

    service.delete_user(current_user_id=owner.user_id, user_id=other.user_id)
    with pytest.raises(NotFoundError):
        service.get_user(other.user_id)
