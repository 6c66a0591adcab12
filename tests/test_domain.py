import pytest
from pydantic import ValidationError

from storefront.domain.order_status import OrderStatus, can_transition
from storefront.domain.owner import UserOwner, GuestOwner, ensure_owner, MAX_SESSION_ID_LENGTH
from storefront.domain.schemas import ProductUpdate, RegisterIn
from storefront.domain.errors import NoFieldsToUpdate
from storefront.domain.updates import changed_fields
from storefront.utils.security import hash_password, check_password, create_access_token, decode_access_token


def test_owners():
    assert str(UserOwner(7)) == "user:7"
    assert str(GuestOwner("abc")) == "guest:abc"
    assert UserOwner(7) == UserOwner(7)
    assert UserOwner(7) != GuestOwner("7")
    assert ensure_owner(GuestOwner("abc")) == GuestOwner("abc")


@pytest.mark.parametrize("bad", [0, -3, "7", None])
def test_user_owner_needs_positive_id(bad):
    with pytest.raises(ValueError):
        UserOwner(bad)


@pytest.mark.parametrize("bad", ["", "   ", None, "s" * 129])
def test_guest_owner_needs_session(bad):
    with pytest.raises(ValueError):
        GuestOwner(bad)


def test_guest_owner_accepts_column_width():
    assert GuestOwner("s" * MAX_SESSION_ID_LENGTH).session_id == "s" * 128


def test_ensure_owner_rejects_other_values():
    with pytest.raises(TypeError):
        ensure_owner("user:1")


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED, True),
        (OrderStatus.PENDING, OrderStatus.PENDING, True),
        (OrderStatus.PENDING, OrderStatus.SHIPPED, False),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED, True),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED, True),
        (OrderStatus.CONFIRMED, OrderStatus.PENDING, False),
        (OrderStatus.DELIVERED, OrderStatus.CANCELLED, False),
        (OrderStatus.CANCELLED, OrderStatus.PENDING, False),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_changed_fields_keeps_only_sent_values():
    assert changed_fields(ProductUpdate(name="Mug", description=None)) == {"name": "Mug"}
    with pytest.raises(NoFieldsToUpdate):
        changed_fields(ProductUpdate())


def test_passwords_and_tokens():
    hashed = hash_password("secret123")
    assert check_password("secret123", hashed)
    assert not check_password("secret124", hashed)
    assert not check_password("secret123", "not-a-bcrypt-hash")

    claims = decode_access_token(create_access_token(3, "ann", "ann@example.com", "admin"))
    assert claims["user_id"] == 3
    assert claims["role"] == "admin"


def test_register_schema_strips_username():
    assert RegisterIn(username=" jan ", email="jan@example.com", password="secret123").username == "jan"
    with pytest.raises(ValidationError):
        RegisterIn(username="   ", email="jan@example.com", password="secret123")
