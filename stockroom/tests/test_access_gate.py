import pytest

from stockroom.app.db.models.models_v1 import Product
from stockroom.app.db.models.core_types import Role
from stockroom.services import access
from stockroom.services.errors import Unauthorized, ValidationError


def test_hash_credential_is_sha256_hex():
    digest = access.hash_credential("secret")
    assert digest == "2bb80d537b1da3e38bd30361aa855686bde0eacd7162fef6a25fe97bf527a25b"
    assert access.hash_credential("secret") == digest


def test_authenticate_matches_lowercased_email(db_session, people):
    user = access.authenticate(db_session, "  Bob@X.com ", "secret")
    assert user.email == "bob@x.com"
    assert user.role == Role.manager


@pytest.mark.parametrize(
    "email, credential",
    [
        ("bob@x.com", "wrong"),
        ("nobody@x.com", "secret"),
    ],
)
def test_authenticate_refuses_bad_credentials(db_session, people, email, credential):
    with pytest.raises(Unauthorized):
        access.authenticate(db_session, email, credential)


@pytest.mark.parametrize("email, credential", [("", "secret"), ("bob@x.com", ""), (None, None)])
def test_authenticate_requires_both_fields(db_session, people, email, credential):
    with pytest.raises(ValidationError):
        access.authenticate(db_session, email, credential)


def test_role_predicates(people):
    alice, bob, carol, dave = (people[k] for k in ("alice", "bob", "carol", "dave"))

    assert [access.can_approve(u) for u in (alice, bob, carol, dave)] == [False, True, False, True]
    assert [access.can_archive(u) for u in (alice, bob, carol, dave)] == [False, False, False, True]
    # seul le flag compte pour la réception
    assert [access.can_receive(u) for u in (alice, bob, carol, dave)] == [False, False, True, False]


def test_can_handle_product(db_session, people, product):
    uncategorized = Product(name="Misc", unit="unit", minimum_stock=0)
    db_session.add(uncategorized)
    db_session.commit()

    assert access.can_handle_product(people["alice"], product)
    assert not access.can_handle_product(people["carol"], product)
    assert not access.can_handle_product(people["alice"], uncategorized)
    assert access.can_handle_product(people["bob"], uncategorized)
    assert access.can_handle_product(people["dave"], product)


def test_resolve_actor(db_session, people):
    assert access.resolve_actor(db_session, "CAROL@x.com").email == "carol@x.com"
    with pytest.raises(Unauthorized):
        access.resolve_actor(db_session, "ghost@x.com")
