"""Service layer — outcome and status-code mapping."""

import pytest

from crudserver.server.models import UserCreate, UserFilters, UserUpdate
from crudserver.server.services import UserService


@pytest.fixture
def service(db):
    return UserService(db)


def _payload(username, **fields):
    return UserCreate(username=username, email=f"{username}@example.com", name=username.title(), **fields)


async def test_create_returns_201_with_record(service):
    result = await service.create_user(_payload("ana"))

    assert result.success is True
    assert result.status_code == 201
    assert result.data.username == "ana"
    assert result.error is None


async def test_create_duplicate_returns_409(service):
    await service.create_user(_payload("ana"))

    result = await service.create_user(_payload("ana"))

    assert result.success is False
    assert result.status_code == 409
    assert result.error == "Username or email already exists"
    assert result.data is None


async def test_list_returns_200(service):
    await service.create_user(_payload("ana", gender="female"))
    await service.create_user(_payload("bob", gender="male"))

    result = await service.list_users(UserFilters(gender="male"))

    assert result.status_code == 200
    assert [u.username for u in result.data] == ["bob"]


async def test_list_empty_is_success(service):
    result = await service.list_users()

    assert result.success is True
    assert result.data == []


async def test_get_missing_returns_404(service, missing_id):
    result = await service.get_user(missing_id)

    assert result.status_code == 404
    assert result.error == "User not found"


async def test_update_returns_200(service):
    created = (await service.create_user(_payload("ana"))).data

    result = await service.update_user(str(created.id), UserUpdate(bio="new"))

    assert result.status_code == 200
    assert result.data.bio == "new"


async def test_update_missing_returns_404(service, missing_id):
    result = await service.update_user(missing_id, UserUpdate(name="x"))

    assert result.status_code == 404


async def test_update_conflict_returns_409(service):
    await service.create_user(_payload("ana"))
    bob = (await service.create_user(_payload("bob"))).data

    result = await service.update_user(str(bob.id), UserUpdate(email="ana@example.com"))

    assert result.status_code == 409
    assert result.error == "Username or email already exists"


async def test_delete_returns_204_without_payload(service):
    created = (await service.create_user(_payload("ana"))).data

    result = await service.delete_user(str(created.id))

    assert result.success is True
    assert result.status_code == 204
    assert result.data is None


async def test_delete_missing_returns_404(service, missing_id):
    result = await service.delete_user(missing_id)

    assert result.status_code == 404
    assert result.error == "User not found"


@pytest.mark.parametrize("call, message", [
    (lambda s, uid: s.create_user(_payload("ana")), "Failed to create user"),
    (lambda s, uid: s.list_users(), "Failed to fetch users"),
    (lambda s, uid: s.get_user(uid), "Failed to fetch user"),
    (lambda s, uid: s.update_user(uid, UserUpdate(name="x")), "Failed to update user"),
    (lambda s, uid: s.delete_user(uid), "Failed to delete user"),
])
async def test_storage_failures_return_generic_500(service, db, missing_id, call, message):
    db.drop_tables()

    result = await call(service, missing_id)

    assert result.success is False
    assert result.status_code == 500
    assert result.error == message
