"""Ownership guard tests — pure, no database."""

import uuid
from types import SimpleNamespace

import pytest

from taskflow.auth.ownership import Access, authorize, require_owner
from taskflow.errors import NotFoundError


def _task(owner_id):
    return SimpleNamespace(id=1, owner_id=owner_id)


def test_owner_is_allowed():
    owner = uuid.uuid4()
    assert authorize(owner, _task(owner)) is Access.ALLOWED
    assert authorize(str(owner), _task(owner)) is Access.ALLOWED


def test_foreign_and_missing_look_the_same():
    owner, other = uuid.uuid4(), uuid.uuid4()
    assert authorize(other, _task(owner)) is Access.NOT_FOUND
    assert authorize(other, None) is Access.NOT_FOUND


@pytest.mark.parametrize("caller", ["", "not-a-uuid", None])
def test_unparseable_caller_is_not_found(caller):
    assert authorize(caller, _task(uuid.uuid4())) is Access.NOT_FOUND


def test_require_owner_returns_resource():
    owner = uuid.uuid4()
    task = _task(owner)
    assert require_owner(owner, task) is task


def test_require_owner_raises_identical_errors():
    owner, other = uuid.uuid4(), uuid.uuid4()
    with pytest.raises(NotFoundError) as foreign:
        require_owner(other, _task(owner))
    with pytest.raises(NotFoundError) as missing:
        require_owner(other, None)
    assert foreign.value.to_dict() == missing.value.to_dict() == {"error": "Task not found."}
