"""Tests for the access rule on job-request creation (SQLite store)."""

from __future__ import annotations

import json

import pytest

from jobrules.domain.enums import PermissionAction
from jobrules.domain.errors import MissingIdError, MissingPrincipalError
from jobrules.domain.permissions import grants_for
from jobrules.handlers.access_tightener import AccessTightener
from jobrules.handlers.outcome import OutcomeKind
from jobrules.infrastructure.repositories import JobRequestRepository

OPEN_PERMISSIONS = ['read("users")', 'update("users")']

JOB = {
    "$id": "jr1",
    "clientId": "c1",
    "driverId": "d1",
    "status": "PENDING",
    "pickupAddress": "Terminal 2",
}


@pytest.fixture
def repo(sql_store, collections):
    return JobRequestRepository(
        sql_store, collections.database_id, collections.job_requests_id
    )


@pytest.fixture
def tightener(repo):
    return AccessTightener(repo)


@pytest.mark.asyncio
async def test_restricts_to_client_and_driver(tightener, repo, sql_store, seed_job_request):
    await seed_job_request(sql_store, JOB)

    outcome = await tightener.handle(json.dumps(JOB), request_id="exec-1")

    assert outcome.kind == OutcomeKind.OK
    assert outcome.status_code == 200
    assert outcome.document_id == "jr1"

    doc = await repo.get("jr1")
    assert grants_for(doc.permissions, "c1") == {
        PermissionAction.READ,
        PermissionAction.UPDATE,
        PermissionAction.DELETE,
    }
    assert grants_for(doc.permissions, "d1") == {
        PermissionAction.READ,
        PermissionAction.UPDATE,
    }
    # The open "users" grants are gone
    assert len(doc.permissions) == 5
    assert not set(OPEN_PERMISSIONS) & set(doc.permissions)


@pytest.mark.asyncio
async def test_attributes_untouched(tightener, repo, sql_store, seed_job_request):
    await seed_job_request(sql_store, JOB)

    # A stale snapshot must not overwrite newer attributes
    stale = dict(JOB, status="SOMETHING_OLD")
    await tightener.apply(json.dumps(stale))

    doc = await repo.get("jr1")
    assert doc.data == {k: v for k, v in JOB.items() if k != "$id"}


@pytest.mark.asyncio
async def test_applying_twice_is_idempotent(tightener, repo, sql_store, seed_job_request):
    await seed_job_request(sql_store, JOB)

    await tightener.handle(json.dumps(JOB))
    first = await repo.get("jr1")
    await tightener.handle(json.dumps(JOB))
    second = await repo.get("jr1")

    assert first.permissions == second.permissions
    assert first.data == second.data


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "doc",
    [
        {"$id": "jr1", "clientId": "c1"},
        {"$id": "jr1", "clientId": "c1", "driverId": ""},
        {"$id": "jr1", "driverId": "d1"},
    ],
)
async def test_missing_principal_rejected_without_mutation(
    tightener, repo, sql_store, seed_job_request, doc
):
    await seed_job_request(sql_store, JOB)

    outcome = await tightener.handle(json.dumps(doc))

    assert outcome.kind == OutcomeKind.ERROR
    assert outcome.status_code == 400
    assert outcome.detail == "missing client/driver"
    assert (await repo.get("jr1")).permissions == OPEN_PERMISSIONS


@pytest.mark.asyncio
async def test_missing_id_checked_before_principals(tightener):
    with pytest.raises(MissingIdError):
        await tightener.apply("{}")

    outcome = await tightener.handle(json.dumps({"clientId": "c1"}))
    assert outcome.status_code == 400
    assert outcome.detail == "no id"

    outcome = await tightener.handle(
        json.dumps({"id": "jr1", "clientId": "c1", "driverId": "d1"})
    )
    assert outcome.status_code == 400
    assert outcome.detail == "no id"


@pytest.mark.asyncio
async def test_missing_principal_raises_from_apply(tightener):
    with pytest.raises(MissingPrincipalError):
        await tightener.apply(json.dumps({"$id": "jr1", "clientId": "c1"}))


@pytest.mark.asyncio
async def test_malformed_payload_is_client_error(tightener):
    outcome = await tightener.handle("{oops")
    assert outcome.kind == OutcomeKind.ERROR
    assert outcome.status_code == 400


@pytest.mark.asyncio
async def test_unknown_document_is_store_error(tightener):
    outcome = await tightener.handle(json.dumps(dict(JOB, **{"$id": "missing"})))

    assert outcome.kind == OutcomeKind.ERROR
    assert outcome.status_code == 500
    assert "missing" in outcome.detail
