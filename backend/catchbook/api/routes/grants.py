"""Grants: subsidy and grant notices surfaced to cooperative members."""
from typing import List

from fastapi import APIRouter, Depends, Query

from catchbook.api.deps import get_store
from catchbook.core.audit import AuditLog
from catchbook.core.exceptions import BusinessError, StoreError
from catchbook.schemas.records import Grant, GrantCreate
from catchbook.services.store import RecordStore

router = APIRouter()


@router.get("/grants", response_model=List[Grant])
def list_grants(
    include_inactive: bool = Query(False, alias="includeInactive"),
    store: RecordStore = Depends(get_store),
):
    """Open notices, soonest application deadline first."""
    try:
        return store.get_grants(active_only=not include_inactive)
    except StoreError as e:
        raise BusinessError.server_error("補助金情報の取得に失敗しました", e)


@router.post("/grants", response_model=Grant)
def create_grant(body: GrantCreate, store: RecordStore = Depends(get_store)):
    """Publish a new notice."""
    if not body.title.strip():
        raise BusinessError.bad_request("title: must not be empty")
    if body.grant_amount is not None and body.grant_amount < 0:
        raise BusinessError.bad_request("grantAmount: cannot be negative")

    try:
        grant = store.create_grant(body)
    except StoreError as e:
        raise BusinessError.server_error("補助金情報の登録に失敗しました", e)

    AuditLog.log_action("create", "grant", grant.id, changes={"title": grant.title})
    return grant
