"""Account routes, including transfers between accounts."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bizbooks.core.security import AuthenticatedUser, get_authenticated_user
from bizbooks.schemas.accounts import AccountCreate, AccountRecord, AccountUpdate, TransferCreate
from bizbooks.services import AccountService
from bizbooks.web import get_db_session, parse_record_id, respond

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


def get_account_service(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_authenticated_user),
) -> AccountService:
    return AccountService(session, user.user_id)


def _dump(account) -> dict:
    return AccountRecord.model_validate(account).model_dump()


@router.get("")
def list_accounts(service: AccountService = Depends(get_account_service)) -> JSONResponse:
    accounts, totals = service.list_accounts()
    return respond({"accounts": [_dump(account) for account in accounts], "totals": totals})


@router.post("/transfer")
def transfer(
    payload: TransferCreate,
    service: AccountService = Depends(get_account_service),
) -> JSONResponse:
    result = service.transfer(payload)
    return respond({"transfer": result.as_dict()}, message="Transfer completed successfully")


@router.get("/{account_id}")
def get_account(account_id: str, service: AccountService = Depends(get_account_service)) -> JSONResponse:
    return respond({"account": _dump(service.get(parse_record_id(account_id, "account")))})


@router.post("")
def create_account(
    payload: AccountCreate,
    service: AccountService = Depends(get_account_service),
) -> JSONResponse:
    account = service.create(payload)
    return respond({"account": _dump(account)}, message="Account created successfully", status_code=201)


@router.put("/{account_id}")
def update_account(
    account_id: str,
    payload: AccountUpdate,
    service: AccountService = Depends(get_account_service),
) -> JSONResponse:
    account = service.update(parse_record_id(account_id, "account"), payload)
    return respond({"account": _dump(account)}, message="Account updated successfully")


@router.delete("/{account_id}")
def delete_account(account_id: str, service: AccountService = Depends(get_account_service)) -> JSONResponse:
    service.delete(parse_record_id(account_id, "account"))
    return respond(message="Account deleted successfully")


__all__ = ["router"]
