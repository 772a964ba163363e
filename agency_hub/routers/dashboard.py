"""Dashboard routes — signed-in user, clients, client reports."""

from fastapi import APIRouter, Depends, HTTPException

from agency_hub import supabase_client as db
from agency_hub.auth import current_user_id

router = APIRouter(prefix="/api")


@router.get("/auth/user")
async def auth_user(user_id: str = Depends(current_user_id)):
    user = db.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/dashboard/clients", dependencies=[Depends(current_user_id)])
async def dashboard_clients():
    return db.get_clients()


@router.get("/dashboard/client/{client_id}/reports", dependencies=[Depends(current_user_id)])
async def dashboard_client_reports(client_id: int):
    return db.get_reports_by_client(client_id)
