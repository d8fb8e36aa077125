from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.roles import Principal, role_banner
from ..core.security import issue_access_token
from ..crud.users import authenticate_user, create_user, delete_user, list_users, to_principal
from ..db.session import get_db
from ..deps.auth import require_admin, require_reader
from ..schemas.user import LoginRequest, LoginResponse, RoleInfo, UserCreate, UserMessage, UserOut

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/users/login", response_model=LoginResponse, summary="Exchange credentials for a JWT")
def api_login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    principal = to_principal(user)
    return LoginResponse(token=issue_access_token(principal), user=principal, info=role_banner(user.role))


@router.get("/users", response_model=list[UserOut], dependencies=[Depends(require_admin)])
def api_list_users(db: Session = Depends(get_db)):
    return list_users(db)


@router.post("/users/create", response_model=UserMessage, dependencies=[Depends(require_admin)])
def api_create_user(payload: UserCreate, db: Session = Depends(get_db)):
    create_user(db, payload.email, payload.password, payload.role)
    return {"msg": "User created successfully"}


@router.delete("/users/{user_id}", response_model=UserMessage)
def api_delete_user(user_id: int, principal: Principal = Depends(require_admin), db: Session = Depends(get_db)):
    delete_user(db, user_id, acting_user_id=principal.id)
    return {"msg": "User deleted"}


@router.get("/role-info", response_model=RoleInfo)
async def api_role_info(principal: Principal = Depends(require_reader)):
    return RoleInfo(role=principal.role, info=role_banner(principal.role))
