"""Registration, login/logout and account routes."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from config import SESSION_COOKIE, SESSION_TTL_HOURS
from database import get_db
from models import User
from schemas import LoginRequest, LoginResponse, PasswordChange, UserCreate, UserOut, UserUpdate
from services.auth import (
    create_session,
    current_user,
    end_session,
    hash_password,
    token_from_request,
    verify_password,
)
from services.designs import (
    create_user,
    get_user_by_username,
    update_user,
    update_user_password,
)

router = APIRouter(prefix="/api", tags=["auth"])


def _set_cookie(response: Response, token: str):
    response.set_cookie(
        SESSION_COOKIE, token,
        max_age=SESSION_TTL_HOURS * 3600,
        httponly=True,
        samesite="lax",
    )


@router.post("/register", response_model=LoginResponse, status_code=201)
async def register(req: UserCreate, response: Response, db: AsyncSession = Depends(get_db)):
    """Create an account and log it in."""
    if await get_user_by_username(db, req.username):
        raise HTTPException(status_code=400, detail="Username already exists")

    data = req.model_dump()
    data["password"] = hash_password(req.password)
    user = await create_user(db, data)
    token = await create_session(db, user)
    _set_cookie(response, token)
    return LoginResponse(token=token, user=UserOut.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    user = await get_user_by_username(db, req.username)
    if not user or not verify_password(req.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    token = await create_session(db, user)
    _set_cookie(response, token)
    return LoginResponse(token=token, user=UserOut.model_validate(user))


@router.post("/logout")
async def logout(request: Request, response: Response, db: AsyncSession = Depends(get_db)):
    token = token_from_request(request)
    if token:
        await end_session(db, token)
    response.delete_cookie(SESSION_COOKIE)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
async def me(user: User = Depends(current_user)):
    return user


@router.patch("/users/{user_id}", response_model=UserOut)
async def patch_user(user_id: str, req: UserUpdate, db: AsyncSession = Depends(get_db),
                     user: User = Depends(current_user)):
    """Update the caller's own profile."""
    if not user_id.isdigit() or int(user_id) != user.id:
        raise HTTPException(status_code=403, detail="You can only update your own account")

    if req.username and req.username != user.username:
        if await get_user_by_username(db, req.username):
            raise HTTPException(status_code=400, detail="Username already exists")

    return await update_user(db, user, req.model_dump(exclude_unset=True))


@router.post("/user/password")
async def change_password(req: PasswordChange, db: AsyncSession = Depends(get_db),
                          user: User = Depends(current_user)):
    if not verify_password(req.current_password, user.password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    await update_user_password(db, user, hash_password(req.new_password))
    return {"message": "Password updated successfully"}
