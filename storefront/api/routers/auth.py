# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import Principal, require_principal, session_id_header
from storefront.data.database import get_db
from storefront.domain.schemas import RegisterIn, LoginIn, AuthOut, ProfileOut, PointsOut
from storefront.services.cart_service import CartService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user, token = UserService(db).register(payload)
    return {"message": "User registered successfully", "user": user, "token": token}


@router.post("/auth/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    session_id: str | None = Depends(session_id_header),
    db: Session = Depends(get_db),
):
    """
    Logs the user in. When the request still carries the guest
    X-Session-ID, that cart is merged into the user's cart.
    """
    user, token = UserService(db).login(payload)
    if session_id:
        CartService(db).migrate_guest_to_user(session_id, user.id)
    return {"message": "Login successful", "user": user, "token": token}


@router.get("/auth/profile", response_model=ProfileOut)
def profile(principal: Principal = Depends(require_principal), db: Session = Depends(get_db)):
    return {"user": UserService(db).get_user(principal.user_id)}


@router.get("/points", response_model=PointsOut)
def points(principal: Principal = Depends(require_principal), db: Session = Depends(get_db)):
    balance = UserService(db).get_points(principal.user_id)
    return {"user_id": principal.user_id, "balance": balance}
