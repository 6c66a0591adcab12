# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import Principal, require_principal, resolve_owner, session_id_header
from storefront.data.database import get_db
from storefront.domain.owner import Owner
from storefront.domain.schemas import ItemIn, QuantityIn, CartOut, MessageOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.post("", response_model=MessageOut)
def add_item(payload: ItemIn, owner: Owner = Depends(resolve_owner), db: Session = Depends(get_db)):
    CartService(db).add_item(owner, payload.product_id, payload.quantity)
    return {"message": "Item added to cart successfully"}


@router.get("", response_model=CartOut)
def get_cart(owner: Owner = Depends(resolve_owner), db: Session = Depends(get_db)):
    return CartService(db).summarize(owner)


@router.delete("", response_model=MessageOut)
def clear_cart(owner: Owner = Depends(resolve_owner), db: Session = Depends(get_db)):
    CartService(db).clear(owner)
    return {"message": "Cart cleared"}


@router.post("/migrate", response_model=MessageOut)
def migrate_cart(
    principal: Principal = Depends(require_principal),
    session_id: str | None = Depends(session_id_header),
    db: Session = Depends(get_db),
):
    if not session_id:
        return {"message": "No guest cart to migrate"}

    CartService(db).migrate_guest_to_user(session_id, principal.user_id)
    return {"message": "Guest cart migrated successfully"}


@router.put("/{product_id}", response_model=MessageOut)
def update_item(
    product_id: int,
    payload: QuantityIn,
    owner: Owner = Depends(resolve_owner),
    db: Session = Depends(get_db),
):
    CartService(db).update_quantity(owner, product_id, payload.quantity)
    if payload.quantity <= 0:
        return {"message": "Item removed from cart"}
    return {"message": "Cart item updated successfully"}


@router.delete("/{product_id}", response_model=MessageOut)
def remove_item(product_id: int, owner: Owner = Depends(resolve_owner), db: Session = Depends(get_db)):
    CartService(db).remove_item(owner, product_id)
    return {"message": "Item removed from cart successfully"}
