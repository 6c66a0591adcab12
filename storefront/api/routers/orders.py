# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import Principal, optional_principal, resolve_owner
from storefront.data.database import get_db
from storefront.domain.owner import Owner
from storefront.domain.schemas import OrderCreate, OrderOut, OrderCreatedOut, OrderListOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderCreatedOut, status_code=201)
def create_order(
    payload: OrderCreate,
    owner: Owner = Depends(resolve_owner),
    db: Session = Depends(get_db),
):
    """
    Turns the caller's whole cart (user or guest) into a pending order.
    """
    order = OrderService(db).create_order_from_cart(owner, payload)
    return {"message": "Order created successfully", "order": order}


@router.get("", response_model=OrderListOut)
def list_my_orders(owner: Owner = Depends(resolve_owner), db: Session = Depends(get_db)):
    orders = OrderService(db).get_owner_orders(owner)
    return {"orders": orders, "total": len(orders)}


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    owner: Owner = Depends(resolve_owner),
    principal: Principal | None = Depends(optional_principal),
    db: Session = Depends(get_db),
):
    is_admin = principal is not None and principal.is_admin
    return OrderService(db).get_order_for(order_id, owner, is_admin=is_admin)
