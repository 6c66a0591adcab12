# storefront/repos/user_repo.py
from decimal import Decimal
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_active_user(self, user_id: int) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.id == user_id, UserModel.is_active.is_(True))
        ).scalar_one_or_none()

    def get_active_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email, UserModel.is_active.is_(True))
        ).scalar_one_or_none()

    def add_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user

    def list_customers(self) -> List[UserModel]:
        return self.db.execute(
            select(UserModel)
            .where(UserModel.role == "customer")
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
        ).scalars().all()

    def add_to_wallet(self, user_id: int, amount: Decimal) -> int:
        """
        Single UPDATE guarded by the resulting balance, 0 rows means either
        no such user or the balance would drop below zero.
        """
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.wallet_balance + amount >= 0)
            .values(wallet_balance=UserModel.wallet_balance + amount)
        )
        return result.rowcount
