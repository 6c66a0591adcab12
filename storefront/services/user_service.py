# storefront/services/user_service.py
from decimal import Decimal
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.user import UserModel
from storefront.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    InsufficientBalanceError,
    BusinessRuleError,
)
from storefront.domain.schemas import RegisterIn, LoginIn
from storefront.repos.user_repo import UserRepo
from storefront.utils.security import hash_password, check_password, create_access_token
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADMIN_ROLES = ("admin", "super_admin")


def issue_token(user: UserModel) -> str:
    return create_access_token(user.id, user.username, user.email, user.role)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> Tuple[UserModel, str]:
        user = UserModel(
            username=payload.username,
            email=payload.email.lower(),
            password_hash=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
            role="customer",
        )

        # uniqueness is enforced by the database, no pre-check
        try:
            with transaction(self.db):
                self.repo.add_user(user)
        except IntegrityError:
            raise ConflictError("User with this email or username already exists") from None

        logger.info(f"Registered user {user.id} ({user.username})")
        return user, issue_token(user)

    def login(self, payload: LoginIn) -> Tuple[UserModel, str]:
        user = self.repo.get_active_user_by_email(payload.email.lower())
        if not user or not check_password(payload.password, user.password_hash):
            logger.info(f"Failed login for {payload.email}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return user, issue_token(user)

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_active_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_customers(self):
        return self.repo.list_customers()

    def get_points(self, user_id: int) -> Decimal:
        return self.get_user(user_id).wallet_balance

    def adjust_wallet(self, user_id: int, amount: Decimal) -> Decimal:
        """
        Adds amount (may be negative) to the wallet in one conditional UPDATE.
        A debit that would take the balance below zero changes nothing.
        """
        if amount == 0:
            raise BusinessRuleError("Amount must not be zero")

        with transaction(self.db):
            if self.repo.add_to_wallet(user_id, amount) == 0:
                if not self.repo.get_user(user_id):
                    raise NotFoundError("User not found")
                raise InsufficientBalanceError("insufficient balance")

        self.db.expire_all()
        balance = self.repo.get_user(user_id).wallet_balance
        logger.info(f"Wallet of user {user_id} changed by {amount}, balance {balance}")
        return balance
