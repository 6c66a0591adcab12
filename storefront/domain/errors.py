# storefront/domain/errors.py


class StoreError(Exception):
    """Base for expected, user facing failures. Carries its HTTP status."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StoreError):
    status_code = 404


class ConflictError(StoreError):
    status_code = 409


class AuthenticationError(StoreError):
    status_code = 401


class ForbiddenError(StoreError):
    status_code = 403


class BusinessRuleError(StoreError):
    status_code = 400


class EmptyCartError(BusinessRuleError):
    def __init__(self, message: str = "cart is empty"):
        super().__init__(message)


class NoFieldsToUpdate(BusinessRuleError):
    def __init__(self, message: str = "no fields to update"):
        super().__init__(message)


class InsufficientBalanceError(BusinessRuleError):
    pass


class InvalidStatusTransition(BusinessRuleError):
    pass


class CategoryInUseError(BusinessRuleError):
    status_code = 409


class ProductInUseError(BusinessRuleError):
    status_code = 409
