"""
Domain Errors

Every error raised by the services derives from AppError. Each one carries a
machine-readable code, a human message, the offending value (when there is
one) and the call stack captured where it was raised. Wrapping uses normal
exception chaining so callers can test by class instead of by message.
"""
import traceback
from typing import Any, List, Optional


def _capture_stack() -> List[str]:
    # Drop the frames belonging to AppError construction itself
    frames = traceback.extract_stack()[:-2]
    return [f"{f.filename}:{f.lineno} {f.name}" for f in reversed(frames[-32:])]


class AppError(Exception):
    """Base domain error"""
    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_message: str = "internal error"

    def __init__(self, message: Optional[str] = None, field_value: Any = None, code: Optional[str] = None):
        self.message = message or self.default_message
        self.field_value = field_value
        if code:
            self.code = code
        self.stack = _capture_stack()
        super().__init__(self.message)

    @classmethod
    def wrap(cls, err: BaseException, message: Optional[str] = None, field_value: Any = None) -> "AppError":
        """Build an error of this kind around `err`, merging stacks when `err` is an AppError"""
        wrapped = cls(message, field_value)
        wrapped.__cause__ = err
        if isinstance(err, AppError):
            wrapped.stack = wrapped.stack + err.stack
        return wrapped

    def unwrap(self) -> Optional[BaseException]:
        return self.__cause__

    @property
    def full_stack(self) -> str:
        return "\n".join(self.stack)

    def to_dict(self) -> dict:
        data = {"code": self.code, "message": self.message}
        if self.field_value is not None:
            data["field_value"] = self.field_value
        return data

    def __str__(self) -> str:
        suffix = f" (value: {self.field_value})" if self.field_value is not None else ""
        text = f"[{self.code}] {self.message}{suffix}"
        if self.__cause__ is not None:
            text += f": {self.__cause__}"
        return text


# ========== Kinds ==========

class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "invalid request"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "resource not found"


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409
    default_message = "resource state does not allow this operation"


class RepositoryError(AppError):
    code = "REPOSITORY_ERROR"
    status_code = 500
    default_message = "storage operation failed"


class ProviderError(AppError):
    code = "PROVIDER_ERROR"
    status_code = 500
    default_message = "electronic invoice provider failed"


# ========== Validation ==========

class InvalidRequest(ValidationError):
    code = "INVALID_REQUEST"


class MissingName(ValidationError):
    code = "PRODUCT_MISSING_NAME"
    default_message = "name is required"


class MissingCategory(ValidationError):
    code = "PRODUCT_MISSING_CATEGORY"
    default_message = "category is required"


class MissingSKU(ValidationError):
    code = "PRODUCT_MISSING_SKU"
    default_message = "sku is required"


class InvalidPrice(ValidationError):
    code = "PRODUCT_INVALID_PRICE"
    default_message = "total_price_with_taxes must be a number greater than 0"


class InvalidVAT(ValidationError):
    code = "PRODUCT_INVALID_VAT"
    default_message = "vat must be a number greater than or equal to 0"


class InvalidICO(ValidationError):
    code = "PRODUCT_INVALID_ICO"
    default_message = "ico must be a number greater than or equal to 0"


class InvalidTaxCalculation(ValidationError):
    code = "PRODUCT_INVALID_TAX_CALCULATION"
    default_message = "taxes cannot be calculated"


class ProductsCannotBeEmpty(ValidationError):
    code = "PRODUCTS_CANNOT_BE_EMPTY"
    default_message = "products cannot be empty"


class InvalidAllowanceAmount(ValidationError):
    code = "INVALID_ALLOWANCE_AMOUNT"
    default_message = "invalid allowance amount"


class InvalidTaxAmount(ValidationError):
    code = "INVALID_TAX_AMOUNT"
    default_message = "invalid tax amount"


class CustomerRequired(ValidationError):
    code = "CUSTOMER_REQUIRED"
    default_message = "customer is required to issue an electronic invoice"


# ========== Not found ==========

class ProductNotFound(NotFoundError):
    code = "PRODUCT_NOT_FOUND"
    default_message = "product not found"


class OrderNotFound(NotFoundError):
    code = "ORDER_NOT_FOUND"
    default_message = "order not found"


class BillNotFound(NotFoundError):
    code = "BILL_NOT_FOUND"
    default_message = "bill not found"


# ========== State ==========

class OrderNotDraft(ConflictError):
    code = "ORDER_NOT_DRAFT"
    default_message = "order is no longer open"


# ========== Repository ==========

class ProductCreationFailed(RepositoryError):
    code = "PRODUCT_CREATION_FAILED"
    default_message = "failed to create product"


class ProductUpdateFailed(RepositoryError):
    code = "PRODUCT_UPDATE_FAILED"
    default_message = "failed to update product"


class ProductDeleteFailed(RepositoryError):
    code = "PRODUCT_DELETE_FAILED"
    default_message = "failed to delete product"


class OrderCreationFailed(RepositoryError):
    code = "ORDER_CREATION_FAILED"
    default_message = "failed to create order"


class OrderUpdateFailed(RepositoryError):
    code = "ORDER_UPDATE_FAILED"
    default_message = "failed to update order"


class OrderPaymentFailed(RepositoryError):
    code = "ORDER_PAYMENT_FAILED"
    default_message = "failed to pay order"


class BillCreationFailed(RepositoryError):
    code = "BILL_CREATION_FAILED"
    default_message = "failed to create bill"


# ========== Provider ==========

class ProviderHTTPError(ProviderError):
    code = "PROVIDER_HTTP_ERROR"
    default_message = "invoice API request failed"

    def __init__(self, message: Optional[str] = None, field_value: Any = None, code: Optional[str] = None,
                 http_status: Optional[int] = None):
        super().__init__(message, field_value, code)
        self.http_status = http_status


class ProviderRejected(ProviderError):
    code = "PROVIDER_REJECTED"
    default_message = "invoice API rejected the document"

    def __init__(self, message: Optional[str] = None, field_value: Any = None, code: Optional[str] = None,
                 provider_status: Optional[int] = None):
        super().__init__(message, field_value, code)
        self.provider_status = provider_status
