import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

NAME_MAX_LENGTH = 255
IMAGE_URL_MAX_LENGTH = 500
# Largest values the Numeric(10, 2) and Integer columns hold
PRICE_MAX = Decimal("99999999.99")
STOCK_MAX = 2**31 - 1

# Labels for the "<Label> is required" message of required fields
FIELD_LABELS = {
    "name": "Product name",
    "price": "Price",
    "stock": "Stock",
}

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_CENTS = Decimal("0.01")


class FieldError(BaseModel):
    """A single field-level validation failure."""
    field: str
    message: str


class ProductValidationError(Exception):
    """Raised when submitted product data violates one or more field rules."""

    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__("; ".join(error.message for error in errors))


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class ProductCandidate(BaseModel):
    """
    Typed, validated product fields as submitted by a client.

    Form posts arrive as strings; each rule parses its own field so that every
    violation is reported with a readable message, in field order.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int = 0
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        if value is None:
            raise PydanticCustomError("name_empty", "Product name cannot be empty")
        if not isinstance(value, str):
            raise PydanticCustomError("name_type", "Product name must be text")
        value = value.strip()
        if not value:
            raise PydanticCustomError("name_empty", "Product name cannot be empty")
        if len(value) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_too_long",
                "Product name must be at most {max_length} characters",
                {"max_length": NAME_MAX_LENGTH},
            )
        return value

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value: Any) -> Decimal:
        if value is None or isinstance(value, bool):
            raise PydanticCustomError("price_not_number", "Price must be a number")
        try:
            price = Decimal(str(value).strip())
        except InvalidOperation:
            raise PydanticCustomError("price_not_number", "Price must be a number")
        if not price.is_finite():
            raise PydanticCustomError("price_not_number", "Price must be a number")
        if price < 0:
            raise PydanticCustomError(
                "price_negative", "Price must be greater than or equal to 0"
            )
        if price > PRICE_MAX:
            raise PydanticCustomError(
                "price_too_large", "Price must be at most {max_price}", {"max_price": str(PRICE_MAX)}
            )
        try:
            return price.quantize(_CENTS, rounding=ROUND_HALF_UP)
        except ArithmeticError:
            raise PydanticCustomError("price_not_number", "Price must be a number")

    @field_validator("stock", mode="before")
    @classmethod
    def check_stock(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise PydanticCustomError("stock_not_integer", "Stock must be an integer")
        if isinstance(value, int):
            stock = value
        elif isinstance(value, str) and _INTEGER_RE.match(value.strip()):
            stock = int(value.strip())
        else:
            raise PydanticCustomError("stock_not_integer", "Stock must be an integer")
        if stock < 0:
            raise PydanticCustomError(
                "stock_negative", "Stock must be greater than or equal to 0"
            )
        if stock > STOCK_MAX:
            raise PydanticCustomError(
                "stock_too_large", "Stock must be at most {max_stock}", {"max_stock": STOCK_MAX}
            )
        return stock

    @field_validator("image_url", mode="before")
    @classmethod
    def check_image_url(cls, value: Any) -> Optional[str]:
        value = _blank_to_none(value)
        if isinstance(value, str) and len(value) > IMAGE_URL_MAX_LENGTH:
            raise PydanticCustomError(
                "image_url_too_long",
                "Image URL must be at most {max_length} characters",
                {"max_length": IMAGE_URL_MAX_LENGTH},
            )
        return value


def _to_field_errors(exc: ValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "product"
        if error["type"] == "missing":
            message = f"{FIELD_LABELS.get(field, field)} is required"
        elif error["type"] == "extra_forbidden":
            message = f"Unknown field '{field}'"
        else:
            message = error["msg"]
        errors.append(FieldError(field=field, message=message))
    return errors


def validate_product(data: Mapping[str, Any]) -> ProductCandidate:
    """
    Validate raw product fields.

    Args:
        data: Submitted fields, keyed by form name (``imageUrl``) or attribute name

    Returns:
        The parsed candidate with price as Decimal and stock as int

    Raises:
        ProductValidationError: With one entry per violated field
    """
    try:
        return ProductCandidate.model_validate(dict(data))
    except ValidationError as exc:
        raise ProductValidationError(_to_field_errors(exc)) from exc
