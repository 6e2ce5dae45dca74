import enum
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator

from dealership.schemas.customer_schemas import CustomerRead
from dealership.schemas.user_schemas import UserReadSchema

# --- Car field limits ---

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 25
MIN_YEAR = 1960
PLATES_LENGTH = 8
STORE_OPENING_DATE = date(2020, 3, 20)
MIN_SELLING_PRICE = 5000
MAX_SELLING_PRICE = 5000000

# String flags the form may send for ``imported``
IMPORTED_TRUE_STRINGS = ("true", "1")
IMPORTED_FALSE_STRINGS = ("false", "0")

# Key for errors that do not belong to a single field
FORM_ERROR_KEY = "_form"


class CarColor(str, enum.Enum):
    AMARELO = "AMARELO"
    AZUL = "AZUL"
    BRANCO = "BRANCO"
    CINZA = "CINZA"
    DOURADO = "DOURADO"
    LARANJA = "LARANJA"
    MARROM = "MARROM"
    PRATA = "PRATA"
    PRETO = "PRETO"
    ROSA = "ROSA"
    ROXO = "ROXO"
    VERDE = "VERDE"
    VERMELHO = "VERMELHO"


COLORS = [color.value for color in CarColor]

SELLING_DATE_MESSAGE = (
    f"Field selling_date, if provided, must be between "
    f"{STORE_OPENING_DATE.isoformat()} and today."
)
SELLING_PRICE_MESSAGE = (
    f"Field selling_price, if provided, must be between "
    f"{MIN_SELLING_PRICE:.2f} and {MAX_SELLING_PRICE:.2f}."
)

# Messages for errors raised by pydantic itself (wrong types, unknown enum values)
_TYPE_ERROR_MESSAGES = {
    "brand": "Field brand must be a text.",
    "model": "Field model must be a text.",
    "color": f"Field color must be one of: {', '.join(COLORS)}.",
    "year_manufacture": "Field year_manufacture must be an integer.",
    "imported": "Field imported is required and must be true or false.",
    "plates": f"Field plates must have exactly {PLATES_LENGTH} characters.",
    "selling_date": SELLING_DATE_MESSAGE,
    "selling_price": SELLING_PRICE_MESSAGE,
    "customer_id": "Field customer_id must be an integer id.",
}


class CarValidationError(Exception):
    """Raised when a car payload fails validation.

    ``errors`` maps each failing field to a single human readable message.
    """

    def __init__(self, errors: dict[str, str]):
        super().__init__("Car payload failed validation")
        self.errors = errors


# --- Car Schemas ---

class CarSchema(BaseModel):
    """
    Validated car payload accepted on create and update.

    Values coming from HTML forms are coerced the way the form sends them:
    numeric strings, ISO date/datetime strings and "true"/"false" flags.
    Audit fields and ``id`` are never read from the payload.
    """
    brand: str
    model: str
    color: CarColor
    year_manufacture: int
    imported: bool
    plates: str
    selling_date: Optional[date] = None
    selling_price: Optional[float] = None
    customer_id: Optional[int] = None

    class Config:
        use_enum_values = True

    @field_validator("selling_date", "selling_price", "customer_id", mode="before")
    @classmethod
    def blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("customer_id", mode="before")
    @classmethod
    def reject_bool_customer(cls, value: Any) -> Any:
        # bool is an int subclass; true/false must not become customer 1/0
        if isinstance(value, bool):
            raise ValueError(_TYPE_ERROR_MESSAGES["customer_id"])
        return value

    @field_validator("imported", mode="before")
    @classmethod
    def parse_imported_flag(cls, value: Any) -> Any:
        if isinstance(value, str):
            flag = value.strip().lower()
            if flag in IMPORTED_TRUE_STRINGS:
                return True
            if flag in IMPORTED_FALSE_STRINGS:
                return False
            raise ValueError(_TYPE_ERROR_MESSAGES["imported"])
        return value

    @field_validator("selling_date", mode="before")
    @classmethod
    def datetime_to_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        # Longer than YYYY-MM-DD: a datetime with "T" or " " separator
        if isinstance(value, str) and len(value.strip()) > 10:
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
            except ValueError:
                return value
        return value

    @field_validator("brand", "model")
    @classmethod
    def check_name_length(cls, value: str, info: ValidationInfo) -> str:
        if len(value) < NAME_MIN_LENGTH:
            raise ValueError(f"Field {info.field_name} must have at least {NAME_MIN_LENGTH} character.")
        if len(value) > NAME_MAX_LENGTH:
            raise ValueError(f"Field {info.field_name} must have at most {NAME_MAX_LENGTH} characters.")
        return value

    @field_validator("year_manufacture")
    @classmethod
    def check_year_range(cls, value: int) -> int:
        current_year = date.today().year
        if value < MIN_YEAR:
            raise ValueError(f"Field year_manufacture cannot be earlier than {MIN_YEAR}.")
        if value > current_year:
            raise ValueError(f"Field year_manufacture cannot be later than {current_year}.")
        return value

    @field_validator("plates")
    @classmethod
    def check_plates_length(cls, value: str) -> str:
        if len(value) != PLATES_LENGTH:
            raise ValueError(f"Field plates must have exactly {PLATES_LENGTH} characters.")
        return value

    @field_validator("selling_date")
    @classmethod
    def check_selling_date(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and not (STORE_OPENING_DATE <= value <= date.today()):
            raise ValueError(SELLING_DATE_MESSAGE)
        return value

    @field_validator("selling_price")
    @classmethod
    def check_selling_price(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not (MIN_SELLING_PRICE <= value <= MAX_SELLING_PRICE):
            raise ValueError(SELLING_PRICE_MESSAGE)
        return value


class CarRead(BaseModel):
    """Schema for reading Car data."""
    id: int
    brand: str
    model: str
    color: str
    year_manufacture: int
    imported: bool
    plates: str
    selling_date: Optional[date] = None
    selling_price: Optional[float] = None
    customer_id: Optional[int] = None
    created_user_id: Optional[int] = None
    updated_user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


def serialize_car(car: Any, include: set[str] | frozenset[str] = frozenset()) -> dict[str, Any]:
    """Render a Car row as JSON-ready data, embedding the requested relations."""
    data = CarRead.model_validate(car).model_dump(mode="json")
    if "customer" in include:
        data["customer"] = (
            CustomerRead.model_validate(car.customer).model_dump(mode="json") if car.customer else None
        )
    for relation in ("created_user", "updated_user"):
        if relation in include:
            user = getattr(car, relation)
            data[relation] = UserReadSchema.model_validate(user).model_dump(mode="json") if user else None
    return data


# --- Parsing helpers ---

def collect_errors(exc: ValidationError) -> dict[str, str]:
    """Turn a pydantic ValidationError into a ``{field: message}`` mapping.

    Only the first failure of each field is kept.
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else FORM_ERROR_KEY
        if field in errors:
            continue
        if field == FORM_ERROR_KEY:
            errors[field] = "Car data must be a JSON object."
        elif error["type"] == "value_error":
            errors[field] = str(error["ctx"]["error"])
        elif error["type"] == "missing":
            errors[field] = f"Field {field} is required."
        else:
            errors[field] = _TYPE_ERROR_MESSAGES.get(field, error["msg"])
    return errors


def parse_car_payload(payload: Any) -> CarSchema:
    """Validate a raw payload, raising CarValidationError on failure."""
    try:
        return CarSchema.model_validate(payload)
    except ValidationError as exc:
        raise CarValidationError(collect_errors(exc)) from exc


def safe_parse_car(payload: Any) -> tuple[Optional[CarSchema], dict[str, str]]:
    """Non-raising variant of parse_car_payload: returns (car, errors)."""
    try:
        return parse_car_payload(payload), {}
    except CarValidationError as exc:
        return None, exc.errors
