"""
Request payloads — pydantic models for the dicts service calls accept.

Service methods take plain dicts (decoded JSON or keyword data from Python
callers) and validate them with parse(). Pydantic's errors come back as
storeman.exceptions.ValidationError, so the API reports one code per failure:

    REQUIRED               missing or blank field
    INVALID_NUMBER         not a number / not an integer / not an id
    INVALID_DATE           not an ISO date or datetime
    INVALID_QUANTITY       quantity out of range for the movement
    INVALID_COST           negative cost
    INVALID_MOVEMENT_TYPE  unknown movement type
    NO_ITEMS               purchase order without lines
    RESERVED_REFERENCE     purchase order line references (receipts only)

Id fields accept a model instance or a primary key.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, ClassVar, Optional

from django.conf import settings
from django.utils import timezone
from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from storeman.exceptions import ValidationError
from storeman.models.enums import MovementType, ReferenceType

QUANTITY_PLACES = Decimal('0.001')
COST_PLACES = Decimal('0.0001')
MONEY_PLACES = Decimal('0.01')


def quantize_quantity(value: Decimal) -> Decimal:
    return value.quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)


def quantize_cost(value: Decimal) -> Decimal:
    return value.quantize(COST_PLACES, rounding=ROUND_HALF_UP)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


# ══════════════════════════════════════════════════════════════
# FIELD TYPES
# ══════════════════════════════════════════════════════════════


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _blank_to_none(value):
    return None if _is_blank(value) else value


def _present(value):
    if _is_blank(value):
        raise PydanticCustomError('REQUIRED', 'Value is required')
    if isinstance(value, bool):
        raise PydanticCustomError('INVALID_NUMBER', 'Value must be a number')
    return value


def _pk(value):
    return _present(getattr(value, 'pk', value))


def _text(value):
    return '' if value is None else str(value).strip()


def _required_text(value):
    return str(_present(value)).strip()


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and settings.USE_TZ and timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def _not_negative(code: str, message: str):
    def check(value: Decimal) -> Decimal:
        if value < 0:
            raise PydanticCustomError(code, message)
        return value
    return check


def _positive(code: str, message: str):
    def check(value: Decimal) -> Decimal:
        if value <= 0:
            raise PydanticCustomError(code, message)
        return value
    return check


def _string_list(value):
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise PydanticCustomError('INVALID_VALUE', 'Value must be a list')
    return [str(v) for v in value]


ModelId = Annotated[int, BeforeValidator(_pk), Field(gt=0)]
OptionalId = Annotated[Optional[ModelId], BeforeValidator(_blank_to_none)]
Integer = Annotated[int, BeforeValidator(_present)]
OptionalInteger = Annotated[Optional[Integer], BeforeValidator(_blank_to_none)]
Text = Annotated[str, BeforeValidator(_text)]
RequiredText = Annotated[str, BeforeValidator(_required_text)]
StringList = Annotated[list[str], BeforeValidator(_string_list)]

Quantity = Annotated[Decimal, BeforeValidator(_present), AfterValidator(quantize_quantity)]
PositiveQuantity = Annotated[
    Quantity,
    AfterValidator(_positive('INVALID_QUANTITY', 'Quantity must be greater than 0')),
]
CountedQuantity = Annotated[
    Quantity,
    AfterValidator(_not_negative('INVALID_QUANTITY', 'Quantity cannot be negative')),
]
Cost = Annotated[
    Decimal,
    BeforeValidator(_present),
    AfterValidator(quantize_cost),
    AfterValidator(_not_negative('INVALID_COST', 'Cost must be zero or positive')),
]
OptionalCost = Annotated[Optional[Cost], BeforeValidator(_blank_to_none)]
OptionalDate = Annotated[Optional[date], BeforeValidator(_blank_to_none)]
OptionalDateTime = Annotated[Optional[datetime], BeforeValidator(_blank_to_none), AfterValidator(_aware)]


# ══════════════════════════════════════════════════════════════
# ERROR MAPPING
# ══════════════════════════════════════════════════════════════


def _code(error: dict) -> str:
    kind = error['type']
    if kind.isupper():
        return kind
    if kind == 'missing':
        return 'REQUIRED'
    if kind.startswith(('int_', 'decimal_', 'float_', 'finite_number')):
        return 'INVALID_NUMBER'
    if kind.startswith(('date_', 'datetime_')):
        return 'INVALID_DATE'
    return 'INVALID_VALUE'


def _raise(exc: PydanticValidationError, field: str | None = None):
    error = exc.errors()[0]
    field = '.'.join(str(part) for part in error['loc']) or field
    code = _code(error)
    if code == 'REQUIRED' and field:
        message = f'{field} is required'
    elif field:
        message = f"{field}: {error['msg']}"
    else:
        message = error['msg']
    raise ValidationError(code, message, field=field) from exc


def parse(schema: type[BaseModel], data: Any):
    """Validate data against schema; ValidationError on the first problem."""
    if isinstance(data, schema):
        return data
    if not isinstance(data, dict):
        raise ValidationError('INVALID_VALUE', 'Payload must be an object')
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        _raise(exc)


_id = TypeAdapter(OptionalId)
_limit = TypeAdapter(OptionalInteger)


def parse_id(value, field: str = 'id') -> int | None:
    """Model instance, pk or numeric string to a pk. Blank gives None."""
    try:
        return _id.validate_python(value)
    except PydanticValidationError as exc:
        _raise(exc, field)


def parse_limit(value, default: int) -> int:
    try:
        limit = _limit.validate_python(value)
    except PydanticValidationError as exc:
        _raise(exc, 'limit')
    return default if limit is None else max(limit, 0)


# ══════════════════════════════════════════════════════════════
# MOVEMENTS
# ══════════════════════════════════════════════════════════════


class MovementIn(BaseModel):
    """
    One ledger movement as accepted from callers.

    quantity is the amount moved (stock_in/stock_out, > 0) or the absolute
    quantity (adjustment, >= 0). Purchase order references are written by
    receipts only; callers cannot claim a purchase order line.
    """

    internal: ClassVar[bool] = False

    product_id: ModelId = Field(validation_alias=AliasChoices('product_id', 'product'))
    location_id: ModelId = Field(validation_alias=AliasChoices('location_id', 'location'))
    movement_type: RequiredText
    quantity: Quantity
    unit_cost: OptionalCost = None
    reference_type: Text = ''
    reference_id: OptionalId = None
    reference_line_id: OptionalId = None
    occurred_at: OptionalDateTime = None
    notes: Text = ''

    @model_validator(mode='before')
    @classmethod
    def _reserved_references(cls, data):
        if cls.internal or not isinstance(data, dict):
            return data
        if not _is_blank(data.get('reference_line_id')) or (
            _text(data.get('reference_type')) == ReferenceType.PURCHASE_ORDER
        ):
            raise PydanticCustomError(
                'RESERVED_REFERENCE',
                'Purchase order references are written by receipts only',
            )
        return data

    @field_validator('movement_type')
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in MovementType.values:
            raise PydanticCustomError(
                'INVALID_MOVEMENT_TYPE',
                'Invalid movement type. Must be one of: {choices}',
                {'choices': ', '.join(MovementType.values)},
            )
        return value

    @model_validator(mode='after')
    def _quantity_for_type(self):
        if self.movement_type == MovementType.ADJUSTMENT:
            if self.quantity < 0:
                raise PydanticCustomError('INVALID_QUANTITY', 'Adjustment quantity cannot be negative')
        elif self.quantity <= 0:
            raise PydanticCustomError('INVALID_QUANTITY', 'Quantity must be greater than 0')
        return self


class ReceiptMovement(MovementIn):
    """stock_in posted for one purchase order line."""

    internal: ClassVar[bool] = True

    reference_id: ModelId
    reference_line_id: ModelId


class StockItemCorrection(BaseModel):
    quantity: Annotated[Optional[CountedQuantity], BeforeValidator(_blank_to_none)] = None
    average_cost: OptionalCost = None
    notes: Text = ''


class StockItemUpsert(StockItemCorrection):
    product_id: ModelId = Field(validation_alias=AliasChoices('product_id', 'product'))
    location_id: ModelId = Field(validation_alias=AliasChoices('location_id', 'location'))


# ══════════════════════════════════════════════════════════════
# PURCHASE ORDERS
# ══════════════════════════════════════════════════════════════


class PurchaseOrderLineIn(BaseModel):
    product_id: ModelId = Field(validation_alias=AliasChoices('product_id', 'product'))
    quantity: PositiveQuantity = Field(validation_alias=AliasChoices('quantity', 'quantity_ordered'))
    unit_cost: Cost

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_cost


class PurchaseOrderIn(BaseModel):
    """Header and lines of a new purchase order."""

    supplier_id: ModelId = Field(validation_alias=AliasChoices('supplier_id', 'supplier'))
    po_number: RequiredText
    items: list[PurchaseOrderLineIn] = Field(default=None, validate_default=True)
    location_id: OptionalId = Field(default=None, validation_alias=AliasChoices('location_id', 'location'))
    expected_delivery_date: OptionalDate = None
    notes: Text = ''

    @field_validator('items', mode='before')
    @classmethod
    def _has_items(cls, value):
        if not value or not isinstance(value, (list, tuple)):
            raise PydanticCustomError('NO_ITEMS', 'At least one item is required')
        return value

    @property
    def total_amount(self) -> Decimal:
        return quantize_money(sum((line.line_total for line in self.items), Decimal('0')))


class PurchaseOrderUpdate(BaseModel):
    """Editable fields of an existing order; only keys that were sent apply."""

    expected_delivery_date: OptionalDate = None
    notes: Text = ''


# ══════════════════════════════════════════════════════════════
# SETTINGS AND CATALOG
# ══════════════════════════════════════════════════════════════


class SettingsIn(BaseModel):
    low_stock_threshold: Integer
    custom_categories: StringList = []
    custom_units: StringList = []


class ProductIn(BaseModel):
    sku: RequiredText
    name: RequiredText
    category: Text = ''
    unit: Text = 'pcs'
    description: Text = ''

    @field_validator('unit')
    @classmethod
    def _default_unit(cls, value: str) -> str:
        return value or 'pcs'


class LocationIn(BaseModel):
    code: RequiredText
    name: RequiredText
    address: Text = ''


class SupplierIn(BaseModel):
    name: RequiredText
    contact_person: Text = ''
    email: Text = ''
    phone: Text = ''
    address: Text = ''
    notes: Text = ''
