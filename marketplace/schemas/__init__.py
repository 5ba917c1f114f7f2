from decimal import Decimal

from marshmallow import fields, validate, validates_schema, ValidationError, EXCLUDE

from marketplace.extensions import ma
from marketplace.enums import (
    UserType,
    SubscriptionStatus,
    CashOutStatus,
    OrderStatus,
    WalletStatus,
    values,
)


class BaseSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE


# Auth

class RegisterSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    phone_number = fields.Str(required=True, validate=validate.Length(min=7, max=20))
    email = fields.Email(load_default=None, allow_none=True)
    password = fields.Str(required=True, validate=validate.Length(min=6))
    address = fields.Str(allow_none=True)


class LoginSchema(BaseSchema):
    email = fields.Email(load_default=None, allow_none=True)
    phone_number = fields.Str(load_default=None, allow_none=True)
    password = fields.Str(required=True)

    @validates_schema
    def require_identifier(self, data, **kwargs):
        if not data.get("email") and not data.get("phone_number"):
            raise ValidationError("email or phone_number is required", "email")


class AdminUserCreateSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(max=255))
    phone_number = fields.Str(required=True, validate=validate.Length(min=7, max=20))
    email = fields.Email(load_default=None, allow_none=True)
    password = fields.Str(validate=validate.Length(min=6))


class EmployeeCreateSchema(AdminUserCreateSchema):
    vendor_id = fields.Int(required=True)
    role = fields.Str(required=True, validate=validate.Length(min=1, max=100))


class UserUpdateSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    email = fields.Email(allow_none=True)
    phone_number = fields.Str(validate=validate.Length(min=7, max=20))
    is_active = fields.Bool()
    is_verified = fields.Bool()
    type = fields.Str(validate=validate.OneOf(values(UserType)))


class NoteSchema(BaseSchema):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str(required=True, validate=validate.Length(min=1))


class PaymentMethodSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1))
    account_number = fields.Str(required=True, validate=validate.Length(min=1))
    account_holder = fields.Str(required=True, validate=validate.Length(min=1))
    type = fields.Str(allow_none=True)
    details = fields.Dict(load_default=dict)


class PaymentMethodUpdateSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(min=1))
    account_number = fields.Str(validate=validate.Length(min=1))
    account_holder = fields.Str(validate=validate.Length(min=1))
    type = fields.Str(allow_none=True)
    details = fields.Dict()


# Wallet

MIN_AMOUNT = Decimal("0.01")


class WalletFundsSchema(BaseSchema):
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(min=MIN_AMOUNT))
    reason = fields.Str(validate=validate.Length(max=255))


class WalletStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(values(WalletStatus)))


class CashOutCreateSchema(BaseSchema):
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(min=MIN_AMOUNT))
    reason = fields.Str(validate=validate.Length(max=255))


class CashOutRejectSchema(BaseSchema):
    reason = fields.Str(validate=validate.Length(max=255))


# Catalog

class CategorySchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)


class CategoryUpdateSchema(CategorySchema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    keepImages = fields.List(fields.Int(), load_default=None)


class SubcategorySchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    category_id = fields.Int(required=True)


class SubcategoryUpdateSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    category_id = fields.Int()
    keepImages = fields.List(fields.Int(), load_default=None)


class ProductSpecSchema(BaseSchema):
    key = fields.Str(required=True, validate=validate.Length(min=1))
    value = fields.Str(required=True, validate=validate.Length(min=1))


class ProductCreateSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    has_discount = fields.Bool(load_default=False)
    sold_in_bulk = fields.Bool(load_default=False)
    stock = fields.Int(required=True, validate=validate.Range(min=0))
    low_stock_threshold = fields.Int(validate=validate.Range(min=0))
    vendor_id = fields.Int(required=True)
    category_id = fields.Int(required=True)
    subcategory_id = fields.Int(required=True)
    specs = fields.List(fields.Nested(ProductSpecSchema), load_default=list)


class ProductUpdateSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    price = fields.Decimal(places=2, validate=validate.Range(min=0))
    has_discount = fields.Bool()
    sold_in_bulk = fields.Bool()
    stock = fields.Int(validate=validate.Range(min=0))
    low_stock_threshold = fields.Int(validate=validate.Range(min=0))
    is_active = fields.Bool()
    category_id = fields.Int()
    subcategory_id = fields.Int()
    specs = fields.List(fields.Nested(ProductSpecSchema))
    keepImages = fields.List(fields.Int(), load_default=None)


# Vendors

class VendorCreateSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    description = fields.Str(allow_none=True)
    category_ids = fields.List(
        fields.Int(),
        required=True,
        validate=validate.Length(min=1, max=3, error="Between 1 and 3 categories are allowed."),
    )
    payment_method = fields.Nested(PaymentMethodSchema, required=True)
    subscription_id = fields.Int(required=True)


class VendorStatusSchema(BaseSchema):
    status = fields.Bool(required=True, truthy={True}, falsy={False})


class VendorApprovalSchema(BaseSchema):
    vendor_id = fields.Int(required=True)
    isApproved = fields.Bool(required=True, truthy={True}, falsy={False})


# Subscriptions

class SubscriptionSchema(BaseSchema):
    amount = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    plan = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    start_date = fields.DateTime(required=True)
    end_date = fields.DateTime(required=True)
    status = fields.Str(required=True, validate=validate.OneOf(values(SubscriptionStatus)))

    @validates_schema
    def validate_dates(self, data, **kwargs):
        start, end = data.get("start_date"), data.get("end_date")
        if start and end and end <= start:
            raise ValidationError("End date must be after start date.", "end_date")


# Orders

class OrderStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(values(OrderStatus)))


CASH_OUT_STATUSES = values(CashOutStatus)
