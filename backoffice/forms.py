from decimal import Decimal

from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import StringField, TextAreaField, EmailField, DecimalField, IntegerField, SelectField, PasswordField, BooleanField
from wtforms.validators import DataRequired, InputRequired, Email, Length, Optional, NumberRange, Regexp, StopValidation

from backoffice.errors import ValidationError
from backoffice.models import ORDER_STATUSES, MESSAGE_STATUSES

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
# Column limits: INTEGER and NUMERIC(10, 2)
MAX_INT = 2**31 - 1
MAX_MONEY = Decimal("99999999.99")


class NotNull:
    """Reject an explicit null for a field that was sent; absent fields pass."""

    def __init__(self, message="This field may not be null."):
        self.message = message

    def __call__(self, form, field):
        if field.raw_data and field.raw_data[0] == "":
            field.errors[:] = []
            raise StopValidation(self.message)


class ApiForm(FlaskForm):
    """Form fed from a JSON body; CSRF is enforced app-wide by CSRFProtect."""

    class Meta:
        csrf = False


class LoginForm(ApiForm):
    email = EmailField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])


class ProductForm(ApiForm):
    name = StringField("Product Name", validators=[DataRequired(), Length(min=1, max=200)])
    slug = StringField("Slug", validators=[DataRequired(), Length(max=200),
                                           Regexp(SLUG_PATTERN, message="Slug may only contain lowercase letters, digits and dashes.")])
    description = TextAreaField("Description", validators=[Optional()])
    short_description = StringField("Short Description", name="shortDescription", validators=[Optional(), Length(max=500)])
    price = DecimalField("Price", validators=[InputRequired(), NumberRange(min=0, max=MAX_MONEY)])
    compare_price = DecimalField("Compare Price", name="comparePrice", validators=[Optional(), NumberRange(min=0, max=MAX_MONEY)])
    sku = StringField("SKU", validators=[Optional(), Length(max=100)])
    quantity = IntegerField("Quantity", validators=[NotNull(), NumberRange(min=0, max=MAX_INT)], default=0)
    low_stock_threshold = IntegerField("Low Stock Threshold", name="lowStockThreshold",
                                       validators=[Optional(), NumberRange(min=0, max=MAX_INT)])
    category_id = IntegerField("Category", name="categoryId", validators=[Optional(), NumberRange(min=1, max=MAX_INT)])
    # Only JSON true/false reach these; see validate_payload
    featured = BooleanField("Featured", default=False)
    active = BooleanField("Active", default=True)


class ContactMessageForm(ApiForm):
    name = StringField("Name", validators=[DataRequired(), Length(max=200)])
    email = EmailField("Email", validators=[DataRequired(), Email(), Length(max=120)])
    subject = StringField("Subject", validators=[DataRequired(), Length(max=200)])
    message = TextAreaField("Message", validators=[DataRequired()])


class UpdateMessageStatusForm(ApiForm):
    status = SelectField("Message Status", validators=[DataRequired()],
                         choices=[(status, status.capitalize()) for status in MESSAGE_STATUSES])


class UpdateOrderStatusForm(ApiForm):
    status = SelectField("Order Status", validators=[DataRequired()],
                         choices=[(status, status.capitalize()) for status in ORDER_STATUSES])


def _as_form_value(value):
    # JSON scalars arrive typed; fields expect the strings a browser would post
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def validate_payload(form_class, payload, partial=False, ignore=()):
    """Validate a JSON object against `form_class`.

    Returns a dict of model attribute name -> coerced value for the keys present
    in the payload. Keys listed in `ignore` are dropped before validation, any
    other key the form does not declare is rejected. In `partial` mode only the
    fields present in the payload are validated, so required fields may be
    omitted.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    payload = {key: value for key, value in payload.items() if key not in ignore}
    nested = sorted(key for key, value in payload.items() if isinstance(value, (dict, list)))
    if nested:
        raise ValidationError("Invalid request payload", errors={key: ["Must be a scalar value."] for key in nested})

    form = form_class(formdata=ImmutableMultiDict({key: _as_form_value(value) for key, value in payload.items()}))

    json_names = {attr: field.name for attr, field in form._fields.items()}
    unknown = sorted(set(payload) - set(json_names.values()))
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}",
                              errors={key: ["Unknown field."] for key in unknown})

    form.validate()
    errors = {json_names[attr]: messages for attr, messages in form.errors.items()}
    for field in form._fields.values():
        if isinstance(field, BooleanField) and field.name in payload and not isinstance(payload[field.name], bool):
            errors[field.name] = ["Must be true or false."]
    if partial:
        errors = {name: messages for name, messages in errors.items() if name in payload}
    if errors:
        raise ValidationError("Invalid request payload", errors=errors)

    return {attr: form._fields[attr].data for attr, name in json_names.items() if name in payload}
