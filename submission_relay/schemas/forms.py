"""Schemas for form definitions, submission entries, and platform records."""

from typing import Annotated, Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


# Field types whose value lives under the field's own id.
GENERIC_FIELD_TYPES = frozenset(
    {
        "generic",
        "text",
        "textarea",
        "email",
        "phone",
        "number",
        "date",
        "time",
        "select",
        "multiselect",
        "radio",
        "checkbox",
        "hidden",
        "website",
        "fileupload",
        "multi_choice",
        "consent",
        "list",
        "address",
    }
)
NAME_FIELD_TYPE = "name"
NESTED_FORM_FIELD_TYPES = frozenset({"form", "nestedform"})

# Entry properties that are not field values.
ENTRY_PROPERTY_KEYS = frozenset(
    {
        "id",
        "form_id",
        "post_id",
        "date_created",
        "date_updated",
        "created_by",
        "is_starred",
        "is_read",
        "is_fulfilled",
        "ip",
        "source_url",
        "source_id",
        "user_agent",
        "currency",
        "status",
        "payment_status",
        "payment_date",
        "payment_amount",
        "payment_method",
        "transaction_id",
        "transaction_type",
    }
)


class InputDescriptor(BaseModel):
    """One sub-input of a composite field (e.g. "2.3" = first name)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    label: str | None = None
    name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class BaseField(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind: ClassVar[str] = "other"

    id: int | str
    label: str = ""
    type: str = ""
    inputs: list[InputDescriptor] | None = None

    @field_validator("label", mode="before")
    @classmethod
    def _label_or_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def key(self) -> str:
        """Key under which the entry stores this field's value."""
        return str(self.id)


class GenericField(BaseField):
    kind: ClassVar[str] = "generic"


class NameField(BaseField):
    kind: ClassVar[str] = "name"

    inputs: list[InputDescriptor] = Field(default_factory=list)

    @field_validator("inputs", mode="before")
    @classmethod
    def _inputs_or_empty(cls, value: Any) -> Any:
        return value or []


class NestedFormField(BaseField):
    kind: ClassVar[str] = "form"

    nested_form_id: int | str | None = Field(None, alias="gpnfForm")


class OtherField(BaseField):
    """Layout or unrecognized field types (html, section, page, ...)."""

    kind: ClassVar[str] = "other"


def field_kind(value: Any) -> str:
    """Map a raw field type onto the closed set of field variants."""
    if isinstance(value, BaseField):
        return value.kind
    raw_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    normalized = str(raw_type or "").strip().lower()
    if normalized == NAME_FIELD_TYPE:
        return NameField.kind
    if normalized in NESTED_FORM_FIELD_TYPES:
        return NestedFormField.kind
    if normalized in GENERIC_FIELD_TYPES:
        return GenericField.kind
    return OtherField.kind


FieldDescriptor = Annotated[
    Union[
        Annotated[GenericField, Tag("generic")],
        Annotated[NameField, Tag("name")],
        Annotated[NestedFormField, Tag("form")],
        Annotated[OtherField, Tag("other")],
    ],
    Discriminator(field_kind),
]


class FormSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str
    title: str = ""
    description: str | None = None
    fields: list[FieldDescriptor] = Field(default_factory=list)


class SubmissionEntry(BaseModel):
    """A stored submission: entry properties plus raw field/input values."""

    id: str
    form_id: str
    date_created: str = ""
    created_by: str | None = None
    values: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "form_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> str:
        return str(value)

    @field_validator("created_by", mode="before")
    @classmethod
    def _coerce_creator(cls, value: Any) -> str | None:
        if value in (None, "", 0, "0"):
            return None
        return str(value)

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_value_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(key): item for key, item in value.items()}
        return value

    def value_for(self, key: int | str) -> Any | None:
        """Raw stored value for a field/input id, or None when absent."""
        return self.values.get(str(key))

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SubmissionEntry":
        """Build from a flat Gravity Forms entry object."""
        values = {key: item for key, item in data.items() if key not in ENTRY_PROPERTY_KEYS}
        return cls(
            id=data["id"],
            form_id=data.get("form_id", ""),
            date_created=data.get("date_created") or "",
            created_by=data.get("created_by"),
            values=values,
        )


class UserInfo(BaseModel):
    id: str
    email: str | None = None
    display_name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class Notification(BaseModel):
    """Outbound notification email as composed by the host platform."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str | None = None
    to: str | None = None
    subject: str | None = None
    message: str = ""
