"""
Typed schema models for the JSON form builder.
Immutable Pydantic models describing a validated form and the tagged
validation result returned by the schema validator.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class FieldOption(BaseModel):
    """One choice of a select or radio field."""

    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class FieldValidation(BaseModel):
    """Pattern rule attached to a field."""

    model_config = ConfigDict(frozen=True)

    pattern: Optional[str] = None
    message: Optional[str] = None


class FieldDescriptor(BaseModel):
    """A single validated field of a form."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    label: str
    required: bool = False
    placeholder: Optional[str] = None
    options: Tuple[FieldOption, ...] = ()
    validation: Optional[FieldValidation] = None

    def to_dict(self) -> Dict[str, Any]:
        """Dump the descriptor without unset optional keys."""
        return self.model_dump(exclude_none=True)


class ValidatedFormSchema(BaseModel):
    """
    Render-ready form schema.

    Instances are produced by ``schema_validator.validate``; every field is
    guaranteed to satisfy the field validation rules checked there.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    form_title: str = Field(alias="formTitle")
    form_description: str = Field(alias="formDescription")
    fields: Tuple[FieldDescriptor, ...]

    @property
    def field_ids(self) -> Tuple[str, ...]:
        return tuple(field.id for field in self.fields)

    def to_dict(self) -> Dict[str, Any]:
        """Dump the schema using the authored JSON key names."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class Valid:
    """Successful validation carrying the typed schema."""

    schema: ValidatedFormSchema

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class Invalid:
    """Failed validation carrying the single most relevant message."""

    message: str

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def schema(self) -> None:
        return None

    @property
    def error(self) -> str:
        return self.message


ValidationResult = Union[Valid, Invalid]
