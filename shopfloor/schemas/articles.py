from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

FieldType = Literal["text", "number", "boolean", "select"]
FieldScope = Literal["attribute", "shop_floor"]
ArticleStatus = Literal["draft", "active", "archived"]


class FieldValidationIn(BaseModel):
    required: bool = False
    min: float | None = None
    max: float | None = None
    options: list[str] | None = None


class FieldDefinitionIn(BaseModel):
    id: int | None = None  # set when updating an existing field
    key: str = Field(min_length=1, max_length=120)
    label: str = Field(min_length=1, max_length=200)
    field_type: FieldType
    scope: FieldScope | None = None  # implied by the list the field is sent in
    validation: FieldValidationIn | None = None


class FieldValidationOut(BaseModel):
    required: bool
    min: float | None
    max: float | None
    options: list[str] | None


class FieldDefinitionOut(BaseModel):
    id: int
    key: str
    label: str
    field_type: str
    scope: str
    validation: FieldValidationOut | None


class ArticleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    organization: str = Field(min_length=1, max_length=200)
    status: ArticleStatus = "draft"
    attribute_fields: list[FieldDefinitionIn] = Field(default_factory=list)
    shop_floor_fields: list[FieldDefinitionIn] = Field(default_factory=list)


class ArticleUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    organization: str | None = Field(default=None, min_length=1, max_length=200)
    status: ArticleStatus | None = None
    # None leaves the schema untouched; a list replaces that scope
    attribute_fields: list[FieldDefinitionIn] | None = None
    shop_floor_fields: list[FieldDefinitionIn] | None = None


class ArticleOut(BaseModel):
    id: int
    name: str
    organization: str
    status: str
    attribute_fields: list[FieldDefinitionOut]
    shop_floor_fields: list[FieldDefinitionOut]
    created_at: datetime
    updated_at: datetime
