"""Schema for accounts module."""

import typing as t

from ninja import ModelSchema, Schema
from pydantic import UUID4, EmailStr, Field, model_validator

from accounts.password_validation import validate_password
from common.schema import StrippedString

from .models import NominatorUser


class NominatorUserSchema(ModelSchema):
    id: UUID4
    email: str
    display_name: str
    is_staff: bool

    class Meta:
        model = NominatorUser
        fields = ["email", "first_name", "last_name", "organization_name", "is_staff"]


class MinimalNominatorUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = NominatorUser
        fields = ["email", "first_name", "last_name"]


class PasswordMixin(Schema):
    password1: str = Field(..., description="Password", min_length=8, max_length=150)
    password2: str = Field(..., description="Password confirmation", min_length=8, max_length=150)

    @model_validator(mode="after")
    def password_match(self) -> t.Self:
        """Validate that the passwords match."""
        if self.password1 != self.password2:
            raise ValueError("Passwords do not match")
        return self


class RegisterUserSchema(PasswordMixin):
    email: EmailStr
    first_name: StrippedString = ""
    last_name: StrippedString = ""
    organization_name: StrippedString = ""

    @model_validator(mode="after")
    def validate_password(self) -> t.Self:
        """Validate the password."""
        tmp_user = NominatorUser(
            email=self.email, username=self.email, first_name=self.first_name, last_name=self.last_name
        )
        validate_password(self.password1, user=tmp_user)
        return self
