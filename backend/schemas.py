"""Request bodies. Fields are lenient; form validation happens in the services."""

from typing import Any

from pydantic import BaseModel


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class PasswordResetRequest(BaseModel):
    email: str = ""


class TransactionRequest(BaseModel):
    description: str = ""
    amount: Any = None
    category: str = ""
    type: str = "expense"
    date: str | None = None


class CategoryRequest(BaseModel):
    name: str = ""
    type: str = "expense"
    icon: str = ""


class PreferencesRequest(BaseModel):
    currency: str = ""
