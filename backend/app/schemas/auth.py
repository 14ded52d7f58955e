# app/schemas/auth.py
"""
Pydantic schemas for account endpoints.
Request bodies for login, password change and profile update.
Fields are optional at the schema level; the account handlers decide what is
required so that missing input is reported as a 400 with a readable message.
"""
from pydantic import BaseModel

class LoginRequest(BaseModel):
    """
    Credentials for login. Either username or email identifies the user.
    """
    username: str | None = None
    email: str | None = None
    password: str | None = None  # Plain text, verified against the stored hash

class ChangePasswordIn(BaseModel):
    oldPassword: str | None = None
    newPassword: str | None = None

class UpdateAccountIn(BaseModel):
    fullName: str | None = None
    email: str | None = None
