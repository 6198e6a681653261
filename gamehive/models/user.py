"""User model and schema.

사용자 정보를 표현하는 모델입니다.
저장소 백엔드(Firebase, MongoDB, memory)가 관리하는 사용자 레코드를 다룹니다.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """사용자 모델.

    Attributes:
        uid: 저장소가 부여한 사용자 ID
        username: 사용자명 (고유)
        email: 이메일 (고유)
        password_hash: werkzeug 해시 (Firebase 백엔드에서는 None,
            비밀번호는 Firebase Auth가 보관)
    """
    uid: str = Field(..., description="Storage-assigned user ID")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="Unique email")
    password_hash: Optional[str] = Field(None, description="Local password hash")

    class Config:
        json_schema_extra = {
            "example": {
                "uid": "f3Jx9QeLk2",
                "username": "parkj",
                "email": "parkj@example.com",
            }
        }

    @classmethod
    def from_backend(cls, uid: str, payload: Dict[str, Any]) -> "User":
        """Create a User model from a stored document."""
        return cls(
            uid=str(uid),
            username=payload.get("username"),
            email=payload.get("email"),
            password_hash=payload.get("password_hash"),
        )

    def matches(self, identifier: str) -> bool:
        """True when ``identifier`` is this user's username or email."""
        return identifier in (self.username, self.email)

    def to_public(self) -> "UserPublic":
        return UserPublic(uid=self.uid, username=self.username, email=self.email)


class UserPublic(BaseModel):
    """공개용 사용자 정보 (비밀번호 해시 제외).

    클라이언트에게 반환할 때 사용하는 모델입니다.
    """
    uid: str
    username: str
    email: str
