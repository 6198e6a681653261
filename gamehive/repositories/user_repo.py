"""User repositories for the Firebase, MongoDB and in-memory backends.

Every backend answers the same three questions: create a user, find a user
by username or email, and check a password for a found user.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from gamehive.adapters import firebase
from gamehive.models.user import User
from gamehive.repositories.base import (
    DuplicateUserError,
    InvalidCredentialsError,
    RepositoryError,
    UserNotFoundError,
)
from gamehive.server.security import hash_password, verify_password

logger = logging.getLogger(__name__)

# Identity Toolkit 오류 중 "비밀번호 불일치"로 취급하는 코드
_FIREBASE_BAD_CREDENTIAL_CODES = {
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "EMAIL_NOT_FOUND",
    "USER_DISABLED",
}


class UserRepository:
    """Interface shared by the concrete user repositories."""

    async def create(self, username: str, email: str, password: str) -> User:
        raise NotImplementedError

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        raise NotImplementedError

    async def check_password(self, user: User, password: str) -> bool:
        raise NotImplementedError

    async def authenticate(self, identifier: str, password: str) -> User:
        """Look up ``identifier`` (username or email) and verify ``password``.

        Raises:
            UserNotFoundError: 일치하는 사용자 없음
            InvalidCredentialsError: 비밀번호 불일치
        """
        user = await self.find_by_identifier(identifier)
        if user is None:
            raise UserNotFoundError(identifier)
        if not await self.check_password(user, password):
            logger.warning("Invalid password for user %s", user.username)
            raise InvalidCredentialsError(identifier)
        return user


class MemoryUserRepository(UserRepository):
    """In-process store for development and tests."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._lock = asyncio.Lock()

    async def create(self, username: str, email: str, password: str) -> User:
        async with self._lock:
            for existing in self._users.values():
                if existing.username == username or existing.email == email:
                    raise DuplicateUserError(username)
            user = User(
                uid=uuid.uuid4().hex,
                username=username,
                email=email,
                password_hash=hash_password(password),
            )
            self._users[user.uid] = user
        logger.info("Registered user %s", username)
        return user

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        for user in self._users.values():
            if user.matches(identifier):
                return user
        return None

    async def check_password(self, user: User, password: str) -> bool:
        return verify_password(user.password_hash, password)


class MongoUserRepository(UserRepository):
    """Users stored in the ``users`` collection; unique indexes reject duplicates."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    async def create(self, username: str, email: str, password: str) -> User:
        document = {
            "username": username,
            "email": email,
            "password_hash": hash_password(password),
        }
        try:
            result = await asyncio.to_thread(self._collection.insert_one, document)
        except DuplicateKeyError as exc:
            raise DuplicateUserError(username) from exc
        except PyMongoError as exc:
            logger.error("Failed to insert user %s: %s", username, exc)
            raise RepositoryError("Failed to create user") from exc

        logger.info("Registered user %s", username)
        return User.from_backend(str(result.inserted_id), document)

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        query = {"$or": [{"username": identifier}, {"email": identifier}]}
        try:
            document = await asyncio.to_thread(self._collection.find_one, query)
        except PyMongoError as exc:
            logger.error("Failed to look up user %s: %s", identifier, exc)
            raise RepositoryError("Failed to look up user") from exc

        if document is None:
            return None
        return User.from_backend(str(document["_id"]), document)

    async def check_password(self, user: User, password: str) -> bool:
        return verify_password(user.password_hash, password)


class FirebaseUserRepository(UserRepository):
    """Credentials in Firebase Authentication, profiles under ``users/<uid>``.

    ``usernames/<username>`` 는 사용자명 선점용 (값: 이메일).
    """

    path = "users"
    username_path = "usernames"

    async def _load_profiles(self) -> List[User]:
        try:
            data = await firebase.get(self.path)
        except firebase.FirebaseError as exc:
            raise RepositoryError("Failed to read users") from exc
        profiles: Dict[str, Any] = data or {}
        return [
            User.from_backend(uid, profile)
            for uid, profile in profiles.items()
            if isinstance(profile, dict)
        ]

    async def _claim_username(self, claim_path: str, email: str) -> None:
        try:
            current, etag = await firebase.get_with_etag(claim_path)
            if current is not None:
                raise DuplicateUserError(claim_path)
            await firebase.put(claim_path, email, if_match=etag)
        except firebase.PreconditionFailed as exc:
            raise DuplicateUserError(claim_path) from exc
        except firebase.FirebaseError as exc:
            raise RepositoryError("Failed to reserve username") from exc

    async def _rollback(self, claim_path: str, id_token: Optional[str] = None) -> None:
        """가입 도중 실패 시 Auth 계정과 사용자명 선점을 되돌립니다."""
        try:
            if id_token:
                await firebase.delete_account(id_token)
            await firebase.delete(claim_path)
        except firebase.FirebaseError as exc:
            logger.error("Failed to roll back registration at %s: %s", claim_path, exc)

    async def create(self, username: str, email: str, password: str) -> User:
        for existing in await self._load_profiles():
            if existing.username == username or existing.email == email:
                raise DuplicateUserError(username)

        # 사용자명 고유성은 usernames/<username> 조건부 쓰기로 보장
        claim_path = f"{self.username_path}/{firebase.escape_key(username)}"
        await self._claim_username(claim_path, email)

        try:
            account = await firebase.sign_up(email, password)
        except firebase.FirebaseError as exc:
            await self._rollback(claim_path)
            if exc.code == "EMAIL_EXISTS":
                raise DuplicateUserError(email) from exc
            raise RepositoryError(exc.code or "Failed to create account") from exc

        uid = account.get("localId")
        if not uid:
            await self._rollback(claim_path, account.get("idToken"))
            raise RepositoryError("Sign-up response missing localId")

        try:
            await firebase.put(f"{self.path}/{uid}", {"username": username, "email": email})
        except firebase.FirebaseError as exc:
            logger.error("Failed to store profile for %s, deleting account", username)
            await self._rollback(claim_path, account.get("idToken"))
            raise RepositoryError("Failed to store user profile") from exc

        logger.info("Registered user %s", username)
        return User(uid=uid, username=username, email=email)

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        for user in await self._load_profiles():
            if user.matches(identifier):
                return user
        return None

    async def check_password(self, user: User, password: str) -> bool:
        try:
            await firebase.sign_in(user.email, password)
        except firebase.FirebaseError as exc:
            if exc.code and exc.code.split(" ")[0] in _FIREBASE_BAD_CREDENTIAL_CODES:
                return False
            raise RepositoryError(exc.code or "Failed to verify credentials") from exc
        return True
