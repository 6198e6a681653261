"""Catalog (suggested games) repositories."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from gamehive.adapters import firebase
from gamehive.models.game import GameEntry, sort_newest_first
from gamehive.repositories.base import DuplicateGameError, RepositoryError

logger = logging.getLogger(__name__)


class GameRepository:
    """Interface shared by the concrete catalog repositories."""

    async def add(self, entry: GameEntry) -> GameEntry:
        """Persist ``entry``; raise DuplicateGameError on a name/slug clash."""
        raise NotImplementedError

    async def list_newest_first(self) -> List[GameEntry]:
        raise NotImplementedError


def _clashes(existing: GameEntry, entry: GameEntry) -> bool:
    return existing.name == entry.name or existing.slug == entry.slug


class MemoryGameRepository(GameRepository):
    def __init__(self) -> None:
        self._games: Dict[str, GameEntry] = {}
        self._lock = asyncio.Lock()

    async def add(self, entry: GameEntry) -> GameEntry:
        async with self._lock:
            if any(_clashes(existing, entry) for existing in self._games.values()):
                raise DuplicateGameError(entry.slug)
            self._games[entry.gameId] = entry
        logger.info("Saved game %s (%s) added by %s", entry.name, entry.gameId, entry.addedBy)
        return entry

    async def list_newest_first(self) -> List[GameEntry]:
        return sort_newest_first(list(self._games.values()))


class MongoGameRepository(GameRepository):
    """Catalog stored in ``suggested_games`` with unique indexes on name and slug."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    async def add(self, entry: GameEntry) -> GameEntry:
        document = {"gameId": entry.gameId, **entry.to_document()}
        try:
            await asyncio.to_thread(self._collection.insert_one, document)
        except DuplicateKeyError as exc:
            raise DuplicateGameError(entry.slug) from exc
        except PyMongoError as exc:
            logger.error("Failed to save game %s: %s", entry.slug, exc)
            raise RepositoryError("Failed to save game") from exc

        logger.info("Saved game %s (%s) added by %s", entry.name, entry.gameId, entry.addedBy)
        return entry

    async def list_newest_first(self) -> List[GameEntry]:
        def _fetch():
            return list(self._collection.find({}, {"_id": 0}).sort("addedAt", -1))

        try:
            documents = await asyncio.to_thread(_fetch)
        except PyMongoError as exc:
            logger.error("Failed to list suggested games: %s", exc)
            raise RepositoryError("Failed to list suggested games") from exc
        return [GameEntry.from_backend(doc["gameId"], doc) for doc in documents]


class FirebaseGameRepository(GameRepository):
    """Catalog under ``suggested_games/<gameId>``.

    Slug 고유성은 ``suggested_game_slugs/<slug>`` 를 ETag 조건부 쓰기로
    선점해서 보장합니다. 이름 중복은 읽기 후 검사입니다.
    """

    path = "suggested_games"
    slug_path = "suggested_game_slugs"

    async def _load(self) -> List[GameEntry]:
        try:
            data = await firebase.get(self.path)
        except firebase.FirebaseError as exc:
            raise RepositoryError("Failed to read suggested games") from exc
        games = data or {}
        return [
            GameEntry.from_backend(game_id, payload)
            for game_id, payload in games.items()
            if isinstance(payload, dict)
        ]

    async def _claim_slug(self, entry: GameEntry) -> None:
        claim_path = f"{self.slug_path}/{firebase.escape_key(entry.slug)}"
        try:
            current, etag = await firebase.get_with_etag(claim_path)
            if current is not None:
                raise DuplicateGameError(entry.slug)
            await firebase.put(claim_path, entry.gameId, if_match=etag)
        except firebase.PreconditionFailed as exc:
            raise DuplicateGameError(entry.slug) from exc
        except firebase.FirebaseError as exc:
            raise RepositoryError("Failed to reserve game slug") from exc

    async def add(self, entry: GameEntry) -> GameEntry:
        if any(_clashes(existing, entry) for existing in await self._load()):
            raise DuplicateGameError(entry.slug)

        await self._claim_slug(entry)
        try:
            await firebase.put(f"{self.path}/{entry.gameId}", entry.to_document())
        except firebase.FirebaseError as exc:
            logger.error("Failed to save game %s, releasing slug claim", entry.slug)
            await firebase.delete(f"{self.slug_path}/{firebase.escape_key(entry.slug)}")
            raise RepositoryError("Failed to save game") from exc

        logger.info("Saved game %s (%s) added by %s", entry.name, entry.gameId, entry.addedBy)
        return entry

    async def list_newest_first(self) -> List[GameEntry]:
        return sort_newest_first(await self._load())
