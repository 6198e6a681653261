"""Review repositories."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from gamehive.adapters import firebase
from gamehive.models.game import sort_newest_first
from gamehive.models.review import Review
from gamehive.repositories.base import RepositoryError

logger = logging.getLogger(__name__)


class ReviewRepository:
    """Interface shared by the concrete review repositories."""

    async def add(self, review: Review) -> Review:
        raise NotImplementedError

    async def list_for_game(self, game_id: str) -> List[Review]:
        """Reviews of ``game_id``, newest first."""
        raise NotImplementedError


class MemoryReviewRepository(ReviewRepository):
    def __init__(self) -> None:
        self._reviews: Dict[str, List[Review]] = {}

    async def add(self, review: Review) -> Review:
        self._reviews.setdefault(review.gameId, []).append(review)
        logger.info("Review %s added to game %s by %s", review.reviewId, review.gameId, review.username)
        return review

    async def list_for_game(self, game_id: str) -> List[Review]:
        return sort_newest_first(self._reviews.get(game_id, []), field="createdAt")


class MongoReviewRepository(ReviewRepository):
    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    async def add(self, review: Review) -> Review:
        document = {"reviewId": review.reviewId, **review.to_document()}
        try:
            await asyncio.to_thread(self._collection.insert_one, document)
        except PyMongoError as exc:
            logger.error("Failed to save review for game %s: %s", review.gameId, exc)
            raise RepositoryError("Failed to save review") from exc

        logger.info("Review %s added to game %s by %s", review.reviewId, review.gameId, review.username)
        return review

    async def list_for_game(self, game_id: str) -> List[Review]:
        def _fetch():
            cursor = self._collection.find({"gameId": game_id}, {"_id": 0})
            return list(cursor.sort("createdAt", -1))

        try:
            documents = await asyncio.to_thread(_fetch)
        except PyMongoError as exc:
            logger.error("Failed to list reviews for game %s: %s", game_id, exc)
            raise RepositoryError("Failed to list reviews") from exc
        return [Review.from_backend(doc["reviewId"], doc) for doc in documents]


class FirebaseReviewRepository(ReviewRepository):
    """Reviews under ``reviews/<gameId>/<pushKey>``."""

    path = "reviews"

    async def add(self, review: Review) -> Review:
        game_path = f"{self.path}/{firebase.escape_key(review.gameId)}"
        try:
            key = await firebase.push(game_path, review.to_document())
        except firebase.FirebaseError as exc:
            raise RepositoryError("Failed to save review") from exc

        review.reviewId = key
        logger.info("Review %s added to game %s by %s", key, review.gameId, review.username)
        return review

    async def list_for_game(self, game_id: str) -> List[Review]:
        try:
            data = await firebase.get(f"{self.path}/{firebase.escape_key(game_id)}")
        except firebase.FirebaseError as exc:
            raise RepositoryError("Failed to list reviews") from exc
        reviews = [
            Review.from_backend(key, payload)
            for key, payload in (data or {}).items()
            if isinstance(payload, dict)
        ]
        return sort_newest_first(reviews, field="createdAt")
