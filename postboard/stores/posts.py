"""Data access for the ``posts`` collection.

Handlers read a whole :class:`Post`, change it in memory and hand it back to
:meth:`PostStore.save`, which replaces the stored document. Two requests
mutating the same post concurrently are last-write-wins.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import DESCENDING
from pymongo.collection import Collection

from ..models.post import Comment, Post, Reaction, truncate_to_millis, utcnow

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


class PostNotFound(StoreError):
    def __init__(self, post_id):
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id


class InvalidPostId(StoreError):
    def __init__(self, post_id):
        super().__init__(f"{post_id!r} is not a valid post id")
        self.post_id = post_id


def _as_utc(value: datetime) -> datetime:
    # pymongo hands back naive datetimes that are already UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_id(post_id) -> ObjectId:
    try:
        return ObjectId(post_id)
    except (InvalidId, TypeError):
        raise InvalidPostId(post_id)


def _comment_from_doc(doc: dict) -> Comment:
    return Comment(
        id=str(doc["_id"]),
        user=doc["user"],
        text=doc["text"],
        name=doc["name"],
        avatar=doc.get("avatar"),
        date=_as_utc(doc["date"]),
    )


def _post_from_doc(doc: dict) -> Post:
    return Post(
        id=str(doc["_id"]),
        user=doc["user"],
        text=doc["text"],
        name=doc["name"],
        avatar=doc.get("avatar"),
        likes=[Reaction(user=r["user"]) for r in doc.get("likes", [])],
        dislikes=[Reaction(user=r["user"]) for r in doc.get("dislikes", [])],
        comments=[_comment_from_doc(c) for c in doc.get("comments", [])],
        date=_as_utc(doc["date"]),
    )


def _post_to_doc(post: Post) -> dict:
    return {
        "user": post.user,
        "text": post.text,
        "name": post.name,
        "avatar": post.avatar,
        "likes": [{"user": r.user} for r in post.likes],
        "dislikes": [{"user": r.user} for r in post.dislikes],
        "comments": [
            {
                "_id": ObjectId(c.id),
                "user": c.user,
                "text": c.text,
                "name": c.name,
                "avatar": c.avatar,
                "date": c.date,
            }
            for c in post.comments
        ],
        "date": post.date,
    }


def new_comment_id() -> str:
    return str(ObjectId())


class PostStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def create(
        self,
        user: str,
        text: str,
        name: str,
        avatar: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Post:
        doc = {
            "user": user,
            "text": text,
            "name": name,
            "avatar": avatar,
            "likes": [],
            "dislikes": [],
            "comments": [],
            "date": truncate_to_millis(date) if date else utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _post_from_doc(doc)

    def find_by_id(self, post_id) -> Post:
        """Return the post, raising :class:`InvalidPostId` for an id that
        cannot be an ObjectId and :class:`PostNotFound` when nothing matches.
        """
        doc = self.collection.find_one({"_id": _parse_id(post_id)})
        if doc is None:
            raise PostNotFound(post_id)
        return _post_from_doc(doc)

    def find_all_sorted_by_date_desc(self) -> List[Post]:
        return [_post_from_doc(doc) for doc in self.collection.find().sort("date", DESCENDING)]

    def save(self, post: Post) -> Post:
        result = self.collection.replace_one({"_id": _parse_id(post.id)}, _post_to_doc(post))
        if result.matched_count == 0:
            # deleted between read and write
            raise PostNotFound(post.id)
        return post

    def delete(self, post: Post) -> None:
        self.collection.delete_one({"_id": _parse_id(post.id)})
