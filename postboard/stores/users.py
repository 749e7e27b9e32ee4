from typing import Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo.collection import Collection

from ..models.post import utcnow


class UserStore:
    """Access to the ``users`` collection. Documents are returned as plain dicts."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def create(self, name: str, email: str, password_hash: str, avatar: Optional[str]) -> dict:
        user_doc = {
            "name": name,
            "email": email,
            "avatar": avatar,
            "passwordHash": password_hash,
            "date": utcnow(),
        }
        result = self.collection.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id
        return user_doc

    def find_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def find_by_id(self, user_id) -> Optional[dict]:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return self.collection.find_one({"_id": oid})
