from fastapi import Depends
from pymongo.database import Database

from .database import get_db
from .stores.posts import PostStore
from .stores.users import UserStore


def get_post_store(database: Database = Depends(get_db)) -> PostStore:
    return PostStore(database.posts)


def get_user_store(database: Database = Depends(get_db)) -> UserStore:
    return UserStore(database.users)
