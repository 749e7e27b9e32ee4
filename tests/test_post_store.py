from datetime import datetime, timedelta, timezone

import pytest

from postboard.models.post import Comment, Reaction
from postboard.stores.posts import InvalidPostId, PostNotFound, StoreError, new_comment_id

_T0 = datetime(2025, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


def _create(store, text="hello", user="u1", date=None):
    return store.create(user=user, text=text, name="Alice", avatar="http://a/1", date=date)


class TestCreate:
    def test_create_assigns_id_and_empty_collections(self, post_store):
        post = _create(post_store)
        assert len(post.id) == 24
        assert post.likes == []
        assert post.dislikes == []
        assert post.comments == []
        assert post.user == "u1"
        assert post.name == "Alice"

    def test_create_defaults_date_to_now(self, post_store):
        before = datetime.now(timezone.utc) - timedelta(seconds=1)
        post = _create(post_store)
        assert post.date >= before

    def test_created_post_is_retrievable(self, post_store):
        post = _create(post_store, date=_T0)
        fetched = post_store.find_by_id(post.id)
        assert fetched.text == "hello"
        assert fetched.date == _T0


class TestFindById:
    def test_missing_id_raises_not_found(self, post_store):
        with pytest.raises(PostNotFound):
            post_store.find_by_id("0123456789abcdef01234567")

    def test_malformed_id_raises_invalid_id(self, post_store):
        with pytest.raises(InvalidPostId):
            post_store.find_by_id("not-an-object-id")

    def test_both_errors_share_a_base(self):
        assert issubclass(PostNotFound, StoreError)
        assert issubclass(InvalidPostId, StoreError)
        assert not issubclass(InvalidPostId, PostNotFound)


class TestFindAllSorted:
    def test_newest_first(self, post_store):
        for offset, text in [(1, "middle"), (0, "oldest"), (2, "newest")]:
            _create(post_store, text=text, date=_T0 + timedelta(minutes=offset))

        texts = [p.text for p in post_store.find_all_sorted_by_date_desc()]
        assert texts == ["newest", "middle", "oldest"]

    def test_empty_collection(self, post_store):
        assert post_store.find_all_sorted_by_date_desc() == []


class TestSaveAndDelete:
    def test_save_persists_whole_document(self, post_store):
        post = _create(post_store, date=_T0)
        post.likes.insert(0, Reaction(user="u2"))
        post.dislikes.insert(0, Reaction(user="u3"))
        comment_id = new_comment_id()
        post.comments.insert(
            0, Comment(id=comment_id, user="u2", text="nice", name="Bob", date=_T0)
        )
        post_store.save(post)

        fetched = post_store.find_by_id(post.id)
        assert [r.user for r in fetched.likes] == ["u2"]
        assert [r.user for r in fetched.dislikes] == ["u3"]
        assert fetched.comments[0].id == comment_id
        assert fetched.comments[0].text == "nice"
        assert fetched.user == "u1"

    def test_save_after_delete_raises_not_found(self, post_store):
        post = _create(post_store)
        post_store.delete(post)
        with pytest.raises(PostNotFound):
            post_store.save(post)

    def test_delete_removes_post(self, post_store):
        post = _create(post_store)
        post_store.delete(post)
        with pytest.raises(PostNotFound):
            post_store.find_by_id(post.id)
