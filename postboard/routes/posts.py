import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends

from ..dependencies import get_post_store
from ..models.post import Comment, CommentCreate, Message, Post, PostCreate, Reaction
from ..stores.posts import InvalidPostId, PostNotFound, PostStore, new_comment_id
from .auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def find_post_or_404(posts: PostStore, post_id: str) -> Post:
    try:
        return posts.find_by_id(post_id)
    except (PostNotFound, InvalidPostId):
        raise HTTPException(status_code=404, detail="Post not found")


def save_or_404(posts: PostStore, post: Post) -> Post:
    try:
        return posts.save(post)
    except PostNotFound:
        raise HTTPException(status_code=404, detail="Post not found")


def has_reacted(entries: List[Reaction], user_id: str) -> bool:
    return any(entry.user == user_id for entry in entries)


def remove_first_by_user(entries: list, user_id: str) -> None:
    """Drop the first entry authored by ``user_id``, if any."""
    for index, entry in enumerate(entries):
        if entry.user == user_id:
            del entries[index]
            return


# --- Posts ---
@router.post("", response_model=Post)
def create_post(
    body: PostCreate,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = posts.create(
        user=str(current_user["_id"]),
        text=body.text,
        name=current_user["name"],
        avatar=current_user.get("avatar"),
    )
    logger.info("Post %s created by %s", post.id, post.user)
    return post


@router.get("", response_model=List[Post])
def get_posts(
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    return posts.find_all_sorted_by_date_desc()


@router.get("/{post_id}", response_model=Post)
def get_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    return find_post_or_404(posts, post_id)


@router.delete("/{post_id}", response_model=Message)
def delete_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    if post.user != str(current_user["_id"]):
        raise HTTPException(status_code=401, detail="User not authorized")
    posts.delete(post)
    logger.info("Post %s removed by %s", post.id, post.user)
    return Message(msg="Post removed")


# --- Likes / Dislikes ---
@router.put("/like/{post_id}", response_model=List[Reaction])
def like_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    user_id = str(current_user["_id"])
    if has_reacted(post.likes, user_id):
        raise HTTPException(status_code=400, detail="Post already liked")
    post.likes.insert(0, Reaction(user=user_id))
    save_or_404(posts, post)
    return post.likes


@router.put("/unlike/{post_id}", response_model=List[Reaction])
def unlike_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    user_id = str(current_user["_id"])
    if not has_reacted(post.likes, user_id):
        raise HTTPException(status_code=400, detail="Post has not yet been liked")
    remove_first_by_user(post.likes, user_id)
    save_or_404(posts, post)
    return post.likes


@router.put("/dislike/{post_id}", response_model=List[Reaction])
def dislike_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    user_id = str(current_user["_id"])
    if has_reacted(post.dislikes, user_id):
        raise HTTPException(status_code=400, detail="Post already disliked")
    post.dislikes.insert(0, Reaction(user=user_id))
    save_or_404(posts, post)
    return post.dislikes


@router.put("/undislike/{post_id}", response_model=List[Reaction])
def undislike_post(
    post_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    user_id = str(current_user["_id"])
    if not has_reacted(post.dislikes, user_id):
        raise HTTPException(status_code=400, detail="Post has not yet been disliked")
    remove_first_by_user(post.dislikes, user_id)
    save_or_404(posts, post)
    return post.dislikes


# --- Comments ---
@router.post("/comment/{post_id}", response_model=List[Comment])
def add_comment(
    post_id: str,
    body: CommentCreate,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    comment = Comment(
        id=new_comment_id(),
        user=str(current_user["_id"]),
        text=body.text,
        name=current_user["name"],
        avatar=current_user.get("avatar"),
    )
    post.comments.insert(0, comment)
    save_or_404(posts, post)
    logger.info("Comment %s added to post %s", comment.id, post.id)
    return post.comments


@router.delete("/comment/{post_id}/{comment_id}", response_model=List[Comment])
def delete_comment(
    post_id: str,
    comment_id: str,
    current_user: dict = Depends(get_current_user),
    posts: PostStore = Depends(get_post_store),
):
    post = find_post_or_404(posts, post_id)
    comment = next((c for c in post.comments if c.id == comment_id), None)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment does not exist")
    user_id = str(current_user["_id"])
    if comment.user != user_id:
        raise HTTPException(status_code=401, detail="User not authorized")
    # Removes the caller's most recent comment, which is the addressed one
    # only when the caller has a single comment on the post.
    remove_first_by_user(post.comments, user_id)
    save_or_404(posts, post)
    logger.info("Comment %s removed from post %s", comment_id, post.id)
    return post.comments
