"""
Post Routes (community feed)

POST /posts - Create post
GET /posts - Feed, newest first
PUT /posts/like/{post_id} - Like / unlike a post
GET /posts/{post_id} - Post with its comments
PUT /posts/{post_id} - Edit post (author only)
DELETE /posts/{post_id} - Delete post and its comments (author only)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.core.auth import get_current_user
from app.services.mongo_service import PostService, CommentService
from app.schemas.schemas import (
    PostCreate, PostUpdate, PostResponse, PostDetailResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Community"])


def get_authored_post(post_id: str, user: dict, action: str) -> dict:
    post = PostService().find(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    if post["author"] != user["id"]:
        logger.warning(f"User {user['email']} attempted to {action} post {post_id}")
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this post")
    return post


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(data: PostCreate, user: dict = Depends(get_current_user)):
    return PostService().create(author_id=user["id"], content=data.content, image=data.image)


@router.get("", response_model=List[PostResponse])
async def list_posts():
    """Community feed, newest first."""
    return PostService().list()


@router.put("/like/{post_id}", response_model=List[str])
async def like_post(post_id: str, user: dict = Depends(get_current_user)):
    """Toggle the current user's like. Returns the ids of everyone who likes the post."""
    likes = PostService().toggle_like(post_id, user["id"])
    if likes is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return likes


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(post_id: str):
    post = PostService().get(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    post["comments"] = CommentService().list_for_post(post_id)
    return post


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(post_id: str, data: PostUpdate, user: dict = Depends(get_current_user)):
    get_authored_post(post_id, user, "edit")

    updates = data.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    return PostService().update(post_id, updates)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: str, user: dict = Depends(get_current_user)):
    get_authored_post(post_id, user, "delete")

    PostService().delete(post_id)
    CommentService().delete_for_post(post_id)

    return MessageResponse(message="Post deleted successfully")
