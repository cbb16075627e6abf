"""
Comment Routes

POST /comments/{post_id} - Comment on a post
GET /comments/{post_id} - Comments on a post, newest first
PUT /comments/{comment_id} - Edit comment (author only)
DELETE /comments/{comment_id} - Delete comment (author only)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.core.auth import get_current_user
from app.services.mongo_service import CommentService, PostService
from app.schemas.schemas import CommentCreate, CommentUpdate, CommentResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["Community"])


def get_authored_comment(comment_id: str, user: dict, action: str) -> dict:
    comment = CommentService().find(comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment["author"] != user["id"]:
        logger.warning(f"User {user['email']} attempted to {action} comment {comment_id}")
        raise HTTPException(status_code=403, detail=f"Not authorized to {action} this comment")
    return comment


@router.post("/{post_id}", response_model=CommentResponse, status_code=201)
async def add_comment(post_id: str, data: CommentCreate, user: dict = Depends(get_current_user)):
    if not PostService().find(post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    return CommentService().create(post_id=post_id, author_id=user["id"], text=data.text)


@router.get("/{post_id}", response_model=List[CommentResponse])
async def get_post_comments(post_id: str):
    """Comments on a post with author details, newest first."""
    return CommentService().list_for_post(post_id)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(comment_id: str, data: CommentUpdate, user: dict = Depends(get_current_user)):
    """Edit a comment. An empty update leaves the text unchanged."""
    comment = get_authored_comment(comment_id, user, "edit")

    if data.text is None:
        return CommentService().get(comment["id"])
    return CommentService().update(comment_id, data.text)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(comment_id: str, user: dict = Depends(get_current_user)):
    get_authored_comment(comment_id, user, "delete")
    CommentService().delete(comment_id)
    return MessageResponse(message="Comment deleted successfully")
