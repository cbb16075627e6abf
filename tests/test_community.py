"""
Tests for the community feed: posts, likes and comments.

Only a post's or comment's author may edit or delete it.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def post(async_client: AsyncClient, candidate: dict) -> dict:
    response = await async_client.post(
        "/api/posts", json={"content": "Just got shortlisted!"}, headers=candidate["headers"]
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def comment(async_client: AsyncClient, employer: dict, post: dict) -> dict:
    response = await async_client.post(
        f"/api/comments/{post['id']}", json={"text": "Congrats!"}, headers=employer["headers"]
    )
    assert response.status_code == 201
    return response.json()


# ============================================================
# POSTS
# ============================================================

@pytest.mark.asyncio
async def test_create_post(async_client: AsyncClient, candidate: dict, post: dict):
    assert post["content"] == "Just got shortlisted!"
    assert post["image"] == ""
    assert post["likes"] == []
    assert post["author"]["id"] == candidate["id"]
    assert post["author"]["role"] == "candidate"


@pytest.mark.asyncio
async def test_create_post_requires_content(async_client: AsyncClient, candidate: dict):
    response = await async_client.post("/api/posts", json={"image": "x.png"}, headers=candidate["headers"])

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_post_requires_auth(async_client: AsyncClient, db):
    response = await async_client.post("/api/posts", json={"content": "anonymous"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_feed_newest_first(async_client: AsyncClient, employer: dict, post: dict):
    newer = (await async_client.post(
        "/api/posts", json={"content": "We're hiring"}, headers=employer["headers"]
    )).json()

    response = await async_client.get("/api/posts")

    assert [p["id"] for p in response.json()] == [newer["id"], post["id"]]


@pytest.mark.asyncio
async def test_like_toggles(async_client: AsyncClient, employer: dict, other_candidate: dict, post: dict):
    url = f"/api/posts/like/{post['id']}"

    liked = await async_client.put(url, headers=employer["headers"])
    both = await async_client.put(url, headers=other_candidate["headers"])
    unliked = await async_client.put(url, headers=employer["headers"])

    assert liked.json() == [employer["id"]]
    assert set(both.json()) == {employer["id"], other_candidate["id"]}
    assert unliked.json() == [other_candidate["id"]]


@pytest.mark.asyncio
async def test_like_unknown_post(async_client: AsyncClient, candidate: dict):
    response = await async_client.put("/api/posts/like/64b7f0c2a1b2c3d4e5f6a7b8", headers=candidate["headers"])

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_post_with_comments(async_client: AsyncClient, employer: dict, post: dict, comment: dict):
    response = await async_client.get(f"/api/posts/{post['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["content"] == post["content"]
    assert [c["id"] for c in data["comments"]] == [comment["id"]]
    assert data["comments"][0]["author"]["name"] == employer["name"]


@pytest.mark.asyncio
async def test_author_edits_post(async_client: AsyncClient, candidate: dict, post: dict):
    response = await async_client.put(
        f"/api/posts/{post['id']}", json={"content": "Got the job!"}, headers=candidate["headers"]
    )

    assert response.status_code == 200
    assert response.json()["content"] == "Got the job!"


@pytest.mark.asyncio
async def test_non_author_cannot_edit_or_delete_post(async_client: AsyncClient, employer: dict, post: dict):
    edit = await async_client.put(
        f"/api/posts/{post['id']}", json={"content": "hijacked"}, headers=employer["headers"]
    )
    delete = await async_client.delete(f"/api/posts/{post['id']}", headers=employer["headers"])

    assert edit.status_code == 403
    assert delete.status_code == 403
    assert (await async_client.get(f"/api/posts/{post['id']}")).json()["content"] == post["content"]


@pytest.mark.asyncio
async def test_delete_post_removes_comments(
    async_client: AsyncClient, candidate: dict, post: dict, comment: dict, db
):
    response = await async_client.delete(f"/api/posts/{post['id']}", headers=candidate["headers"])

    assert response.status_code == 200
    assert db["posts"].count_documents({}) == 0
    assert db["comments"].count_documents({}) == 0


# ============================================================
# COMMENTS
# ============================================================

@pytest.mark.asyncio
async def test_comment_on_unknown_post(async_client: AsyncClient, candidate: dict):
    response = await async_client.post(
        "/api/comments/64b7f0c2a1b2c3d4e5f6a7b8", json={"text": "hello?"}, headers=candidate["headers"]
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Post not found"}


@pytest.mark.asyncio
async def test_comment_requires_text(async_client: AsyncClient, candidate: dict, post: dict):
    response = await async_client.post(
        f"/api/comments/{post['id']}", json={"text": ""}, headers=candidate["headers"]
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_comments_newest_first(
    async_client: AsyncClient, candidate: dict, post: dict, comment: dict
):
    reply = (await async_client.post(
        f"/api/comments/{post['id']}", json={"text": "Thanks!"}, headers=candidate["headers"]
    )).json()

    response = await async_client.get(f"/api/comments/{post['id']}")

    comments = response.json()
    assert [c["id"] for c in comments] == [reply["id"], comment["id"]]
    assert comments[0]["author"] == {"id": candidate["id"], "name": candidate["name"], "profilePic": ""}
    assert comments[0]["post"] == post["id"]


@pytest.mark.asyncio
async def test_author_edits_comment(async_client: AsyncClient, employer: dict, comment: dict):
    response = await async_client.put(
        f"/api/comments/{comment['id']}", json={"text": "Well done!"}, headers=employer["headers"]
    )

    assert response.status_code == 200
    assert response.json()["text"] == "Well done!"


@pytest.mark.asyncio
async def test_empty_comment_update_keeps_text(async_client: AsyncClient, employer: dict, comment: dict):
    response = await async_client.put(f"/api/comments/{comment['id']}", json={}, headers=employer["headers"])

    assert response.status_code == 200
    assert response.json()["text"] == "Congrats!"


@pytest.mark.asyncio
async def test_non_author_cannot_edit_or_delete_comment(
    async_client: AsyncClient, candidate: dict, comment: dict, db
):
    """Even the post's author cannot touch someone else's comment."""
    edit = await async_client.put(
        f"/api/comments/{comment['id']}", json={"text": "rewritten"}, headers=candidate["headers"]
    )
    delete = await async_client.delete(f"/api/comments/{comment['id']}", headers=candidate["headers"])

    assert edit.status_code == 403
    assert delete.status_code == 403
    assert db["comments"].count_documents({}) == 1


@pytest.mark.asyncio
async def test_author_deletes_comment(async_client: AsyncClient, employer: dict, comment: dict, db):
    response = await async_client.delete(f"/api/comments/{comment['id']}", headers=employer["headers"])

    assert response.status_code == 200
    assert response.json()["message"] == "Comment deleted successfully"
    assert db["comments"].count_documents({}) == 0
