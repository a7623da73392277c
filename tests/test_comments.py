"""Tests for embedded comment management."""

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.modules.posts.comments.services.comment import (
    add_comment,
    delete_comment,
    edit_comment,
    find_comment_index,
    get_comments,
)
from app.modules.posts.services.post import create_post, delete_post


class TestCommentService:
    def test_add_returns_generated_comment(self, db: Session) -> None:
        post = create_post(db, "hello")
        comment = add_comment(db, post.id, "u1", "Alice", "nice")
        assert comment["id"]
        assert comment["body"] == "nice"
        assert comment["author_id"] == "u1"
        assert comment["author_name"] == "Alice"
        assert comment["reactions"] == {}
        assert get_comments(db, post.id) == [comment]

    def test_comments_keep_insertion_order(self, db: Session) -> None:
        post = create_post(db, "hello")
        ids = [add_comment(db, post.id, "u1", "Alice", body)["id"] for body in ("a", "b", "c")]
        assert [c["id"] for c in get_comments(db, post.id)] == ids

    def test_edit(self, db: Session) -> None:
        post = create_post(db, "hello")
        comment = add_comment(db, post.id, "u1", "Alice", "nice")
        edited = edit_comment(db, post.id, comment["id"], "nicer")
        assert edited["body"] == "nicer"
        assert edited["is_edited"] is True
        assert get_comments(db, post.id)[0]["body"] == "nicer"

    def test_add_then_delete_then_edit_fails(self, db: Session) -> None:
        post = create_post(db, "hello")
        comment = add_comment(db, post.id, "u1", "Alice", "nice")

        delete_comment(db, post.id, comment["id"])
        assert get_comments(db, post.id) == []

        with pytest.raises(NotFound):
            edit_comment(db, post.id, comment["id"], "again")
        with pytest.raises(NotFound):
            delete_comment(db, post.id, comment["id"])

    def test_missing_post(self, db: Session) -> None:
        with pytest.raises(NotFound):
            add_comment(db, "missing", "u1", "Alice", "nice")
        with pytest.raises(NotFound):
            get_comments(db, "missing")

    def test_blank_body(self, db: Session) -> None:
        post = create_post(db, "hello")
        with pytest.raises(ValidationError):
            add_comment(db, post.id, "u1", "Alice", "  ")

    def test_deleting_post_drops_comments(self, db: Session) -> None:
        post = create_post(db, "hello")
        add_comment(db, post.id, "u1", "Alice", "nice")
        delete_post(db, post.id)
        with pytest.raises(NotFound):
            get_comments(db, post.id)

    def test_find_comment_index(self) -> None:
        comments = [{"id": "a"}, {"id": "b"}]
        assert find_comment_index(comments, "b") == 1
        assert find_comment_index(comments, "z") is None


class TestCommentRoutes:
    def test_crud(self, client, api: str) -> None:
        post = client.post(f"{api}/posts", data={"content": "hello"}).json()
        base = f"{api}/posts/{post['id']}/comments"

        response = client.post(base, json={"user_id": "u1", "username": "Alice", "comment": "nice"})
        assert response.status_code == 201
        comment = response.json()

        listed = client.get(base).json()
        assert [(c["author_name"], c["body"]) for c in listed] == [("Alice", "nice")]

        response = client.put(f"{base}/{comment['id']}", json={"comment": "nicer"})
        assert response.status_code == 200
        assert response.json()["body"] == "nicer"

        assert client.delete(f"{base}/{comment['id']}").status_code == 200
        assert client.get(base).json() == []
        assert client.put(f"{base}/{comment['id']}", json={"comment": "x"}).status_code == 404

    def test_missing_fields_is_400(self, client, api: str) -> None:
        post = client.post(f"{api}/posts", data={"content": "hello"}).json()
        response = client.post(f"{api}/posts/{post['id']}/comments", json={"comment": "nice"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Validation error"
