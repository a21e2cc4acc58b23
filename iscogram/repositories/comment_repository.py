from sqlalchemy import func

from iscogram.db import db
from iscogram.models.comment_model import Comment
from iscogram.models.user_model import User


LATEST_COMMENTS_LIMIT = 3


def count_by_post(post_id: int) -> int:
    return (
        db.session.query(func.count(Comment.id))
        .filter(Comment.post_id == post_id)
        .scalar()
    )


def list_by_post(post_id: int, all_comments: bool):
    """Comments joined with their authors, newest first."""
    query = (
        db.session.query(Comment, User)
        .join(User, Comment.user_id == User.id)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    if not all_comments:
        query = query.limit(LATEST_COMMENTS_LIMIT)

    return [comment.to_dict(user) for comment, user in query.all()]


def count_by_user(user_id: int) -> int:
    return (
        db.session.query(func.count(Comment.id))
        .filter(Comment.user_id == user_id)
        .scalar()
    )


def count_on_posts(post_ids) -> int:
    post_ids = list(post_ids)
    if not post_ids:
        return 0
    return (
        db.session.query(func.count(Comment.id))
        .filter(Comment.post_id.in_(post_ids))
        .scalar()
    )


def create_comment(post_id, user_id, text):
    comment = Comment(
        post_id=post_id,
        user_id=user_id,
        comment=text,
    )
    db.session.add(comment)
    db.session.commit()
    return comment
