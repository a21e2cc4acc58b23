from sqlalchemy.orm import defer

from iscogram.db import db
from iscogram.models.post_model import Post
from iscogram.models.user_model import User


def _rows_query():
    return (
        db.session.query(Post, User)
        .join(User, Post.user_id == User.id)
        .options(defer(Post.imgdata))
    )


def _to_rows(results):
    return [post.to_dict(user) for post, user in results]


def list_recent_rows(limit: int):
    results = (
        _rows_query()
        .filter(User.del_flg == 0)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
        .all()
    )
    return _to_rows(results)


def list_rows_before(max_created_at, limit: int):
    results = (
        _rows_query()
        .filter(User.del_flg == 0, Post.created_at <= max_created_at)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
        .all()
    )
    return _to_rows(results)


def list_rows_by_user(user_id: int):
    results = (
        _rows_query()
        .filter(Post.user_id == user_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return _to_rows(results)


def get_row(post_id: int):
    result = _rows_query().filter(Post.id == post_id).first()
    if result is None:
        return None
    post, user = result
    return post.to_dict(user)


def get_by_id(post_id: int):
    return db.session.get(Post, post_id)


def exists(post_id: int) -> bool:
    return db.session.query(Post.id).filter(Post.id == post_id).first() is not None


def list_ids_by_user(user_id: int):
    rows = db.session.query(Post.id).filter(Post.user_id == user_id).all()
    return [row[0] for row in rows]


def create_post(user_id, mime, imgdata, body):
    post = Post(
        user_id=user_id,
        mime=mime,
        imgdata=imgdata,
        body=body,
    )
    db.session.add(post)
    db.session.commit()
    return post
