from iscogram.repositories import comment_repository, post_repository


class CommentRejected(ValueError):
    pass


class PostNotFound(LookupError):
    pass


def parse_post_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CommentRejected("post_id must be an integer")


def add_comment(user_id: int, post_id: int, text):
    if not post_repository.exists(post_id):
        raise PostNotFound(post_id)

    return comment_repository.create_comment(
        post_id=post_id,
        user_id=user_id,
        text=text or "",
    )
