from datetime import datetime, timezone

from flask import current_app

from iscogram.extensions.cache import get_cache
from iscogram.repositories import post_repository
from iscogram.services import image_store
from iscogram.services.post_hydrator import PostHydrator


ALLOWED_IMAGE_MIME_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
}

ISO8601_FORMAT = "%Y-%m-%dT%H:%M:%S+00:00"


class UploadRejected(ValueError):
    pass


def _page_size() -> int:
    return current_app.config.get("POSTS_PER_PAGE", 20)


def get_hydrator() -> PostHydrator:
    return PostHydrator(get_cache(), page_size=_page_size())


def image_url(post) -> str:
    ext = image_store.extension_for_mime(post["mime"])
    suffix = f".{ext}" if ext else ""
    return f"/image/{post['id']}{suffix}"


def format_created_at(value) -> str:
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(ISO8601_FORMAT)


def parse_max_created_at(value: str):
    """Parse an ISO 8601 timestamp into the naive UTC form stored in the db."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def mime_for_content_type(content_type) -> str | None:
    content_type = (content_type or "").lower()
    for marker, mime in ALLOWED_IMAGE_MIME_TYPES.items():
        if marker in content_type:
            return mime
    return None


def create_post(user_id: int, file_storage, body) -> int:
    if file_storage is None or not getattr(file_storage, "filename", ""):
        raise UploadRejected("An image is required")

    mime = mime_for_content_type(file_storage.mimetype)
    if mime is None:
        raise UploadRejected("Only jpg, png and gif images can be posted")

    data = file_storage.read()
    if len(data) > current_app.config["UPLOAD_LIMIT_BYTES"]:
        raise UploadRejected("The file is too large")

    post = post_repository.create_post(
        user_id=user_id,
        mime=mime,
        imgdata=data,
        body=body or "",
    )
    image_store.mirror_image(post.id, mime, data)
    return post.id


def get_image(post_id: int, ext: str):
    """Return ``(mime, bytes)`` when ``ext`` matches the stored MIME type."""
    post = post_repository.get_by_id(post_id)
    if post is None:
        return None

    if image_store.extension_for_mime(post.mime) != ext:
        return None

    image_store.ensure_mirrored(post.id, post.mime, post.imgdata)
    return post.mime, post.imgdata


def get_index_posts(csrf_token: str):
    rows = post_repository.list_recent_rows(_page_size())
    return get_hydrator().hydrate(rows, csrf_token, all_comments=False)


def get_posts_before(max_created_at, csrf_token: str):
    rows = post_repository.list_rows_before(max_created_at, _page_size())
    return get_hydrator().hydrate(rows, csrf_token, all_comments=False)


def get_post(post_id: int, csrf_token: str):
    row = post_repository.get_row(post_id)
    if row is None:
        return None
    posts = get_hydrator().hydrate([row], csrf_token, all_comments=True)
    return posts[0] if posts else None
