"""Mirror of post images outside the database.

The ``posts.imgdata`` column is the source of truth. The mirror is a cache
for the static file server: it is written on upload, refilled when the image
route serves a post, and pruned by ``/initialize``. Mirror failures are
logged and never fail the request.
"""
import io
import os

from flask import current_app

from iscogram.extensions.minio_client import get_minio_client


MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}


def extension_for_mime(mime: str) -> str:
    return MIME_EXTENSIONS.get(mime, "")


def image_filename(post_id: int, ext: str) -> str:
    return f"{post_id}.{ext}"


def _local_image_dir() -> str:
    return os.path.join(current_app.config["PUBLIC_DIR"], "image")


def _write_local(post_id: int, ext: str, data: bytes) -> str:
    directory = _local_image_dir()
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, image_filename(post_id, ext))
    with open(path, "wb") as f:
        f.write(data)
    return path


def _write_minio(post_id: int, ext: str, data: bytes, mime: str):
    minio = get_minio_client()
    bucket = current_app.config["MINIO_BUCKET"]
    if not minio.bucket_exists(bucket):
        minio.make_bucket(bucket)
    minio.put_object(
        bucket_name=bucket,
        object_name=image_filename(post_id, ext),
        data=io.BytesIO(data),
        length=len(data),
        content_type=mime,
    )


def mirror_image(post_id: int, mime: str, data: bytes) -> bool:
    ext = extension_for_mime(mime)
    if not ext:
        return False

    backend = current_app.config.get("IMAGE_MIRROR_BACKEND", "local")
    if backend == "minio":
        try:
            _write_minio(post_id, ext, data, mime)
            return True
        except Exception:
            current_app.logger.warning(
                "MinIO mirror of post %s failed", post_id, exc_info=True
            )
            if not current_app.config.get("IMAGE_MIRROR_LOCAL_FALLBACK", True):
                return False

    try:
        _write_local(post_id, ext, data)
    except OSError:
        current_app.logger.warning(
            "Local mirror of post %s failed", post_id, exc_info=True
        )
        return False
    return True


def is_mirrored_locally(post_id: int, mime: str) -> bool:
    ext = extension_for_mime(mime)
    if not ext:
        return False
    return os.path.exists(os.path.join(_local_image_dir(), image_filename(post_id, ext)))


def ensure_mirrored(post_id: int, mime: str, data: bytes) -> bool:
    # only the local mirror can be checked without a round trip
    if current_app.config.get("IMAGE_MIRROR_BACKEND", "local") != "local":
        return False
    if is_mirrored_locally(post_id, mime):
        return False
    return mirror_image(post_id, mime, data)


def prune_local_mirror(max_post_id: int) -> int:
    """Delete mirrored files of posts with an id above ``max_post_id``."""
    directory = _local_image_dir()
    if not os.path.isdir(directory):
        return 0

    removed = 0
    for name in os.listdir(directory):
        stem, _, ext = name.partition(".")
        if not stem.isdigit() or ext not in MIME_EXTENSIONS.values():
            continue
        if int(stem) <= max_post_id:
            continue
        try:
            os.remove(os.path.join(directory, name))
            removed += 1
        except OSError:
            current_app.logger.warning("Could not prune %s", name, exc_info=True)
    return removed


def _prune_minio(max_post_id: int) -> int:
    minio = get_minio_client()
    bucket = current_app.config["MINIO_BUCKET"]
    removed = 0
    for obj in minio.list_objects(bucket):
        stem, _, _ = obj.object_name.partition(".")
        if stem.isdigit() and int(stem) > max_post_id:
            minio.remove_object(bucket, obj.object_name)
            removed += 1
    return removed


def prune_mirror(max_post_id: int) -> int:
    removed = prune_local_mirror(max_post_id)
    if current_app.config.get("IMAGE_MIRROR_BACKEND", "local") == "minio":
        try:
            removed += _prune_minio(max_post_id)
        except Exception:
            current_app.logger.warning("MinIO mirror prune failed", exc_info=True)
    return removed
