import urllib3
from flask import current_app
from minio import Minio


def build_minio_client(config):
    http_client = urllib3.PoolManager(
        timeout=urllib3.Timeout(
            connect=config["MINIO_CONNECT_TIMEOUT"],
            read=config["MINIO_READ_TIMEOUT"],
        ),
        retries=False,
        maxsize=config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
    )
    return Minio(
        config["MINIO_ENDPOINT"],
        access_key=config["MINIO_ACCESS_KEY"],
        secret_key=config["MINIO_SECRET_KEY"],
        secure=config["MINIO_SECURE"],
        http_client=http_client,
    )


def init_minio(app, client=None):
    """Register an injected MinIO client. Without one, the client is built
    on first use, so apps on the local mirror never construct it."""
    if client is not None:
        app.extensions["minio"] = client
    return client


def get_minio_client():
    client = current_app.extensions.get("minio")
    if client is None:
        client = build_minio_client(current_app.config)
        current_app.extensions["minio"] = client
    return client
