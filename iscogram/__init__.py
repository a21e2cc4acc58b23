import json
import logging

from flask import Flask, Response
from marshmallow import ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from iscogram.config import Config
from iscogram.db import db
from iscogram.extensions.extensions import ma, sess
from iscogram.extensions.minio_client import init_minio
from iscogram.extensions.redis_client import init_redis


def _configure_logging(app):
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=app.config["LOG_LEVEL"],
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
    app.logger.setLevel(app.config["LOG_LEVEL"])


def _register_error_handlers(app):
    def data_access_failure(error):
        app.logger.exception("Data access failure: %s", error)
        db.session.rollback()
        return Response("Internal Server Error", status=500, mimetype="text/plain")

    app.register_error_handler(SQLAlchemyError, data_access_failure)
    app.register_error_handler(RedisError, data_access_failure)
    app.register_error_handler(ValidationError, data_access_failure)
    # undecodable cache entries
    app.register_error_handler(json.JSONDecodeError, data_access_failure)


def _register_template_helpers(app):
    from iscogram.services.post_service import format_created_at, image_url

    app.jinja_env.globals["image_url"] = image_url
    app.jinja_env.filters["iso8601"] = format_created_at


def create_app(config_object=Config, redis_client=None, minio_client=None):
    app = Flask(__name__, static_folder=None)
    app.config.from_object(config_object)

    _configure_logging(app)

    db.init_app(app)
    ma.init_app(app)
    app.config["SESSION_REDIS"] = init_redis(app, redis_client)
    sess.init_app(app)
    init_minio(app, minio_client)

    from iscogram.routes.admin_routes import admin_bp
    from iscogram.routes.auth_routes import auth_bp
    from iscogram.routes.comment_routes import comment_bp
    from iscogram.routes.main_routes import main_bp
    from iscogram.routes.post_routes import post_bp
    from iscogram.routes.profile_routes import profile_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(post_bp)
    app.register_blueprint(comment_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(profile_bp)
    app.register_blueprint(main_bp)

    _register_template_helpers(app)
    _register_error_handlers(app)

    with app.app_context():
        db.create_all()

    app.logger.debug("Application created and configured")
    return app
