import os

from flask import Blueprint, Response, abort, current_app, send_from_directory

from iscogram.services import initialize_service


main_bp = Blueprint("main", __name__)


@main_bp.route("/initialize", methods=["GET"])
def initialize():
    initialize_service.initialize()
    current_app.logger.info("Store reset to seed state")
    return Response(status=200)


@main_bp.route("/<path:filename>", methods=["GET", "HEAD"])
def public_file(filename):
    public_dir = current_app.config["PUBLIC_DIR"]
    if not os.path.isdir(public_dir):
        abort(404)
    return send_from_directory(public_dir, filename)
