from flask import Blueprint, abort, render_template

from iscogram.routes.helpers import get_csrf_token, get_session_user
from iscogram.services import profile_service


profile_bp = Blueprint("profiles", __name__)


@profile_bp.route("/@<account_name>", methods=["GET"])
def get_profile(account_name):
    profile = profile_service.get_profile(account_name, get_csrf_token())
    if profile is None:
        abort(404)

    return render_template("user.html", me=get_session_user(), **profile)
