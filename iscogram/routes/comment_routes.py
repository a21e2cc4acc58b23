from flask import Blueprint, abort, request

from iscogram.routes.helpers import (
    csrf_protected,
    get_session_user,
    login_required,
    redirect_to,
    set_flash,
)
from iscogram.services import comment_service


comment_bp = Blueprint("comments", __name__)


@comment_bp.route("/comment", methods=["POST"])
@login_required()
@csrf_protected
def create_comment():
    me = get_session_user()

    try:
        post_id = comment_service.parse_post_id(request.form.get("post_id"))
    except comment_service.CommentRejected as e:
        set_flash(str(e))
        return redirect_to("/")

    try:
        comment_service.add_comment(me["id"], post_id, request.form.get("comment", ""))
    except comment_service.PostNotFound:
        abort(404)

    return redirect_to(f"/posts/{post_id}")
