from flask import Blueprint, render_template, request

from iscogram.routes.helpers import (
    admin_required,
    csrf_protected,
    get_csrf_token,
    get_session_user,
    login_required,
    redirect_to,
)
from iscogram.services import admin_service


admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/banned", methods=["GET"])
@login_required(redirect_location="/")
@admin_required
def banned_form():
    return render_template(
        "banned.html",
        users=admin_service.list_bannable_users(),
        me=get_session_user(),
        csrf_token=get_csrf_token(),
    )


@admin_bp.route("/banned", methods=["POST"])
@login_required(redirect_location="/")
@admin_required
@csrf_protected
def ban():
    admin_service.ban_users(request.form.getlist("uid[]"))
    return redirect_to("/admin/banned")
