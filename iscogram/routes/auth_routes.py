from flask import Blueprint, render_template, request, session

from iscogram.routes.helpers import (
    get_flash,
    get_session_user,
    login_session,
    redirect_to,
    set_flash,
)
from iscogram.services import auth_service
from iscogram.services.session_service import anonymous_user, is_login


auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/login", methods=["GET"])
def login_form():
    me = get_session_user()
    if is_login(me):
        return redirect_to("/")

    return render_template("login.html", me=me, flash=get_flash())


@auth_bp.route("/login", methods=["POST"])
def login():
    if is_login(get_session_user()):
        return redirect_to("/")

    user = auth_service.try_login(
        request.form.get("account_name", ""),
        request.form.get("password", ""),
    )
    if user is None:
        set_flash("Wrong account name or password")
        return redirect_to("/login")

    login_session(user.id, auth_service.secure_random_str())
    return redirect_to("/")


@auth_bp.route("/register", methods=["GET"])
def register_form():
    if is_login(get_session_user()):
        return redirect_to("/")

    return render_template("register.html", me=anonymous_user(), flash=get_flash())


@auth_bp.route("/register", methods=["POST"])
def register():
    if is_login(get_session_user()):
        return redirect_to("/")

    try:
        user_id = auth_service.register(
            request.form.get("account_name", ""),
            request.form.get("password", ""),
        )
    except auth_service.RegistrationError as e:
        set_flash(str(e))
        return redirect_to("/register")

    login_session(user_id, auth_service.secure_random_str())
    return redirect_to("/")


@auth_bp.route("/logout", methods=["GET"])
def logout():
    session.clear()
    return redirect_to("/")
