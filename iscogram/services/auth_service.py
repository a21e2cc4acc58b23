import hashlib
import re
import secrets

from iscogram.repositories import user_repository


ACCOUNT_NAME_PATTERN = re.compile(r"[0-9a-zA-Z_]{3,}")
PASSWORD_PATTERN = re.compile(r"[0-9a-zA-Z_]{6,}")

CSRF_TOKEN_BYTES = 16


class RegistrationError(ValueError):
    pass


def digest(src: str) -> str:
    return hashlib.sha512(src.encode("utf-8")).hexdigest()


def calculate_salt(account_name: str) -> str:
    return digest(account_name)


def calculate_passhash(account_name: str, password: str) -> str:
    # The account name doubles as the salt so existing stored hashes stay
    # valid; a per-user random salt would be stronger.
    return digest(password + ":" + calculate_salt(account_name))


def validate_user(account_name, password) -> bool:
    if not isinstance(account_name, str) or not isinstance(password, str):
        return False
    return bool(
        ACCOUNT_NAME_PATTERN.fullmatch(account_name)
        and PASSWORD_PATTERN.fullmatch(password)
    )


def secure_random_str(num_bytes: int = CSRF_TOKEN_BYTES) -> str:
    return secrets.token_hex(num_bytes)


def try_login(account_name, password):
    if not account_name or password is None:
        return None

    user = user_repository.get_active_by_account_name(account_name)
    if user is None:
        return None

    if calculate_passhash(user.account_name, password) != user.passhash:
        return None
    return user


def register(account_name, password) -> int:
    if not validate_user(account_name, password):
        raise RegistrationError(
            "Account names need at least 3 characters and passwords at least 6"
        )

    if user_repository.account_name_exists(account_name):
        raise RegistrationError("That account name is already taken")

    user = user_repository.create_user(
        account_name=account_name,
        passhash=calculate_passhash(account_name, password),
    )
    return user.id
