import bcrypt

BCRYPT_ROUNDS = 12
MIN_ADMIN_PASSWORD_LENGTH = 10

def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    if not isinstance(plain_password, str) or len(plain_password) < MIN_ADMIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_ADMIN_PASSWORD_LENGTH} characters")

    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")

def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
