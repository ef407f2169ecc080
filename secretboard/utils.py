from werkzeug.security import generate_password_hash, check_password_hash

# Compared against when no stored hash exists, so lookups for unknown
# usernames take as long as real password checks.
_DUMMY_HASH = generate_password_hash('secretboard-dummy-password')


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password_hash, password):
    if not password_hash:
        check_password_hash(_DUMMY_HASH, password)
        return False
    return check_password_hash(password_hash, password)
