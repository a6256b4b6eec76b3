"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting, so hashing the same password twice gives two different
strings, and checkpw compares in constant time.

The work factor is configurable (TASKFLOW_BCRYPT_ROUNDS, default 12).
Hashes created with a lower factor are auto-upgraded on successful login.

Every failure mode of verify_password (wrong type, malformed hash,
truncated hash) returns False. Nothing here raises on bad stored data.
"""

import bcrypt

DEFAULT_ROUNDS = 12

# Throwaway hashes for the "unknown email" login branch, one per cost
_DUMMY_HASHES: dict[int, bytes] = {}


class PasswordError(ValueError):
    """Raised when a value can't be hashed as a password."""


def _to_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes (newer releases refuse longer input)
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". The cost factor is embedded in the
    hash, so verification never needs to know it.
    """
    if not isinstance(password, str):
        raise PasswordError("password must be a string")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_to_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash. Fails closed."""
    if not isinstance(password, str) or not isinstance(password_hash, str):
        return False
    if not password_hash.startswith("$2"):
        return False
    try:
        return bcrypt.checkpw(_to_bytes(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def needs_upgrade(password_hash: str, rounds: int = DEFAULT_ROUNDS) -> bool:
    """Check if a stored hash was made with a weaker cost than configured."""
    try:
        # "$2b$12$<salt+hash>"
        cost = int(password_hash.split("$")[2])
    except (AttributeError, IndexError, ValueError):
        return False
    return cost < rounds


def dummy_verify(password: str, rounds: int = DEFAULT_ROUNDS) -> bool:
    """Burn the same time as a real verification and return False.

    Learn: Without this, "unknown email" answers in microseconds while
    "wrong password" takes a full bcrypt round, which leaks which emails
    are registered through timing alone.
    """
    dummy_hash = _DUMMY_HASHES.get(rounds)
    if dummy_hash is None:
        dummy_hash = bcrypt.hashpw(b"taskflow-dummy", bcrypt.gensalt(rounds=rounds))
        _DUMMY_HASHES[rounds] = dummy_hash
    if isinstance(password, str):
        bcrypt.checkpw(_to_bytes(password), dummy_hash)
    return False
