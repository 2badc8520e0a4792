import secrets
import string
from typing import Optional, Tuple, Union

from .errors import ConflictingKeyOptions, InvalidKeyLength, MissingKeyOption

# --- Constants ---
KEY_SIZE = 32
KEY_POOL = string.ascii_lowercase + string.ascii_uppercase + string.digits


def validate_key(key: Union[str, bytes]) -> bytes:
    """Returns the raw key bytes, rejecting anything that is not exactly KEY_SIZE bytes."""
    raw = key.encode('utf-8') if isinstance(key, str) else bytes(key)
    if len(raw) != KEY_SIZE:
        raise InvalidKeyLength(len(raw), KEY_SIZE)
    return raw


def generate_key() -> str:
    """Generates a random alphanumeric key of KEY_SIZE characters."""
    return ''.join(secrets.choice(KEY_POOL) for _ in range(KEY_SIZE))


def validate_or_generate(key_opt: Optional[str], random_requested: bool) -> Tuple[bytes, bool]:
    """Resolves the key for one invocation.

    Exactly one of an explicit key or random generation must be selected.
    Returns the key bytes and whether the key was freshly generated, in which
    case the caller must show it to the operator: it is stored nowhere else.
    """
    if key_opt and random_requested:
        raise ConflictingKeyOptions()
    if not key_opt and not random_requested:
        raise MissingKeyOption()
    if random_requested:
        return validate_key(generate_key()), True
    return validate_key(key_opt), False
