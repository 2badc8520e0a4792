import hashlib
import os
import time
from pathlib import Path
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from tqdm import tqdm

from .errors import AuthenticationFailed, InvalidKeyLength
from .keys import KEY_SIZE
from .utils import resource_stats

# --- Constants ---
NONCE_SIZE = 12
TAG_SIZE = 16
CHUNK_SIZE_KB_DEFAULT = 4096


def _cipher(key: bytes) -> AESGCM:
    if len(key) != KEY_SIZE:
        raise InvalidKeyLength(len(key), KEY_SIZE)
    return AESGCM(key)


# --- AES-256-GCM ---
def seal(plaintext: bytes, key: bytes) -> bytes:
    """Encrypts one buffer into ``nonce || ciphertext || tag``.

    A fresh random nonce is drawn for every call, so encrypting many files
    under the same key never repeats a nonce.
    """
    aesgcm = _cipher(key)
    nonce = os.urandom(NONCE_SIZE)
    return nonce + aesgcm.encrypt(nonce, plaintext, None)


def open_sealed(ciphertext: bytes, key: bytes) -> bytes:
    """Verifies and decrypts a buffer produced by :func:`seal`."""
    aesgcm = _cipher(key)
    if len(ciphertext) < NONCE_SIZE:
        raise AuthenticationFailed(reason="Input is shorter than the nonce; not an fcrypt ciphertext.")
    nonce, sealed = ciphertext[:NONCE_SIZE], ciphertext[NONCE_SIZE:]
    try:
        return aesgcm.decrypt(nonce, sealed, None)
    except InvalidTag:
        raise AuthenticationFailed() from None


# --- Checksums ---
def calculate_hash(file_path: Path, algorithm: str = 'sha256', show_progress: bool = False,
                   use_ascii: bool = False, is_debug: bool = False) -> Optional[str]:
    """Calculates the hash of a file in chunks, with an optional progress bar and debug stats."""
    chunk_size = CHUNK_SIZE_KB_DEFAULT * 1024
    hasher = hashlib.new(algorithm)
    last_update_time = 0.0
    try:
        file_size = file_path.stat().st_size
        with file_path.open('rb') as f:
            iterable = iter(lambda: f.read(chunk_size), b'')
            if show_progress:
                with tqdm(total=file_size, unit='B', unit_scale=True, desc=f"Hashing {file_path.name}",
                          leave=False, ascii=use_ascii) as pbar:
                    for chunk in iterable:
                        hasher.update(chunk)
                        pbar.update(len(chunk))
                        if is_debug and (time.time() - last_update_time > 0.5):
                            pbar.set_postfix_str(resource_stats())
                            last_update_time = time.time()
            else:
                for chunk in iterable:
                    hasher.update(chunk)
        return hasher.hexdigest()
    except (FileNotFoundError, PermissionError) as e:
        print(f"Error calculating hash: {e}")
        return None
