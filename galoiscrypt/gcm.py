"""AES in Galois/Counter Mode: authenticated encryption with associated data."""

from __future__ import annotations

import hmac

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

BLOCK_SIZE = 16
TAG_SIZE = 16

A_MAX = 1 << 36
"""Maximum length of associated data, in bytes."""

P_MAX = 1 << 36
"""Maximum length of plaintext, in bytes."""

C_MAX = (1 << 36) + 16
"""Maximum length of ciphertext, in bytes."""

_R = 0xE1 << 120
_MASK32 = 0xFFFFFFFF


class AeadError(Exception):
    """Raised when encryption or decryption cannot be carried out or verified."""


def _xor(a: bytes, b: bytes) -> bytes:
    n = len(a)
    return (int.from_bytes(a, "big") ^ int.from_bytes(b[:n], "big")).to_bytes(n, "big")


def _build_tables(h: int) -> tuple[tuple[int, ...], ...]:
    # powers[i] is H multiplied by x^i in the field's reflected bit order.
    powers = []
    v = h
    for _ in range(128):
        powers.append(v)
        v = (v >> 1) ^ _R if v & 1 else v >> 1
    tables = []
    for p in range(16):
        table = [0] * 256
        for b in range(1, 256):
            low = b & -b
            k = 8 - low.bit_length()
            table[b] = table[b ^ low] ^ powers[8 * p + k]
        tables.append(tuple(table))
    return tuple(tables)


class GHash:
    """The GHASH universal hash over GF(2^128) keyed with a 16-byte key."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != BLOCK_SIZE:
            raise ValueError(f"GHASH key must be {BLOCK_SIZE} bytes, got {len(key)}")
        self._tables = _build_tables(int.from_bytes(key, "big"))
        self._state = 0

    def _multiply(self, x: int) -> int:
        z = 0
        for p, byte in enumerate(x.to_bytes(BLOCK_SIZE, "big")):
            z ^= self._tables[p][byte]
        return z

    def update(self, data: bytes) -> None:
        """Absorb whole 16-byte blocks."""
        data = bytes(data)
        if len(data) % BLOCK_SIZE:
            raise ValueError("GHASH input must be a multiple of 16 bytes")
        state = self._state
        for start in range(0, len(data), BLOCK_SIZE):
            block = int.from_bytes(data[start:start + BLOCK_SIZE], "big")
            state = self._multiply(state ^ block)
        self._state = state

    def update_padded(self, data: bytes) -> None:
        """Absorb data, zero-padding the final block to 16 bytes."""
        data = bytes(data)
        remainder = len(data) % BLOCK_SIZE
        if remainder:
            data += bytes(BLOCK_SIZE - remainder)
        self.update(data)

    def finalize(self) -> bytes:
        """Return the 16-byte hash of everything absorbed so far."""
        return self._state.to_bytes(BLOCK_SIZE, "big")

    def copy(self) -> "GHash":
        """Return an independent hasher with the same key and state."""
        clone = GHash.__new__(GHash)
        clone._tables = self._tables
        clone._state = self._state
        return clone


class AesGcm:
    """AES-GCM over an AES key of 16, 24 or 32 bytes and a fixed nonce size."""

    def __init__(self, key: bytes, nonce_size: int = 12) -> None:
        key = bytes(key)
        if len(key) not in (16, 24, 32):
            raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        if nonce_size < 1:
            raise ValueError("nonce size must be at least one byte")
        self.nonce_size = nonce_size
        self._ecb = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
        self._ghash = GHash(self._ecb.update(bytes(BLOCK_SIZE)))

    def _check_nonce(self, nonce: bytes) -> bytes:
        nonce = bytes(nonce)
        if len(nonce) != self.nonce_size:
            raise ValueError(f"nonce must be {self.nonce_size} bytes, got {len(nonce)}")
        return nonce

    def _initial_counter(self, nonce: bytes) -> bytes:
        if self.nonce_size == 12:
            return nonce + b"\x00\x00\x00\x01"
        ghash = self._ghash.copy()
        ghash.update_padded(nonce)
        ghash.update(bytes(8) + (self.nonce_size * 8).to_bytes(8, "big"))
        return ghash.finalize()

    def _keystream(self, j0: bytes, start: int, length: int) -> bytes:
        if length == 0:
            return b""
        prefix = j0[:12]
        counter = int.from_bytes(j0[12:], "big")
        blocks = -(-length // BLOCK_SIZE)
        counters = b"".join(
            prefix + ((counter + start + i) & _MASK32).to_bytes(4, "big")
            for i in range(blocks)
        )
        return self._ecb.update(counters)[:length]

    def _compute_tag(self, associated_data: bytes, data: bytes) -> bytes:
        ghash = self._ghash.copy()
        ghash.update_padded(associated_data)
        ghash.update_padded(data)
        ghash.update(
            (len(associated_data) * 8).to_bytes(8, "big") + (len(data) * 8).to_bytes(8, "big")
        )
        return ghash.finalize()

    def encrypt_detached(self, nonce: bytes, associated_data: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
        """Encrypt plaintext, returning the ciphertext and the 16-byte tag."""
        nonce = self._check_nonce(nonce)
        associated_data = bytes(associated_data)
        plaintext = bytes(plaintext)
        if len(plaintext) > P_MAX or len(associated_data) > A_MAX:
            raise AeadError("input too long")
        j0 = self._initial_counter(nonce)
        ciphertext = _xor(plaintext, self._keystream(j0, 1, len(plaintext)))
        tag = _xor(self._compute_tag(associated_data, ciphertext), self._keystream(j0, 0, TAG_SIZE))
        return ciphertext, tag

    def decrypt_detached(self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes) -> bytes:
        """Verify the tag and decrypt; raise AeadError if verification fails."""
        nonce = self._check_nonce(nonce)
        associated_data = bytes(associated_data)
        ciphertext = bytes(ciphertext)
        tag = bytes(tag)
        if len(ciphertext) > C_MAX or len(associated_data) > A_MAX:
            raise AeadError("input too long")
        if len(tag) != TAG_SIZE:
            raise AeadError("tag has the wrong length")
        j0 = self._initial_counter(nonce)
        expected = _xor(self._compute_tag(associated_data, ciphertext), self._keystream(j0, 0, TAG_SIZE))
        if not hmac.compare_digest(expected, tag):
            raise AeadError("authentication failed")
        return _xor(ciphertext, self._keystream(j0, 1, len(ciphertext)))

    def encrypt(self, nonce: bytes, plaintext: bytes, associated_data: bytes = b"") -> bytes:
        """Encrypt plaintext, returning the ciphertext with the tag appended."""
        ciphertext, tag = self.encrypt_detached(nonce, associated_data, plaintext)
        return ciphertext + tag

    def decrypt(self, nonce: bytes, ciphertext: bytes, associated_data: bytes = b"") -> bytes:
        """Decrypt ciphertext that carries its tag at the end."""
        ciphertext = bytes(ciphertext)
        if len(ciphertext) < TAG_SIZE:
            raise AeadError("ciphertext shorter than the tag")
        return self.decrypt_detached(
            nonce, associated_data, ciphertext[:-TAG_SIZE], ciphertext[-TAG_SIZE:]
        )


class Aes128Gcm(AesGcm):
    """AES-GCM with a 128-bit key and a 96-bit nonce."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != 16:
            raise ValueError(f"AES-128 key must be 16 bytes, got {len(key)}")
        super().__init__(key, 12)


class Aes256Gcm(AesGcm):
    """AES-GCM with a 256-bit key and a 96-bit nonce."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != 32:
            raise ValueError(f"AES-256 key must be 32 bytes, got {len(key)}")
        super().__init__(key, 12)