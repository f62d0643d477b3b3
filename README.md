# galoiscrypt

AES-GCM authenticated encryption with associated data (AEAD). The AES block
cipher comes from `cryptography`. The counter mode, the GHASH universal hash and
the tag handling are written in Python in this package.

Everything lives in the module `galoiscrypt.gcm`.

## Installation

```
pip install galoiscrypt
```

## Usage

```python
from galoiscrypt.gcm import Aes256Gcm, AeadError

key = bytes(32)                # placeholder; use a random 32-byte key
cipher = Aes256Gcm(key)
nonce = b"unique nonce"        # 12 bytes; never reuse with the same key

sealed = cipher.encrypt(nonce, b"plaintext message", b"header")
assert cipher.decrypt(nonce, sealed, b"header") == b"plaintext message"

try:
    cipher.decrypt(nonce, sealed, b"other header")
except AeadError:
    print("authentication failed")
```

`encrypt(nonce, plaintext, associated_data=b"")` returns the ciphertext with
the 16-byte tag appended, and `decrypt(nonce, ciphertext, associated_data=b"")`
expects the same layout. To keep the tag separate, use the detached methods,
which take the associated data before the message:

```python
ciphertext, tag = cipher.encrypt_detached(nonce, b"header", b"plaintext message")
plaintext = cipher.decrypt_detached(nonce, b"header", ciphertext, tag)
```

### Keys and nonce sizes

- `Aes128Gcm(key)` takes a 16-byte key and uses 12-byte nonces.
- `Aes256Gcm(key)` takes a 32-byte key and uses 12-byte nonces.
- `AesGcm(key, nonce_size=12)` takes a 16, 24 or 32-byte key and a nonce size
  of at least one byte. A 12-byte nonce becomes the initial counter block
  directly; any other size is turned into it through GHASH, as NIST SP 800-38D
  specifies.

A key or nonce of the wrong length raises `ValueError`.

### Limits and errors

The module defines `A_MAX` and `P_MAX` (2**36 bytes each) for the associated
data and the plaintext, and `C_MAX` (2**36 + 16 bytes) for the ciphertext.
Going over a limit raises `AeadError`. So does a tag that is not 16 bytes long,
a sealed message shorter than the tag, or a tag that does not match during
decryption; in that case no plaintext is returned. Tags are compared in
constant time.

### GHASH

`GHash(key)` is available on its own with a 16-byte key:

- `update(data)` absorbs whole 16-byte blocks and raises `ValueError` otherwise;
- `update_padded(data)` pads the last block with zeros;
- `finalize()` returns the 16-byte hash of what has been absorbed;
- `copy()` returns an independent hasher with the same key and state.

## What this package does not do

It offers no command-line tool, no streaming interface and no key or nonce
generation; the caller supplies keys and unique nonces. Tags are always
16 bytes.

## Running the tests

```
pip install -e ".[test]"
pytest
```