"""AES-GCM authenticated encryption with a pure-Python GHASH, in galoiscrypt.gcm."""

__version__ = "0.1.0"