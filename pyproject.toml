[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "galoiscrypt"
version = "0.1.0"
description = "AES in Galois/Counter Mode (AES-GCM) authenticated encryption with a pure-Python GHASH"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["aes", "gcm", "aead", "ghash", "authenticated-encryption", "cryptography"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["galoiscrypt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
