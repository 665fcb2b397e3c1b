# Copyright 2020 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Cryptographic building blocks used by GLOME.

X25519 is delegated to `cryptography`, HMAC-SHA-256 to the standard library.
All functions work on raw byte strings.
"""

import hashlib
import hmac

from cryptography.hazmat.primitives.asymmetric import x25519 as _x25519
from cryptography.hazmat.primitives import serialization


def _public_key_encode(public_key: _x25519.X25519PublicKey) -> bytes:
    return public_key.public_bytes(serialization.Encoding.Raw,
                                   serialization.PublicFormat.Raw)


def x25519_base(scalar: bytes) -> bytes:
    """Multiplies the Curve25519 base point by `scalar`.

    Args:
        scalar: 32 byte private key.
    Returns:
        The 32 byte public key matching `scalar`.
    """
    private_key = _x25519.X25519PrivateKey.from_private_bytes(bytes(scalar))
    return _public_key_encode(private_key.public_key())


def x25519(scalar: bytes, point: bytes) -> bytes:
    """Computes the X25519 function of `scalar` and `point`.

    Args:
        scalar: 32 byte private key.
        point: 32 byte public key (u-coordinate).
    Returns:
        The 32 byte shared secret.
    Raises:
        ValueError: Raised by `cryptography` when the point has low order
          and the result would be all zeros.
    """
    private_key = _x25519.X25519PrivateKey.from_private_bytes(bytes(scalar))
    public_key = _x25519.X25519PublicKey.from_public_bytes(bytes(point))
    return private_key.exchange(public_key)


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """Returns the 32 byte HMAC-SHA-256 of `data` under `key`."""
    digester = hmac.new(key=key, msg=data, digestmod=hashlib.sha256)
    return digester.digest()


def constant_time_equal(first: bytes, second: bytes) -> bool:
    """Compares two byte strings of equal length in constant time.

    Every byte pair is visited; the only branch is on the accumulated result.

    Raises:
        ValueError: Raised when lengths differ. Lengths are not secret and
          callers are expected to have checked them.
    """
    if len(first) != len(second):
        raise ValueError('Cannot compare {} bytes with {} bytes'.format(
            len(first), len(second)))

    result = 0
    for x, y in zip(first, second):
        result |= x ^ y
    return result == 0
