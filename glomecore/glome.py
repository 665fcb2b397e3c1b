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
"""Python GLOME library.

This module contains the Glome session class, the GlomeBuilder and the
errors they raise.

Example use: Sender

>>> import glomecore
>>> tag_manager = (glomecore.GlomeBuilder(peer_key, min_peer_tag_len=8)
...                .set_private_key(my_private_key)
...                .build())
>>> first_tag = tag_manager.tag(first_msg, 0) # 0 as it is the first msg
>>> second_tag = tag_manager.tag(second_msg, 1)

Example use: Receiver

>>> import glomecore
>>> tag_manager = glomecore.Glome(peer_key, my_private_key, 8)
>>> ## Need to have a private key (paired to the public key
>>> ## that the sender use)
>>> try:
...     tag_manager.check(tag, msg, counter=0)
... except glomecore.WrongTagError as wte:
...     ## Handle the exception
>>> ## do what you have to do
"""

import logging
from typing import Union

from cryptography.hazmat.primitives.asymmetric import x25519 as _x25519
from cryptography.hazmat.primitives import serialization

from glomecore import primitives

_LOGGER = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
MIN_TAG_LENGTH = 1
MAX_TAG_LENGTH = 32
MIN_CNT_VALUE = 0
MAX_CNT_VALUE = 255

PublicKey = Union[bytes, bytearray, memoryview, _x25519.X25519PublicKey]
PrivateKey = Union[bytes, bytearray, memoryview, _x25519.X25519PrivateKey]


class Error(Exception):
    """Error super-class for any error that is thrown in glomecore."""


class InvalidKeySizeError(Error, ValueError):
    """Raised whenever a key is not exactly 32 bytes long."""


class MinPeerTagLengthOutOfBoundsError(Error, ValueError):
    """Raised whenever min_peer_tag_len is not in range 1-32."""


class CounterOutOfBoundsError(Error, ValueError):
    """Raised whenever a counter is not in range 0-255."""


class ExchangeError(Error):
    """Raised whenever the key exchange with the peer's key fails."""


class SessionClosedError(Error):
    """Raised when a closed Glome session is used."""


class WrongTagError(Error):
    """Raised whenever a received tag is not accepted."""


class TagLengthError(WrongTagError):
    """Raised whenever a received tag is too short or too long."""


class IncorrectTagError(WrongTagError):
    """Raised whenever the tag provided does not match the message and counter."""


def _key_bytes(name: str, key) -> bytes:
    if isinstance(key, _x25519.X25519PublicKey):
        return key.public_bytes(serialization.Encoding.Raw,
                                serialization.PublicFormat.Raw)
    if isinstance(key, _x25519.X25519PrivateKey):
        return key.private_bytes(serialization.Encoding.Raw,
                                 serialization.PrivateFormat.Raw,
                                 serialization.NoEncryption())
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError('{} must be bytes or an X25519 key, not {}'.format(
            name, type(key).__name__))
    return bytes(key)


def _check_key_size(name: str, key: bytes, expected: int):
    if len(key) != expected:
        raise InvalidKeySizeError(
            '{} has invalid size. Expected {}, got {}.'.format(
                name, expected, len(key)))


def _check_min_peer_tag_len(min_peer_tag_len: int):
    if not MIN_TAG_LENGTH <= min_peer_tag_len <= MAX_TAG_LENGTH:
        raise MinPeerTagLengthOutOfBoundsError(
            'min_peer_tag_len argument should be in [{}..{}] range. '
            'Got {}.'.format(MIN_TAG_LENGTH, MAX_TAG_LENGTH, min_peer_tag_len))


def check_counter(counter: int):
    """Raises CounterOutOfBoundsError unless counter is in range 0-255."""
    if not MIN_CNT_VALUE <= counter <= MAX_CNT_VALUE:
        raise CounterOutOfBoundsError(
            'Counter should be in [{}..{}] range. Got {}.'.format(
                MIN_CNT_VALUE, MAX_CNT_VALUE, counter))


def _tag(msg: bytes, counter: int, key: bytearray) -> bytes:
    check_counter(counter)
    message = bytes([counter]) + msg  # msg: N_x|M_n
    return primitives.hmac_sha256(key, message)


class Glome:
    """Implement tag managing functionalities for GLOME protocol.

    This class is initialized by providing your peer's public key, your
    private key and the minimum tag length you accept from your peer. Keys
    can be raw 32 byte strings or `cryptography` X25519 key objects. The
    key exchange is performed once, on initialization, and the session
    does not change afterwards. Provides methods tag (to generate new tags)
    and check (to check receiving tags).

    The private key is not kept. Secret material is overwritten when the
    session is closed, either explicitly, by leaving a `with` block or on
    garbage collection.
    """

    MAX_TAG_LEN = MAX_TAG_LENGTH
    MIN_TAG_LEN = MIN_TAG_LENGTH

    def __init__(self,
                 peer_key: PublicKey,
                 my_private_key: PrivateKey,
                 min_peer_tag_len: int = MAX_TAG_LEN):
        """Initialize Glome class.

        Performs the handshake and derives the tagging keys.

        Args:
            peer_key: Your peer's public key.
            my_private_key: Your private key.
            min_peer_tag_len: Shortest tag (in bytes) accepted from the peer.
              Must be an integer in range 1-32.
        Raises:
            TypeError: Raised whenever a key is neither bytes nor an X25519 key.
            InvalidKeySizeError: Raised whenever a key is not 32 bytes long.
            MinPeerTagLengthOutOfBoundsError: Raised whenever
              min_peer_tag_len is not in range 1-32.
            ExchangeError: Raised whenever peer_key is a low order point.
        """
        self._closed = True

        peer_key = _key_bytes('peer_key', peer_key)
        _check_key_size('peer_key', peer_key, PUBLIC_KEY_LENGTH)
        _check_min_peer_tag_len(min_peer_tag_len)
        my_private_key = _key_bytes('my_private_key', my_private_key)
        _check_key_size('my_private_key', my_private_key, PRIVATE_KEY_LENGTH)

        my_public_key = primitives.x25519_base(my_private_key)
        try:
            shared_secret = bytearray(
                primitives.x25519(my_private_key, peer_key))
        except ValueError as value_error:
            raise ExchangeError(
                'Key exchange with peer_key failed') from value_error

        self._send_key = shared_secret + peer_key + my_public_key
        self._receive_key = shared_secret + my_public_key + peer_key
        self._shared_secret = shared_secret
        self._peer_key = peer_key
        self._my_public_key = my_public_key
        self._min_peer_tag_len = min_peer_tag_len
        self._closed = False

    @property
    def own_public_key(self) -> bytes:
        """User's public key, derived from the private key."""
        return self._my_public_key

    @property
    def peer_key(self) -> bytes:
        """Peer's public key used in handshake."""
        return self._peer_key

    @property
    def min_peer_tag_len(self) -> int:
        """Shortest tag length accepted by check."""
        return self._min_peer_tag_len

    @property
    def closed(self) -> bool:
        """Whether close() has wiped the session."""
        return self._closed

    def _ensure_open(self):
        if self._closed:
            raise SessionClosedError('Glome session has been closed')

    def tag(self, msg: bytes, counter: int) -> bytes:
        """Generates a tag from a message and a counter.

        Generates a tag matching some provided message and counter.
        This tag is generated following the GLOME protocol
        in the context of a communication from the users to theirs peers.
        The full 32 byte tag is returned, truncating it is up to the caller.

        Args:
           msg: Message to be transmitted.
           counter: Numbers of messages transmitted previously in the
             conversation in this direction (i.e. from the user
             to the peer). Must be an integer in {0,...,255}.
        Returns:
           tag: Tag matching counter and msg.
        Raises:
           CounterOutOfBoundsError: Raised whenever counter is not in
             range 0-255.
           SessionClosedError: Raised whenever the session is closed.
        """
        self._ensure_open()
        return _tag(msg, counter, self._send_key)

    def check(self, tag: bytes, msg: bytes, counter: int):
        """Check whether a tag is correct for some message and counter.

        Checks if a tag matches some provided message and counter.
        The method generates the matching tag following GLOME protocol
        in the context of a communication from the users'
        peers to the users and then compares its prefix with the tag
        provided in constant time.

        Args:
           tag: Received tag, possibly truncated. Its length must be in
             range min_peer_tag_len-32.
           msg: Object containing received message.
           counter: Numbers of messages transmitted previously in the
             conversation in this direction (i.e. from the peer
             to the user).
        Returns:
           None.
        Raises:
           TagLengthError: Raised whenever the tag length is not accepted.
           CounterOutOfBoundsError: Raised whenever counter is not in
             range 0-255.
           IncorrectTagError: Raised whenever the tag is incorrect.
           SessionClosedError: Raised whenever the session is closed.
        """
        self._ensure_open()

        if not self._min_peer_tag_len <= len(tag) <= MAX_TAG_LENGTH:
            raise TagLengthError(
                'The received tag has invalid length. Expected value in '
                'range [{}..{}], got {}.'.format(self._min_peer_tag_len,
                                                 MAX_TAG_LENGTH, len(tag)))

        correct_tag = _tag(msg, counter, self._receive_key)[:len(tag)]

        if not primitives.constant_time_equal(tag, correct_tag):
            raise IncorrectTagError(
                "The received tag doesn't match the expected tag.")

    def _wipe(self):
        if self._closed:
            return False
        for buffer in (self._shared_secret, self._send_key,
                       self._receive_key):
            buffer[:] = bytes(len(buffer))
        self._closed = True
        return True

    def close(self):
        """Overwrites the secret material and disables the session."""
        if self._wipe():
            _LOGGER.debug('Glome session closed')

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __del__(self):
        self._wipe()


class GlomeBuilder:
    """Validates key material step by step and builds Glome sessions.

    Example:

    >>> glome = (GlomeBuilder(peer_key, 32)
    ...          .set_private_key(my_private_key)
    ...          .build())

    No private key is ever generated: build fails until one has been set.
    """

    def __init__(self, peer_key: PublicKey, min_peer_tag_len: int):
        """Initialize GlomeBuilder class.

        Args:
            peer_key: Your peer's public key.
            min_peer_tag_len: Shortest tag (in bytes) accepted from the peer.
        Raises:
            TypeError: Raised whenever peer_key is neither bytes nor an X25519
              public key.
            InvalidKeySizeError: Raised whenever peer_key is not 32 bytes.
            MinPeerTagLengthOutOfBoundsError: Raised whenever
              min_peer_tag_len is not in range 1-32.
        """
        peer_key = _key_bytes('peer_key', peer_key)
        _check_key_size('peer_key', peer_key, PUBLIC_KEY_LENGTH)
        _check_min_peer_tag_len(min_peer_tag_len)

        self._peer_key = peer_key
        self._min_peer_tag_len = min_peer_tag_len
        self._my_private_key = None

    def set_private_key(self, my_private_key: PrivateKey) -> 'GlomeBuilder':
        """Sets the user's private key.

        Raises:
            TypeError: Raised whenever the key is neither bytes nor an X25519
              private key.
            InvalidKeySizeError: Raised whenever the key is not 32 bytes.
        """
        my_private_key = _key_bytes('my_private_key', my_private_key)
        _check_key_size('my_private_key', my_private_key, PRIVATE_KEY_LENGTH)
        self._my_private_key = my_private_key
        return self

    def build(self) -> Glome:
        """Performs the handshake and returns a new Glome session.

        Raises:
            InvalidKeySizeError: Raised whenever no private key was set.
            ExchangeError: Raised whenever peer_key is a low order point.
        """
        if self._my_private_key is None:
            raise InvalidKeySizeError('my_private_key has not been set.')

        _LOGGER.debug('Building Glome session, min_peer_tag_len=%d',
                      self._min_peer_tag_len)
        return Glome(self._peer_key, self._my_private_key,
                     self._min_peer_tag_len)
