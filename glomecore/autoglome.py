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
"""Counter managing wrapper around a Glome session."""

import logging

from glomecore.glome import (GlomeBuilder, IncorrectTagError,
                             PublicKey, PrivateKey, MAX_TAG_LENGTH,
                             MAX_CNT_VALUE, check_counter)

_LOGGER = logging.getLogger(__name__)

_COUNTER_MODULUS = MAX_CNT_VALUE + 1


class AutoGlome:
    """Adds counter managing functionalities for GLOME protocol.

    This class is initialized by providing your peer's public key and
    your private key. On initialization, two counters (sending and
    receiving) are created and set to 0. Provides methods tag (to generate
    new tags) and check (to check receiving tags).

    Unlike Glome, an AutoGlome instance is stateful and must not be shared
    between threads without external locking.
    """

    def __init__(self,
                 peer_key: PublicKey,
                 my_private_key: PrivateKey,
                 *,
                 min_peer_tag_len: int = MAX_TAG_LENGTH,
                 skippable_range: int = 0):
        """Initialize AutoGlome class.

        Performs the handshake, generates keys and counters.
        Args:
           peer_key: Your peer's public key.
           my_private_key: Your private key.
           min_peer_tag_len: Shortest tag (in bytes) accepted from the peer.
             Must be an integer in range 1-32. keyword only.
           skippable_range: Number of messages that can be missed. keyword
             only. Must be non-negative. For more information please go to
             check method's documentation.
        Raises:
           ValueError: Raised whenever skippable_range is a negative integer.
             The errors raised by GlomeBuilder are propagated as well.
        """
        if skippable_range < 0:
            raise ValueError(
                'Skippable_range must be non-negative, not {}'.format(
                    skippable_range))

        self.glome = (GlomeBuilder(peer_key, min_peer_tag_len)
                      .set_private_key(my_private_key)
                      .build())
        self._sending_counter = 0
        self._receiving_counter = 0
        self.skippable_range = skippable_range

    @property
    def sending_counter(self) -> int:
        """Number of tags shared from the user to the peer.

        It is incremented each time a new tag is generated. It is always
        one byte long. When the counter gets past 255 it overflows at 0.

        Setter raises CounterOutOfBoundsError if provided integer is not in
        range 0-255.
        """
        return self._sending_counter

    @sending_counter.setter
    def sending_counter(self, value: int):
        check_counter(value)
        self._sending_counter = value

    @property
    def receiving_counter(self) -> int:
        """Number of tags the user receives from the peer.

        It is always one byte long. When the counter gets past 255 it restarts
        at 0. Every time a message is successfully checked, the
        receiving_counter is set to the next value after the last successful
        one. Note that if skippable_range is n the counter might be increased
        by any amount in range 1-n+1 after a successful check.

        Setter raises CounterOutOfBoundsError if provided counter is not in
        range 0-255.
        """
        return self._receiving_counter

    @receiving_counter.setter
    def receiving_counter(self, value: int):
        check_counter(value)
        self._receiving_counter = value

    @property
    def own_public_key(self) -> bytes:
        """User's public key used in handshake."""
        return self.glome.own_public_key

    @property
    def peer_key(self) -> bytes:
        """Peer's public key used in handshake."""
        return self.glome.peer_key

    def tag(self, msg: bytes) -> bytes:
        """Generates a tag from a message.

        Generates a tag matching some provided message and the internal
        sending counter, then advances the counter.

        Args:
           msg: Message to be transmitted.
        Returns:
           tag: Tag matching counter and msg.
        """
        tag = self.glome.tag(msg, self._sending_counter)
        self._sending_counter = (self._sending_counter + 1) % _COUNTER_MODULUS
        return tag

    def check(self, tag: bytes, msg: bytes):
        """Check whether a tag is correct for some message.

        Checks if a tag matches some provided message and internal receiving
        counter. If tag checking is not successful, the receiving counter
        remains unchanged.

        If skippable_range is greater than 0, the method tries to check the
        tag against all counters in range [receiving_counter,
        receiving_counter + skippable_range], in order, until one is
        successful. If none is successful, an exception is raised and the
        receiving counter remains unchanged.

        Args:
           tag: Object with the generated tag.
           msg: Object containing received message.
        Returns:
           None.
        Raises:
           TagLengthError: Raised whenever the tag length is not accepted.
           IncorrectTagError: Raised whenever the tag is incorrect.
        """
        for skipped in range(self.skippable_range + 1):
            counter = (self._receiving_counter + skipped) % _COUNTER_MODULUS
            try:
                self.glome.check(tag, msg, counter)
            except IncorrectTagError:
                continue
            if skipped:
                _LOGGER.debug('Accepted tag after skipping %d message(s)',
                              skipped)
            self._receiving_counter = (counter + 1) % _COUNTER_MODULUS
            return None

        raise IncorrectTagError(
            "The received tag doesn't match the expected tag.")

    def close(self):
        """Closes the wrapped Glome session."""
        self.glome.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
