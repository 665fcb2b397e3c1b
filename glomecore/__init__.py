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
"""
glomecore is a Python library that implements the core of the GLOME protocol.

Basic Usage:
Alice and Bob each own an X25519 key pair, as 32 byte raw strings or as
`cryptography` key objects. glomecore never generates keys itself.

Suppose that Alice knows Bob's `public_key` and wants to send Bob the message
`msg` and no other message have been shared before. Alice will need to:

>>> import glomecore
>>> glome = (glomecore.GlomeBuilder(bob_public, min_peer_tag_len=8)
...          .set_private_key(alice_private)
...          .build())
>>> first_tag = glome.tag(msg, counter=0)

And Alice will send Bob msg, a prefix of first_tag of at least 8 bytes as
well as Alice's public key. On Bob's end he will need to do the following:

>>> glome = glomecore.Glome(alice_public, bob_private, min_peer_tag_len=8)
>>> try:
...     glome.check(first_tag[:8], msg, counter=0)
... except glomecore.WrongTagError as tag_error:
...     ## Handle the exception.
>>> ## do what you have to do
"""

# Bring glome module to top level
from glomecore.glome import (
    Glome, GlomeBuilder, Error, InvalidKeySizeError,
    MinPeerTagLengthOutOfBoundsError, CounterOutOfBoundsError, ExchangeError,
    SessionClosedError, WrongTagError, TagLengthError, IncorrectTagError,
    PRIVATE_KEY_LENGTH, PUBLIC_KEY_LENGTH, MIN_TAG_LENGTH, MAX_TAG_LENGTH,
    MIN_CNT_VALUE, MAX_CNT_VALUE)
from glomecore.autoglome import AutoGlome
