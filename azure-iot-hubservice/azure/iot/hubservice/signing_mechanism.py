# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines the mechanism used to sign SAS token data with a shared access key
"""

import base64
import binascii
import hmac
import hashlib
from typing import AnyStr
from .exceptions import EncodingError, SigningError


class SymmetricKeySigningMechanism(object):
    def __init__(self, key: AnyStr) -> None:
        """
        A mechanism that signs data using a symmetric key

        :param key: Symmetric Key (base64 encoded)
        :type key: str or bytes

        :raises: :class:`SigningError` if the key is empty
        :raises: :class:`EncodingError` if the key is not valid base64
        """
        if not key:
            raise SigningError("Unable to sign with an empty key")

        # Convert key to bytes (if not already)
        if isinstance(key, str):
            key_bytes = key.encode("utf-8")
        else:
            key_bytes = key

        try:
            self._signing_key = base64.b64decode(key_bytes, validate=True)
        except binascii.Error as e:
            raise EncodingError("Invalid Symmetric Key - key is not valid base64") from e

        if not self._signing_key:
            raise SigningError("Unable to sign with an empty key")

    def sign(self, data_str: AnyStr) -> str:
        """
        Sign a data string with symmetric key and the HMAC-SHA256 algorithm.

        :param data_str: Data string to be signed
        :type data_str: str or bytes

        :returns: The signed data, base64 encoded
        :rtype: str

        :raises: :class:`SigningError` if the data cannot be signed
        """
        if isinstance(data_str, str):
            data_bytes = data_str.encode("utf-8")
        else:
            data_bytes = data_str

        try:
            hmac_digest = hmac.HMAC(
                key=self._signing_key, msg=data_bytes, digestmod=hashlib.sha256
            ).digest()
        except (TypeError, ValueError) as e:
            raise SigningError("Unable to sign string using the provided symmetric key") from e
        return base64.b64encode(hmac_digest).decode("utf-8")
