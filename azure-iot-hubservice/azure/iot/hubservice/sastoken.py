# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with Shared Access Signature (SAS) Tokens"""

import logging
import time
import urllib.parse
from typing import Dict, List, Optional
from .exceptions import SasTokenError
from .signing_mechanism import SymmetricKeySigningMechanism
from . import constant

logger = logging.getLogger(__name__)

TOKEN_PREFIX: str = "SharedAccessSignature "
REQUIRED_SASTOKEN_FIELDS: List[str] = ["sr", "sig", "se"]
VALID_SASTOKEN_FIELDS: List[str] = REQUIRED_SASTOKEN_FIELDS + ["skn"]


def get_resource_uri(resource_name: str) -> str:
    """Return the fully qualified IoT Hub hostname for a resource (IoT Hub) name"""
    return resource_name + constant.IOTHUB_HOST_SUFFIX


def generate_sastoken(
    resource_name: str,
    private_key: str,
    ttl: int = constant.DEFAULT_TOKEN_TTL,
    key_name: str = constant.DEFAULT_SHARED_ACCESS_KEY_NAME,
) -> str:
    """Generate a SAS token string granting access to an IoT Hub.

    A ttl of zero or less is accepted, and produces a token that has already expired.

    :param str resource_name: The name of the IoT Hub (without the azure-devices.net suffix)
    :param str private_key: The shared access key (base64 encoded)
    :param int ttl: Time to live for the token, in seconds (default 3600)
    :param str key_name: The name of the shared access policy the key belongs to

    :returns: The SAS token, in the format expected by the Authorization header
    :rtype: str

    :raises: :class:`azure.iot.hubservice.exceptions.EncodingError` if the key is not base64
    :raises: :class:`azure.iot.hubservice.exceptions.SigningError` if the key cannot sign
    """
    signing_mechanism = SymmetricKeySigningMechanism(private_key)
    resource_uri = get_resource_uri(resource_name)
    expiry_time = int(time.time()) + ttl
    message = resource_uri + "\n" + str(expiry_time)
    signature = signing_mechanism.sign(message)

    encoded = urllib.parse.urlencode(
        [("sr", resource_uri), ("sig", signature), ("skn", key_name), ("se", str(expiry_time))]
    )
    logger.debug(
        "Generated SAS token for {resource} expiring at {expiry}".format(
            resource=resource_uri, expiry=expiry_time
        )
    )
    return TOKEN_PREFIX + encoded


class SasToken(object):
    def __init__(self, sastoken_str: str) -> None:
        """Create a SasToken object from a SAS Token string

        :param str sastoken_str: The SAS Token string

        :raises: :class:`azure.iot.hubservice.exceptions.SasTokenError` if the string is invalid
        """
        self._token_str = sastoken_str
        self._token_info = _get_sastoken_info_from_string(sastoken_str)

    def __str__(self) -> str:
        return self._token_str

    @property
    def expiry_time(self) -> int:
        return int(self._token_info["se"])

    @property
    def resource_uri(self) -> str:
        return urllib.parse.unquote_plus(self._token_info["sr"])

    @property
    def signature(self) -> str:
        return urllib.parse.unquote_plus(self._token_info["sig"])

    @property
    def key_name(self) -> Optional[str]:
        return self._token_info.get("skn")


def _get_sastoken_info_from_string(sastoken_string: str) -> Dict[str, str]:
    pieces = sastoken_string.split(TOKEN_PREFIX)
    if len(pieces) != 2 or pieces[0]:
        raise SasTokenError("Invalid SAS Token string: Not a SAS Token")

    try:
        sastoken_info = dict(sub.split("=", 1) for sub in pieces[1].split("&"))
    except ValueError as e:
        raise SasTokenError("Invalid SAS Token string: Incorrectly formatted") from e

    if not all(key in sastoken_info for key in REQUIRED_SASTOKEN_FIELDS):
        raise SasTokenError("Invalid SAS Token string: Not all required fields present")

    if not all(key in VALID_SASTOKEN_FIELDS for key in sastoken_info):
        raise SasTokenError("Invalid SAS Token string: Unexpected fields present")

    try:
        int(sastoken_info["se"])
    except ValueError as e:
        raise SasTokenError("Invalid SAS Token string: Expiry is not a number") from e

    return sastoken_info
