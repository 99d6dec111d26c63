# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Provides the credential used to authorize requests to the IoT Hub service
"""

import logging
import time
from typing import Optional
from .connection_string import ConnectionString
from .exceptions import SasTokenError
from . import constant
from . import sastoken as st

logger = logging.getLogger(__name__)

__all__ = ["ServiceCredential"]


class ServiceCredential(object):
    """The resource (IoT Hub) name, and the value of the Authorization header to send to it.

    A ServiceCredential is immutable. The authorization header embeds an expiry time and is
    never refreshed, so a new ServiceCredential must be created once it expires.
    """

    __slots__ = ("_resource_name", "_authorization_header")

    def __init__(self, resource_name: str, authorization_header: str) -> None:
        """Initializer for ServiceCredential

        Users should not call this directly. Rather, they should use one of the
        from_sastoken(), from_private_key() or from_connection_string() factory methods.

        :param str resource_name: The name of the IoT Hub
        :param str authorization_header: The SAS token sent in the Authorization header
        """
        object.__setattr__(self, "_resource_name", resource_name)
        object.__setattr__(self, "_authorization_header", authorization_header)

    def __setattr__(self, name, value):
        raise AttributeError("ServiceCredential is immutable")

    def __repr__(self):
        # Never expose the token itself
        return "ServiceCredential(resource_name={!r})".format(self._resource_name)

    def __eq__(self, other):
        if not isinstance(other, ServiceCredential):
            return NotImplemented
        return (self._resource_name, self._authorization_header) == (
            other._resource_name,
            other._authorization_header,
        )

    def __hash__(self):
        return hash((self._resource_name, self._authorization_header))

    @property
    def resource_name(self) -> str:
        return self._resource_name

    @property
    def authorization_header(self) -> str:
        return self._authorization_header

    @property
    def hostname(self) -> str:
        return st.get_resource_uri(self._resource_name)

    @property
    def expiry_time(self) -> Optional[int]:
        """The expiry of the SAS token in the header, or None if it cannot be determined"""
        try:
            return st.SasToken(self._authorization_header).expiry_time
        except SasTokenError:
            return None

    def is_expired(self) -> bool:
        """Return True if the SAS token is known to have expired"""
        expiry_time = self.expiry_time
        return expiry_time is not None and expiry_time <= time.time()

    @classmethod
    def from_sastoken(cls, resource_name: str, sastoken: str) -> "ServiceCredential":
        """Create a ServiceCredential from an already generated SAS token.
        The token is stored as-is.

        :param str resource_name: The name of the IoT Hub
        :param str sastoken: The SAS token string

        :rtype: :class:`azure.iot.hubservice.auth.ServiceCredential`
        """
        return cls(resource_name, sastoken)

    @classmethod
    def from_private_key(
        cls, resource_name: str, private_key: str, ttl: int = constant.DEFAULT_TOKEN_TTL
    ) -> "ServiceCredential":
        """Create a ServiceCredential by signing a new SAS token with a private key.

        The private key should preferably be of a shared access policy that has the rights to
        make service requests.

        :param str resource_name: The name of the IoT Hub
        :param str private_key: The shared access key (base64 encoded)
        :param int ttl: Time to live of the generated token, in seconds

        :raises: :class:`azure.iot.hubservice.exceptions.EncodingError` if the key is not base64
        :raises: :class:`azure.iot.hubservice.exceptions.SigningError` if signing fails

        :rtype: :class:`azure.iot.hubservice.auth.ServiceCredential`
        """
        sastoken = st.generate_sastoken(resource_name, private_key, ttl)
        return cls(resource_name, sastoken)

    @classmethod
    def from_connection_string(
        cls, connection_string: str, ttl: int = constant.DEFAULT_TOKEN_TTL
    ) -> "ServiceCredential":
        """Create a ServiceCredential by signing a new SAS token with the details in a
        connection string.

        :param str connection_string: The IoT Hub connection string, of the format
            HostName=<name>.azure-devices.net;SharedAccessKeyName=<key name>;SharedAccessKey=<key>
        :param int ttl: Time to live of the generated token, in seconds

        :raises: :class:`azure.iot.hubservice.exceptions.InvalidConnectionString` if the
            connection string is malformed or incomplete
        :raises: :class:`azure.iot.hubservice.exceptions.EncodingError` if the key is not base64
        :raises: :class:`azure.iot.hubservice.exceptions.SigningError` if signing fails

        :rtype: :class:`azure.iot.hubservice.auth.ServiceCredential`
        """
        cs = ConnectionString(connection_string)
        logger.debug("Creating credential for IoT Hub {}".format(cs.resource_name))
        sastoken = st.generate_sastoken(cs.resource_name, cs.shared_access_key, ttl)
        return cls(cs.resource_name, sastoken)
