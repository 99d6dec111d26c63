# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with IoT Hub service Connection Strings"""

from .exceptions import InvalidConnectionString
from . import constant

__all__ = ["ConnectionString"]

CS_DELIMITER = ";"
CS_VAL_SEPARATOR = "="
CS_FIELD_COUNT = 3

HOST_NAME = "HostName"
SHARED_ACCESS_KEY_NAME = "SharedAccessKeyName"
SHARED_ACCESS_KEY = "SharedAccessKey"


class ConnectionString(object):
    """Key/value mappings for the connection details of an IoT Hub shared access policy.
    Uses the same syntax as dictionary

    A valid connection string has exactly three fields, in any order:
    HostName=<name>.azure-devices.net;SharedAccessKeyName=<key name>;SharedAccessKey=<key>
    """

    def __init__(self, connection_string):
        """Initializer for ConnectionString

        :param str connection_string: String with connection details provided by Azure
        :raises: :class:`azure.iot.hubservice.exceptions.InvalidConnectionString` if the
            provided connection_string is invalid
        """
        self._dict = _parse_connection_string(connection_string)
        self._resource_name = _get_resource_name(self._dict[HOST_NAME])
        self._strrep = connection_string

    def __contains__(self, item):
        return item in self._dict

    def __getitem__(self, key):
        return self._dict[key]

    def __repr__(self):
        return self._strrep

    def get(self, key, default=None):
        """Return the value for key if key is in the dictionary, else default

        :param str key: The key to retrieve a value for
        :param str default: The default value returned if a key is not found
        :returns: The value for the given key
        """
        return self._dict.get(key, default)

    @property
    def resource_name(self):
        """The name of the IoT Hub, i.e. the HostName without the azure-devices.net suffix"""
        return self._resource_name

    @property
    def shared_access_key(self):
        return self._dict[SHARED_ACCESS_KEY]

    @property
    def shared_access_key_name(self):
        return self._dict.get(SHARED_ACCESS_KEY_NAME, constant.DEFAULT_SHARED_ACCESS_KEY_NAME)


def _parse_connection_string(connection_string):
    """Return a dictionary of values contained in a given connection string"""
    if not isinstance(connection_string, str):
        raise TypeError("Connection String must be of type str")

    cs_args = connection_string.split(CS_DELIMITER)
    if len(cs_args) != CS_FIELD_COUNT:
        raise InvalidConnectionString(
            "Invalid Connection String - Expected {} fields, found {}".format(
                CS_FIELD_COUNT, len(cs_args)
            )
        )

    d = {}
    for arg in cs_args:
        key, separator, value = arg.partition(CS_VAL_SEPARATOR)
        if not separator:
            continue
        d[key] = value

    if HOST_NAME not in d:
        raise InvalidConnectionString("Invalid Connection String - Missing HostName")
    if SHARED_ACCESS_KEY not in d:
        raise InvalidConnectionString("Invalid Connection String - Missing SharedAccessKey")
    return d


def _get_resource_name(host_name):
    """Return the IoT Hub name, which is everything in the HostName before the suffix"""
    end = host_name.find(constant.IOTHUB_HOST_SUFFIX)
    if end <= 0:
        raise InvalidConnectionString(
            "Invalid Connection String - HostName must be of the form <name>{}".format(
                constant.IOTHUB_HOST_SUFFIX
            )
        )
    return host_name[:end]
