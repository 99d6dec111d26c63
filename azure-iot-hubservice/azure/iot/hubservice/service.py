# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the IoTHubService, the entry point for making requests to an
IoT Hub as a service.
"""

import logging
from typing import Optional
from . import constant
from .auth import ServiceCredential
from .config import ServiceClientConfig
from .direct_method import DirectMethod
from .http_client import IoTHubServiceHTTPClient
from .models import ModulesContent
from .query import QueryBuilder
from .twin import TwinManager

logger = logging.getLogger(__name__)


class IoTHubService(object):
    """A handle for making service requests to an IoT Hub.

    The SAS token used to authorize requests is generated once, when the IoTHubService is
    created, and is not renewed. Create a new IoTHubService once the token has expired.

    The IoTHubService owns an HTTP session, so it should be shut down when it is no longer
    needed, either by calling .shutdown() or by using it as an async context manager::

        async with IoTHubService.from_connection_string(connection_string, 3600) as service:
            twin = await service.twin_manager().get_device_twin("SomeDevice")
    """

    def __init__(
        self, credential: ServiceCredential, client_config: Optional[ServiceClientConfig] = None
    ) -> None:
        """Initializer for an IoTHubService.

        This initializer should not be called directly.
        Instead, use one of the 'from_' classmethods to create an IoTHubService.

        :param credential: The credential used to authorize requests
        :type credential: :class:`azure.iot.hubservice.auth.ServiceCredential`
        :param client_config: Optional configuration of the HTTP client
        :type client_config: :class:`azure.iot.hubservice.config.ServiceClientConfig`
        """
        self._credential = credential
        self._http_client = IoTHubServiceHTTPClient(credential, client_config)

    async def __aenter__(self) -> "IoTHubService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.shutdown()

    @classmethod
    def from_sastoken(
        cls, iothub_name: str, sastoken: str, client_config: Optional[ServiceClientConfig] = None
    ) -> "IoTHubService":
        """Instantiate the IoTHubService using an already generated SAS token.

        :param str iothub_name: The name of the IoT Hub (without the .azure-devices.net suffix)
        :param str sastoken: The SAS token used to authorize requests
        :param client_config: Optional configuration of the HTTP client
        :type client_config: :class:`azure.iot.hubservice.config.ServiceClientConfig`

        :rtype: :class:`IoTHubService`
        """
        return cls(ServiceCredential.from_sastoken(iothub_name, sastoken), client_config)

    @classmethod
    def from_private_key(
        cls,
        iothub_name: str,
        private_key: str,
        expires_in_seconds: int = constant.DEFAULT_TOKEN_TTL,
        client_config: Optional[ServiceClientConfig] = None,
    ) -> "IoTHubService":
        """Instantiate the IoTHubService by generating a SAS token from a private key.

        The private key should preferably be of a shared access policy that has the rights
        to perform service operations.

        :param str iothub_name: The name of the IoT Hub (without the .azure-devices.net suffix)
        :param str private_key: The base64 encoded shared access key
        :param int expires_in_seconds: How long the generated token is valid for
        :param client_config: Optional configuration of the HTTP client
        :type client_config: :class:`azure.iot.hubservice.config.ServiceClientConfig`

        :raises: :class:`azure.iot.hubservice.exceptions.EncodingError` if the private key
            is not valid base64
        :raises: :class:`azure.iot.hubservice.exceptions.SigningError` if the token cannot
            be signed

        :rtype: :class:`IoTHubService`
        """
        credential = ServiceCredential.from_private_key(
            iothub_name, private_key, expires_in_seconds
        )
        return cls(credential, client_config)

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        expires_in_seconds: int = constant.DEFAULT_TOKEN_TTL,
        client_config: Optional[ServiceClientConfig] = None,
    ) -> "IoTHubService":
        """Instantiate the IoTHubService by generating a SAS token from a connection string.

        :param str connection_string: The IoT Hub connection string, of the format
            HostName=<name>.azure-devices.net;SharedAccessKeyName=<key name>;SharedAccessKey=<key>
        :param int expires_in_seconds: How long the generated token is valid for
        :param client_config: Optional configuration of the HTTP client
        :type client_config: :class:`azure.iot.hubservice.config.ServiceClientConfig`

        :raises: :class:`azure.iot.hubservice.exceptions.InvalidConnectionString` if the
            connection string is malformed or incomplete
        :raises: :class:`azure.iot.hubservice.exceptions.EncodingError` if the key is not
            valid base64

        :rtype: :class:`IoTHubService`
        """
        credential = ServiceCredential.from_connection_string(
            connection_string, expires_in_seconds
        )
        return cls(credential, client_config)

    @property
    def iothub_name(self) -> str:
        return self._credential.resource_name

    @property
    def credential(self) -> ServiceCredential:
        return self._credential

    async def shutdown(self) -> None:
        """Close the HTTP session of the IoTHubService"""
        logger.debug("Shutting down IoTHubService for {}".format(self.iothub_name))
        await self._http_client.shutdown()

    def twin_manager(self) -> TwinManager:
        """Create a TwinManager for reading and updating the twins of this IoT Hub"""
        return TwinManager(self._http_client)

    def query_builder(self) -> QueryBuilder:
        """Create a QueryBuilder for querying the devices of this IoT Hub"""
        return QueryBuilder(self._http_client)

    def create_device_method(
        self, device_id: str, method_name: str, response_timeout: int, connect_timeout: int
    ) -> DirectMethod:
        """Create a direct method that can be invoked on a device.

        :param str device_id: The ID of the target device
        :param str method_name: The name of the method
        :param int response_timeout: Seconds to wait for the device to respond to the method
        :param int connect_timeout: Seconds to wait for the device to connect

        :rtype: :class:`azure.iot.hubservice.direct_method.DirectMethod`
        """
        return DirectMethod(
            self._http_client, device_id, None, method_name, response_timeout, connect_timeout
        )

    def create_module_method(
        self,
        device_id: str,
        module_id: str,
        method_name: str,
        response_timeout: int,
        connect_timeout: int,
    ) -> DirectMethod:
        """Create a direct method that can be invoked on a module.

        :param str device_id: The ID of the device the target module is on
        :param str module_id: The ID of the target module
        :param str method_name: The name of the method
        :param int response_timeout: Seconds to wait for the module to respond to the method
        :param int connect_timeout: Seconds to wait for the module to connect

        :rtype: :class:`azure.iot.hubservice.direct_method.DirectMethod`
        """
        return DirectMethod(
            self._http_client, device_id, module_id, method_name, response_timeout, connect_timeout
        )

    async def apply_modules_configuration(
        self, device_id: str, modules_content: ModulesContent
    ) -> None:
        """Apply a deployment manifest to an edge device.

        :param str device_id: The ID of the target edge device
        :param modules_content: The deployment manifest, created with
            :class:`azure.iot.hubservice.configuration.ModulesContentBuilder`
        :type modules_content: :class:`azure.iot.hubservice.models.ModulesContent`

        :raises: :class:`azure.iot.hubservice.exceptions.ServiceError` if IoTHub responds
            with failure
        """
        logger.info("Applying modules configuration to {}".format(device_id))
        await self._http_client.apply_configuration_content(
            device_id=device_id, modules_content=modules_content
        )
