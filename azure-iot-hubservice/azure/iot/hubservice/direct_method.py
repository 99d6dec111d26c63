# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import logging
from typing import Optional
from .custom_typing import DirectMethodParameters, JSONSerializable
from .http_client import IoTHubServiceHTTPClient
from .models import DirectMethodResponse

logger = logging.getLogger(__name__)


class DirectMethod(object):
    """A direct method on a device or module, ready to be invoked.

    Instances should be created with :meth:`IoTHubService.create_device_method` or
    :meth:`IoTHubService.create_module_method`.
    """

    def __init__(
        self,
        http_client: IoTHubServiceHTTPClient,
        device_id: str,
        module_id: Optional[str],
        method_name: str,
        response_timeout: int,
        connect_timeout: int,
    ) -> None:
        self._http_client = http_client
        self.device_id = device_id
        self.module_id = module_id
        self.method_name = method_name
        self.response_timeout = response_timeout
        self.connect_timeout = connect_timeout

    def _method_params(self, payload: JSONSerializable) -> DirectMethodParameters:
        return {
            "connectTimeoutInSeconds": self.connect_timeout,
            "methodName": self.method_name,
            "payload": payload if payload is not None else "",
            "responseTimeoutInSeconds": self.response_timeout,
        }

    async def invoke(self, payload: JSONSerializable = None) -> DirectMethodResponse:
        """Invoke the direct method on the target device or module.

        Receiving a response does not mean the invocation succeeded; the status within the
        response is the one reported by the device, and should still be verified.

        :param payload: The JSON payload to send to the method (optional)

        :returns: The status and payload reported by the device or module
        :rtype: :class:`azure.iot.hubservice.models.DirectMethodResponse`

        :raises: :class:`azure.iot.hubservice.exceptions.ServiceError` if IoTHub responds
            with failure
        :raises: :class:`azure.iot.hubservice.exceptions.ResponseParsingError` if the
            response cannot be parsed
        """
        logger.debug("Invoking direct method {}".format(self.method_name))
        return await self._http_client.invoke_method(
            device_id=self.device_id,
            module_id=self.module_id,
            method_params=self._method_params(payload),
        )
