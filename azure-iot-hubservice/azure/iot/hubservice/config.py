# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import ssl
from typing import Optional
from . import constant

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 10


class ServiceClientConfig:
    """
    Class for storing all configurations/options of the IoT Hub service client.
    """

    def __init__(
        self,
        *,
        api_version: str = constant.IOTHUB_API_VERSION,
        timeout: float = HTTP_TIMEOUT,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        """Initializer for ServiceClientConfig

        :param str api_version: The IoT Hub REST API version sent with every request.
            Must match the management-plane version expected by the IoT Hub.
        :param float timeout: Total timeout for a single HTTP request, in seconds
        :param ssl_context: SSLContext to use with the client. A default context that
            verifies the server certificate is created if not provided.
        :type ssl_context: :class:`ssl.SSLContext`
        """
        if not api_version:
            raise ValueError("api_version must be a non-empty string")
        if timeout <= 0:
            raise ValueError("timeout must be greater than zero")

        self.api_version = api_version
        self.timeout = timeout
        self.ssl_context = ssl_context if ssl_context is not None else _default_ssl_context()


def _default_ssl_context() -> ssl.SSLContext:
    """Return a default SSLContext"""
    logger.debug("creating a default SSL context")
    ssl_context = ssl.SSLContext(protocol=ssl.PROTOCOL_TLS_CLIENT)
    ssl_context.load_default_certs()
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.check_hostname = True
    return ssl_context
