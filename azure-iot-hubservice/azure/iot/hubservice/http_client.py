# --------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import aiohttp
import asyncio
import json
import logging
from typing import Optional, Dict, Any, Union
from .auth import ServiceCredential
from .config import ServiceClientConfig
from .custom_typing import DirectMethodParameters, JSONSerializable
from .exceptions import ServiceError, ResponseParsingError
from .models import (
    DeviceTwin,
    DirectMethodResponse,
    ModuleTwin,
    ModulesContent,
    ServiceErrorDetail,
    TwinPatch,
)
from . import http_path

logger = logging.getLogger(__name__)

# Header Definitions
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_IF_MATCH = "If-Match"

# Query parameter definitions
PARAM_API_VERSION = "api-version"

CONTENT_TYPE_JSON = "application/json"


def _ensure_quoted(etag: str) -> str:
    if len(etag) > 1 and etag[0] == '"' and etag[-1] == '"':
        return etag
    return '"' + etag + '"'


class IoTHubServiceHTTPClient:
    """Issues signed requests to the IoT Hub service REST API.

    Every operation is a single request/response pair. The underlying aiohttp session is
    created on first use, and must be closed with .shutdown() when finished with the client.
    """

    def __init__(
        self, credential: ServiceCredential, client_config: Optional[ServiceClientConfig] = None
    ) -> None:
        """Instantiate the client

        :param credential: The credential used to authorize every request
        :type credential: :class:`azure.iot.hubservice.auth.ServiceCredential`
        :param client_config: The config object for the client (optional)
        :type client_config: :class:`azure.iot.hubservice.config.ServiceClientConfig`
        """
        if client_config is None:
            client_config = ServiceClientConfig()
        self._credential = credential
        self._hostname = credential.hostname
        self._api_version = client_config.api_version
        self._timeout = client_config.timeout
        self._ssl_context = client_config.ssl_context
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def credential(self) -> ServiceCredential:
        return self._credential

    async def shutdown(self) -> None:
        """Shut down the client

        Invoke only when complete finished with the client for graceful exit.
        """
        if self._session is not None:
            await self._session.close()
            self._session = None
            # Wait 250ms for the underlying SSL connections to close
            # See: https://docs.aiohttp.org/en/stable/client_advanced.html#graceful-shutdown
            await asyncio.sleep(0.25)

    def _get_session(self) -> aiohttp.ClientSession:
        # NOTE: aiohttp sessions must be created within a running event loop, so this can't
        # be done in the __init__
        if self._session is None:
            self._session = _create_client_session(self._hostname, self._timeout)
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        body: Optional[JSONSerializable] = None,
        etag: Optional[str] = None,
    ) -> str:
        """Send a request and return the body of a successful response

        :raises: :class:`ServiceError` if IoT Hub responds with failure
        """
        query_params = {PARAM_API_VERSION: self._api_version}
        headers = {
            HEADER_AUTHORIZATION: self._credential.authorization_header,
            HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON,
        }
        if etag is not None:
            headers[HEADER_IF_MATCH] = _ensure_quoted(etag)
        data = json.dumps(body) if body is not None else None

        logger.info("sending https {} request to {}".format(method, path))
        session = self._get_session()
        async with session.request(
            method,
            path,
            data=data,
            params=query_params,
            headers=headers,
            ssl=self._ssl_context,
        ) as response:
            response_body = await response.text()
            if response.status >= 300:
                logger.error(
                    "Received failure response from IoTHub for {} ({})".format(
                        operation, response.status
                    )
                )
                raise _create_service_error(
                    operation, response.status, response.reason, response_body
                )
            logger.debug("Successfully received response from IoTHub for {}".format(operation))

        return response_body

    async def invoke_method(
        self,
        *,
        device_id: str,
        module_id: Optional[str] = None,
        method_params: DirectMethodParameters
    ) -> DirectMethodResponse:
        """Send a request to invoke a direct method on a target device or module

        :param str device_id: The target device ID
        :param str module_id: The target module ID (optional)
        :param dict method_params: The parameters for the direct method invocation

        :returns: The status and payload reported by the target device or module
        :rtype: :class:`azure.iot.hubservice.models.DirectMethodResponse`

        :raises: :class:`ServiceError` if IoTHub responds with failure
        :raises: :class:`ResponseParsingError` if the response cannot be parsed
        """
        path = http_path.get_method_invoke_path(device_id, module_id)
        logger.debug(
            "Sending direct method invocation request to {device_id}/{module_id}".format(
                device_id=device_id, module_id=module_id
            )
        )
        response_body = await self._request(
            "POST", path, "direct method invocation", body=dict(method_params)
        )
        return _parse_response(response_body, DirectMethodResponse.from_dict)

    async def get_twin(
        self, *, device_id: str, module_id: Optional[str] = None
    ) -> Union[DeviceTwin, ModuleTwin]:
        """Retrieve a device twin, or a module twin if a module ID is given

        :raises: :class:`ServiceError` if IoTHub responds with failure
        :raises: :class:`ResponseParsingError` if the response cannot be parsed
        """
        path = http_path.get_twin_path(device_id, module_id)
        response_body = await self._request("GET", path, "get twin")
        return _parse_response(response_body, _twin_parser(module_id))

    async def update_twin(
        self,
        *,
        device_id: str,
        module_id: Optional[str] = None,
        twin_patch: Union[TwinPatch, Dict[str, Any]],
        etag: Optional[str] = None
    ) -> Union[DeviceTwin, ModuleTwin]:
        """Update (PATCH) the tags and desired properties of a device or module twin

        :raises: :class:`ServiceError` if IoTHub responds with failure
        :raises: :class:`ResponseParsingError` if the response cannot be parsed
        """
        path = http_path.get_twin_path(device_id, module_id)
        response_body = await self._request(
            "PATCH", path, "update twin", body=_twin_patch_body(twin_patch), etag=etag
        )
        return _parse_response(response_body, _twin_parser(module_id))

    async def replace_twin(
        self,
        *,
        device_id: str,
        module_id: Optional[str] = None,
        twin_patch: Union[TwinPatch, Dict[str, Any]],
        etag: Optional[str] = None
    ) -> Union[DeviceTwin, ModuleTwin]:
        """Replace (PUT) the tags and desired properties of a device or module twin

        :raises: :class:`ServiceError` if IoTHub responds with failure
        :raises: :class:`ResponseParsingError` if the response cannot be parsed
        """
        path = http_path.get_twin_path(device_id, module_id)
        response_body = await self._request(
            "PUT", path, "replace twin", body=_twin_patch_body(twin_patch), etag=etag
        )
        return _parse_response(response_body, _twin_parser(module_id))

    async def query(self, *, query: str) -> JSONSerializable:
        """Execute a device query

        :param str query: The query, in the IoT Hub query language

        :returns: The query result, as returned by IoTHub
        :raises: :class:`ServiceError` if IoTHub responds with failure
        :raises: :class:`ResponseParsingError` if the response is not JSON
        """
        path = http_path.get_query_path()
        logger.debug("Sending query to IoTHub: {}".format(query))
        response_body = await self._request("POST", path, "query", body={"query": query})
        return _parse_response(response_body, lambda value: value)

    async def apply_configuration_content(
        self, *, device_id: str, modules_content: ModulesContent
    ) -> None:
        """Apply a deployment manifest to an edge device

        :param str device_id: The target edge device ID
        :param modules_content: The deployment manifest
        :type modules_content: :class:`azure.iot.hubservice.models.ModulesContent`

        :raises: :class:`ServiceError` if IoTHub responds with failure
        """
        path = http_path.get_apply_configuration_content_path(device_id)
        body = {"modulesContent": modules_content.to_dict()}
        await self._request("POST", path, "apply configuration content", body=body)
        return None


def _twin_patch_body(twin_patch: Union[TwinPatch, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(twin_patch, TwinPatch):
        return twin_patch.to_dict()
    return twin_patch


def _twin_parser(module_id: Optional[str]):
    return ModuleTwin.from_dict if module_id else DeviceTwin.from_dict


def _parse_response(response_body: str, parser):
    """Deserialize a success response, raising ResponseParsingError if it does not match
    the expected schema"""
    try:
        return parser(json.loads(response_body))
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Response from IoTHub did not match the expected schema")
        raise ResponseParsingError(
            "Response did not match expected schema: {}".format(response_body), response_body
        ) from e


def _create_service_error(
    operation: str, status: int, reason: Optional[str], response_body: str
) -> ServiceError:
    try:
        detail: Optional[ServiceErrorDetail] = ServiceErrorDetail.from_response_body(
            response_body
        )
    except (ValueError, KeyError, TypeError):
        logger.debug("Failure response from IoTHub is not a structured error")
        detail = None

    message = "IoTHub responded to {operation} with a failed status ({status}) - {reason}".format(
        operation=operation, status=status, reason=detail if detail is not None else reason
    )
    return ServiceError(message, status=status, reason=reason, body=response_body, detail=detail)


def _create_client_session(hostname: str, timeout: float) -> aiohttp.ClientSession:
    """Create and return a aiohttp ClientSession object"""
    base_url = "https://{hostname}".format(hostname=hostname)
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    session = aiohttp.ClientSession(base_url=base_url, timeout=client_timeout)
    logger.debug(
        "Creating HTTP Session for {url} with timeout of {timeout}".format(
            url=base_url, timeout=client_timeout.total
        )
    )
    return session
