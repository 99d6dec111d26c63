# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines the models sent to and received from the IoT Hub service.

Every model provides a .to_dict() method producing the JSON compatible wire format, and
models that are received from IoT Hub additionally provide a .from_dict() factory. The
.from_dict() factories raise KeyError, TypeError or ValueError for documents that do not
match the expected schema.
"""

import json
from enum import Enum
from typing import Optional, Dict, Any
from .custom_typing import JSONSerializable, TwinDocument
from . import constant


class Status(Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class RestartPolicy(Enum):
    NEVER = "never"
    ON_FAILURE = "on-failure"
    ON_UNHEALTHY = "on-unhealthy"
    ALWAYS = "always"


class ImagePullPolicy(Enum):
    ON_CREATE = "on-create"
    NEVER = "never"


class DeviceStatus(Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class ConnectionState(Enum):
    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"


class AuthenticationType(Enum):
    CERTIFICATE = "certificate"
    SAS = "sas"
    AUTHORITY = "Authority"
    SELF_SIGNED = "selfSigned"
    NONE = "none"


def _env_to_dict(env: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    return {name: {"value": value} for name, value in env.items()}


def _env_from_dict(d: Optional[Dict[str, Any]]) -> Dict[str, str]:
    if d is None:
        return {}
    return {name: _require_str(var["value"], name) for name, var in d.items()}


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError("Expected '{}' to be a string".format(field_name))
    return value


def _require_dict(value: Any, field_name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError("Expected '{}' to be a JSON object".format(field_name))
    return value


def serialize_json_blob(value: JSONSerializable) -> str:
    """Serialize an opaque JSON value (e.g. docker create options) to the string form
    the deployment manifest carries it in.

    :raises: TypeError or ValueError if the value is not JSON serializable
    """
    return json.dumps(value, separators=(",", ":"), allow_nan=False)


# ~~~~~ Deployment Manifest ~~~~~


class ModuleSettings:
    """The container settings of a module

    :ivar str image: The container image
    :ivar str create_options: The docker create options, as a JSON string (optional)
    """

    def __init__(self, image: str, create_options: Optional[str] = None) -> None:
        self.image = image
        self.create_options = create_options

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"image": self.image}
        if self.create_options is not None:
            d["createOptions"] = self.create_options
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ModuleSettings":
        d = _require_dict(d, "settings")
        create_options = d.get("createOptions")
        if create_options is not None:
            create_options = _require_str(create_options, "createOptions")
        return cls(image=_require_str(d["image"], "image"), create_options=create_options)


class EdgeModule:
    """The configuration of a custom module for IoT Edge.
    Create instances with :class:`azure.iot.hubservice.configuration.EdgeModuleBuilder`.

    :ivar str module_id: The id of the module. Not part of the wire format, it is the key
        of the module in the deployment manifest.
    :ivar str version: The version of the module
    :ivar str module_type: The runtime type of the module (always "docker")
    :ivar status: The desired status of the module
    :ivar restart_policy: The restart policy of the module
    :ivar image_pull_policy: The image pull policy of the module (optional)
    :ivar dict env: Environment variables, name to value
    :ivar settings: The container settings of the module
    """

    def __init__(
        self,
        module_id: str,
        version: str,
        status: Status,
        restart_policy: RestartPolicy,
        settings: ModuleSettings,
        image_pull_policy: Optional[ImagePullPolicy] = None,
        env: Optional[Dict[str, str]] = None,
        module_type: str = constant.RUNTIME_TYPE,
    ) -> None:
        self.module_id = module_id
        self.version = version
        self.module_type = module_type
        self.status = status
        self.restart_policy = restart_policy
        self.image_pull_policy = image_pull_policy
        self.env = env if env is not None else {}
        self.settings = settings

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "version": self.version,
            "type": self.module_type,
            "status": self.status.value,
            "restartPolicy": self.restart_policy.value,
        }
        if self.image_pull_policy is not None:
            d["imagePullPolicy"] = self.image_pull_policy.value
        d["env"] = _env_to_dict(self.env)
        d["settings"] = self.settings.to_dict()
        return d

    @classmethod
    def from_dict(cls, module_id: str, d: Dict[str, Any]) -> "EdgeModule":
        d = _require_dict(d, module_id)
        image_pull_policy = d.get("imagePullPolicy")
        return cls(
            module_id=module_id,
            version=_require_str(d["version"], "version"),
            module_type=_require_str(d["type"], "type"),
            status=Status(d["status"]),
            restart_policy=RestartPolicy(d["restartPolicy"]),
            image_pull_policy=(
                ImagePullPolicy(image_pull_policy) if image_pull_policy is not None else None
            ),
            env=_env_from_dict(d.get("env")),
            settings=ModuleSettings.from_dict(d["settings"]),
        )


class RegistryCredential:
    """Credentials for a container registry the Edge runtime pulls module images from"""

    def __init__(self, username: str, password: str, address: str) -> None:
        self.username = username
        self.password = password
        self.address = address

    def to_dict(self) -> Dict[str, str]:
        return {"username": self.username, "password": self.password, "address": self.address}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RegistryCredential":
        return cls(
            username=_require_str(d["username"], "username"),
            password=_require_str(d["password"], "password"),
            address=_require_str(d["address"], "address"),
        )


class RuntimeSettings:
    """The runtime settings for the Edge Agent

    :ivar str min_docker_version: The minimum docker version required on the device
    :ivar str logging_options: Docker logging options, as a JSON string (optional)
    :ivar dict registry_credentials: Registry credentials keyed by credential name
    """

    def __init__(
        self,
        min_docker_version: str,
        logging_options: Optional[str] = None,
        registry_credentials: Optional[Dict[str, RegistryCredential]] = None,
    ) -> None:
        self.min_docker_version = min_docker_version
        self.logging_options = logging_options
        self.registry_credentials = registry_credentials if registry_credentials else {}

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"minDockerVersion": self.min_docker_version}
        if self.logging_options is not None:
            d["loggingOptions"] = self.logging_options
        if self.registry_credentials:
            d["registryCredentials"] = {
                name: cred.to_dict() for name, cred in self.registry_credentials.items()
            }
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RuntimeSettings":
        logging_options = d.get("loggingOptions")
        if logging_options is not None:
            logging_options = _require_str(logging_options, "loggingOptions")
        registry_credentials = {
            name: RegistryCredential.from_dict(cred)
            for name, cred in (d.get("registryCredentials") or {}).items()
        }
        return cls(
            min_docker_version=_require_str(d["minDockerVersion"], "minDockerVersion"),
            logging_options=logging_options,
            registry_credentials=registry_credentials,
        )


class Runtime:
    def __init__(self, settings: RuntimeSettings, runtime_type: str = constant.RUNTIME_TYPE):
        self.settings = settings
        self.runtime_type = runtime_type

    def to_dict(self) -> Dict[str, Any]:
        return {"settings": self.settings.to_dict(), "type": self.runtime_type}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Runtime":
        return cls(
            settings=RuntimeSettings.from_dict(d["settings"]),
            runtime_type=_require_str(d["type"], "type"),
        )


class EdgeAgentSettings:
    """The system module settings for the Edge Agent"""

    def __init__(
        self,
        settings: ModuleSettings,
        env: Optional[Dict[str, str]] = None,
        runtime_type: str = constant.RUNTIME_TYPE,
    ) -> None:
        self.runtime_type = runtime_type
        self.settings = settings
        self.env = env if env is not None else {}

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.runtime_type, "settings": self.settings.to_dict()}
        if self.env:
            d["env"] = _env_to_dict(self.env)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EdgeAgentSettings":
        return cls(
            runtime_type=_require_str(d["type"], "type"),
            settings=ModuleSettings.from_dict(d["settings"]),
            env=_env_from_dict(d.get("env")),
        )


class EdgeHubSettings:
    """The system module settings for the Edge Hub.

    The Edge Hub always runs, and is always restarted.
    """

    def __init__(
        self,
        settings: ModuleSettings,
        env: Optional[Dict[str, str]] = None,
        runtime_type: str = constant.RUNTIME_TYPE,
        restart_policy: RestartPolicy = RestartPolicy.ALWAYS,
        status: Status = Status.RUNNING,
    ) -> None:
        self.runtime_type = runtime_type
        self.restart_policy = restart_policy
        self.status = status
        self.settings = settings
        self.env = env if env is not None else {}

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.runtime_type,
            "restartPolicy": self.restart_policy.value,
            "status": self.status.value,
            "settings": self.settings.to_dict(),
        }
        if self.env:
            d["env"] = _env_to_dict(self.env)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EdgeHubSettings":
        return cls(
            runtime_type=_require_str(d["type"], "type"),
            restart_policy=RestartPolicy(d["restartPolicy"]),
            status=Status(d["status"]),
            settings=ModuleSettings.from_dict(d["settings"]),
            env=_env_from_dict(d.get("env")),
        )


class SystemModules:
    def __init__(self, edge_agent: EdgeAgentSettings, edge_hub: EdgeHubSettings) -> None:
        self.edge_agent = edge_agent
        self.edge_hub = edge_hub

    def to_dict(self) -> Dict[str, Any]:
        return {"edgeAgent": self.edge_agent.to_dict(), "edgeHub": self.edge_hub.to_dict()}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SystemModules":
        return cls(
            edge_agent=EdgeAgentSettings.from_dict(d["edgeAgent"]),
            edge_hub=EdgeHubSettings.from_dict(d["edgeHub"]),
        )


class EdgeAgent:
    """The desired properties of the Edge Agent, i.e. which modules run on the device

    :ivar str schema_version: The schema version of the manifest (always "1.0")
    :ivar runtime: The container runtime settings
    :ivar system_modules: The Edge Agent and Edge Hub settings
    :ivar dict modules: The custom modules, keyed by module id
    """

    def __init__(
        self,
        runtime: Runtime,
        system_modules: SystemModules,
        modules: Optional[Dict[str, EdgeModule]] = None,
        schema_version: str = constant.MANIFEST_SCHEMA_VERSION,
    ) -> None:
        self.schema_version = schema_version
        self.runtime = runtime
        self.system_modules = system_modules
        self.modules = modules if modules is not None else {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "runtime": self.runtime.to_dict(),
            "systemModules": self.system_modules.to_dict(),
            "modules": {module_id: module.to_dict() for module_id, module in self.modules.items()},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EdgeAgent":
        d = _require_dict(d, constant.EDGE_AGENT_KEY)
        modules = {
            module_id: EdgeModule.from_dict(module_id, module)
            for module_id, module in _require_dict(d["modules"], "modules").items()
        }
        return cls(
            schema_version=_require_str(d["schemaVersion"], "schemaVersion"),
            runtime=Runtime.from_dict(d["runtime"]),
            system_modules=SystemModules.from_dict(d["systemModules"]),
            modules=modules,
        )


class StoreAndForwardConfiguration:
    def __init__(self, time_to_live_secs: int) -> None:
        self.time_to_live_secs = time_to_live_secs

    def to_dict(self) -> Dict[str, int]:
        return {"timeToLiveSecs": self.time_to_live_secs}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StoreAndForwardConfiguration":
        time_to_live_secs = d["timeToLiveSecs"]
        if not isinstance(time_to_live_secs, int) or isinstance(time_to_live_secs, bool):
            raise TypeError("Expected 'timeToLiveSecs' to be an integer")
        return cls(time_to_live_secs=time_to_live_secs)


class EdgeHub:
    """The desired properties of the Edge Hub, i.e. how messages are routed on the device

    :ivar str schema_version: The schema version of the manifest (always "1.0")
    :ivar dict routes: Routes keyed by route name
    :ivar store_and_forward_configuration: How long messages are kept while offline
    """

    def __init__(
        self,
        store_and_forward_configuration: StoreAndForwardConfiguration,
        routes: Optional[Dict[str, str]] = None,
        schema_version: str = constant.MANIFEST_SCHEMA_VERSION,
    ) -> None:
        self.schema_version = schema_version
        self.routes = routes if routes is not None else {}
        self.store_and_forward_configuration = store_and_forward_configuration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "routes": dict(self.routes),
            "storeAndForwardConfiguration": self.store_and_forward_configuration.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EdgeHub":
        d = _require_dict(d, constant.EDGE_HUB_KEY)
        routes = {
            name: _require_str(route, name)
            for name, route in _require_dict(d["routes"], "routes").items()
        }
        return cls(
            schema_version=_require_str(d["schemaVersion"], "schemaVersion"),
            routes=routes,
            store_and_forward_configuration=StoreAndForwardConfiguration.from_dict(
                d["storeAndForwardConfiguration"]
            ),
        )


class ModulesContent:
    """An IoT Edge deployment manifest.
    Create instances with :class:`azure.iot.hubservice.configuration.ModulesContentBuilder`.
    """

    def __init__(self, edge_agent: EdgeAgent, edge_hub: EdgeHub) -> None:
        self.edge_agent = edge_agent
        self.edge_hub = edge_hub

    def to_dict(self) -> Dict[str, Any]:
        """Return the manifest in its wire format, where each section is nested under
        a "properties.desired" key"""
        return {
            constant.EDGE_AGENT_KEY: {constant.DESIRED_PROPERTIES_KEY: self.edge_agent.to_dict()},
            constant.EDGE_HUB_KEY: {constant.DESIRED_PROPERTIES_KEY: self.edge_hub.to_dict()},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ModulesContent":
        return cls(
            edge_agent=EdgeAgent.from_dict(
                d[constant.EDGE_AGENT_KEY][constant.DESIRED_PROPERTIES_KEY]
            ),
            edge_hub=EdgeHub.from_dict(d[constant.EDGE_HUB_KEY][constant.DESIRED_PROPERTIES_KEY]),
        )


# ~~~~~ Twins ~~~~~


class TwinPatch:
    """Tags and desired properties to apply to a device or module twin.
    Create instances with :class:`azure.iot.hubservice.twin.TwinPatchBuilder`.
    """

    def __init__(
        self,
        desired_properties: Optional[JSONSerializable] = None,
        tags: Optional[Dict[str, JSONSerializable]] = None,
    ) -> None:
        self._desired_properties = desired_properties if desired_properties is not None else {}
        self._tags = dict(tags) if tags else {}

    @property
    def desired_properties(self) -> JSONSerializable:
        return self._desired_properties

    @property
    def tags(self) -> Dict[str, JSONSerializable]:
        return dict(self._tags)

    def to_dict(self) -> Dict[str, Any]:
        return {"properties": {"desired": self._desired_properties}, "tags": dict(self._tags)}


class TwinProperties:
    def __init__(self, desired: JSONSerializable, reported: JSONSerializable) -> None:
        self.desired = desired
        self.reported = reported

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TwinProperties":
        d = _require_dict(d, "properties")
        return cls(desired=d["desired"], reported=d["reported"])


class _Twin:
    """Fields shared by device and module twins"""

    def __init__(self, d: TwinDocument) -> None:
        d = _require_dict(d, "twin")
        self.device_id: str = _require_str(d["deviceId"], "deviceId")
        self.etag: str = _require_str(d["etag"], "etag")
        self.version: int = d["version"]
        self.status = DeviceStatus(d["status"])
        self.connection_state = ConnectionState(d["connectionState"])
        self.properties = TwinProperties.from_dict(d["properties"])
        self.tags: Dict[str, JSONSerializable] = _require_dict(d.get("tags") or {}, "tags")
        authentication_type = d.get("authenticationType")
        self.authentication_type: Optional[AuthenticationType] = (
            AuthenticationType(authentication_type) if authentication_type is not None else None
        )
        self.device_etag: Optional[str] = d.get("deviceEtag")
        self.status_update_time: Optional[str] = d.get("statusUpdateTime")
        self.last_activity_time: Optional[str] = d.get("lastActivityTime")
        self.cloud_to_device_message_count: Optional[int] = d.get("cloudToDeviceMessageCount")
        self.x509_thumbprint: Optional[Dict[str, Any]] = d.get("x509Thumbprint")
        if not isinstance(self.version, int):
            raise TypeError("Expected 'version' to be an integer")
        self._raw = d

    def to_dict(self) -> TwinDocument:
        """Return the twin document as received from IoT Hub"""
        return self._raw


class DeviceTwin(_Twin):
    """A device twin as returned by IoT Hub"""

    def __init__(self, d: TwinDocument) -> None:
        super().__init__(d)
        capabilities = d.get("capabilities") or {}
        self.iot_edge: bool = bool(capabilities.get("iotEdge", False))
        self.device_scope: Optional[str] = d.get("deviceScope")
        self.parent_scopes = d.get("parentScopes")
        self.status_reason: Optional[str] = d.get("statusReason")

    @classmethod
    def from_dict(cls, d: TwinDocument) -> "DeviceTwin":
        return cls(d)


class ModuleTwin(_Twin):
    """A module twin as returned by IoT Hub"""

    def __init__(self, d: TwinDocument) -> None:
        super().__init__(d)
        self.module_id: str = _require_str(d["moduleId"], "moduleId")

    @classmethod
    def from_dict(cls, d: TwinDocument) -> "ModuleTwin":
        return cls(d)


# ~~~~~ Direct Methods ~~~~~


class DirectMethodResponse:
    """The response to a direct method invocation.

    A response does not mean the invocation was successful, the status reported by the
    device should still be verified.

    :ivar int status: The status reported by the device or module
    :ivar payload: The JSON payload reported by the device or module
    """

    def __init__(self, status: int, payload: JSONSerializable = None) -> None:
        self.status = status
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "payload": self.payload}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DirectMethodResponse":
        d = _require_dict(d, "response")
        status = d["status"]
        if not isinstance(status, int) or isinstance(status, bool):
            raise TypeError("Expected 'status' to be an integer")
        return cls(status=status, payload=d["payload"])


# ~~~~~ Errors ~~~~~


class ServiceErrorDetail:
    """The structured error reported by IoT Hub in the body of a failure response.

    IoT Hub double encodes these errors: the outer envelope is a JSON object whose "Message"
    field is itself a JSON document, e.g.
    {"Message": "{\\"errorCode\\":404001,...}", "ExceptionMessage": "..."}

    :ivar int error_code: The IoT Hub error code (e.g. 404001)
    :ivar str tracking_id: The tracking id of the failed request
    :ivar str message: A human readable description of the error
    :ivar info: Additional information about the error
    :ivar str timestamp_utc: The ISO-8601 timestamp of the error
    :ivar str exception_message: The outer exception message of the envelope
    """

    def __init__(
        self,
        error_code: int,
        tracking_id: str,
        message: str,
        info: JSONSerializable = None,
        timestamp_utc: Optional[str] = None,
        exception_message: Optional[str] = None,
    ) -> None:
        self.error_code = error_code
        self.tracking_id = tracking_id
        self.message = message
        self.info = info
        self.timestamp_utc = timestamp_utc
        self.exception_message = exception_message

    def __str__(self) -> str:
        return "{code}: {message} (tracking id: {tracking_id})".format(
            code=self.error_code, message=self.message, tracking_id=self.tracking_id
        )

    @classmethod
    def from_response_body(cls, body: str) -> "ServiceErrorDetail":
        """Parse the error detail out of the body of a failure response.

        :raises: ValueError if the body (or the JSON embedded in it) is not valid JSON
        :raises: KeyError or TypeError if the body does not have the expected shape
        """
        envelope = _require_dict(json.loads(body), "envelope")
        inner = _require_dict(json.loads(_require_str(envelope["Message"], "Message")), "Message")
        error_code = inner["errorCode"]
        if not isinstance(error_code, int) or isinstance(error_code, bool):
            raise TypeError("Expected 'errorCode' to be an integer")
        return cls(
            error_code=error_code,
            tracking_id=_require_str(inner["trackingId"], "trackingId"),
            message=_require_str(inner["message"], "message"),
            info=inner.get("info"),
            timestamp_utc=inner.get("timestampUtc"),
            exception_message=envelope.get("ExceptionMessage"),
        )
