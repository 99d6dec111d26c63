# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the builders for IoT Edge deployment manifests.

Builders accumulate values and validate them when .build() is invoked, so that a
deployment manifest is never sent to IoT Hub unless it is complete.
"""

import logging
from typing import Optional, Dict
from .custom_typing import JSONSerializable
from .exceptions import MissingFieldError, InvalidValueError
from .models import (
    EdgeAgent,
    EdgeAgentSettings,
    EdgeHub,
    EdgeHubSettings,
    EdgeModule,
    ImagePullPolicy,
    ModulesContent,
    ModuleSettings,
    RegistryCredential,
    RestartPolicy,
    Runtime,
    RuntimeSettings,
    Status,
    StoreAndForwardConfiguration,
    SystemModules,
    serialize_json_blob,
)

logger = logging.getLogger(__name__)


def _serialize_optional_blob(value: Optional[JSONSerializable], field_name: str) -> Optional[str]:
    if value is None:
        return None
    try:
        return serialize_json_blob(value)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(field_name) from e


class EdgeModuleBuilder(object):
    """Builds the configuration of a custom module for IoT Edge.

    module_id, version, status, restart_policy and image are required.

    Example::

        edge_module = (
            EdgeModuleBuilder()
            .module_id("SomeModule")
            .image("some_image.acr")
            .restart_policy(RestartPolicy.ALWAYS)
            .status(Status.RUNNING)
            .version("1.0")
            .build()
        )
    """

    def __init__(self) -> None:
        self._module_id: Optional[str] = None
        self._version: Optional[str] = None
        self._status: Optional[Status] = None
        self._restart_policy: Optional[RestartPolicy] = None
        self._image_pull_policy: Optional[ImagePullPolicy] = None
        self._env: Dict[str, str] = {}
        self._image: Optional[str] = None
        self._create_options: Optional[JSONSerializable] = None

    def module_id(self, module_id: str) -> "EdgeModuleBuilder":
        self._module_id = module_id
        return self

    def version(self, version: str) -> "EdgeModuleBuilder":
        self._version = version
        return self

    def status(self, status: Status) -> "EdgeModuleBuilder":
        self._status = status
        return self

    def restart_policy(self, restart_policy: RestartPolicy) -> "EdgeModuleBuilder":
        self._restart_policy = restart_policy
        return self

    def image_pull_policy(self, image_pull_policy: ImagePullPolicy) -> "EdgeModuleBuilder":
        self._image_pull_policy = image_pull_policy
        return self

    def environment_variable(self, name: str, value: str) -> "EdgeModuleBuilder":
        """Add an environment variable to the module. Setting a variable twice overwrites it."""
        self._env[name] = value
        return self

    def environment_variables(self, variables: Dict[str, str]) -> "EdgeModuleBuilder":
        """Add multiple environment variables to the module"""
        self._env.update(variables)
        return self

    def image(self, image: str) -> "EdgeModuleBuilder":
        self._image = image
        return self

    def create_options(self, create_options: JSONSerializable) -> "EdgeModuleBuilder":
        """Set the docker create options of the module. They are passed to the Edge
        runtime unexamined."""
        self._create_options = create_options
        return self

    def build(self) -> EdgeModule:
        """Build the EdgeModule

        :raises: :class:`azure.iot.hubservice.exceptions.MissingFieldError` naming the first
            required field that was not set
        :raises: :class:`azure.iot.hubservice.exceptions.InvalidValueError` if the create
            options cannot be serialized to JSON
        """
        if self._module_id is None:
            raise MissingFieldError("module_id")
        if self._version is None:
            raise MissingFieldError("version")
        if self._status is None:
            raise MissingFieldError("status")
        if self._restart_policy is None:
            raise MissingFieldError("restart_policy")
        if self._image is None:
            raise MissingFieldError("image")

        create_options = _serialize_optional_blob(self._create_options, "create_options")

        return EdgeModule(
            module_id=self._module_id,
            version=self._version,
            status=self._status,
            restart_policy=self._restart_policy,
            image_pull_policy=self._image_pull_policy,
            env=dict(self._env),
            settings=ModuleSettings(image=self._image, create_options=create_options),
        )


class ModulesContentBuilder(object):
    """Builds an IoT Edge deployment manifest.

    minimum_docker_version, edge_agent_image, edge_hub_image and time_to_live_secs are
    required. The Edge Hub system module is always configured to be running, and to
    always restart.

    Example::

        modules_content = (
            ModulesContentBuilder()
            .edge_agent_image("mcr.microsoft.com/azureiotedge-agent:1.0.9")
            .edge_hub_image("mcr.microsoft.com/azureiotedge-hub:1.0.9")
            .minimum_docker_version("v1.25")
            .time_to_live_secs(10)
            .build()
        )
    """

    def __init__(self) -> None:
        self._minimum_docker_version: Optional[str] = None
        self._logging_options: Optional[JSONSerializable] = None
        self._registry_credentials: Dict[str, RegistryCredential] = {}
        self._edge_agent_env: Dict[str, str] = {}
        self._edge_hub_env: Dict[str, str] = {}
        self._edge_agent_image: Optional[str] = None
        self._edge_hub_image: Optional[str] = None
        self._edge_agent_create_options: Optional[JSONSerializable] = None
        self._edge_hub_create_options: Optional[JSONSerializable] = None
        self._modules: Dict[str, EdgeModule] = {}
        self._routes: Dict[str, str] = {}
        self._time_to_live_secs: Optional[int] = None

    def minimum_docker_version(self, version: str) -> "ModulesContentBuilder":
        """Set the minimum docker version the edge device should have for this deployment"""
        self._minimum_docker_version = version
        return self

    def registry_credential(
        self, name: str, username: str, password: str, address: str
    ) -> "ModulesContentBuilder":
        """Add a container registry credential, keyed by a name of your choosing"""
        self._registry_credentials[name] = RegistryCredential(
            username=username, password=password, address=address
        )
        return self

    def logging_options(self, logging_options: JSONSerializable) -> "ModulesContentBuilder":
        """Set the docker logging options of the Edge runtime"""
        self._logging_options = logging_options
        return self

    def route(self, name: str, route: str) -> "ModulesContentBuilder":
        """Add a message route to the Edge Hub,
        e.g. "FROM /messages/modules/SomeModule/outputs/* INTO $upstream"
        """
        self._routes[name] = route
        return self

    def time_to_live_secs(self, seconds: int) -> "ModulesContentBuilder":
        """Set how long the Edge Hub keeps messages when it cannot reach IoT Hub"""
        self._time_to_live_secs = seconds
        return self

    def edge_agent_image(self, image: str) -> "ModulesContentBuilder":
        self._edge_agent_image = image
        return self

    def edge_hub_image(self, image: str) -> "ModulesContentBuilder":
        self._edge_hub_image = image
        return self

    def edge_agent_create_options(
        self, create_options: JSONSerializable
    ) -> "ModulesContentBuilder":
        self._edge_agent_create_options = create_options
        return self

    def edge_hub_create_options(self, create_options: JSONSerializable) -> "ModulesContentBuilder":
        self._edge_hub_create_options = create_options
        return self

    def edge_agent_env(self, name: str, value: str) -> "ModulesContentBuilder":
        self._edge_agent_env[name] = value
        return self

    def edge_hub_env(self, name: str, value: str) -> "ModulesContentBuilder":
        self._edge_hub_env[name] = value
        return self

    def edge_module(self, edge_module: EdgeModule) -> "ModulesContentBuilder":
        """Add a custom module. Adding a module with an id that was already added
        replaces the earlier module."""
        if edge_module.module_id in self._modules:
            logger.debug("Replacing module {} in deployment".format(edge_module.module_id))
        self._modules[edge_module.module_id] = edge_module
        return self

    def build(self) -> ModulesContent:
        """Build the ModulesContent

        :raises: :class:`azure.iot.hubservice.exceptions.MissingFieldError` naming the first
            required field that was not set, checked in the order time_to_live_secs,
            minimum_docker_version, edge_hub_image, edge_agent_image
        :raises: :class:`azure.iot.hubservice.exceptions.InvalidValueError` if the logging
            options or create options cannot be serialized to JSON
        """
        if self._time_to_live_secs is None:
            raise MissingFieldError("time_to_live_secs")
        if self._minimum_docker_version is None:
            raise MissingFieldError("minimum_docker_version")
        if self._edge_hub_image is None:
            raise MissingFieldError("edge_hub_image")
        if self._edge_agent_image is None:
            raise MissingFieldError("edge_agent_image")

        logging_options = _serialize_optional_blob(self._logging_options, "logging_options")
        edge_agent_create_options = _serialize_optional_blob(
            self._edge_agent_create_options, "edge_agent_create_options"
        )
        edge_hub_create_options = _serialize_optional_blob(
            self._edge_hub_create_options, "edge_hub_create_options"
        )

        edge_agent = EdgeAgent(
            runtime=Runtime(
                settings=RuntimeSettings(
                    min_docker_version=self._minimum_docker_version,
                    logging_options=logging_options,
                    registry_credentials=dict(self._registry_credentials),
                )
            ),
            system_modules=SystemModules(
                edge_agent=EdgeAgentSettings(
                    settings=ModuleSettings(
                        image=self._edge_agent_image, create_options=edge_agent_create_options
                    ),
                    env=dict(self._edge_agent_env),
                ),
                edge_hub=EdgeHubSettings(
                    settings=ModuleSettings(
                        image=self._edge_hub_image, create_options=edge_hub_create_options
                    ),
                    env=dict(self._edge_hub_env),
                    restart_policy=RestartPolicy.ALWAYS,
                    status=Status.RUNNING,
                ),
            ),
            modules=dict(self._modules),
        )
        edge_hub = EdgeHub(
            routes=dict(self._routes),
            store_and_forward_configuration=StoreAndForwardConfiguration(
                time_to_live_secs=self._time_to_live_secs
            ),
        )
        return ModulesContent(edge_agent=edge_agent, edge_hub=edge_hub)
