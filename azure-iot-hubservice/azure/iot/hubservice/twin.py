# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the tools for reading and updating device and module twins."""

from typing import Dict, Optional
from .custom_typing import JSONSerializable
from .http_client import IoTHubServiceHTTPClient
from .models import DeviceTwin, ModuleTwin, TwinPatch


class TwinPatchBuilder(object):
    """Builds a patch of tags and desired properties for a twin.

    Example::

        twin_patch = (
            TwinPatchBuilder()
            .properties({"telemetryInterval": 30})
            .add_tag("location", "Amsterdam")
            .build()
        )
    """

    def __init__(self) -> None:
        self._desired_properties: Optional[JSONSerializable] = None
        self._tags: Dict[str, JSONSerializable] = {}

    def properties(self, desired_properties: JSONSerializable) -> "TwinPatchBuilder":
        """Set the desired properties of the patch, replacing any set earlier"""
        self._desired_properties = desired_properties
        return self

    def add_tag(self, name: str, value: JSONSerializable) -> "TwinPatchBuilder":
        self._tags[name] = value
        return self

    def build(self) -> TwinPatch:
        return TwinPatch(desired_properties=self._desired_properties, tags=self._tags)


class TwinManager(object):
    """Reads, updates and replaces device and module twins.

    Update operations merge the patch into the twin, replace operations overwrite the tags
    and desired properties of the twin with those in the patch. All operations accept an
    optional etag, in which case IoT Hub only applies the change if the twin has not been
    modified since that etag was issued.
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient) -> None:
        self._http_client = http_client

    async def get_device_twin(self, device_id: str) -> DeviceTwin:
        return await self._http_client.get_twin(device_id=device_id)

    async def get_module_twin(self, device_id: str, module_id: str) -> ModuleTwin:
        return await self._http_client.get_twin(device_id=device_id, module_id=module_id)

    async def update_device_twin(
        self, device_id: str, twin_patch: TwinPatch, etag: Optional[str] = None
    ) -> DeviceTwin:
        return await self._http_client.update_twin(
            device_id=device_id, twin_patch=twin_patch, etag=etag
        )

    async def update_module_twin(
        self, device_id: str, module_id: str, twin_patch: TwinPatch, etag: Optional[str] = None
    ) -> ModuleTwin:
        return await self._http_client.update_twin(
            device_id=device_id, module_id=module_id, twin_patch=twin_patch, etag=etag
        )

    async def replace_device_twin(
        self, device_id: str, twin_patch: TwinPatch, etag: Optional[str] = None
    ) -> DeviceTwin:
        return await self._http_client.replace_twin(
            device_id=device_id, twin_patch=twin_patch, etag=etag
        )

    async def replace_module_twin(
        self, device_id: str, module_id: str, twin_patch: TwinPatch, etag: Optional[str] = None
    ) -> ModuleTwin:
        return await self._http_client.replace_twin(
            device_id=device_id, module_id=module_id, twin_patch=twin_patch, etag=etag
        )
