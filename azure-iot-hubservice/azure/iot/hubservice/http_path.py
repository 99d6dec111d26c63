# --------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import urllib.parse
from typing import Optional


def _quote(value: str) -> str:
    return urllib.parse.quote(value, safe="")


def get_twin_path(device_id: str, module_id: Optional[str] = None) -> str:
    """
    :return: The path for a device or module twin. It is of the format
    /twins/uri_encode($device_id)/modules/uri_encode($module_id)
    """
    if module_id:
        return "/twins/{device_id}/modules/{module_id}".format(
            device_id=_quote(device_id), module_id=_quote(module_id)
        )
    else:
        return "/twins/{device_id}".format(device_id=_quote(device_id))


def get_method_invoke_path(device_id: str, module_id: Optional[str] = None) -> str:
    """
    :return: The path for invoking a direct method on a device or module. It is of the format
    /twins/uri_encode($device_id)/modules/uri_encode($module_id)/methods
    """
    return get_twin_path(device_id, module_id) + "/methods"


def get_query_path() -> str:
    """
    :return: The path for querying devices. It is of the format /devices/query
    """
    return "/devices/query"


def get_apply_configuration_content_path(device_id: str) -> str:
    """
    :return: The path for applying a deployment manifest to an edge device. It is of the format
    /devices/uri_encode($device_id)/applyConfigurationContent
    """
    return "/devices/{device_id}/applyConfigurationContent".format(device_id=_quote(device_id))
