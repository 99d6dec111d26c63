# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the azure-iot-hubservice package
"""

VERSION = "0.1.0"
IOTHUB_API_VERSION = "2020-09-30"
IOTHUB_HOST_SUFFIX = ".azure-devices.net"
DEFAULT_SHARED_ACCESS_KEY_NAME = "iothubowner"
DEFAULT_TOKEN_TTL = 3600

# Edge deployment manifest
MANIFEST_SCHEMA_VERSION = "1.0"
RUNTIME_TYPE = "docker"
EDGE_AGENT_KEY = "$edgeAgent"
EDGE_HUB_KEY = "$edgeHub"
DESIRED_PROPERTIES_KEY = "properties.desired"
