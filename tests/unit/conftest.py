# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import pytest

FAKE_IOTHUB_NAME = "cool-iot-hub"
FAKE_SHARED_ACCESS_KEY = "YSB2ZXJ5IHNlY3VyZSBrZXkgaXMgaW1wb3J0YW50Cg=="
FAKE_SHARED_ACCESS_KEY_NAME = "iothubowner"
FAKE_CONNECTION_STRING = (
    "HostName={name}.azure-devices.net;SharedAccessKeyName={key_name};SharedAccessKey={key}".format(
        name=FAKE_IOTHUB_NAME, key_name=FAKE_SHARED_ACCESS_KEY_NAME, key=FAKE_SHARED_ACCESS_KEY
    )
)


@pytest.fixture
def arbitrary_exception():
    class ArbitraryException(Exception):
        pass

    e = ArbitraryException("arbitrary description")
    return e


@pytest.fixture
def connection_string():
    return FAKE_CONNECTION_STRING
