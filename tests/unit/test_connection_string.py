# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
import logging
from azure.iot.hubservice.connection_string import ConnectionString
from azure.iot.hubservice.exceptions import InvalidConnectionString

logging.basicConfig(level=logging.DEBUG)

FAKE_KEY = "YSB2ZXJ5IHNlY3VyZSBrZXkgaXMgaW1wb3J0YW50Cg=="
VALID_CONNECTION_STRING = "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey={}".format(
    FAKE_KEY
)


@pytest.mark.describe("ConnectionString")
class TestConnectionString(object):
    @pytest.mark.it("Instantiates from a valid connection string, with the fields in any order")
    @pytest.mark.parametrize(
        "input_string",
        [
            pytest.param(VALID_CONNECTION_STRING, id="HostName, SharedAccessKeyName, SharedAccessKey"),
            pytest.param(
                "SharedAccessKey={};HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner".format(
                    FAKE_KEY
                ),
                id="SharedAccessKey, HostName, SharedAccessKeyName",
            ),
            pytest.param(
                "SharedAccessKeyName=iothubowner;SharedAccessKey={};HostName=cool-iot-hub.azure-devices.net".format(
                    FAKE_KEY
                ),
                id="SharedAccessKeyName, SharedAccessKey, HostName",
            ),
        ],
    )
    def test_instantiates_correctly_from_string(self, input_string):
        cs = ConnectionString(input_string)
        assert isinstance(cs, ConnectionString)
        assert cs.resource_name == "cool-iot-hub"
        assert cs.shared_access_key == FAKE_KEY

    @pytest.mark.it(
        "Raises InvalidConnectionString (a ValueError) on invalid string input during instantiation"
    )
    @pytest.mark.parametrize(
        "input_string",
        [
            pytest.param("", id="Empty string"),
            pytest.param("garbage", id="Not a connection string"),
            pytest.param(
                "HostName=cool-iot-hub.azure-devices.net;SharedAccessKey={}".format(FAKE_KEY),
                id="Too few fields",
            ),
            pytest.param(
                "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey={};DeviceId=my-device".format(
                    FAKE_KEY
                ),
                id="Too many fields",
            ),
            pytest.param(
                "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey={};".format(
                    FAKE_KEY
                ),
                id="Trailing delimiter",
            ),
            pytest.param(
                "HostName=cool-iot-hub.example.com;SharedAccessKeyName=iothubowner;SharedAccessKey={}".format(
                    FAKE_KEY
                ),
                id="Missing hostname suffix",
            ),
            pytest.param(
                "HostName=.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey={}".format(
                    FAKE_KEY
                ),
                id="Empty hub name",
            ),
            pytest.param(
                "InvalidKey=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey={}".format(
                    FAKE_KEY
                ),
                id="Missing HostName",
            ),
            pytest.param(
                "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessSignature=abc",
                id="Missing SharedAccessKey",
            ),
            pytest.param(
                "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey",
                id="SharedAccessKey without separator",
            ),
        ],
    )
    def test_raises_value_error_on_invalid_input(self, input_string):
        with pytest.raises(InvalidConnectionString):
            ConnectionString(input_string)
        with pytest.raises(ValueError):
            ConnectionString(input_string)

    @pytest.mark.it("Raises TypeError on non-string input during instantiation")
    @pytest.mark.parametrize(
        "input_val",
        [
            pytest.param(2123, id="Integer"),
            pytest.param(23.098, id="Float"),
            pytest.param(b"bytes", id="Bytes"),
            pytest.param(object(), id="Complex object"),
            pytest.param(["a", "b"], id="List"),
            pytest.param({"a": "b"}, id="Dictionary"),
        ],
    )
    def test_raises_type_error_on_non_string_input(self, input_val):
        with pytest.raises(TypeError):
            ConnectionString(input_val)

    @pytest.mark.it("Uses the input connection string as a string representation")
    def test_string_representation_of_object_is_the_input_string(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert str(cs) == VALID_CONNECTION_STRING

    @pytest.mark.it("Supports indexing syntax to return the stored value for a given key")
    def test_indexing_key_returns_corresponding_value(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert cs["HostName"] == "cool-iot-hub.azure-devices.net"
        assert cs["SharedAccessKeyName"] == "iothubowner"
        assert cs["SharedAccessKey"] == FAKE_KEY

    @pytest.mark.it("Raises KeyError if indexing on a key not contained in the ConnectionString")
    def test_indexing_key_raises_key_error_if_key_not_in_string(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        with pytest.raises(KeyError):
            cs["SharedAccessSignature"]

    @pytest.mark.it(
        "Supports the 'in' operator for validating if a key is contained in the ConnectionString"
    )
    def test_item_in_string(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert "SharedAccessKey" in cs
        assert "SharedAccessKeyName" in cs
        assert "HostName" in cs
        assert "FakeKeyNotInTheString" not in cs

    @pytest.mark.it("Keeps everything after 'SharedAccessKey=' as the key, including '=' padding")
    def test_key_with_padding(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert cs.shared_access_key.endswith("==")
        assert cs.shared_access_key == FAKE_KEY

    @pytest.mark.it(
        "Derives the resource name from the part of the HostName before '.azure-devices.net'"
    )
    def test_resource_name(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert cs.resource_name == "cool-iot-hub"

    @pytest.mark.it("Exposes the SharedAccessKeyName as the shared access key name")
    def test_shared_access_key_name(self):
        cs = ConnectionString(
            "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=service;SharedAccessKey={}".format(
                FAKE_KEY
            )
        )
        assert cs.shared_access_key_name == "service"

    @pytest.mark.it("Accepts an empty SharedAccessKey, leaving it to the signer to reject")
    def test_empty_shared_access_key(self):
        cs = ConnectionString(
            "HostName=cool-iot-hub.azure-devices.net;SharedAccessKeyName=iothubowner;SharedAccessKey="
        )
        assert cs.shared_access_key == ""

    @pytest.mark.it("Ignores a field that has no '=' separator")
    def test_field_without_separator(self):
        cs = ConnectionString(
            "HostName=cool-iot-hub.azure-devices.net;garbage;SharedAccessKey={}".format(FAKE_KEY)
        )
        assert cs.resource_name == "cool-iot-hub"
        assert cs.shared_access_key == FAKE_KEY
        assert "garbage" not in cs
        assert cs.shared_access_key_name == "iothubowner"


@pytest.mark.describe("ConnectionString - .get()")
class TestConnectionStringGet(object):
    @pytest.mark.it("Returns the stored value for a given key")
    def test_calling_get_with_key_returns_corresponding_value(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert cs.get("HostName") == "cool-iot-hub.azure-devices.net"

    @pytest.mark.it("Returns None if the given key is invalid")
    def test_calling_get_with_invalid_key_and_no_default_value_returns_none(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert cs.get("invalidkey") is None

    @pytest.mark.it("Returns an optionally provided default value if the given key is invalid")
    def test_calling_get_with_invalid_key_and_a_default_value_returns_default_value(self):
        cs = ConnectionString(VALID_CONNECTION_STRING)
        assert cs.get("invalidkey", "defaultval") == "defaultval"
