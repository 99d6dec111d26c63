# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import logging
import pytest
from azure.iot.hubservice.http_client import IoTHubServiceHTTPClient
from azure.iot.hubservice.models import TwinPatch
from azure.iot.hubservice.twin import TwinManager, TwinPatchBuilder

logging.basicConfig(level=logging.DEBUG)

FAKE_DEVICE_ID = "SomeDevice"
FAKE_MODULE_ID = "SomeModule"
FAKE_ETAG = "AAAAAAAAAAM="


@pytest.mark.describe("TwinPatchBuilder - .build()")
class TestTwinPatchBuilderBuild(object):
    @pytest.mark.it("Always succeeds, producing empty desired properties and tags if none are set")
    def test_empty(self):
        patch = TwinPatchBuilder().build()
        assert isinstance(patch, TwinPatch)
        assert patch.to_dict() == {"properties": {"desired": {}}, "tags": {}}

    @pytest.mark.it("Includes the desired properties and tags that were set")
    def test_full(self):
        patch = (
            TwinPatchBuilder()
            .properties({"telemetryInterval": 30})
            .add_tag("location", "Amsterdam")
            .add_tag("floor", 3)
            .build()
        )
        assert patch.to_dict() == {
            "properties": {"desired": {"telemetryInterval": 30}},
            "tags": {"location": "Amsterdam", "floor": 3},
        }

    @pytest.mark.it("Uses the most recent value when a tag or the desired properties are set twice")
    def test_overwrite(self):
        patch = (
            TwinPatchBuilder()
            .properties({"a": 1})
            .properties({"b": 2})
            .add_tag("location", "Amsterdam")
            .add_tag("location", "Utrecht")
            .build()
        )
        assert patch.desired_properties == {"b": 2}
        assert patch.tags == {"location": "Utrecht"}

    @pytest.mark.it("Does not share state between patches built from the same builder")
    def test_independent_builds(self):
        builder = TwinPatchBuilder().add_tag("a", "1")
        first = builder.build()
        builder.add_tag("b", "2")
        assert first.tags == {"a": "1"}


@pytest.mark.describe("TwinManager")
class TestTwinManager(object):
    @pytest.fixture
    def mock_http_client(self, mocker):
        return mocker.AsyncMock(spec=IoTHubServiceHTTPClient)

    @pytest.fixture
    def twin_manager(self, mock_http_client):
        return TwinManager(mock_http_client)

    @pytest.fixture
    def twin_patch(self):
        return TwinPatchBuilder().properties({"a": 1}).build()

    @pytest.mark.it(".get_device_twin() gets the device twin using the HTTP client")
    async def test_get_device_twin(self, mocker, twin_manager, mock_http_client):
        twin = await twin_manager.get_device_twin(FAKE_DEVICE_ID)
        assert mock_http_client.get_twin.await_count == 1
        assert mock_http_client.get_twin.await_args == mocker.call(device_id=FAKE_DEVICE_ID)
        assert twin is mock_http_client.get_twin.return_value

    @pytest.mark.it(".get_module_twin() gets the module twin using the HTTP client")
    async def test_get_module_twin(self, mocker, twin_manager, mock_http_client):
        twin = await twin_manager.get_module_twin(FAKE_DEVICE_ID, FAKE_MODULE_ID)
        assert mock_http_client.get_twin.await_args == mocker.call(
            device_id=FAKE_DEVICE_ID, module_id=FAKE_MODULE_ID
        )
        assert twin is mock_http_client.get_twin.return_value

    @pytest.mark.it(".update_device_twin() updates the device twin using the HTTP client")
    @pytest.mark.parametrize(
        "etag", [pytest.param(None, id="No etag"), pytest.param(FAKE_ETAG, id="With etag")]
    )
    async def test_update_device_twin(
        self, mocker, twin_manager, mock_http_client, twin_patch, etag
    ):
        twin = await twin_manager.update_device_twin(FAKE_DEVICE_ID, twin_patch, etag=etag)
        assert mock_http_client.update_twin.await_args == mocker.call(
            device_id=FAKE_DEVICE_ID, twin_patch=twin_patch, etag=etag
        )
        assert twin is mock_http_client.update_twin.return_value

    @pytest.mark.it(".update_module_twin() updates the module twin using the HTTP client")
    async def test_update_module_twin(self, mocker, twin_manager, mock_http_client, twin_patch):
        twin = await twin_manager.update_module_twin(FAKE_DEVICE_ID, FAKE_MODULE_ID, twin_patch)
        assert mock_http_client.update_twin.await_args == mocker.call(
            device_id=FAKE_DEVICE_ID, module_id=FAKE_MODULE_ID, twin_patch=twin_patch, etag=None
        )
        assert twin is mock_http_client.update_twin.return_value

    @pytest.mark.it(".replace_device_twin() replaces the device twin using the HTTP client")
    async def test_replace_device_twin(self, mocker, twin_manager, mock_http_client, twin_patch):
        twin = await twin_manager.replace_device_twin(FAKE_DEVICE_ID, twin_patch, FAKE_ETAG)
        assert mock_http_client.replace_twin.await_args == mocker.call(
            device_id=FAKE_DEVICE_ID, twin_patch=twin_patch, etag=FAKE_ETAG
        )
        assert twin is mock_http_client.replace_twin.return_value

    @pytest.mark.it(".replace_module_twin() replaces the module twin using the HTTP client")
    async def test_replace_module_twin(self, mocker, twin_manager, mock_http_client, twin_patch):
        twin = await twin_manager.replace_module_twin(FAKE_DEVICE_ID, FAKE_MODULE_ID, twin_patch)
        assert mock_http_client.replace_twin.await_args == mocker.call(
            device_id=FAKE_DEVICE_ID, module_id=FAKE_MODULE_ID, twin_patch=twin_patch, etag=None
        )
        assert twin is mock_http_client.replace_twin.return_value

    @pytest.mark.it("Allows any exceptions raised by the HTTP client to propagate")
    async def test_raises(self, twin_manager, mock_http_client, arbitrary_exception):
        mock_http_client.get_twin.side_effect = arbitrary_exception
        with pytest.raises(type(arbitrary_exception)) as e_info:
            await twin_manager.get_device_twin(FAKE_DEVICE_ID)
        assert e_info.value is arbitrary_exception
