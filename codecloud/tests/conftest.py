"""
Pytest configuration and shared fixtures for the cloud storage client tests.
"""
import json
import threading
from io import BytesIO
from unittest.mock import MagicMock, Mock

import pytest

from codecloud.codec.bundle_codec import compress_bundle, encode_base64, pack_bundle
from codecloud.config.app_config import ApiConfig, AppConfig, WorkspaceConfig
from codecloud.mock_api.server import ProjectStore, create_server
from codecloud.sync.local_workspace import LocalWorkspace


SAMPLE_FILES = {
    "pxt.json": json.dumps({
        "name": "Sample",
        "dependencies": {"core": "*"},
        "files": ["main.blocks", "main.ts"],
        "preferredEditor": "tsprj"
    }),
    "main.ts": "basic.showString(\"hi\")\n",
    "main.blocks": "<xml xmlns=\"https://developers.google.com/blockly/xml\"></xml>"
}

SAMPLE_META = {
    "name": "Sample",
    "editor": "blocksprj",
    "targetVersions": {"target": "6.0.18"},
    "meta": {"description": "sample project"},
    "pubId": ""
}


def make_payload(document) -> str:
    """Compress and Base64 encode an arbitrary project document."""
    return encode_base64(compress_bundle(json.dumps(document)))


def make_source_payload(files=None, meta=None) -> str:
    """Payload in the 'source' + 'meta' layout."""
    return encode_base64(pack_bundle(files or SAMPLE_FILES, meta if meta is not None else SAMPLE_META))


def make_text_payload(files=None, header=None) -> str:
    """Payload in the 'text' + 'header' layout."""
    return make_payload({
        "text": files or SAMPLE_FILES,
        "header": header if header is not None else SAMPLE_META
    })


def make_http_response(body, status=200):
    """Build a context-manager mock standing in for urlopen's response."""
    raw = body if isinstance(body, bytes) else json.dumps(body).encode('utf-8')
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.read = Mock(return_value=raw)
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=False)
    return mock_response


def make_http_error_body(body) -> BytesIO:
    raw = body if isinstance(body, bytes) else json.dumps(body).encode('utf-8')
    return BytesIO(raw)


@pytest.fixture
def test_api_config():
    """Create a test API configuration."""
    return ApiConfig(base_url="http://test.example.com")


@pytest.fixture
def test_app_config(test_api_config):
    """Create a test application configuration."""
    return AppConfig(
        api=test_api_config,
        workspace=WorkspaceConfig(path=":memory:", target_id="microbit"),
        user_id="u1"
    )


@pytest.fixture
def workspace():
    """Create an in-memory workspace for testing."""
    ws = LocalWorkspace(":memory:")
    yield ws
    ws.close()


@pytest.fixture
def mock_notifier():
    """Create a mock notification sink."""
    mock = Mock()
    mock.info = Mock()
    mock.error = Mock()
    return mock


@pytest.fixture
def mock_identity():
    """Create a mock identity provider returning a fixed user."""
    mock = Mock()
    mock.current_user_id = Mock(return_value="u1")
    return mock


@pytest.fixture
def mock_api_server():
    """Run the mock project-store API on an ephemeral port."""
    store = ProjectStore()
    server = create_server('127.0.0.1', 0, store=store)
    thread = threading.Thread(target=server.serve_forever, name="MockProjectAPI", daemon=True)
    thread.start()

    host, port = server.server_address[:2]
    server.base_url = f"http://{host}:{port}"
    server.store = store
    yield server

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
