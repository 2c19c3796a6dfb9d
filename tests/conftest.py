"""Pytest configuration and fixtures."""

import httpx
import pytest

from core import cache
from core.config import Settings, set_global_config
from core.http import Http


@pytest.fixture(autouse=True)
def isolated_state():
    """Give every test an empty package cache and default settings."""
    cache.clear()
    set_global_config(Settings(_env_file=None))
    yield
    cache.clear()
    set_global_config(None)


@pytest.fixture
def mock_http():
    """Build an ``Http`` whose requests are answered by ``handler``."""

    def factory(handler, host_type="test"):
        return Http(host_type, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def sample_requirements():
    """Sample requirements.txt content for testing."""
    return "fastapi==0.85.0\nuvicorn>=0.18.0"


@pytest.fixture
def sample_conanfile():
    """Sample conanfile.txt content for testing."""
    return """[requires]
poco/1.9.4
zlib/1.2.11@conan/stable

[generators]
cmake
"""


@pytest.fixture
def sample_kubernetes():
    """Sample Kubernetes deployment for testing."""
    return """apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  template:
    spec:
      containers:
        - name: nginx
          image: nginx:1.19.0
        - name: sidecar
          image: "quay.io/prometheus/node-exporter"
"""


@pytest.fixture
def temp_manifest_file(tmp_path):
    """Create a temporary manifest file for testing."""
    manifest = tmp_path / "requirements.txt"
    manifest.write_text("fastapi==0.85.0")
    return manifest
