"""Pytest configuration and fixtures."""


import pytest

from upmfix.models import PatchConfig


@pytest.fixture
def sample_manifest():
    """A Unity manifest without scoped registries."""
    return """{
  "dependencies": {
    "com.unity.textmeshpro": "2.0.1",
    "com.unity.ugui": "1.0.0"
  },
  "testables": [
    "com.unity.inputsystem"
  ]
}
"""


@pytest.fixture
def manifest_with_registry():
    """A Unity manifest with a custom registry and an old package version."""
    return """{
  "scopedRegistries": [
    {
      "name": "Example",
      "url": "https://example.com/registry",
      "scopes": [
        "com.example"
      ]
    }
  ],
  "dependencies": {
    "com.example.pkg": "0.5.0",
    "com.unity.ugui": "1.0.0"
  }
}
"""


@pytest.fixture
def example_config():
    """Patch configuration targeting the example package and registry."""
    return PatchConfig(
        package_name="com.example.pkg",
        package_version="1.0.0",
        registry_name="Example Registry",
        registry_url="https://example.com/registry",
        registry_scopes=["com.example"],
    )


@pytest.fixture
def make_project(tmp_path):
    """Create a project directory holding Packages/manifest.json."""

    def _make_project(content: str):
        packages = tmp_path / "Packages"
        packages.mkdir(exist_ok=True)
        (packages / "manifest.json").write_text(content, encoding="utf-8", newline="")
        return tmp_path

    return _make_project
