"""Pytest configuration."""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "live: marks tests that call a real LLM provider (skipped by default)",
    )


def pytest_addoption(parser):
    """Add command line options."""
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests that call a real LLM provider",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --live flag is provided."""
    if config.getoption("--live"):
        return

    skip_live = pytest.mark.skip(reason="Live test - use --live to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture(autouse=True)
def isolate_config(request, monkeypatch, tmp_path):
    """Point the config file at a temp HOME and clear the cached manager.

    Provider credentials are cleared too, except for live tests which need them.
    """
    from toolwire.config import reset_config_manager
    from toolwire.config.manager import ConfigManager

    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(
        ConfigManager, "DEFAULT_CONFIG_PATH", tmp_path / ".toolwire" / "config.yaml"
    )
    if request.node.get_closest_marker("live") is None:
        for var in [
            "TOOLWIRE_MODEL",
            "OPENAI_API_KEY",
            "OPENAI_BASE_URL",
            "OPENROUTER_API_KEY",
            "OLLAMA_BASE_URL",
        ]:
            monkeypatch.delenv(var, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()
