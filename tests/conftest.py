"""Pytest configuration for the fire-planner test suite."""

# The MCP server tests are coroutines run by pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: run the test inside an asyncio event loop"
    )
