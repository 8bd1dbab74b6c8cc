# tests/conftest.py
import pytest

from flowshell.core.command_registry import register_all_commands
from flowshell.core.context.shell_context import ShellContext
from flowshell.core.io_streams import IoStreams


@pytest.fixture(scope="session", autouse=True)
def registered_commands():
    """Discovers the builtin handlers once, like app.main() does."""
    register_all_commands()


@pytest.fixture
def streams():
    return IoStreams.buffered()


@pytest.fixture
def script_ctx(streams):
    """A non-interactive context, as used when running a script."""
    return ShellContext(interactive=False, streams=streams)


@pytest.fixture
def interactive_ctx(streams):
    return ShellContext(interactive=True, streams=streams)
