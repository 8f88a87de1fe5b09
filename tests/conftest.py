import pytest
from click.testing import CliRunner

PROVIDER_ENV_VARS = (
    "OPENROUTER_API_KEY",
    "AI_PROVIDER",
    "AI_MODEL",
    "OLLAMA_BASE_URL",
    "LOCAL_MODEL",
    "MD_WRITER_MAX_FILE_SIZE",
)


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def clean_environment(monkeypatch):
    """Removes provider settings inherited from the host environment."""
    for variable in PROVIDER_ENV_VARS:
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture()
def workdir(tmp_path, monkeypatch, clean_environment):
    """Runs a test inside `tmp_path` with a clean environment."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
