import subprocess

import httpx
import pytest

from agent_router import system
from agent_router.system import OpenCodeLocator, fetch_latest_version, is_tmux_installed


class FakeRun:
    """Records probe commands; answers from a {executable: (returncode, stdout)} table."""

    def __init__(self, answers):
        self.answers = answers
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append(command)
        if command[0] not in self.answers:
            raise FileNotFoundError(command[0])
        returncode, stdout = self.answers[command[0]]
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr="")


@pytest.fixture
def fake_run(monkeypatch):
    def _install(answers):
        runner = FakeRun(answers)
        monkeypatch.setattr(system.subprocess, "run", runner)
        return runner

    return _install


def test_locator_returns_first_working_candidate(fake_run) -> None:
    runner = fake_run({"/broken/opencode": (1, ""), "/good/opencode": (0, "1.2.3\n")})
    locator = OpenCodeLocator(["/missing/opencode", "/broken/opencode", "/good/opencode"])

    assert locator.resolve() == "/good/opencode"
    assert locator.path() == "/good/opencode"
    assert locator.is_installed()
    assert [call[0] for call in runner.calls] == ["/missing/opencode", "/broken/opencode", "/good/opencode"]


def test_locator_caches_until_invalidated(fake_run) -> None:
    runner = fake_run({"opencode": (0, "1.2.3")})
    locator = OpenCodeLocator(["opencode"])

    locator.resolve()
    locator.resolve()
    assert len(runner.calls) == 1

    locator.invalidate()
    locator.resolve()
    assert len(runner.calls) == 2


def test_locator_caches_a_miss_until_invalidated(fake_run) -> None:
    runner = fake_run({})
    locator = OpenCodeLocator(["/a/opencode", "/b/opencode"])

    assert not locator.is_installed()
    assert locator.path() is None
    assert locator.resolve() is None
    assert len(runner.calls) == 2

    runner.answers["/b/opencode"] = (0, "1.2.3")
    assert locator.resolve() is None

    locator.invalidate()
    assert locator.resolve() == "/b/opencode"


def test_locator_on_path_has_no_explicit_location(fake_run) -> None:
    fake_run({"opencode": (0, "1.2.3")})
    locator = OpenCodeLocator(["opencode"])
    assert locator.command() == "opencode"
    assert locator.path() is None


def test_locator_without_binary(fake_run) -> None:
    fake_run({})
    locator = OpenCodeLocator(["/nowhere/opencode"])

    assert locator.resolve() is None
    assert not locator.is_installed()
    assert locator.command() == "opencode"
    assert locator.version() is None


def test_version_is_stripped_stdout(fake_run) -> None:
    fake_run({"/good/opencode": (0, "  0.15.2\n")})
    assert OpenCodeLocator(["/good/opencode"]).version() == "0.15.2"


def test_probe_timeout_counts_as_missing(monkeypatch) -> None:
    def slow(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs.get("timeout"))

    monkeypatch.setattr(system.subprocess, "run", slow)
    assert not is_tmux_installed()


def test_tmux_detection(fake_run) -> None:
    runner = fake_run({"tmux": (0, "tmux 3.4")})
    assert is_tmux_installed()
    assert runner.calls == [["tmux", "-V"]]


# ---------------------------------------------------------------------------
# Registry lookup
# ---------------------------------------------------------------------------

def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_fetch_latest_version_reads_version_field() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"name": "oh-my-opencode-slim", "version": "0.6.1"})

    with _client(handler) as client:
        version = fetch_latest_version("oh-my-opencode-slim", client=client, registry_url="https://registry.test/")

    assert version == "0.6.1"
    assert seen == ["https://registry.test/oh-my-opencode-slim/latest"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, json={"error": "Not found"}),
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json=["0.6.1"]),
        httpx.Response(200, json={"version": 7}),
    ],
)
def test_fetch_latest_version_bad_responses_are_none(response) -> None:
    with _client(lambda request: response) as client:
        assert fetch_latest_version("pkg", client=client) is None


def test_fetch_latest_version_network_error_is_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        assert fetch_latest_version("pkg", client=client) is None
