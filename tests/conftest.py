"""Shared fixtures: a scriptable stand-in for the tmux command line."""

from dataclasses import dataclass, field

import pytest
from loguru import logger

from tmux_preview.errors import Error, ErrorType, Result


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru output out of test results and drop sinks between tests."""
    logger.remove()
    yield
    logger.remove()


@dataclass
class FakeWindow:
    index: int
    name: str
    active: bool = False
    panes: int = 1
    pane_id: str = ""


@dataclass
class FakeSession:
    name: str
    windows: list[FakeWindow] = field(default_factory=list)
    attached: int = 0
    activity: int = 0


class FakeTmux:
    """Answers run_tmux(*args) calls from in-memory sessions and panes."""

    def __init__(self):
        self.sessions: dict[str, FakeSession] = {}
        self.panes: dict[str, str] = {}
        self.calls: list[tuple[str, ...]] = []
        self.fail_commands: set[str] = set()
        self._next_pane = 100

    def add_session(self, name, windows=(), attached=0, activity=0):
        session = FakeSession(name=name, windows=list(windows), attached=attached, activity=activity)
        self.sessions[name] = session
        return session

    def add_window(self, session, index, name, active=False, panes=1, content=None):
        pane_id = f"%{self._next_pane}"
        self._next_pane += 1
        self.sessions[session].windows.append(
            FakeWindow(index=index, name=name, active=active, panes=panes, pane_id=pane_id)
        )
        if content is not None:
            self.panes[pane_id] = content
        return pane_id

    @staticmethod
    def _fail(message):
        return Result.err(Error(error_type=ErrorType.COMMAND_FAILED, message=message))

    def _session(self, target):
        return self.sessions.get(target[1:] if target.startswith("=") else None)

    def __call__(self, *args):
        self.calls.append(args)
        command = args[0]
        if command in self.fail_commands:
            return self._fail(f"{command} failed")

        if command == "has-session":
            session = self._session(args[2])
            return Result.ok("") if session else self._fail("can't find session")

        if command == "list-windows":
            session = self._session(args[2])
            if session is None:
                return self._fail("can't find session")
            return Result.ok("\n".join(
                f"{w.index}|{1 if w.active else 0}|{w.panes}|{w.pane_id}|{w.name}"
                for w in session.windows
            ))

        if command == "list-sessions":
            if not self.sessions:
                return self._fail("no server running")
            return Result.ok("\n".join(
                f"{len(s.windows)}|{s.attached}|{s.activity}|{s.name}"
                for s in self.sessions.values()
            ))

        if command == "capture-pane":
            pane_id = args[-1]
            if pane_id not in self.panes:
                return self._fail(f"can't find pane: {pane_id}")
            return Result.ok(self.panes[pane_id].rstrip("\n"))

        if command == "new-session":
            self.add_session(args[-1])
            return Result.ok("")

        if command == "switch-client":
            session = self._session(args[2])
            return Result.ok("") if session else self._fail("can't find session")

        return self._fail(f"unsupported: {command}")


@pytest.fixture
def fake_tmux(monkeypatch):
    fake = FakeTmux()
    monkeypatch.setattr("tmux_preview.tmux.run_tmux", fake)
    return fake
