"""Shared pytest fixtures and fake transport."""

import asyncio

import pytest
from loguru import logger

from messen.store.appstate import AppStateStore
from messen.transport.base import SessionHandle, Transport
from messen.types import AppStatePayload, Credentials, Thread, User


class FakeHandle(SessionHandle):
    """A session handle that lets tests push raw events into the listener."""

    def __init__(self, user_id="me", app_state=None):
        self.user_id = user_id
        self.app_state = app_state if app_state is not None else [{"key": "c_user", "value": user_id}]
        self.callback = None
        self.stopped = False

    def get_current_user_id(self):
        return self.user_id

    def get_app_state(self):
        return self.app_state

    def listen(self, callback):
        self.callback = callback

        def stop():
            self.stopped = True

        return stop

    def emit(self, error=None, event=None):
        self.callback(error, event)


class FakeTransport(Transport):
    """In-memory transport recording every call it receives."""

    def __init__(self, threads=None, friends=None):
        self.threads = {t.id: t for t in (threads or [Thread(id="T0", name="General")])}
        self.friends = friends if friends is not None else [User(id="f1", name="Friend One", is_friend=True)]
        self.user = User(id="me", name="Me")
        self.handle = FakeHandle()

        self.payloads = []
        self.options = []
        self.fetch_thread_calls = []
        self.thread_list_calls = 0
        self.logout_calls = 0

        self.reject_credentials = False
        self.require_mfa = False
        self.fail_friends = None
        self.fail_logout = None
        self.fail_thread_list = None
        self.thread_gate = None

    async def authenticate(self, payload, options, get_mfa_code):
        self.payloads.append(payload)
        self.options.append(options)
        if isinstance(payload, Credentials) and self.reject_credentials:
            raise RuntimeError("Wrong username/password.")
        if self.require_mfa:
            code = await get_mfa_code()
            if code != "123456":
                raise RuntimeError("Invalid two-factor code")
        return self.handle

    async def logout(self, handle):
        self.logout_calls += 1
        if self.fail_logout:
            raise self.fail_logout

    async def fetch_user_info(self, handle, user_id):
        return User(id=user_id, name=self.user.name)

    async def fetch_friends(self, handle):
        await asyncio.sleep(0)
        if self.fail_friends:
            raise self.fail_friends
        return list(self.friends)

    async def fetch_thread_list(self, handle):
        self.thread_list_calls += 1
        if self.fail_thread_list:
            raise self.fail_thread_list
        return list(self.threads.values())

    async def fetch_thread(self, handle, thread_id):
        self.fetch_thread_calls.append(thread_id)
        if self.thread_gate is not None:
            await self.thread_gate.wait()
        return self.threads.get(thread_id)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def store(tmp_path):
    return AppStateStore(tmp_path / "appstate.json")


@pytest.fixture
def cached_payload():
    return AppStatePayload([{"key": "c_user", "value": "me"}])


@pytest.fixture
def log_records():
    """Capture messen log records as (level, message) tuples."""
    records = []
    logger.enable("messen")
    sink_id = logger.add(lambda m: records.append((m.record["level"].name, m.record["message"])), level="DEBUG")
    yield records
    logger.remove(sink_id)
    logger.disable("messen")
