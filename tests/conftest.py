# tests/conftest.py
"""Shared fixtures: a fake provider and a small window tree built on it."""

import pytest

from fakes import FakeApplicationSource, FakeNode, FakeProvider
from uiauto_ax.actionlogger import ACTION_LOGGER
from uiauto_ax.config import TimeConfig
from uiauto_ax.engine import AXEngine
from uiauto_ax.models import Application, Window
from uiauto_ax.timinglogger import TIMING_LOGGER


@pytest.fixture(autouse=True)
def reset_global_state():
    TimeConfig.reset_to_defaults()
    yield
    TimeConfig.reset_to_defaults()
    TIMING_LOGGER.disable()
    TIMING_LOGGER.clear()
    ACTION_LOGGER.disable()
    ACTION_LOGGER.clear()


@pytest.fixture
def provider():
    p = FakeProvider()
    yield p
    p.release()


@pytest.fixture
def tree():
    """
    window "Main"
      toolbar
        button "OK"      (AXPress)
        button "Cancel"  (AXPress)
      textField "Search"
    """
    ok = FakeNode("AXButton", "OK", actions=["AXPress"], role_description="button")
    cancel = FakeNode("AXButton", "Cancel", actions=["AXPress"], role_description="button")
    toolbar = FakeNode("AXToolbar", children=[ok, cancel])
    search = FakeNode("AXTextField", "Search", attributes={"AXValue": ""}, role_description="search text field")
    window = FakeNode("AXWindow", "Main", children=[toolbar, search], sub_role="AXStandardWindow")
    return {"window": window, "toolbar": toolbar, "ok": ok, "cancel": cancel, "search": search}


@pytest.fixture
def app_source(tree):
    app = Application(name="Demo", pid=4242, is_frontmost=True)
    window = Window(title="Main", pid=4242, handle=tree["window"])
    return FakeApplicationSource(app, window)


@pytest.fixture
def engine(provider, app_source):
    return AXEngine(provider, app_source)


@pytest.fixture
def root(engine, tree):
    return engine.element_from_handle(tree["window"], pid=4242)
