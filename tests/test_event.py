import time

import pytest

from dockcompose.progress import event as ev
from dockcompose.progress.event import Event, EventStatus, new_event
from dockcompose.progress.spinner import Spinner


def test_new_event_fields():
    e = new_event("web", EventStatus.DONE, "Ready")
    assert (e.id, e.status, e.status_text) == ("web", EventStatus.DONE, "Ready")
    assert e.text == ""
    assert e.parent_id == ""
    assert e.end_time is None


@pytest.mark.parametrize(
    "factory, status, text",
    [
        (ev.error_event, EventStatus.ERROR, "Error"),
        (ev.creating_event, EventStatus.WORKING, "Creating"),
        (ev.starting_event, EventStatus.WORKING, "Starting"),
        (ev.started_event, EventStatus.DONE, "Started"),
        (ev.waiting, EventStatus.WORKING, "Waiting"),
        (ev.healthy, EventStatus.DONE, "Healthy"),
        (ev.exited, EventStatus.DONE, "Exited"),
        (ev.restarting_event, EventStatus.WORKING, "Restarting"),
        (ev.restarted_event, EventStatus.DONE, "Restarted"),
        (ev.running_event, EventStatus.DONE, "Running"),
        (ev.created_event, EventStatus.DONE, "Created"),
        (ev.stopping_event, EventStatus.WORKING, "Stopping"),
        (ev.stopped_event, EventStatus.DONE, "Stopped"),
        (ev.killing_event, EventStatus.WORKING, "Killing"),
        (ev.killed_event, EventStatus.DONE, "Killed"),
        (ev.removing_event, EventStatus.WORKING, "Removing"),
        (ev.removed_event, EventStatus.DONE, "Removed"),
    ],
)
def test_factories(factory, status, text):
    assert factory("c1") == Event(id="c1", status=status, status_text=text)


def test_error_message_event():
    e = ev.error_message_event("c1", "boom")
    assert e.status == EventStatus.ERROR
    assert e.status_text == "boom"


def test_stop_sets_end_time_and_stops_spinner():
    spinner = Spinner(chars=["."], done="#")
    e = Event(id="x", spinner=spinner)
    before = time.monotonic()
    e.stop()
    assert e.end_time is not None and e.end_time >= before
    assert str(spinner) == "#"


def test_stop_without_spinner():
    e = Event(id="x")
    before = time.monotonic()
    e.stop()
    assert e.end_time >= before
    assert e.end_time <= time.monotonic()