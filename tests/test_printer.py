import io

import pytest

from dockcompose.compose.printer import ContainerEvent, ContainerEventType, LogPrinter


class RecordingConsumer:
    def __init__(self):
        self.calls = []

    def register(self, container):
        self.calls.append(("register", container))

    def status(self, container, message):
        self.calls.append(("status", container, message))

    def log(self, container, service, line):
        self.calls.append(("log", container, service, line))


def _attach(name, service="svc"):
    return ContainerEvent(type=ContainerEventType.ATTACH, container=name, service=service)


def _exit(name, code, service="svc", restarting=False):
    return ContainerEvent(
        type=ContainerEventType.EXIT,
        container=name,
        service=service,
        exit_code=code,
        restarting=restarting,
    )


def _never():
    raise AssertionError("stop function should not be called")


def test_logs_and_exit_without_cascade():
    consumer = RecordingConsumer()
    printer = LogPrinter(consumer, out=io.StringIO())
    printer.handle_event(_attach("web-1", "web"))
    printer.handle_event(
        ContainerEvent(type=ContainerEventType.LOG, container="web-1", service="web", line="hi")
    )
    printer.handle_event(_exit("web-1", 1, "web"))
    code = printer.run(False, "", _never)
    assert code == 0
    assert consumer.calls == [
        ("register", "web-1"),
        ("log", "web-1", "web", "hi"),
        ("status", "web-1", "exited with code 1"),
    ]


def test_duplicate_attach_registers_once():
    consumer = RecordingConsumer()
    printer = LogPrinter(consumer, out=io.StringIO())
    printer.handle_event(_attach("a"))
    printer.handle_event(_attach("a"))
    printer.handle_event(_exit("a", 0))
    printer.run(False, "", _never)
    assert [c for c in consumer.calls if c[0] == "register"] == [("register", "a")]


def test_cascade_stop_uses_first_exiting_service():
    consumer = RecordingConsumer()
    out = io.StringIO()
    stopped = []
    printer = LogPrinter(consumer, out=out)
    printer.handle_event(_attach("a", "first"))
    printer.handle_event(_attach("b", "second"))
    printer.handle_event(_exit("a", 3, "first"))
    printer.handle_event(_exit("b", 0, "second"))
    code = printer.run(True, "", lambda: stopped.append(True))
    assert code == 3
    assert stopped == [True]
    assert "Aborting on container exit..." in out.getvalue()
    statuses = [c for c in consumer.calls if c[0] == "status"]
    assert statuses == [("status", "a", "exited with code 3")]


def test_cascade_stop_with_exit_code_from():
    consumer = RecordingConsumer()
    printer = LogPrinter(consumer, out=io.StringIO())
    printer.handle_event(_attach("a", "first"))
    printer.handle_event(_attach("b", "second"))
    printer.handle_event(_exit("a", 3, "first"))
    printer.handle_event(_exit("b", 7, "second"))
    code = printer.run(True, "second", lambda: None)
    assert code == 7


def test_cancel_suppresses_logs_and_status():
    consumer = RecordingConsumer()
    printer = LogPrinter(consumer, out=io.StringIO())
    printer.handle_event(_attach("a"))
    printer.cancel()
    printer.handle_event(ContainerEvent(type=ContainerEventType.LOG, container="a", line="x"))
    printer.handle_event(_exit("a", 2))
    code = printer.run(False, "", _never)
    assert code == 0
    assert consumer.calls == [("register", "a")]


def test_restarting_container_keeps_loop_running():
    consumer = RecordingConsumer()
    printer = LogPrinter(consumer, out=io.StringIO())
    printer.handle_event(_attach("a"))
    printer.handle_event(_exit("a", 1, restarting=True))
    printer.handle_event(ContainerEvent(type=ContainerEventType.LOG, container="a", line="again"))
    printer.handle_event(_exit("a", 0))
    printer.run(False, "", _never)
    statuses = [c for c in consumer.calls if c[0] == "status"]
    assert len(statuses) == 2
    assert ("log", "a", "", "again") in consumer.calls


def test_stopped_event_ends_loop():
    consumer = RecordingConsumer()
    printer = LogPrinter(consumer, out=io.StringIO())
    printer.handle_event(_attach("a"))
    printer.handle_event(ContainerEvent(type=ContainerEventType.STOPPED, container="a"))
    assert printer.run(False, "", _never) == 0
    assert consumer.calls[-1] == ("status", "a", "exited with code 0")


def test_stop_function_error_propagates():
    printer = LogPrinter(RecordingConsumer(), out=io.StringIO())
    printer.handle_event(_attach("a"))
    printer.handle_event(_exit("a", 1))

    def failing():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        printer.run(True, "", failing)