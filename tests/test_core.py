"""Tests for core utilities."""

import asyncio

import pytest


def test_timeout_add_and_remove(qapp):
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import idle_add, pending_source_count, source_remove, timeout_add

    called = []
    before = pending_source_count()

    idle_add(lambda: called.append("idle"))
    cancelled = timeout_add(10, lambda: called.append("cancelled"))
    timeout_add(10, lambda: called.append("timeout"))
    assert pending_source_count() == before + 3

    source_remove(cancelled)
    QTest.qWait(50)

    assert called == ["idle", "timeout"]
    assert pending_source_count() == before


def test_debouncer_trailing(qapp):
    """Five quick calls produce one trailing call with the last arguments."""
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import Debouncer

    calls = []
    debouncer = Debouncer(30, lambda *args: calls.append(args))

    for i in range(1, 6):
        debouncer.call(i)
    assert calls == []
    assert debouncer.pending and debouncer.scheduled

    QTest.qWait(100)
    assert calls == [(5,)]
    assert not debouncer.pending and not debouncer.scheduled


def test_debouncer_leading(qapp):
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import Debouncer

    calls = []
    debouncer = Debouncer(30, calls.append, trigger="leading")

    for i in range(1, 6):
        debouncer(i)
    assert calls == [1]

    QTest.qWait(100)
    assert calls == [1]

    debouncer(6)
    assert calls == [1, 6]


def test_debouncer_leading_and_trailing(qapp):
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import Debouncer

    calls = []
    debouncer = Debouncer(30, calls.append, trigger="leading+trailing")

    for i in range(1, 6):
        debouncer.call(i)
    assert calls == [1]

    QTest.qWait(100)
    assert calls == [1, 5]


def test_debouncer_single_call_with_both_triggers(qapp):
    """A lone call runs once, on the leading edge only."""
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import Debouncer

    calls = []
    debouncer = Debouncer(20, calls.append, trigger="leading+trailing")

    debouncer.call("only")
    QTest.qWait(60)
    assert calls == ["only"]


def test_debouncer_cancel_and_force(qapp):
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import Debouncer

    calls = []
    debouncer = Debouncer(30, calls.append)

    debouncer.call("dropped")
    debouncer.cancel()
    QTest.qWait(60)
    assert calls == []

    debouncer.call("forced")
    debouncer.force()
    assert calls == ["forced"]
    QTest.qWait(60)
    assert calls == ["forced"]


def test_debounce_invalid_trigger():
    from pyqt_classgen.core import Debouncer, debounce

    with pytest.raises(ValueError):
        debounce(10, trigger="middle")
    with pytest.raises(ValueError):
        Debouncer(10, print, trigger="sometimes")


def test_debounce_default_trigger_from_config(qapp, classgen_config):
    from pyqt_classgen.core import Debouncer

    classgen_config.default_debounce_trigger = "leading"
    calls = []
    Debouncer(30, calls.append).call("now")
    assert calls == ["now"]


def test_debounce_decorator_is_per_instance(qapp):
    """Each instance and each decorated method get their own debouncer."""
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import debounce

    class Search:
        def __init__(self):
            self.queries = []
            self.saves = []

        @debounce(30)
        def run_query(self, text):
            self.queries.append(text)

        @debounce(30)
        def save(self):
            self.saves.append(True)

    first, second = Search(), Search()
    for text in ("a", "ab", "abc"):
        first.run_query(text)
    second.run_query("x")
    first.save()

    assert Search.run_query.debouncer_for(first).pending
    assert Search.run_query.debouncer_for(second) is not Search.run_query.debouncer_for(first)

    QTest.qWait(100)
    assert first.queries == ["abc"]
    assert second.queries == ["x"]
    assert first.saves == [True]


def test_debounced_wraps_plain_function(qapp):
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import debounced

    seen = []
    wrapped = debounced(seen.append, 20)
    wrapped("a")
    wrapped("b")

    QTest.qWait(60)
    assert seen == ["b"]


def test_debounced_handler_errors_propagate_on_leading(qapp):
    from pyqt_classgen.core import Debouncer

    def explode(value):
        raise ValueError(value)

    debouncer = Debouncer(20, explode, trigger="leading")
    with pytest.raises(ValueError):
        debouncer.call("bad")
    debouncer.cancel()


def test_notify_emits_canonical_name(qapp):
    from PyQt6.QtCore import QObject
    from pyqt_classgen import Property, notify, qclass, template

    @qclass
    class Model(template(QObject, {"a_count": Property.int32(minimum=0, maximum=100)})):
        def __init__(self):
            super().__init__()
            self._a_count = 0

        @property
        def a_count(self):
            return self._a_count

        @a_count.setter
        @notify
        def a_count(self, value):
            self._a_count = value

    model = Model()
    changes = []
    model.property_changed.connect(changes.append)

    model.a_count = 500
    assert changes == ["a-count"]
    assert model.a_count == 100


def test_notify_setter_errors_propagate(qapp):
    from PyQt6.QtCore import QObject, pyqtSignal
    from pyqt_classgen.core import notify

    class Plain(QObject):
        property_changed = pyqtSignal(str)

        def set_value(self, value):
            raise ValueError(value)

        set_value = notify(set_value)

    obj = Plain()
    changes = []
    obj.property_changed.connect(changes.append)

    with pytest.raises(ValueError):
        obj.set_value(1)
    assert changes == []


def test_canonical_name():
    from pyqt_classgen.core import canonical_name

    assert canonical_name("a_count") == "a-count"
    assert canonical_name("title") == "title"


def make_worker_class():
    from PyQt6.QtCore import QObject
    from pyqt_classgen import qclass, signal

    @qclass
    @signal("done", int)
    @signal("failed", str)
    @signal("value-ready", str, int)
    class Worker(QObject):
        pass

    return Worker


def test_connect_async_resolves_first_emission(qapp):
    from pyqt_classgen.core import connect_async

    Worker = make_worker_class()
    worker = Worker()

    async def scenario():
        future = connect_async(worker, "done", "failed")
        worker.done.emit(42)
        worker.done.emit(7)
        worker.failed.emit("late")
        return await future

    assert asyncio.run(scenario()) == [42]
    assert worker.receivers(worker.done) == 0
    assert worker.receivers(worker.failed) == 0


def test_connect_async_rejects(qapp):
    from pyqt_classgen.core import connect_async
    from pyqt_classgen.exceptions import AsyncBridgeRejection

    Worker = make_worker_class()
    worker = Worker()

    async def scenario():
        future = connect_async(worker, "done", "failed")
        worker.failed.emit("disk full")
        worker.done.emit(1)
        return await future

    with pytest.raises(AsyncBridgeRejection) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.signal_name == "failed"
    assert excinfo.value.args_emitted == ["disk full"]
    assert str(excinfo.value) == "Rejection signal 'failed' triggered with args: ['disk full']"
    assert worker.receivers(worker.done) == 0


def test_connect_async_hyphenated_signal(qapp):
    from pyqt_classgen.core import connect_async

    Worker = make_worker_class()
    worker = Worker()

    async def scenario():
        future = connect_async(worker, "value-ready")
        worker.value_ready.emit("size", 3)
        return await future

    assert asyncio.run(scenario()) == ["size", 3]


def test_connect_async_cancel_disconnects(qapp):
    from pyqt_classgen.core import connect_async

    Worker = make_worker_class()
    worker = Worker()

    async def scenario():
        future = connect_async(worker, "done")
        assert worker.receivers(worker.done) == 1
        future.cancel()
        await asyncio.sleep(0)

    asyncio.run(scenario())
    assert worker.receivers(worker.done) == 0


def test_connect_async_unknown_signal(qapp):
    from pyqt_classgen.core import connect_async

    Worker = make_worker_class()
    worker = Worker()

    async def scenario():
        connect_async(worker, "nope")

    with pytest.raises(AttributeError):
        asyncio.run(scenario())


def test_next_idle_and_timeout_futures(qapp):
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import next_idle, timeout_ms

    async def scenario():
        idle = next_idle()
        later = timeout_ms(10)
        assert not idle.done()
        QTest.qWait(50)
        await idle
        await later
        return idle.done() and later.done()

    assert asyncio.run(scenario())


def test_debounced_method_does_not_keep_instance_alive(qapp):
    """After the trailing call fires, the debouncer drops its stashed arguments."""
    import gc
    import weakref
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import debounce

    class Search:
        def __init__(self):
            self.queries = []

        @debounce(10)
        def run(self, text):
            self.queries.append(text)

    search = Search()
    search.run("a")
    QTest.qWait(50)
    assert search.queries == ["a"]

    ref = weakref.ref(search)
    del search
    gc.collect()
    assert ref() is None


def test_cancelled_debouncer_drops_arguments(qapp):
    import gc
    import weakref
    from pyqt_classgen.core import Debouncer

    class Payload:
        pass

    payload = Payload()
    debouncer = Debouncer(30, lambda value: None)
    debouncer.call(payload)
    debouncer.cancel()

    ref = weakref.ref(payload)
    del payload
    gc.collect()
    assert ref() is None


def test_notify_requires_change_signal(qapp):
    """Without the change signal the setter is not run at all."""
    from PyQt6.QtCore import QObject
    from pyqt_classgen.core import notify

    class Bare(QObject):
        def __init__(self):
            super().__init__()
            self.value = 0

        def set_value(self, value):
            self.value = value

        set_value = notify(set_value)

    bare = Bare()
    with pytest.raises(AttributeError, match="property_changed"):
        bare.set_value(5)
    assert bare.value == 0


def test_spawn_without_running_loop_keeps_qt_responsive(qapp):
    """Tasks spawned outside asyncio are stepped from the Qt event loop."""
    from PyQt6.QtTest import QTest
    from pyqt_classgen.core import spawn, timeout_add, timeout_ms

    order = []

    async def job():
        await timeout_ms(20)
        order.append("job")

    task = spawn(job())
    timeout_add(5, lambda: order.append("qt"))
    QTest.qWait(200)

    assert order == ["qt", "job"]
    assert task.done()


def test_spawn_uses_running_loop(qapp):
    from pyqt_classgen.core import spawn

    async def scenario():
        async def value():
            return 7

        task = spawn(value())
        assert task.get_loop() is asyncio.get_running_loop()
        return await task

    assert asyncio.run(scenario()) == 7
