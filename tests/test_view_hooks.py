import threading

import numpy as np
import pytest

from resilience.view_hooks import CallbackOverloadSet, DynamicViewHooks

_SET_NAMES = (
    "copy_constructor_set",
    "copy_assignment_set",
    "move_constructor_set",
    "move_assignment_set",
)


def _readonly(array):
    array.flags.writeable = False
    return array


def _install_recorders(hooks):
    fired = {}

    def recorder(name):
        def record(holder):
            fired[name] = holder

        return record

    for name in _SET_NAMES:
        getattr(hooks, name).set_callback(recorder(name))
    return fired


def _check_only(fired, attribute, array):
    assert list(fired) == [attribute]
    holder = fired[attribute]
    assert holder.label == "x"
    assert holder.data is array
    assert not holder.is_const


def test_mutable_callback_receives_holder():
    seen = []
    overload_set = CallbackOverloadSet()
    overload_set.set_callback(seen.append)
    array = np.arange(4, dtype=np.float64)
    overload_set.call(array, "field")
    assert len(seen) == 1
    assert seen[0].label == "field"
    assert seen[0].data is array
    assert not seen[0].is_const


def test_const_callback_only_for_readonly():
    mutable, const = [], []
    overload_set = CallbackOverloadSet()
    overload_set.set_callback(mutable.append)
    overload_set.set_const_callback(const.append)
    overload_set.call(_readonly(np.zeros(2)), "ro")
    overload_set.call(np.zeros(2), "rw")
    assert [h.label for h in const] == ["ro"]
    assert [h.label for h in mutable] == ["rw"]


def test_readonly_without_const_callback_is_ignored():
    seen = []
    overload_set = CallbackOverloadSet()
    overload_set.set_callback(seen.append)
    overload_set.call(_readonly(np.zeros(2)))
    assert seen == []


def test_clear_and_reset():
    seen = []
    overload_set = CallbackOverloadSet()
    overload_set.set_callback(seen.append)
    overload_set.set_const_callback(seen.append)
    overload_set.clear_callback()
    overload_set.call(np.zeros(1))
    assert seen == []
    overload_set.call(_readonly(np.zeros(1)))
    assert len(seen) == 1
    overload_set.set_callback(seen.append)
    overload_set.reset()
    overload_set.call(np.zeros(1))
    overload_set.call(_readonly(np.zeros(1)))
    assert len(seen) == 1
    overload_set.set_const_callback(seen.append)
    overload_set.clear_const_callback()
    overload_set.call(_readonly(np.zeros(1)))
    assert len(seen) == 1


def test_copy_constructed_uses_its_own_set():
    hooks = DynamicViewHooks()
    fired = _install_recorders(hooks)
    array = np.zeros(3)
    hooks.copy_constructed(array, "x")
    _check_only(fired, "copy_constructor_set", array)


def test_copy_assigned_uses_its_own_set():
    hooks = DynamicViewHooks()
    fired = _install_recorders(hooks)
    array = np.zeros(3)
    hooks.copy_assigned(array, "x")
    _check_only(fired, "copy_assignment_set", array)


def test_move_constructed_uses_its_own_set():
    hooks = DynamicViewHooks()
    fired = _install_recorders(hooks)
    array = np.zeros(3)
    hooks.move_constructed(array, "x")
    _check_only(fired, "move_constructor_set", array)


def test_move_assigned_uses_its_own_set():
    hooks = DynamicViewHooks()
    fired = _install_recorders(hooks)
    array = np.zeros(3)
    hooks.move_assigned(array, "x")
    _check_only(fired, "move_assignment_set", array)


def test_reentrant_hooks_suppressed():
    hooks = DynamicViewHooks()
    calls = []

    def callback(holder):
        calls.append(holder.label)
        assert hooks.reentrant
        hooks.copy_constructed(np.zeros(1), "inner")
        hooks.move_assigned(np.zeros(1), "inner")

    hooks.copy_constructor_set.set_callback(callback)
    hooks.move_assignment_set.set_callback(callback)
    hooks.copy_constructed(np.zeros(1), "outer")
    assert calls == ["outer"]
    assert not hooks.reentrant


def test_reentrancy_flag_cleared_after_exception():
    hooks = DynamicViewHooks()

    def failing(holder):
        raise RuntimeError("boom")

    hooks.copy_assignment_set.set_callback(failing)
    with pytest.raises(RuntimeError):
        hooks.copy_assigned(np.zeros(1))
    assert not hooks.reentrant


def test_reentrancy_is_per_thread():
    hooks = DynamicViewHooks()
    holders = []
    thread_array = np.zeros(1)

    def callback(holder):
        holders.append(holder)
        if holder.label == "outer":
            worker = threading.Thread(target=hooks.move_constructed, args=(thread_array, "thread"))
            worker.start()
            worker.join()

    hooks.move_constructor_set.set_callback(callback)
    hooks.move_constructed(np.zeros(1), "outer")
    assert [holder.label for holder in holders] == ["outer", "thread"]
    assert holders[1].data is thread_array
    assert not hooks.reentrant


def test_reset_clears_all_sets():
    hooks = DynamicViewHooks()
    seen = []
    hooks.copy_constructor_set.set_callback(seen.append)
    hooks.move_assignment_set.set_const_callback(seen.append)
    hooks.reset()
    hooks.copy_constructed(np.zeros(1))
    hooks.move_assigned(_readonly(np.zeros(1)))
    assert seen == []