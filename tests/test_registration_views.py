import io

import numpy as np
import pytest

from resilience.registration import SimpleRegistration, label_hash
from resilience.registration_views import ViewRegistration
from resilience.viewholder import ViewHolder


def test_name_comes_from_view_label():
    reg = ViewRegistration(ViewHolder(np.zeros(2), "my view"))
    assert reg.name == "my_view"
    assert hash(reg) == label_hash("my_view")


def test_round_trip_contiguous():
    data = np.arange(6, dtype=np.int32)
    reg = ViewRegistration(ViewHolder(data, "v"))
    stream = io.BytesIO()
    assert reg.serialize(stream) is True
    assert len(stream.getvalue()) == data.nbytes
    data[:] = 0
    stream.seek(0)
    assert reg.deserialize(stream) is True
    np.testing.assert_array_equal(data, np.arange(6, dtype=np.int32))


def test_round_trip_strided():
    base = np.arange(10, dtype=np.float64)
    view = base[::2]
    reg = ViewRegistration(ViewHolder(view, "s"))
    stream = io.BytesIO()
    reg.serialize(stream)
    assert stream.getvalue() == np.array([0, 2, 4, 6, 8], dtype=np.float64).tobytes()
    base[:] = -1
    stream.seek(0)
    assert reg.deserialize(stream)
    np.testing.assert_array_equal(view, [0, 2, 4, 6, 8])
    assert base[1] == -1


def test_short_stream_reports_failure():
    reg = ViewRegistration(ViewHolder(np.zeros(4), "v"))
    assert reg.deserialize(io.BytesIO(b"\x00")) is False


def test_subview_is_same_reference():
    base = np.zeros(8)
    whole = ViewRegistration(ViewHolder(base, "v"))
    tail = ViewRegistration(ViewHolder(base[4:], "v"))
    assert whole.is_same_reference(tail)
    assert not tail.is_same_reference(whole)
    assert whole.is_same_reference(whole)


def test_other_type_warns():
    reg = ViewRegistration(ViewHolder(np.zeros(2), "v"))
    with pytest.warns(RuntimeWarning):
        assert reg.is_same_reference(SimpleRegistration(bytearray(2), "v")) is False


def test_equal_to_other_registration_with_same_name():
    reg = ViewRegistration(ViewHolder(np.zeros(2), "v"))
    assert reg == SimpleRegistration(bytearray(2), "v")
    assert reg != SimpleRegistration(bytearray(2), "w")