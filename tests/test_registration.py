import io

import numpy as np
import pytest

from resilience.registration import (
    CustomRegistration,
    RegistrationInfo,
    SimpleRegistration,
    label_hash,
    make_registration,
    sanitized_label,
)
from resilience.registration_views import ViewRegistration
from resilience.viewholder import ViewHolder


def test_sanitized_label_replaces_non_alphanumerics():
    assert sanitized_label("a b-c.d_1") == "a_b_c_d_1"


def test_sanitized_label_multibyte_character():
    assert sanitized_label("x\u00e9") == "x__"


def test_label_hash_empty_and_single():
    assert label_hash("") == 0
    assert label_hash("a") == ord("a")


def test_label_hash_two_characters():
    assert label_hash("ab") == 6663


def test_label_hash_order_matters():
    assert label_hash("ab") != label_hash("ba")


@pytest.mark.parametrize("name", ["short", "x" * 40, "mixed_Label_123" * 3])
def test_label_hash_in_int_range(name):
    value = label_hash(name)
    assert 0 <= value < 2**31 - 1
    assert label_hash(name) == value


def test_registration_name_is_sanitized():
    reg = SimpleRegistration(bytearray(4), "my var")
    assert reg.name == "my_var"


def test_equality_and_hash_by_name():
    first = SimpleRegistration(bytearray(4), "value")
    second = CustomRegistration(lambda s: True, lambda s: True, "value")
    assert first == second
    assert hash(first) == label_hash("value")
    assert len({first, second}) == 1


def test_simple_round_trip_bytearray():
    member = bytearray(b"\x01\x02\x03\x04")
    reg = SimpleRegistration(member, "m")
    stream = io.BytesIO()
    assert reg.serialize(stream) is True
    assert stream.getvalue() == b"\x01\x02\x03\x04"
    member[:] = b"\x00\x00\x00\x00"
    stream.seek(0)
    assert reg.deserialize(stream) is True
    assert member == bytearray(b"\x01\x02\x03\x04")


def test_simple_round_trip_numpy():
    member = np.arange(5, dtype=np.float64)
    reg = SimpleRegistration(member, "arr")
    stream = io.BytesIO()
    reg.serialize(stream)
    member[:] = 0
    stream.seek(0)
    assert reg.deserialize(stream)
    np.testing.assert_array_equal(member, np.arange(5, dtype=np.float64))


def test_simple_short_stream_reports_failure():
    member = bytearray(8)
    reg = SimpleRegistration(member, "m")
    assert reg.deserialize(io.BytesIO(b"\xff\xff")) is False
    assert member[:2] == bytearray(b"\xff\xff")


def test_simple_read_only_member_cannot_deserialize():
    reg = SimpleRegistration(b"abcd", "m")
    with pytest.raises(TypeError):
        reg.deserialize(io.BytesIO(b"wxyz"))


def test_simple_rejects_non_buffer():
    with pytest.raises(TypeError):
        SimpleRegistration(3, "m")


def test_simple_same_reference():
    member = bytearray(4)
    assert SimpleRegistration(member, "m").is_same_reference(SimpleRegistration(member, "m"))
    assert not SimpleRegistration(member, "m").is_same_reference(SimpleRegistration(bytearray(4), "m"))


def test_mixed_types_warn_and_differ():
    simple = SimpleRegistration(bytearray(4), "m")
    custom = CustomRegistration(lambda s: True, lambda s: True, "m")
    with pytest.warns(RuntimeWarning, match="shared by more than 1"):
        assert simple.is_same_reference(custom) is False


def test_custom_calls_functions():
    calls = []

    def save(stream):
        stream.write(b"saved")
        return True

    def load(stream):
        calls.append(stream.read())
        return False

    reg = CustomRegistration(save, load, "c")
    stream = io.BytesIO()
    assert reg.serialize(stream) is True
    assert stream.getvalue() == b"saved"
    stream.seek(0)
    assert reg.deserialize(stream) is False
    assert calls == [b"saved"]


def test_custom_same_reference_is_identity():
    def save(s):
        return True

    def load(s):
        return True

    reg = CustomRegistration(save, load, "c")
    assert reg.is_same_reference(reg)
    assert not reg.is_same_reference(CustomRegistration(save, load, "c"))


def test_make_registration_unpacks_info():
    member = bytearray(2)
    reg = make_registration(RegistrationInfo(member, "the label"))
    assert isinstance(reg, SimpleRegistration)
    assert reg.name == "the_label"
    assert reg.member is member


def test_make_registration_needs_label():
    with pytest.raises(TypeError):
        make_registration(bytearray(2))


def test_make_registration_view_holder():
    holder = ViewHolder(np.zeros(3), "view")
    reg = make_registration(holder)
    assert isinstance(reg, ViewRegistration)
    assert reg.name == "view"


def test_make_registration_passes_registration_through():
    reg = CustomRegistration(lambda s: True, lambda s: True, "c")
    assert make_registration(reg) is reg