import pytest

from loggingdrain.errors import (
    InternalError,
    LoggingDrainError,
    MaskPatternError,
    internal_error,
    mask_pattern_error,
)


def _create_pattern_compile_wrap_err():
    return mask_pattern_error(Exception("mask pattern compile error"))


def test_compile_mask_pattern_error_message():
    err1 = Exception("compile mask pattern error")
    new_err = mask_pattern_error(err1)
    assert str(new_err) == "compile mask pattern error: compile mask pattern error"


def test_mask_pattern_error_with_detail():
    err1 = Exception("compile mask pattern error")
    new_err = mask_pattern_error(err1, "err1 error %s" % "test")
    assert (
        str(new_err)
        == "compile mask pattern error: err1 error test: compile mask pattern error"
    )


def test_nested_cause_type():
    err = _create_pattern_compile_wrap_err()
    assert str(err) == "mask pattern compile error: compile mask pattern error"
    assert isinstance(err, MaskPatternError)
    assert isinstance(err, LoggingDrainError)
    assert not isinstance(err, InternalError)


def test_nested_cause_is_kept():
    cause = Exception("mask pattern compile error")
    err = mask_pattern_error(cause)
    assert err.__cause__ is cause
    assert err.cause is cause


def test_internal_error_message_and_raise():
    err = internal_error(ValueError("boom"))
    assert str(err) == "boom: internal error"
    assert isinstance(err, InternalError)
    with pytest.raises(InternalError, match="boom: internal error"):
        raise err


def test_error_without_cause_has_base_message():
    assert str(internal_error()) == "internal error"
    assert str(mask_pattern_error()) == "compile mask pattern error"