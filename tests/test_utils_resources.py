"""
Tests for src/utils/resources.py

Best-effort release: I/O failures on close are logged at WARNING and never
propagate. Any other release error is a bug and propagates, replacing the
with-block's own exception.
"""

import logging

import pytest

from src.utils.resources import CLOSE_FAILURE_MESSAGE, close_quietly, closing_quietly


class FakeResource:
    """Closeable that records closes and can fail on close."""

    def __init__(self, error=None):
        self.error = error
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        if self.error is not None:
            raise self.error


def test_close_none_is_a_no_op(caplog):
    with caplog.at_level(logging.WARNING):
        close_quietly(None)

    assert caplog.records == []


def test_close_calls_close():
    resource = FakeResource()

    close_quietly(resource)

    assert resource.close_calls == 1


def test_close_failure_is_logged_and_swallowed(caplog):
    resource = FakeResource(OSError("client aborted"))

    with caplog.at_level(logging.WARNING, logger="src.utils.resources"):
        close_quietly(resource)

    assert resource.close_calls == 1
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == CLOSE_FAILURE_MESSAGE
    assert isinstance(record.exc_info[1], OSError)


def test_close_failure_goes_to_injected_logger(caplog):
    sink = logging.getLogger("tests.resources.sink")

    with caplog.at_level(logging.WARNING, logger="tests.resources.sink"):
        close_quietly(FakeResource(BrokenPipeError()), diagnostic_logger=sink)

    assert [record.name for record in caplog.records] == ["tests.resources.sink"]


def test_non_io_errors_propagate():
    with pytest.raises(AttributeError):
        close_quietly(FakeResource(AttributeError("bug")))


def test_closing_quietly_releases_on_normal_exit():
    resource = FakeResource()

    with closing_quietly(resource) as handle:
        assert handle is resource

    assert resource.close_calls == 1


def test_closing_quietly_releases_on_error_and_keeps_original_error(caplog):
    resource = FakeResource(OSError("close failed"))

    with caplog.at_level(logging.WARNING, logger="src.utils.resources"):
        with pytest.raises(KeyError, match="original"):
            with closing_quietly(resource):
                raise KeyError("original")

    assert resource.close_calls == 1
    assert len(caplog.records) == 1


def test_closing_quietly_non_io_release_error_replaces_block_error():
    """Test that only I/O failures are suppressed on release."""
    resource = FakeResource(RuntimeError("bug in close"))

    with pytest.raises(RuntimeError, match="bug in close") as raised:
        with closing_quietly(resource):
            raise KeyError("original")

    assert isinstance(raised.value.__context__, KeyError)
    assert resource.close_calls == 1


def test_closing_quietly_releases_on_early_return():
    resource = FakeResource()

    def read_first():
        with closing_quietly(resource):
            return "early"

    assert read_first() == "early"
    assert resource.close_calls == 1


def test_closing_quietly_custom_release(caplog):
    released = []

    def release():
        released.append(True)
        raise OSError("release failed")

    with caplog.at_level(logging.WARNING, logger="src.utils.resources"):
        with closing_quietly("handle", release=release) as handle:
            assert handle == "handle"

    assert released == [True]
    assert caplog.records[0].getMessage() == CLOSE_FAILURE_MESSAGE


def test_closing_quietly_with_none():
    with closing_quietly(None) as handle:
        assert handle is None


def test_real_file_is_closed(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"payload")

    with closing_quietly(open(path, "rb")) as stream:
        assert stream.read() == b"payload"

    assert stream.closed
