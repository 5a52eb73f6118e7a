"""Тесты контекста отмены и дедлайна."""

import threading
import time

import pytest

from waitfor.context import (
    Canceled,
    ContextError,
    DeadlineExceeded,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
)


class TestBackground:
    def test_live(self):
        ctx = background()
        assert ctx.err() is None
        assert ctx.deadline() is None
        assert ctx.remaining() is None
        assert not ctx.done()

    def test_cancel(self):
        ctx = background()
        ctx.cancel()
        assert isinstance(ctx.err(), Canceled)

    def test_err_is_stable(self):
        ctx = background()
        ctx.cancel()
        first = ctx.err()
        ctx.cancel()
        assert ctx.err() is first


class TestDeadline:
    def test_past_deadline(self):
        ctx = with_deadline(background(), time.monotonic() - 1)
        err = ctx.err()
        assert isinstance(err, DeadlineExceeded)
        assert isinstance(err, TimeoutError)
        assert ctx.err() is err

    def test_zero_timeout_expired(self):
        ctx = with_timeout(background(), 0)
        assert isinstance(ctx.err(), DeadlineExceeded)

    def test_fresh_timeout_live(self):
        ctx = with_timeout(background(), 10)
        assert ctx.err() is None
        assert 0 < ctx.remaining() <= 10

    def test_child_keeps_earlier_parent_deadline(self):
        parent = with_timeout(background(), 5)
        child = with_timeout(parent, 60)
        assert child.deadline() == parent.deadline()

    def test_child_shorter_deadline(self):
        parent = with_timeout(background(), 60)
        child = with_timeout(parent, 5)
        assert child.deadline() < parent.deadline()

    def test_cancel_after_deadline_keeps_deadline_error(self):
        ctx = with_timeout(background(), -1)
        err = ctx.err()
        ctx.cancel()
        assert ctx.err() is err


class TestTree:
    def test_parent_cancel_propagates(self):
        parent = with_cancel(background())
        child = with_cancel(parent)
        grandchild = with_timeout(child, 60)

        parent.cancel()

        assert child.err() is parent.err()
        assert grandchild.err() is parent.err()

    def test_child_cancel_does_not_affect_parent(self):
        parent = with_cancel(background())
        child = with_cancel(parent)
        child.cancel()
        assert parent.err() is None

    def test_child_of_terminated_parent(self):
        parent = background()
        parent.cancel()
        child = with_timeout(parent, 60)
        assert child.err() is parent.err()

    def test_context_manager_cancels(self):
        with with_timeout(background(), 60) as ctx:
            assert ctx.err() is None
        assert isinstance(ctx.err(), Canceled)


class TestWait:
    def test_wait_times_out_while_live(self):
        ctx = with_cancel(background())
        assert ctx.wait(0.01) is False

    def test_wait_returns_on_cancel(self):
        ctx = with_cancel(background())
        timer = threading.Timer(0.05, ctx.cancel)
        timer.start()
        try:
            assert ctx.wait(5) is True
        finally:
            timer.cancel()
        assert isinstance(ctx.err(), Canceled)

    def test_wait_bounded_by_deadline(self):
        ctx = with_timeout(background(), 0.05)
        started = time.monotonic()
        assert ctx.wait(5) is True
        assert time.monotonic() - started < 2
        assert isinstance(ctx.err(), DeadlineExceeded)

    def test_errors_share_base(self):
        assert issubclass(Canceled, ContextError)
        assert issubclass(DeadlineExceeded, ContextError)

    def test_repr(self):
        ctx = background()
        assert "live" in repr(ctx)
        ctx.cancel()
        assert "Canceled" in repr(ctx)

    @pytest.mark.parametrize("timeout", [0, 0.001])
    def test_wait_on_terminated(self, timeout):
        ctx = background()
        ctx.cancel()
        assert ctx.wait(timeout) is True
