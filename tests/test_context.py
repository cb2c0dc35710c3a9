import time
import threading
import unittest
from unittest.mock import MagicMock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sharecheck.context import CheckContext, CANCELED, DEADLINE_EXCEEDED
from sharecheck.exceptions import CheckCancelled

class TestCheckContext(unittest.TestCase):
    def test_background_never_done(self):
        ctx = CheckContext.background()
        ctx.raise_if_done()
        self.assertFalse(ctx.cancelled)
        self.assertIsNone(ctx.remaining())
        self.assertEqual(ctx.remaining(7.5), 7.5)

    def test_cancel_runs_callbacks_once(self):
        ctx = CheckContext()
        cb = MagicMock()
        ctx.on_cancel(cb)
        ctx.cancel()
        ctx.cancel()
        cb.assert_called_once_with()
        self.assertEqual(ctx.reason, CANCELED)
        with self.assertRaises(CheckCancelled):
            ctx.raise_if_done()

    def test_unregistered_callback_not_called(self):
        ctx = CheckContext()
        cb = MagicMock()
        unregister = ctx.on_cancel(cb)
        unregister()
        ctx.cancel()
        cb.assert_not_called()

    def test_on_cancel_after_cancel_runs_immediately(self):
        ctx = CheckContext()
        ctx.cancel()
        cb = MagicMock()
        ctx.on_cancel(cb)
        cb.assert_called_once_with()

    def test_failing_callback_is_logged(self):
        ctx = CheckContext()
        ctx.on_cancel(MagicMock(side_effect=OSError("closed")))
        second = MagicMock()
        ctx.on_cancel(second)
        with self.assertLogs("share_check.context", level="WARNING"):
            ctx.cancel()
        second.assert_called_once_with()

    def test_timeout_fires(self):
        fired = threading.Event()
        with CheckContext.with_timeout(0.05) as ctx:
            ctx.on_cancel(fired.set)
            self.assertTrue(fired.wait(2))
        self.assertEqual(ctx.reason, DEADLINE_EXCEEDED)
        with self.assertRaises(CheckCancelled) as cm:
            ctx.raise_if_done()
        self.assertEqual(str(cm.exception), DEADLINE_EXCEEDED)

    def test_zero_timeout_is_already_expired(self):
        ctx = CheckContext.with_timeout(0)
        self.assertTrue(ctx.cancelled)
        self.assertEqual(ctx.remaining(), 0.0)

    def test_close_disarms_timer(self):
        ctx = CheckContext.with_timeout(0.05)
        ctx.close()
        time.sleep(0.1)
        self.assertFalse(ctx.cancelled)

    def test_passed_deadline_detected_without_timer(self):
        ctx = CheckContext(deadline=time.monotonic() - 0.1)
        with self.assertRaises(CheckCancelled):
            ctx.raise_if_done()
        self.assertTrue(ctx.cancelled)

if __name__ == '__main__':
    unittest.main()
