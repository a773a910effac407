import threading
import unittest

from tapegrad import TapeStackError, TapeStackUnderflowError, tensor
from tapegrad.infrastructure.autograd import TapeStack, current_tape_stack


class TestTapeStack(unittest.TestCase):
    def setUp(self) -> None:
        self.stack = TapeStack()

    def test_push_pop_lifo(self) -> None:
        self.assertFalse(self.stack.active)
        a = self.stack.push()
        b = self.stack.push()
        self.assertEqual(len(self.stack), 2)
        self.assertEqual(list(self.stack), [a, b])
        self.assertIs(self.stack.pop(), b)
        self.assertIs(self.stack.pop(), a)
        self.assertFalse(self.stack.active)

    def test_pop_empty_raises(self) -> None:
        with self.assertRaises(TapeStackUnderflowError):
            self.stack.pop()

    def test_watch_applies_to_every_tape(self) -> None:
        a = self.stack.push()
        b = self.stack.push()
        x = tensor(1.0)
        self.stack.watch(x)
        self.assertTrue(a.is_tracked(x.id))
        self.assertTrue(b.is_tracked(x.id))

    def test_recording_pops_on_exception(self) -> None:
        with self.assertRaises(KeyError):
            with self.stack.recording():
                self.assertEqual(len(self.stack), 1)
                raise KeyError("boom")
        self.assertEqual(len(self.stack), 0)

    def test_recording_detects_mismatched_pop(self) -> None:
        with self.assertRaises(TapeStackError):
            with self.stack.recording():
                self.stack.push()
        # the stray inner tape was popped by the session; the session's own
        # tape is still on the stack
        self.assertEqual(len(self.stack), 1)

    def test_recording_yields_pushed_tape(self) -> None:
        with self.stack.recording() as tape:
            self.assertIs(list(self.stack)[-1], tape)


class TestCurrentTapeStack(unittest.TestCase):
    def test_same_instance_on_one_thread(self) -> None:
        self.assertIs(current_tape_stack(), current_tape_stack())

    def test_threads_get_independent_stacks(self) -> None:
        seen = {}

        def worker() -> None:
            stack = current_tape_stack()
            seen["stack"] = stack
            seen["depth"] = len(stack)

        main = current_tape_stack()
        with main.recording():
            t = threading.Thread(target=worker)
            t.start()
            t.join()
        self.assertIsNot(seen["stack"], main)
        self.assertEqual(seen["depth"], 0)


class TestRecordingThroughOps(unittest.TestCase):
    def test_untracked_operations_are_not_recorded(self) -> None:
        stack = current_tape_stack()
        with stack.recording() as tape:
            x = tensor(2.0)
            y = tensor(3.0)
            stack.watch(x)
            z = x * 2.0
            w = y * 2.0
        self.assertTrue(tape.is_tracked(z.id))
        self.assertFalse(tape.is_tracked(w.id))
        self.assertEqual(len(tape.oid_lookup), 1)

    def test_nothing_recorded_without_active_tape(self) -> None:
        stack = current_tape_stack()
        self.assertFalse(stack.active)
        x = tensor(1.0)
        with stack.recording() as tape:
            pass
        _ = x * 2.0
        self.assertEqual(tape.oid_lookup, {})


if __name__ == "__main__":
    unittest.main()
