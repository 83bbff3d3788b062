import unittest

from coin_converter.services.reactive import Effect, Signal


class TestSignal(unittest.TestCase):
    def test_set_notifies_subscribers_with_new_value(self):
        signal = Signal(1)
        seen = []
        signal.subscribe(seen.append)

        changed = signal.set(2)

        self.assertTrue(changed)
        self.assertEqual(signal.get(), 2)
        self.assertEqual(seen, [2])

    def test_equal_value_does_not_notify(self):
        signal = Signal("btc")
        seen = []
        signal.subscribe(seen.append)

        changed = signal.set("btc")

        self.assertFalse(changed)
        self.assertEqual(seen, [])

    def test_dedupe_disabled_notifies_every_write(self):
        signal = Signal(None, dedupe=False)
        seen = []
        signal.subscribe(seen.append)

        signal.set("boom")
        signal.set("boom")

        self.assertEqual(seen, ["boom", "boom"])

    def test_unsubscribe_stops_notifications(self):
        signal = Signal(0)
        seen = []
        unsubscribe = signal.subscribe(seen.append)

        signal.set(1)
        unsubscribe()
        unsubscribe()
        signal.set(2)

        self.assertEqual(seen, [1])
        self.assertEqual(signal.subscriber_count, 0)


class TestEffect(unittest.TestCase):
    def test_runs_on_activation_and_on_each_dependency_change(self):
        a = Signal(1)
        b = Signal("x")
        calls = []
        effect = Effect([a, b], lambda: calls.append((a.get(), b.get())))

        effect.activate()
        a.set(2)
        b.set("y")
        b.set("y")

        self.assertEqual(calls, [(1, "x"), (2, "x"), (2, "y")])
        self.assertEqual(effect.runs, 3)

    def test_rerun_forces_execution_with_unchanged_inputs(self):
        a = Signal(1)
        calls = []
        effect = Effect([a], lambda: calls.append(a.get()))
        effect.activate()

        effect.rerun()

        self.assertEqual(calls, [1, 1])

    def test_dispose_detaches_from_dependencies(self):
        a = Signal(1)
        calls = []
        effect = Effect([a], lambda: calls.append(a.get()))
        effect.activate()

        effect.dispose()
        a.set(5)
        effect.rerun()

        self.assertEqual(calls, [1])
        self.assertEqual(a.subscriber_count, 0)


if __name__ == "__main__":
    unittest.main()
