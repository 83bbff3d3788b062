import unittest

from coin_converter.services.reactive import Signal
from coin_converter.services.throttle import ThrottledValue
from fakes import ManualScheduler


def _throttle(interval_sec: float = 0.5, initial=0):
    scheduler = ManualScheduler()
    source = Signal(initial, name="amount")
    throttled = ThrottledValue(source, interval_sec, scheduler)
    throttled.start()
    emitted = []
    throttled.output.subscribe(lambda value: emitted.append((scheduler.now(), value)))
    return scheduler, source, throttled, emitted


class TestThrottledValue(unittest.TestCase):
    def test_burst_inside_window_collapses_to_single_trailing_emission(self):
        scheduler, source, throttled, emitted = _throttle()

        source.set(1)
        scheduler.advance(0.1)
        source.set(2)
        scheduler.advance(0.1)
        source.set(3)

        scheduler.advance(0.25)
        self.assertEqual(throttled.value, 0)
        self.assertEqual(emitted, [])

        scheduler.advance(0.1)
        self.assertEqual(throttled.value, 3)
        self.assertEqual(len(emitted), 1)
        self.assertAlmostEqual(emitted[0][0], 0.5)
        self.assertEqual(emitted[0][1], 3)

    def test_change_after_quiet_interval_emits_immediately(self):
        scheduler, source, throttled, emitted = _throttle()
        scheduler.advance(2.0)

        source.set(7)

        self.assertEqual(throttled.value, 7)
        self.assertEqual(emitted, [(2.0, 7)])
        self.assertFalse(throttled.has_pending)

    def test_pending_delay_uses_remaining_budget(self):
        scheduler, source, throttled, emitted = _throttle()
        scheduler.advance(1.0)
        source.set(1)

        scheduler.advance(0.2)
        source.set(2)

        self.assertEqual(len(scheduler.active_timers), 1)
        self.assertAlmostEqual(scheduler.active_timers[0].due, 1.5)

        scheduler.advance(0.35)
        self.assertAlmostEqual(emitted[-1][0], 1.5)
        self.assertEqual(emitted[-1][1], 2)

    def test_only_one_pending_timer_at_a_time(self):
        scheduler, source, _throttled, _emitted = _throttle()

        for value in range(1, 6):
            source.set(value)
            scheduler.advance(0.05)

        self.assertEqual(len(scheduler.active_timers), 1)

    def test_zero_interval_is_pass_through(self):
        scheduler, source, throttled, emitted = _throttle(interval_sec=0.0)

        source.set(1)
        source.set(2)
        source.set(3)

        self.assertEqual([value for _, value in emitted], [1, 2, 3])
        self.assertEqual(scheduler.active_timers, [])

    def test_consecutive_windows_each_emit_latest_value(self):
        scheduler, source, _throttled, emitted = _throttle()

        source.set(1)
        source.set(2)
        scheduler.advance(0.5)
        source.set(3)
        source.set(4)
        scheduler.advance(0.5)

        self.assertEqual([value for _, value in emitted], [2, 4])

    def test_close_cancels_pending_emission(self):
        scheduler, source, throttled, emitted = _throttle()

        source.set(5)
        throttled.close()
        scheduler.advance(5.0)
        source.set(6)

        self.assertEqual(emitted, [])
        self.assertEqual(throttled.value, 0)
        self.assertEqual(scheduler.active_timers, [])

    def test_negative_interval_is_rejected(self):
        with self.assertRaises(ValueError):
            ThrottledValue(Signal(0), -1.0, ManualScheduler())


if __name__ == "__main__":
    unittest.main()
