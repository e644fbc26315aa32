#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
import io
import unittest
from contextlib import redirect_stdout

from sculptfade import debug
from sculptfade.utils.debug import DebugManager


class DebugManagerTests(unittest.TestCase):
    def setUp(self):
        self.manager = DebugManager()

    def test_disabled_manager_records_nothing(self):
        self.manager.debug_log("FADE_STATE", "crate: Idle -> Triggered")
        self.manager.update_state("crate", "state", "Triggered")

        self.assertEqual(self.manager.events, [])
        self.assertEqual(self.manager.current_state, {})

    def test_records_events_and_state_transitions(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            self.manager.enable()
            self.manager.update_state("crate", "state", "Waiting")
            self.manager.update_state("crate", "state", "Fading", "Delay elapsed")

        self.assertEqual(self.manager.current_state, {"crate": {"state": "Fading"}})
        last = self.manager.events[-1]
        self.assertEqual(last["event_type"], "STATE_CHANGE")
        self.assertEqual(last["data"]["old_value"], "Waiting")
        self.assertIn("Delay elapsed crate.state: Waiting -> Fading", buffer.getvalue())

    def test_log_error_and_summary(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            self.manager.enable()
            self.manager.log_error("CLIP_LOAD", "crate", "bad header", {"path": "pop.wav"})
            self.manager.print_state_summary()

        error = [e for e in self.manager.events if e["event_type"] == "ERROR"][0]
        self.assertEqual(error["data"]["path"], "pop.wav")
        self.assertIn("=== STATE SUMMARY ===", buffer.getvalue())
        self.assertEqual(self.manager.get_current_state()["total_events"], len(self.manager.events))


class DebugSwitchTests(unittest.TestCase):
    def setUp(self):
        original = debug.is_debug_enabled()
        self.addCleanup(self._restore, original)

    def _restore(self, enabled):
        with redirect_stdout(io.StringIO()):
            debug.set_debug_mode(enabled)

    def test_set_debug_mode_toggles_recording(self):
        with redirect_stdout(io.StringIO()):
            debug.set_debug_mode(True)
            self.assertTrue(debug.is_debug_enabled())
            count = len(debug.debug_manager.events)
            debug.debug_log("TEST", "recorded")
            self.assertEqual(len(debug.debug_manager.events), count + 1)

            debug.set_debug_mode(False)
            debug.debug_log("TEST", "dropped")
        self.assertFalse(debug.is_debug_enabled())
        self.assertEqual(debug.debug_manager.events[-1]["event_type"], "DEBUG_MODE_DISABLED")


if __name__ == "__main__":
    unittest.main()
