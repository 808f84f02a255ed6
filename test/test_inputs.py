#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8step.constants import DEFAULT_KEYMAP
from chip8step.inputs.i_null import Inputs, InputsError
from chip8step.keypad import Keypad
from chip8step.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.keypad = Keypad()
        self.inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)

    def test_inputs_keymap(self):
        self.assertEqual(0x0, self.inputs.keymap_dict[ord("x")])
        self.assertEqual(0x1, self.inputs.keymap_dict[ord("1")])
        self.assertEqual(0xF, self.inputs.keymap_dict[ord("v")])

    def test_inputs_bad_keymaps(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", self.renderer, self.keypad)
        self.assertRaises(InputsError, Inputs, ",".join(["a"] * 16), self.renderer, self.keypad)
        self.assertRaises(InputsError, Inputs, ",".join(["1"] * 16), self.renderer, self.keypad)

    def test_inputs_host_key_event(self):
        self.assertEqual(0xC, self.inputs.host_key_event(ord("4"), True))
        self.assertTrue(self.keypad.is_key_down(0xC))
        self.inputs.host_key_event(ord("4"), False)
        self.assertFalse(self.keypad.is_key_down(0xC))

    def test_inputs_unmapped_key(self):
        self.assertIsNone(self.inputs.host_key_event(ord("p"), True))
        self.assertIsNone(self.keypad.get_first_pressed())

    def test_inputs_process_messages(self):
        self.assertFalse(self.inputs.process_messages())
        self.assertFalse(self.inputs.can_quit())
