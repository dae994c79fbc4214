import os
import tempfile
import unittest

import torch

from distilqa.errors import LoadError
from distilqa.utils.io import load_state, read_state_dict, save_state


class TestIO(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.ckpt_path = os.path.join(self.temp_dir.name, "pytorch_model.bin")
        self.model = torch.nn.Linear(10, 2)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_save_and_load_state(self):
        save_state(self.model, self.ckpt_path)
        self.assertTrue(os.path.exists(self.ckpt_path))

        original_weight = self.model.weight.detach().clone()
        with torch.no_grad():
            torch.nn.init.xavier_uniform_(self.model.weight)
        self.assertFalse(torch.equal(self.model.weight, original_weight))

        load_state(self.model, self.ckpt_path)
        self.assertTrue(torch.equal(self.model.weight, original_weight))

    def test_save_creates_directories(self):
        nested_path = os.path.join(self.temp_dir.name, "subdir", "model.pt")
        save_state(self.model, nested_path)
        self.assertTrue(os.path.exists(nested_path))

    def test_nested_state_dict_is_unwrapped(self):
        torch.save({"state_dict": {"_orig_mod.weight": torch.ones(2)}}, self.ckpt_path)
        state = read_state_dict(self.ckpt_path)
        self.assertEqual(list(state), ["weight"])

    def test_missing_file(self):
        missing = os.path.join(self.temp_dir.name, "absent.bin")
        with self.assertRaises(LoadError) as ctx:
            read_state_dict(missing)
        self.assertEqual(ctx.exception.resource, missing)

    def test_garbage_file(self):
        with open(self.ckpt_path, "wb") as f:
            f.write(b"definitely not a checkpoint")
        with self.assertRaises(LoadError):
            read_state_dict(self.ckpt_path)

    def test_non_tensor_payload(self):
        torch.save({"epoch": 3}, self.ckpt_path)
        with self.assertRaises(LoadError):
            read_state_dict(self.ckpt_path)


if __name__ == "__main__":
    unittest.main()
