import unittest
import os
import sys
import json
import shutil
import tempfile
from contextlib import redirect_stdout, redirect_stderr
from io import StringIO

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import main_app


class TestMainApp(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _run(self, *argv):
        out, err = StringIO(), StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main_app.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_demo_network(self):
        network, _ = main_app.build_demo_network(4, seed=1)
        self.assertEqual(network.size(), 4)
        self.assertNotEqual(network.weight(0, 3), 0.0)
        self.assertEqual(network.weight(1, 2), network.weight(2, 1))

    def test_run(self):
        path = os.path.join(self.test_dir, "config.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"physics": {"seed": 3}}, f)
        code, out, _ = self._run("-c", path, "-n", "4", "-f", "20", "--select", "0")
        self.assertEqual(code, 0)
        self.assertEqual(len(out.strip().splitlines()), 4)
        self.assertIn("distance=0", out)

    def test_bad_config(self):
        code, _, err = self._run("-c", os.path.join(self.test_dir, "missing.json"))
        self.assertEqual(code, 1)
        self.assertIn("could not load config", err)

    def test_malformed_config_values(self):
        for physics in ({"mass": "heavy"}, ["mass"]):
            with self.subTest(physics=physics):
                path = os.path.join(self.test_dir, "config.json")
                with open(path, "w", encoding="utf-8") as f:
                    json.dump({"physics": physics}, f)
                code, _, err = self._run("-c", path, "-n", "2", "-f", "1")
                self.assertEqual(code, 1)
                self.assertIn("could not load config", err)

    def test_null_config_value_keeps_default(self):
        path = os.path.join(self.test_dir, "config.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"physics": {"mass": None}}, f)
        code, _, _ = self._run("-c", path, "-n", "2", "-f", "1")
        self.assertEqual(code, 0)

    def test_config_source_is_logged(self):
        path = os.path.join(self.test_dir, "config.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"physics": {"seed": 1}}, f)
        with self.assertLogs("memview", level="INFO") as logs:
            code, _, _ = self._run("-c", path, "-n", "2", "-f", "1")
        self.assertEqual(code, 0)
        self.assertTrue(any(path in line for line in logs.output))

    def test_unknown_selected_node(self):
        code, _, err = self._run("-n", "2", "-f", "1", "--select", "9")
        self.assertEqual(code, 1)
        self.assertIn("Node 9 not found", err)


if __name__ == '__main__':
    unittest.main()
