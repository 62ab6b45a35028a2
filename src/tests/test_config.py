import json
import os
import shutil
import tempfile
import unittest

from gnews_tui import config
from gnews_tui.config import load_config, resolve_settings


class TestConfigFile(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, ".config/gnews/config.json")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_default_config_is_created(self):
        loaded = load_config(self.config_path)

        self.assertTrue(os.path.exists(self.config_path))
        self.assertEqual(loaded, config.DEFAULT_CONFIG)

    def test_existing_config_is_loaded(self):
        os.makedirs(os.path.dirname(self.config_path))
        with open(self.config_path, "w") as f:
            json.dump({"api_key": "abc", "page_size": 20}, f)

        self.assertEqual(load_config(self.config_path), {"api_key": "abc", "page_size": 20})

    def test_corrupt_config_yields_empty(self):
        os.makedirs(os.path.dirname(self.config_path))
        with open(self.config_path, "w") as f:
            f.write("{oops")

        self.assertEqual(load_config(self.config_path), {})

    def test_non_object_config_yields_empty(self):
        os.makedirs(os.path.dirname(self.config_path))
        with open(self.config_path, "w") as f:
            json.dump(["api_key"], f)

        self.assertEqual(load_config(self.config_path), {})


class TestResolveSettings(unittest.TestCase):
    def test_defaults(self):
        settings = resolve_settings({}, environ={})

        self.assertIsNone(settings.api_key)
        self.assertEqual(settings.language, "en")
        self.assertEqual(settings.page_size, 10)
        self.assertEqual(settings.base_url, config.GNEWS_BASE_URL)

    def test_precedence(self):
        file_config = {"api_key": "from-file", "language": "de", "page_size": 5}
        environ = {"GNEWS_API_KEY": "from-env", "GNEWS_PAGE_SIZE": "7"}

        settings = resolve_settings(file_config, {"page_size": 3, "api_key": None}, environ)

        self.assertEqual(settings.api_key, "from-env")
        self.assertEqual(settings.language, "de")
        self.assertEqual(settings.page_size, 3)

    def test_empty_api_key_is_missing(self):
        self.assertIsNone(resolve_settings({"api_key": ""}, environ={}).api_key)

    def test_invalid_page_size(self):
        with self.assertRaisesRegex(ValueError, "GNEWS_PAGE_SIZE"):
            resolve_settings({}, environ={"GNEWS_PAGE_SIZE": "lots"})
        with self.assertRaisesRegex(ValueError, "positive"):
            resolve_settings({"page_size": 0}, environ={})


if __name__ == "__main__":
    unittest.main()
