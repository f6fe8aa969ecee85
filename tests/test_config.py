import os
import tempfile
import unittest
from unittest import mock

from ntpclock.config import ClientConfig
from ntpclock.cli.config import ConfigManager, ConfigResolver, parse_offset
from ntpclock.utils.exceptions import ConfigError


class TestParseOffset(unittest.TestCase):
    def test_formats(self):
        self.assertEqual(parse_offset(None), 0)
        self.assertEqual(parse_offset(""), 0)
        self.assertEqual(parse_offset("3600"), 3600)
        self.assertEqual(parse_offset("-7200"), -7200)
        self.assertEqual(parse_offset("+09:00"), 32400)
        self.assertEqual(parse_offset("-05:30"), -19800)
        self.assertEqual(parse_offset("5:45"), 20700)

    def test_garbage_raises(self):
        with self.assertRaises(ValueError):
            parse_offset("noon")

    def test_minutes_out_of_range(self):
        with self.assertRaises(ValueError):
            parse_offset("+01:99")
        with self.assertRaises(ValueError):
            parse_offset("+01:60")

    def test_sign_only_in_front(self):
        for text in ("+01:-30", "01:+30", "+-01:00", "--3600"):
            with self.assertRaises(ValueError, msg=text):
                parse_offset(text)

    def test_resolver_reports_bad_offset(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError):
                ConfigResolver.resolve({'offset': '+01:-30'}, os.path.join(tmp, ".ntpclock"))


class TestClientConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = ClientConfig()
        self.assertEqual(cfg.server, "pool.ntp.org")
        self.assertEqual(cfg.local_port, 1337)
        self.assertEqual(cfg.time_offset, 0)
        self.assertEqual(cfg.update_interval_ms, 60000)
        self.assertEqual(cfg.response_timeout_ms, 1000)

    def test_invalid_values(self):
        with self.assertRaises(ConfigError):
            ClientConfig(server=" ")
        with self.assertRaises(ConfigError):
            ClientConfig(local_port=70000)
        with self.assertRaises(ConfigError):
            ClientConfig(update_interval_ms=-5)
        with self.assertRaises(ConfigError):
            ClientConfig(poll_interval_ms=0)

    def test_error_message_names_class(self):
        try:
            ClientConfig(max_poll_attempts=0)
        except ConfigError as e:
            self.assertTrue(str(e).startswith("ConfigError: "))
        else:
            self.fail("ConfigError not raised")


class TestConfigFile(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = os.path.realpath(self._tmp.name)
        self.path = os.path.join(self.root, ".ntpclock")
        self._old_cwd = os.getcwd()

    def tearDown(self):
        os.chdir(self._old_cwd)
        self._tmp.cleanup()

    def test_write_then_read(self):
        ConfigManager.write(self.path, {'server': 'time.example.org', 'offset': '+09:00', 'interval': 30000})
        values = ConfigManager.read(self.path)
        self.assertEqual(values, {'server': 'time.example.org', 'offset': '+09:00', 'interval': '30000'})

    def test_read_ignores_other_sections_and_comments(self):
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write("# comment\n[OTHER]\nSERVER=nope\n[ntp]\nserver = ntp.example.com\nUNKNOWN=1\n")
        self.assertEqual(ConfigManager.read(self.path), {'server': 'ntp.example.com'})

    def test_missing_file_reads_empty(self):
        self.assertEqual(ConfigManager.read(os.path.join(self.root, "absent")), {})

    def test_find_config_file_searches_upward(self):
        ConfigManager.write(self.path, {'server': 'up.example.org'})
        nested = os.path.join(self.root, "a", "b")
        os.makedirs(nested)
        os.chdir(nested)
        self.assertEqual(ConfigManager.find_config_file(), self.path)


class TestConfigResolver(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, ".ntpclock")
        ConfigManager.write(self.path, {'server': 'file.example.org', 'offset': '+01:00', 'interval': 5000})

    def tearDown(self):
        self._tmp.cleanup()

    def test_priority(self):
        env = {'NTPCLOCK_OFFSET': '-02:00', 'NTPCLOCK_INTERVAL': '7000'}
        with mock.patch.dict(os.environ, env, clear=False):
            os.environ.pop('NTPCLOCK_SERVER', None)
            os.environ.pop('NTPCLOCK_LOCAL_PORT', None)
            cfg, sources = ConfigResolver.resolve({'interval': 9000}, self.path)

        self.assertEqual(cfg.server, 'file.example.org')
        self.assertEqual(cfg.time_offset, -7200)
        self.assertEqual(cfg.update_interval_ms, 9000)
        self.assertEqual(cfg.local_port, 1337)
        self.assertEqual(sources, {'server': 'file', 'offset': 'env', 'interval': 'option', 'local_port': 'default'})

    def test_invalid_number_raises(self):
        with mock.patch.dict(os.environ, {'NTPCLOCK_LOCAL_PORT': 'eighty'}):
            with self.assertRaises(ConfigError):
                ConfigResolver.resolve({}, self.path)


if __name__ == "__main__":
    unittest.main()
