import logging
import unittest
from unittest.mock import patch

from kundali_facts.config import Settings
from kundali_facts.logging_config import PACKAGE_LOGGER, configure_logging


class TestConfigureLogging(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger(PACKAGE_LOGGER)
        self.saved_handlers = list(self.logger.handlers)
        self.saved_level = self.logger.level

    def tearDown(self):
        self.logger.handlers = self.saved_handlers
        self.logger.setLevel(self.saved_level)

    def test_single_handler_on_package_logger(self):
        root_handlers = list(logging.getLogger().handlers)

        configure_logging("debug")
        configure_logging("warning")

        ours = [h for h in self.logger.handlers if getattr(h, "_kundali_facts", False)]
        self.assertEqual(len(ours), 1)
        self.assertEqual(self.logger.level, logging.WARNING)
        self.assertEqual(logging.getLogger().handlers, root_handlers)


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.DASHA_YEAR_DAYS, 365.2425)
        self.assertEqual(settings.DASHA_DEPTH, 5)
        self.assertEqual(settings.YOGINI_START_RULE, "classical")
        self.assertIsNone(settings.YOGINI_START_LORD)
        self.assertEqual(settings.LOG_LEVEL, "INFO")
        self.assertNotIn("APP_NAME", Settings.model_fields)

    def test_environment_override(self):
        with patch.dict("os.environ", {"DASHA_DEPTH": "3", "YOGINI_START_RULE": "sequential"}):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.DASHA_DEPTH, 3)
        self.assertEqual(settings.YOGINI_START_RULE, "sequential")


if __name__ == "__main__":
    unittest.main()
