import unittest
from unittest.mock import Mock, patch

from fastapi.testclient import TestClient

from coin_converter.config.settings import Settings
from coin_converter.main import app, build_converter
from coin_converter.services.converter import ConverterWidget
from fakes import StubPriceClient


class AppLifecycleTest(unittest.TestCase):
    def tearDown(self):
        app.state.converter = None

    def test_converter_starts_on_startup_and_stops_on_shutdown(self):
        converter = ConverterWidget(rest_client=StubPriceClient(), throttle_interval_sec=0.0)
        app.state.converter = converter

        with TestClient(app):
            self.assertTrue(converter.started)
            self.assertFalse(converter.stopped)
            self.assertTrue(converter.poller.running)

        self.assertTrue(converter.stopped)
        self.assertFalse(converter.poller.running)
        self.assertTrue(converter.throttle.closed)
        self.assertIs(app.state.converter, converter)

    def test_lifespan_builds_converter_from_settings_when_none_installed(self):
        settings = Settings(
            COINGECKO_BASE_URL="https://example.test/api/v3",
            HTTP_TIMEOUT_SEC=1.0,
            THROTTLE_INTERVAL_MS=250,
            PRICE_POLL_INTERVAL_SEC=60.0,
        )
        original_get_settings = app.state.get_settings
        app.state.get_settings = Mock(return_value=settings)
        seen = {}

        try:
            with patch('coin_converter.main.CoinGeckoRestClient', return_value=StubPriceClient()) as client_cls:
                with TestClient(app):
                    seen['converter'] = app.state.converter
            client_cls.assert_called_once_with(base_url="https://example.test/api/v3", timeout=1.0)
        finally:
            app.state.get_settings = original_get_settings

        converter = seen['converter']
        self.assertEqual(converter.throttle.interval_sec, 0.25)
        self.assertEqual(converter.poller.interval_sec, 60.0)
        self.assertTrue(converter.stopped)
        self.assertIsNone(app.state.converter)

    def test_build_converter_wires_rest_client(self):
        converter = build_converter(Settings())

        self.assertEqual(converter.rest_client.base_url, "https://api.coingecko.com/api/v3")
        self.assertEqual(converter.rest_client.timeout, 10.0)
        self.assertEqual(converter.throttle.interval_sec, 0.5)


if __name__ == '__main__':
    unittest.main()
