"""
Tests for observability helpers
"""

from unittest.mock import patch

import pytest

from klaviyo_dashboard.core import observability
from klaviyo_dashboard.core.observability import capture_exception, setup_observability, track_performance


@pytest.fixture(autouse=True)
def reset_observability(monkeypatch):
    monkeypatch.setattr(observability, "_observability_config", None)


class TestSetupObservability:
    """Test Sentry initialisation"""

    def test_disabled_without_dsn(self):
        with patch("klaviyo_dashboard.core.observability.sentry_sdk.init") as init:
            config = setup_observability(environment="test")

        assert config.enable_sentry is False
        init.assert_not_called()

    def test_enabled_with_dsn(self):
        with patch("klaviyo_dashboard.core.observability.sentry_sdk.init") as init:
            config = setup_observability(sentry_dsn="https://key@sentry.example/1", environment="production")

        assert config.enable_sentry is True
        assert init.call_args.kwargs["environment"] == "production"

    def test_dsn_from_environment(self, monkeypatch):
        monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example/2")

        with patch("klaviyo_dashboard.core.observability.sentry_sdk.init") as init:
            setup_observability()

        assert init.call_args.kwargs["dsn"] == "https://key@sentry.example/2"


class TestCaptureException:
    """Test capture_exception"""

    def test_logs_without_sentry(self):
        setup_observability()

        with patch.object(observability.logger, "error") as log_error:
            with patch("klaviyo_dashboard.core.observability.sentry_sdk.capture_exception") as capture:
                capture_exception(RuntimeError("boom"), {"client_id": 1})

        capture.assert_not_called()
        assert log_error.call_args.kwargs["extra"]["context"] == {"client_id": 1}

    def test_reports_to_sentry(self):
        with patch("klaviyo_dashboard.core.observability.sentry_sdk.init"):
            setup_observability(sentry_dsn="https://key@sentry.example/1")

        with patch("klaviyo_dashboard.core.observability.sentry_sdk.capture_exception") as capture:
            capture_exception(RuntimeError("boom"), {"scope": "all"})

        capture.assert_called_once()


class TestTrackPerformance:
    """Test track_performance"""

    def test_logs_duration_and_context(self):
        with patch.object(observability.logger, "info") as log_info:
            with track_performance("campaign_metrics") as ctx:
                ctx["campaigns"] = 4

        extra = log_info.call_args.kwargs["extra"]
        assert extra["operation"] == "campaign_metrics"
        assert extra["campaigns"] == 4
        assert extra["duration_ms"] >= 0

    def test_warns_when_slow(self):
        with patch.object(observability.logger, "warning") as log_warning:
            with patch("klaviyo_dashboard.core.observability.time.perf_counter", side_effect=[0.0, 2.0]):
                with track_performance("flow_metrics", alert_threshold_ms=1000.0):
                    pass

        assert log_warning.call_args.kwargs["extra"]["threshold_ms"] == 1000.0

    def test_logs_on_exception(self):
        with patch.object(observability.logger, "info") as log_info:
            with pytest.raises(ValueError):
                with track_performance("revenue_metrics"):
                    raise ValueError("bad")

        assert log_info.called
