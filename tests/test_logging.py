"""Tests for logging configuration and error envelopes"""
import logging

import pytest

from nim_proxy.core.exceptions import ProxyError, UpstreamError
from nim_proxy.core.logging import InterceptHandler, get_logger, setup_logging


@pytest.mark.unit
class TestSetupLogging:
    """Test setup_logging"""

    def test_file_sink_receives_messages(self, tmp_path):
        log_file = tmp_path / 'logs' / 'app.log'
        try:
            setup_logging(log_level='INFO', log_file=str(log_file))
            get_logger().warning('upstream went away')

            assert log_file.exists()
            assert 'upstream went away' in log_file.read_text(encoding='utf-8')
        finally:
            setup_logging(log_level='INFO')

    def test_file_sink_honours_level(self, tmp_path):
        log_file = tmp_path / 'app.log'
        try:
            setup_logging(log_level='warning', log_file=str(log_file))
            get_logger().info('chunk reassembled')
            get_logger().error('upstream refused')

            text = log_file.read_text(encoding='utf-8')
            assert 'upstream refused' in text
            assert 'chunk reassembled' not in text
        finally:
            setup_logging(log_level='INFO')

    def test_stdlib_logging_is_intercepted(self, tmp_path):
        log_file = tmp_path / 'app.log'
        try:
            setup_logging(log_level='INFO', log_file=str(log_file))
            logging.getLogger('uvicorn.error').error('bind failed')

            assert any(isinstance(h, InterceptHandler) for h in logging.getLogger('uvicorn.error').handlers)
            assert 'bind failed' in log_file.read_text(encoding='utf-8')
        finally:
            setup_logging(log_level='INFO')

    def test_console_only(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        setup_logging(log_level='debug')
        assert not (tmp_path / 'logs').exists()


@pytest.mark.unit
class TestErrors:
    """Test error envelopes"""

    def test_proxy_error_defaults(self):
        error = ProxyError()
        assert error.status_code == 500
        assert error.to_dict() == {'error': {'message': 'Upstream NIM error', 'type': 'proxy_error'}}

    def test_upstream_error_hides_detail(self):
        error = UpstreamError('connection reset by peer', 'transport')

        assert error.to_dict() == {'error': {'message': 'Upstream NIM error', 'type': 'proxy_error'}}
        assert 'connection reset by peer' in str(error)

    def test_upstream_error_str_with_status(self):
        error = UpstreamError('bad key', 'status', 401)
        assert str(error) == 'status error (HTTP 401): bad key'
