"""Tests for SnapshotClient and remote sources."""
import logging
from unittest.mock import Mock, patch

import pytest
import requests

from payloadscan.api.snapshot_client import SnapshotClient
from payloadscan.config import SnapshotSourceConfig
from payloadscan.parser.parser_factory import HostFactory
from payloadscan.parser.python_host import PythonHost
from payloadscan.parser.snapshot_parser import SnapshotHost

SNAPSHOT_URL = "https://ci.example.com/artifacts/symbols.json"


@pytest.fixture
def source_config(tmp_path):
    return SnapshotSourceConfig(username="ci", password="secret", cache_dir=tmp_path / "cache")


def mock_response(document):
    response = Mock()
    response.json.return_value = document
    return response


class TestSnapshotClient:
    """Tests for SnapshotClient"""

    def test_basic_auth(self, source_config):
        client = SnapshotClient(source_config)
        assert client.session.auth.username == "ci"
        assert client.session.auth.password == "secret"

    def test_no_auth_without_username(self, tmp_path):
        client = SnapshotClient(SnapshotSourceConfig(cache_dir=tmp_path))
        assert client.session.auth is None

    @patch("requests.Session.get")
    def test_fetch_success(self, mock_get, source_config, snapshot_document):
        """Test successful snapshot download"""
        mock_get.return_value = mock_response(snapshot_document)

        document = SnapshotClient(source_config).fetch(SNAPSHOT_URL)

        assert document == snapshot_document
        mock_get.assert_called_once_with(SNAPSHOT_URL, timeout=30)

    @patch("requests.Session.get")
    def test_file_cache(self, mock_get, source_config, snapshot_document):
        """Test a second client reads the file cache"""
        mock_get.return_value = mock_response(snapshot_document)

        SnapshotClient(source_config).fetch(SNAPSHOT_URL)
        document = SnapshotClient(source_config).fetch(SNAPSHOT_URL)

        assert mock_get.call_count == 1
        assert document == snapshot_document
        assert len(list(source_config.cache_dir.glob("snapshot_*.json"))) == 1

    @patch("requests.Session.get")
    def test_cache_hit_is_logged(self, mock_get, source_config, snapshot_document, caplog):
        mock_get.return_value = mock_response(snapshot_document)
        client = SnapshotClient(source_config)
        client.fetch(SNAPSHOT_URL)

        with caplog.at_level(logging.INFO, logger="payloadscan.api.snapshot_client"):
            client.fetch(SNAPSHOT_URL)

        assert f"Loaded snapshot {SNAPSHOT_URL} from file cache" in caplog.text

    @patch("requests.Session.get")
    def test_force_refresh(self, mock_get, source_config, snapshot_document):
        """Test force refresh bypasses cache"""
        mock_get.return_value = mock_response(snapshot_document)
        client = SnapshotClient(source_config)

        client.fetch(SNAPSHOT_URL)
        client.fetch(SNAPSHOT_URL, force_refresh=True)

        assert mock_get.call_count == 2

    @patch("requests.Session.get")
    def test_expired_cache(self, mock_get, source_config, snapshot_document):
        mock_get.return_value = mock_response(snapshot_document)
        client = SnapshotClient(source_config)
        client.fetch(SNAPSHOT_URL)

        client.CACHE_TTL = -1
        client.fetch(SNAPSHOT_URL)

        assert mock_get.call_count == 2

    @patch("requests.Session.get")
    def test_connection_error(self, mock_get, source_config):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(RuntimeError, match="Could not fetch snapshot"):
            SnapshotClient(source_config).fetch(SNAPSHOT_URL)

    @patch("requests.Session.get")
    def test_http_error(self, mock_get, source_config):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        mock_get.return_value = response

        with pytest.raises(RuntimeError):
            SnapshotClient(source_config).fetch(SNAPSHOT_URL)


class TestHostFactory:
    """Tests for HostFactory"""

    @pytest.mark.parametrize(
        "source, expected",
        [
            (SNAPSHOT_URL, "url"),
            ("http://localhost:8000/symbols.json", "url"),
            ("build/symbols.JSON", "snapshot"),
            ("sample_api", "module"),
            ("myapp.api.users", "module"),
        ],
    )
    def test_detect_source_type(self, source, expected):
        assert HostFactory.detect_source_type(source) == expected

    @pytest.mark.parametrize("source", ["", "build/symbols.xml", "not a module"])
    def test_unsupported_source(self, source):
        with pytest.raises(ValueError, match="Unsupported source"):
            HostFactory.detect_source_type(source)

    @patch("requests.Session.get")
    def test_url_source(self, mock_get, source_config, snapshot_document):
        mock_get.return_value = mock_response(snapshot_document)

        host = HostFactory.create_host(SNAPSHOT_URL, source_config)

        assert isinstance(host, SnapshotHost)
        assert host.get_class("com.example.Dto") is not None

    def test_module_source(self):
        assert isinstance(HostFactory.create_host("sample_api"), PythonHost)

    def test_missing_snapshot_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HostFactory.create_host(str(tmp_path / "missing.json"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
