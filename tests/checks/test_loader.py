"""Tests for loading check definitions and building the tree."""

import logging
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import yaml

from probewatch.checks.loader import HealthChecker, build_checks, load_check_definitions
from probewatch.checks.nodes import Group, SmtpCheck, TlsCheck
from probewatch.exceptions import (
    ConfigurationError,
    DuplicateCheckIdError,
    InvalidCheckDefinitionError,
    UnknownCheckTypeError,
)

EXAMPLE_CHECKS = [
    {
        "name": "Web",
        "type": "group",
        "checks": [
            {"name": "Frontend", "type": "tls", "address": "www.example.com:443"},
            {"name": "Backend", "type": "tls", "address": "10.0.0.5:8443", "insecure": True},
        ],
    },
    {"name": "mail.example.com", "type": "smtp", "address": "mail.example.com:25"},
]


class TestLoadCheckDefinitions:
    """Test cases for reading the YAML file."""

    def _write(self, temp_dir: Path, content: str) -> Path:
        config_file = temp_dir / "checks.yaml"
        config_file.write_text(content, encoding="utf-8")
        return config_file

    def test_load_list(self) -> None:
        """Test loading a top-level list of checks."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = self._write(Path(temp_dir), yaml.dump(EXAMPLE_CHECKS))

            definitions = load_check_definitions(config_file)

            assert definitions == EXAMPLE_CHECKS

    def test_load_mapping_with_checks_key(self) -> None:
        """Test loading a mapping that holds the checks list."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = self._write(Path(temp_dir), yaml.dump({"checks": EXAMPLE_CHECKS}))

            assert load_check_definitions(config_file) == EXAMPLE_CHECKS

    def test_empty_file(self) -> None:
        """Test that an empty file yields no checks."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = self._write(Path(temp_dir), "")

            assert load_check_definitions(config_file) == []

    def test_missing_file(self) -> None:
        """Test that a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_check_definitions(Path("/nonexistent/checks.yaml"))

    def test_invalid_yaml(self) -> None:
        """Test that invalid YAML is a configuration error."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = self._write(Path(temp_dir), "invalid: yaml: content: [unclosed")

            with pytest.raises(ConfigurationError, match="Invalid check definitions"):
                load_check_definitions(config_file)

    def test_list_of_scalars(self) -> None:
        """Test that non-mapping entries are rejected."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = self._write(Path(temp_dir), "- just a string\n")

            with pytest.raises(InvalidCheckDefinitionError, match="list of checks"):
                load_check_definitions(config_file)


class TestBuildChecks:
    """Test cases for building the check tree."""

    @pytest.fixture
    def logger(self) -> Mock:
        """Create a mock logger for testing."""
        return Mock(spec=logging.Logger)

    def test_build_tree(self, logger) -> None:
        """Test that definitions map onto node types and dotted ids."""
        notifier = Mock()
        checks = build_checks(EXAMPLE_CHECKS, notifier, logger)

        web, mail = checks
        assert isinstance(web, Group)
        assert web.id == "web"
        frontend, backend = web.checks
        assert isinstance(frontend, TlsCheck)
        assert frontend.id == "web.frontend"
        assert frontend.insecure is False
        assert backend.id == "web.backend"
        assert backend.insecure is True
        assert isinstance(mail, SmtpCheck)
        assert mail.id == "mail_example_com"
        assert mail.address == "mail.example.com:25"
        assert all(node.notifier is notifier for node in (web, frontend, backend, mail))

    def test_unknown_type(self, logger) -> None:
        """Test that an unknown type is fatal."""
        with pytest.raises(UnknownCheckTypeError, match="http"):
            build_checks([{"name": "x", "type": "http", "address": "a:1"}], Mock(), logger)

    def test_missing_type(self, logger) -> None:
        """Test that a missing type is fatal."""
        with pytest.raises(UnknownCheckTypeError):
            build_checks([{"name": "x"}], Mock(), logger)

    def test_missing_name(self, logger) -> None:
        """Test that a check needs a name."""
        with pytest.raises(InvalidCheckDefinitionError, match="name"):
            build_checks([{"type": "tls", "address": "a:1"}], Mock(), logger)

    def test_missing_address(self, logger) -> None:
        """Test that probe checks need an address."""
        with pytest.raises(InvalidCheckDefinitionError, match="address"):
            build_checks([{"name": "x", "type": "smtp"}], Mock(), logger)

    def test_malformed_address(self, logger) -> None:
        """Test that addresses without port are fatal."""
        with pytest.raises(InvalidCheckDefinitionError, match="host:port"):
            build_checks([{"name": "x", "type": "tls", "address": "example.com"}], Mock(), logger)

    def test_insecure_must_be_bool(self, logger) -> None:
        """Test that insecure rejects non-boolean values."""
        with pytest.raises(InvalidCheckDefinitionError, match="insecure"):
            build_checks(
                [{"name": "x", "type": "tls", "address": "a:1", "insecure": "yes"}],
                Mock(),
                logger,
            )

    def test_duplicate_ids_among_siblings(self, logger) -> None:
        """Test that names collapsing to the same id are rejected."""
        definitions = [
            {"name": "example.com", "type": "tls", "address": "a:1"},
            {"name": "Example com", "type": "tls", "address": "b:1"},
        ]
        with pytest.raises(DuplicateCheckIdError, match="example_com"):
            build_checks(definitions, Mock(), logger)

    def test_same_name_in_different_groups(self, logger) -> None:
        """Test that equal names below different parents are allowed."""
        definitions = [
            {"name": "a", "type": "group", "checks": [{"name": "tls", "type": "tls", "address": "a:1"}]},
            {"name": "b", "type": "group", "checks": [{"name": "tls", "type": "tls", "address": "b:1"}]},
        ]
        a, b = build_checks(definitions, Mock(), logger)

        assert a.checks[0].id == "a.tls"
        assert b.checks[0].id == "b.tls"


class TestHealthChecker:
    """Test cases for the root of the check tree."""

    @pytest.fixture
    def logger(self) -> Mock:
        """Create a mock logger for testing."""
        return Mock(spec=logging.Logger)

    def test_from_file(self, logger) -> None:
        """Test building the checker from a YAML file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / "checks.yaml"
            config_file.write_text(yaml.dump(EXAMPLE_CHECKS), encoding="utf-8")

            checker = HealthChecker.from_file(config_file, Mock(), logger)

        assert [check.id for check in checker.iter_checks()] == [
            "web",
            "web.frontend",
            "web.backend",
            "mail_example_com",
        ]

    def test_perform_checks_evaluates_everything(self, logger) -> None:
        """Test that every top-level check runs even after a failure."""
        failing = Mock(evaluate=Mock(return_value=False))
        passing = Mock(evaluate=Mock(return_value=True))
        checker = HealthChecker([failing, passing], logger)

        assert checker.perform_checks() is False
        failing.evaluate.assert_called_once()
        passing.evaluate.assert_called_once()

    def test_perform_checks_all_ok(self, logger) -> None:
        """Test that the root is healthy when every check is."""
        checker = HealthChecker([Mock(evaluate=Mock(return_value=True))], logger)

        assert checker.perform_checks() is True

    def test_no_checks(self, logger) -> None:
        """Test that an empty tree is healthy."""
        assert HealthChecker([], logger).perform_checks() is True
