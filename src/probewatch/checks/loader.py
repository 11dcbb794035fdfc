"""Loading check definitions and building the check tree."""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from probewatch.checks.identity import CheckIdentity
from probewatch.checks.nodes import CheckNode, Group, SmtpCheck, TlsCheck
from probewatch.checks.probes import split_address
from probewatch.exceptions import (
    ConfigurationError,
    DuplicateCheckIdError,
    InvalidCheckDefinitionError,
    UnknownCheckTypeError,
)

if TYPE_CHECKING:
    from probewatch.notifier.hub import Notifier

CHECK_TYPES = (Group.check_type, TlsCheck.check_type, SmtpCheck.check_type)


def load_check_definitions(config_path: Path) -> list[dict[str, Any]]:
    """Read the raw check definitions from a YAML file.

    The document is either a list of checks or a mapping with a ``checks``
    list.

    Raises:
        ConfigurationError: If the file cannot be read or parsed

    """
    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        error_msg = f"Check definitions not found: {config_path}"
        raise ConfigurationError(error_msg, original_error=e) from e
    except yaml.YAMLError as e:
        error_msg = f"Invalid check definitions format: {e}"
        raise ConfigurationError(error_msg, original_error=e) from e
    except OSError as e:
        error_msg = f"Cannot open check definitions {config_path}: {e}"
        raise ConfigurationError(error_msg, original_error=e) from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("checks", [])
    return _sub_checks({"checks": data}, "checks", "<root>")


def _string_value(definition: dict[str, Any], key: str, check_name: str) -> str:
    value = definition.get(key)
    if not isinstance(value, str) or not value.strip():
        error_msg = f"Check '{check_name}': field '{key}' must be a non-empty string"
        raise InvalidCheckDefinitionError(error_msg)
    return value


def _bool_value(definition: dict[str, Any], key: str, check_name: str) -> bool:
    value = definition.get(key, False)
    if not isinstance(value, bool):
        error_msg = f"Check '{check_name}': field '{key}' must be a boolean"
        raise InvalidCheckDefinitionError(error_msg)
    return value


def _sub_checks(definition: dict[str, Any], key: str, check_name: str) -> list[dict[str, Any]]:
    value = definition.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        error_msg = f"Check '{check_name}': field '{key}' must be a list of checks"
        raise InvalidCheckDefinitionError(error_msg)
    return value


def _address_value(definition: dict[str, Any], check_name: str) -> str:
    address = _string_value(definition, "address", check_name)
    try:
        split_address(address)
    except ValueError as e:
        error_msg = f"Check '{check_name}': {e}"
        raise InvalidCheckDefinitionError(error_msg, original_error=e) from e
    return address


def build_checks(
    definitions: list[dict[str, Any]],
    notifier: "Notifier",
    logger: logging.Logger,
    parent: CheckIdentity | None = None,
    seen_ids: set[str] | None = None,
) -> list[CheckNode]:
    """Build check nodes from raw definitions, depth first.

    Args:
        definitions: Raw check definitions in configuration order
        notifier: Notifier shared by every node
        logger: Logger shared by every node
        parent: Identity of the enclosing group, if any
        seen_ids: Ids built so far, used to reject duplicates

    Returns:
        Check nodes in configuration order

    Raises:
        InvalidCheckDefinitionError: If a definition is malformed
        UnknownCheckTypeError: If a definition names an unsupported type
        DuplicateCheckIdError: If two checks resolve to the same id

    """
    if seen_ids is None:
        seen_ids = set()

    checks: list[CheckNode] = []
    for definition in definitions:
        name = _string_value(definition, "name", "<unnamed>")
        check_type = definition.get("type")
        identity = CheckIdentity.create(name, parent)

        if identity.id in seen_ids:
            error_msg = f"Check '{name}' resolves to duplicate id '{identity.id}'"
            raise DuplicateCheckIdError(error_msg)
        seen_ids.add(identity.id)

        check: CheckNode
        if check_type == Group.check_type:
            children = build_checks(
                _sub_checks(definition, "checks", name),
                notifier,
                logger,
                parent=identity,
                seen_ids=seen_ids,
            )
            check = Group(identity, notifier, logger, checks=children)
        elif check_type == TlsCheck.check_type:
            check = TlsCheck(
                identity,
                notifier,
                logger,
                address=_address_value(definition, name),
                insecure=_bool_value(definition, "insecure", name),
            )
        elif check_type == SmtpCheck.check_type:
            check = SmtpCheck(
                identity,
                notifier,
                logger,
                address=_address_value(definition, name),
            )
        else:
            error_msg = f"Check '{name}' has unrecognized type {check_type!r}, expected one of {', '.join(CHECK_TYPES)}"
            raise UnknownCheckTypeError(error_msg)

        checks.append(check)

    return checks


class HealthChecker:
    """Root of the check tree; runs every top-level check once per poll."""

    def __init__(self, checks: list[CheckNode], logger: logging.Logger) -> None:
        """Initialize the health checker.

        Args:
            checks: Top-level checks in configuration order
            logger: Logger instance for logging operations

        """
        self.checks = checks
        self.logger = logger

    @classmethod
    def from_file(
        cls,
        config_path: Path,
        notifier: "Notifier",
        logger: logging.Logger,
    ) -> "HealthChecker":
        """Load check definitions from YAML and build the tree.

        Raises:
            ConfigurationError: If the definitions cannot be loaded or are invalid

        """
        definitions = load_check_definitions(config_path)
        checks = build_checks(definitions, notifier, logger)
        checker = cls(checks, logger)
        logger.info(f"Loaded {sum(1 for _ in checker.iter_checks())} checks from {config_path}")
        return checker

    def iter_checks(self) -> Iterator[CheckNode]:
        """Yield every node of the tree in pre-order."""
        stack = list(reversed(self.checks))
        while stack:
            check = stack.pop()
            yield check
            if isinstance(check, Group):
                stack.extend(reversed(check.checks))

    def perform_checks(self) -> bool:
        """Evaluate all top-level checks and return whether all are healthy."""
        self.logger.info("Running checks.")
        all_ok = True
        for check in self.checks:
            if not check.evaluate():
                all_ok = False
        return all_ok
