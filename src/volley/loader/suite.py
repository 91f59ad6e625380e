"""Loading a suite for execution: validate, pick the version, filter tests."""

from __future__ import annotations

from pathlib import Path

import structlog

from volley.loader.validator import ValidationErrorDetail, validate_suite_file
from volley.models.suite import SuiteConfig

logger = structlog.get_logger(__name__)


class SuiteLoadError(Exception):
    """Raised when a suite file cannot be read or fails validation.

    Attributes:
        path: The suite file.
        errors: Every validation problem found, empty for read failures.
    """

    def __init__(
        self,
        path: Path,
        message: str,
        errors: list[ValidationErrorDetail] | None = None,
    ) -> None:
        self.path = path
        self.errors = errors or []
        super().__init__(f"{path}: {message}")


def filter_by_version(config: SuiteConfig, version: str | None) -> SuiteConfig:
    """Keep only the tests that apply to ``version``."""
    kept = [api for api in config.apis if api.applies_to(version)]
    return config.model_copy(update={"apis": kept})


def load_suite(path: Path, version: str | None = None) -> SuiteConfig:
    """Load a suite file ready to run.

    A non-empty ``version`` replaces the file's version before tests are
    filtered against it.

    Raises:
        SuiteLoadError: If the file is unreadable or invalid.
    """
    try:
        config, errors = validate_suite_file(path)
    except OSError as exc:
        raise SuiteLoadError(path, f"failed to read suite: {exc.strerror or exc}") from exc

    if config is None:
        summary = errors[0].message if errors else "invalid suite"
        raise SuiteLoadError(path, f"invalid suite ({len(errors)} error(s)): {summary}", errors)

    if version:
        config = config.model_copy(update={"version": version})

    total = len(config.apis)
    config = filter_by_version(config, config.version or None)
    logger.debug(
        "suite_loaded",
        path=str(path),
        version=config.version,
        tests=len(config.apis),
        filtered_out=total - len(config.apis),
    )
    return config


def apply_overrides(
    config: SuiteConfig,
    base_url: str | None = None,
    version: str | None = None,
    cert_file: str | None = None,
    key_file: str | None = None,
    ca_file: str | None = None,
) -> SuiteConfig:
    """Return a copy of ``config`` with non-empty command-line values applied."""
    update: dict[str, object] = {}
    if base_url:
        update["base_url"] = base_url
    if version:
        update["version"] = version

    cert_update = {
        key: value
        for key, value in (("cert_file", cert_file), ("key_file", key_file), ("ca_file", ca_file))
        if value
    }
    if cert_update:
        update["certificate"] = config.certificate.model_copy(update=cert_update)

    return config.model_copy(update=update) if update else config
