"""Configuration loader for the access policy and ranking settings."""

import hashlib
import json
import time
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TypeVar

import structlog
import yaml
from pydantic import BaseModel, ValidationError

from school_portal.config.constants import (
    COMPONENT_CONFIG,
    FILE_TYPE_ACCESS,
    FILE_TYPE_RANKING,
)
from school_portal.config.effective import EffectiveConfig
from school_portal.config.schemas.access import AccessPolicyConfig
from school_portal.config.schemas.ranking import RankingConfig


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)
ResultT = TypeVar("ResultT")


class ConfigState(str, Enum):
    """Where a loader is in its single load."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ConfigStateError(Exception):
    """Raised when a loader that already ran is asked to load again."""

    def __init__(self, from_state: ConfigState, to_state: ConfigState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class ConfigLoader:
    """Loads and validates access.yaml and ranking.yaml.

    A loader runs once: UNLOADED -> LOADING, then READY or FAILED. Create a
    new loader to reload. Failures are recorded as `{loc, msg, type}` entries
    that the CLI prints with hints.
    """

    def __init__(self, run_id: str) -> None:
        """Initialize the loader.

        Args:
            run_id: Unique identifier for the current run.
        """
        self._run_id = run_id
        self._state = ConfigState.UNLOADED
        self._file_checksums: dict[str, str] = {}
        self._validation_errors: list[dict[str, str]] = []
        self._validation_duration_ms: float = 0
        self._current_file = ""
        self._log = logger.bind(run_id=run_id, component=COMPONENT_CONFIG)

    @property
    def state(self) -> ConfigState:
        """Get the current loader state."""
        return self._state

    @property
    def file_checksums(self) -> dict[str, str]:
        """Get SHA-256 checksums of loaded files."""
        return self._file_checksums.copy()

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    @property
    def validation_duration_ms(self) -> float:
        """Get validation duration in milliseconds."""
        return self._validation_duration_ms

    def load(
        self,
        access_path: Path,
        ranking_path: Path | None = None,
    ) -> EffectiveConfig:
        """Load the access policy and, optionally, the ranking settings.

        Args:
            access_path: Path to access.yaml.
            ranking_path: Optional path to ranking.yaml; defaults apply if omitted.

        Returns:
            EffectiveConfig with all validated configurations.

        Raises:
            ConfigValidationError: If schema validation fails.
            FileNotFoundError: If a file does not exist.
            yaml.YAMLError: If a file is not valid YAML.
            ConfigStateError: If this loader already ran.
        """

        def load_all() -> EffectiveConfig:
            access = self._load_model(access_path, FILE_TYPE_ACCESS, AccessPolicyConfig)
            ranking = RankingConfig()
            if ranking_path is not None:
                ranking = self._load_model(ranking_path, FILE_TYPE_RANKING, RankingConfig)
            return EffectiveConfig(
                access=access,
                ranking=ranking,
                file_checksums=self._file_checksums.copy(),
                run_id=self._run_id,
            )

        return self._run(load_all)

    def load_ranking(self, ranking_path: Path) -> RankingConfig:
        """Load ranking.yaml on its own, for commands that need no access policy.

        Raises:
            ConfigValidationError: If schema validation fails.
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            ConfigStateError: If this loader already ran.
        """
        return self._run(
            lambda: self._load_model(ranking_path, FILE_TYPE_RANKING, RankingConfig)
        )

    def _run(self, load: Callable[[], ResultT]) -> ResultT:
        """Run one load, recording its outcome."""
        if self._state is not ConfigState.UNLOADED:
            raise ConfigStateError(self._state, ConfigState.LOADING)
        self._state = ConfigState.LOADING
        start_time = time.perf_counter()

        try:
            result = load()
        except ValidationError as e:
            self._handle_validation_error(e)
            raise ConfigValidationError(
                self.validation_errors, self._current_file
            ) from e
        except FileNotFoundError as e:
            self._record_failure("file", str(e), "file_not_found")
            raise
        except yaml.YAMLError as e:
            self._record_failure("yaml", str(e), "yaml_parse_error")
            raise

        self._validation_duration_ms = (time.perf_counter() - start_time) * 1000
        self._state = ConfigState.READY
        self._log.info(
            "config_ready",
            files=len(self._file_checksums),
            config_validation_duration_ms=self._validation_duration_ms,
        )
        return result

    def _load_yaml_file(self, file_path: Path) -> tuple[dict[str, object], str]:
        """Load a YAML file and compute its checksum.

        Raises:
            FileNotFoundError: If file does not exist.
            yaml.YAMLError: If YAML parsing fails.
        """
        content_bytes = file_path.read_bytes()
        checksum = hashlib.sha256(content_bytes).hexdigest()
        parsed = yaml.safe_load(content_bytes.decode("utf-8")) or {}
        if not isinstance(parsed, dict):
            msg = f"expected a mapping at the top level of {file_path}"
            raise yaml.YAMLError(msg)
        return parsed, checksum

    def _load_model(
        self, file_path: Path, file_type: str, model: type[ModelT]
    ) -> ModelT:
        """Load one YAML file and validate it against a schema."""
        self._current_file = str(file_path)
        self._log.info(
            "loading_config_file", file_path=str(file_path), file_type=file_type
        )
        data, checksum = self._load_yaml_file(file_path)
        self._file_checksums[str(file_path.resolve())] = checksum
        validated = model.model_validate(data)
        self._log.info(
            "config_file_loaded",
            file_path=str(file_path),
            file_type=file_type,
            file_sha256=checksum,
        )
        return validated

    def _handle_validation_error(self, error: ValidationError) -> None:
        """Record pydantic errors and move to FAILED."""
        self._state = ConfigState.FAILED
        for err in error.errors():
            self._validation_errors.append(
                {
                    "loc": ".".join(str(loc) for loc in err["loc"]),
                    "msg": err["msg"],
                    "type": err["type"],
                }
            )
        self._log.error(
            "config_validation_failed",
            file_path=self._current_file,
            validation_error_count=len(self._validation_errors),
            errors=self._validation_errors,
        )

    def _record_failure(self, loc: str, msg: str, error_type: str) -> None:
        """Record a file-level failure and move to FAILED."""
        self._state = ConfigState.FAILED
        self._validation_errors.append({"loc": loc, "msg": msg, "type": error_type})
        self._log.error(
            "config_load_failed",
            file_path=self._current_file,
            error_type=error_type,
            error=msg,
        )

    def get_validation_summary(self) -> dict[str, object]:
        """Get a summary of the validation process."""
        return {
            "run_id": self._run_id,
            "state": self._state.name,
            "file_checksums": self._file_checksums,
            "validation_error_count": len(self._validation_errors),
            "validation_errors": self._validation_errors,
            "validation_duration_ms": self._validation_duration_ms,
        }

    def get_validation_summary_json(self) -> str:
        """Get validation summary as JSON string with stable ordering."""
        return json.dumps(self.get_validation_summary(), sort_keys=True, indent=2)
