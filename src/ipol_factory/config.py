"""Run configuration for building an ipol file."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

# ---------------------------------------------------------------------------
# Defaults (overridable from the command line)
# ---------------------------------------------------------------------------
DEFAULT_PREDICTION_FILE = "prediction.root"
DEFAULT_PARAM_FILE = "params.dat"
DEFAULT_BIN_LIST = "bin.list"
DEFAULT_ORDER = 4
DEFAULT_OUTPUT = "output.ipol"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_log_level(value) -> str:
    """Upper-cased logging level name; unknown or empty values give INFO."""
    level = (value or "").upper()
    return level if level in LOG_LEVELS else "INFO"


LOG_LEVEL = resolve_log_level(os.environ.get("IPOL_LOG_LEVEL"))


class IpolConfig(BaseModel):
    """All inputs of one ipol build."""

    scan_dir: Path = Field(..., description="Directory holding one subdirectory per run.")
    prediction_file: str = Field(DEFAULT_PREDICTION_FILE, description="Histogram store inside each run.")
    param_file: str = Field(DEFAULT_PARAM_FILE, description="Parameter file inside each run.")
    bin_list: Path = Field(Path(DEFAULT_BIN_LIST), description="File listing '<name>#<bin>' entries.")
    # Negative orders are rejected by the fitting layer, not here.
    order: int = Field(DEFAULT_ORDER, description="Maximum polynomial order.")
    n_test: int = Field(0, ge=0, description="Number of runs held out to choose the order.")
    output: Path = Field(Path(DEFAULT_OUTPUT), description="Path of the ipol file to write.")
    include_header: bool = True

    @field_validator("scan_dir")
    @classmethod
    def _scan_dir_exists(cls, value: Path) -> Path:
        if not value.is_dir():
            raise ValueError(f"{value} is not a valid directory.")
        return value


def make_config(**kwargs) -> IpolConfig:
    """
    Builds an ``IpolConfig``, turning pydantic validation failures into
    ``ConfigurationError``.
    """
    try:
        return IpolConfig(**kwargs)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(details) from e
