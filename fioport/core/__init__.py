"""Core domain types: configuration, results, exit codes and workspace."""

from .config import BuildConfig, ConfigError, load_config, load_config_or_default
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok
from .workspace import BuildWorkspace, acquire_workspace

__all__ = [
    # config
    "BuildConfig",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # workspace
    "BuildWorkspace",
    "acquire_workspace",
]
