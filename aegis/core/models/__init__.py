"""
Domain models — Pydantic types for the setup wizard.

All models are re-exported here for convenient access:

    from aegis.core.models import SetupConfig, Receipt, StepResult
"""

from aegis.core.models.config import (
    Backend,
    BackendType,
    B2Provider,
    BorgBackend,
    FTPProvider,
    GCSProvider,
    JobConfig,
    MonitoringConfig,
    Provider,
    ProviderType,
    ResticBackend,
    RetentionConfig,
    S3CompatibleProvider,
    SchedulingConfig,
    SetupConfig,
    SFTPProvider,
    TraditionalBackend,
)
from aegis.core.models.receipt import Receipt
from aegis.core.models.step import StepResult
from aegis.core.models.template import GeneratedFile
from aegis.core.models.tool import ToolSpec

__all__ = [
    # config.py
    "B2Provider",
    "Backend",
    "BackendType",
    "BorgBackend",
    "FTPProvider",
    "GCSProvider",
    # template.py
    "GeneratedFile",
    "JobConfig",
    "MonitoringConfig",
    "Provider",
    "ProviderType",
    # receipt.py
    "Receipt",
    "ResticBackend",
    "RetentionConfig",
    "S3CompatibleProvider",
    "SFTPProvider",
    "SchedulingConfig",
    "SetupConfig",
    # step.py
    "StepResult",
    "TraditionalBackend",
    # tool.py
    "ToolSpec",
]
