"""Runtime configuration: env-driven, overridable from the CLI.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and BOOTVERIFY_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class VerifyConfig(BaseSettings):
    """Configuration for a verification run.

    All settings can be overridden via BOOTVERIFY_* environment variables
    or a .env file in the working directory.  CLI flags take precedence
    and are applied with ``model_copy(update=...)``.

    Examples
    --------
    Override via environment::

        export BOOTVERIFY_NAMESPACE=verify
        export BOOTVERIFY_TIMEOUT_SECONDS=900
        export BOOTVERIFY_CLUSTER_SERVER=https://api.cluster.example:6443

    Or via .env file::

        BOOTVERIFY_WORKERS=4
        BOOTVERIFY_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BOOTVERIFY_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Ledger
    results_file: Path = Path("results.json")

    # Image source
    registry: str = "quay.io/containerdisks"

    # Verification
    namespace: str = "kubevirt"
    timeout_seconds: int = 600
    poll_interval_seconds: float = 1.0
    verify_username: str = "verify"

    # Worker pool
    workers: int = 1
    focus: str = ""

    # Cluster access: empty server means in-cluster service account
    cluster_server: str = ""
    cluster_token: str = ""
    cluster_token_file: Path | None = None
    cluster_ca_file: Path | None = None
    insecure_skip_tls_verify: bool = False
    request_timeout_seconds: float = 30.0
