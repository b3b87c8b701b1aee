"""Pydantic model for the daemon connection settings.

Build one directly or from the environment::

    config = ConnectionConfig(host="search.internal", port=9306)
    config = ConnectionConfig.from_env()   # SPHINXQL_HOST, SPHINXQL_PORT, ...
"""
from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field


class ConnectionConfig(BaseModel):
    """Where and how to reach the search daemon's MySQL-protocol listener.

    Attributes:
        host: Daemon host name or address.
        port: SphinxQL listener port.
        charset: Connection character set.
        connect_timeout: Seconds to wait for the TCP handshake.
        read_timeout: Seconds to wait for a response; ``None`` waits forever.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = "127.0.0.1"
    port: int = Field(default=9306, ge=1, le=65535)
    charset: str = "utf8"
    connect_timeout: float = Field(default=10.0, gt=0)
    read_timeout: float | None = Field(default=None, gt=0)

    @classmethod
    def from_env(
        cls,
        prefix: str = "SPHINXQL_",
        environ: Mapping[str, str] | None = None,
    ) -> ConnectionConfig:
        """Read settings from ``<prefix><FIELD>`` environment variables.

        Unset variables fall back to the field defaults.

        Args:
            prefix: Variable name prefix.
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values = {
            name: env[f"{prefix}{name.upper()}"]
            for name in cls.model_fields
            if f"{prefix}{name.upper()}" in env
        }
        return cls.model_validate(values)
