"""Client configuration: immutable settings, optionally loaded from the environment / .env."""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 11016
DEFAULT_TIMEOUT_MS = 5000
# Responses larger than this are rejected, so size it for the largest expected INFO/RESULTS reply.
DEFAULT_RECV_BUFFER_SIZE = 65536

ENV_PREFIX = "MYGRAM_"


class ClientConfig(BaseModel):
    """Connection settings. Frozen: assigning a field after construction raises."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    recv_buffer_size: int = Field(default=DEFAULT_RECV_BUFFER_SIZE, ge=16)
    # 0 disables the query length check
    max_query_length: int = Field(default=0, ge=0)
    normalize_queries: bool = False

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "ClientConfig":
        """
        Build config from MYGRAM_* environment variables, after loading .env
        (env_file, or the nearest .env found from the working directory).
        Variables already set in the environment win over .env values.
        """
        load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True))
        values = {}
        for field in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + field.upper())
            if raw is not None and raw != "":
                values[field] = raw
        return cls(**values)
