"""
Runtime configuration for the ticket assistant.

Values come from environment variables (optionally a local ``.env`` file) and
are injected into the generator backends explicitly; nothing below reads the
environment at call time.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ticket_assistant.errors import ConfigurationError
from ticket_assistant.utils import validate_helper

DEFAULT_BACKEND = "openai"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_REQUEST_TIMEOUT = 60.0


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class Settings:
    """
    Configuration for building a generator backend.

    - backend: "openai" for a hosted OpenAI-compatible API, "llama" for a local GGUF model
    - api_key / base_url / request_timeout: hosted API access
    - model: model identifier sent with every request
    - model_path / model_repo / model_filename / n_gpu_layers: local model loading
    """

    backend: str = DEFAULT_BACKEND
    api_key: str | None = None
    base_url: str | None = None
    model: str = DEFAULT_MODEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    model_path: Path | None = None
    model_repo: str | None = None
    model_filename: str | None = None
    n_gpu_layers: int = 0

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        load_dotenv(env_file)

        model_path = _optional("TICKET_MODEL_PATH")
        try:
            timeout = float(os.getenv("TICKET_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
            n_gpu_layers = int(os.getenv("TICKET_N_GPU_LAYERS", "0"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        return cls(
            backend=os.getenv("TICKET_BACKEND", DEFAULT_BACKEND).strip().lower(),
            api_key=_optional("OPENAI_API_KEY"),
            base_url=_optional("OPENAI_BASE_URL"),
            model=os.getenv("TICKET_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
            request_timeout=timeout,
            model_path=Path(model_path) if model_path else None,
            model_repo=_optional("TICKET_MODEL_REPO"),
            model_filename=_optional("TICKET_MODEL_FILENAME"),
            n_gpu_layers=n_gpu_layers,
        )

    def validate(self) -> None:
        """
        Check that the settings describe a buildable backend.

        The API key is deliberately not checked: a missing or invalid key is
        reported by the service and surfaces as an extraction failure.

        Raises:
            ConfigurationError: If the settings are inconsistent
        """
        try:
            validate_helper.validate_backend(self.backend)
            if self.backend == "llama":
                validate_helper.validate_model_arguments(
                    self.model_path, self.model_repo, self.model_filename
                )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")
