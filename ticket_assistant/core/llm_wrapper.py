"""
Local generator backend on llama-cpp-python.

Loads a GGUF model from disk or the Hugging Face Hub and answers extraction
requests with schema-constrained chat completions.
"""

import asyncio
import errno
import os
from pathlib import Path
from typing import Literal

from llama_cpp import Llama

from ticket_assistant import models
from ticket_assistant.errors import TransportError
from ticket_assistant.utils import llm_helper, logging_helper, validate_helper

logger = logging_helper.get_logger(__name__)

DEFAULT_MODEL_DIR = "./models"
DeviceMode = Literal["cpu", "gpu", "auto"]


N_CTX_DEFAULT = 4096
MAX_TOKENS_DEFAULT = 1024
TEMPERATURE_DEFAULT = 0.2


class LLMWrapper:
    """
    Async wrapper for llama-cpp-python with device management.

    Supports loading from local files or Hugging Face Hub.
    """

    def __init__(
        self,
        model_path: Path | str | None = None,
        repo_id: str | None = None,
        filename: str | None = None,
        n_ctx: int = N_CTX_DEFAULT,
        n_gpu_layers: int = 0,
        device_mode: DeviceMode = "auto",
        local_dir: str = DEFAULT_MODEL_DIR,
        max_tokens: int = MAX_TOKENS_DEFAULT,
        temperature: float = TEMPERATURE_DEFAULT,
        verbose: bool = False,
    ) -> None:
        """
        Initialize LLM wrapper.

        Args:
            model_path: Path to local GGUF model file
            repo_id: Hugging Face repository ID
            filename: Filename pattern for GGUF file
            n_ctx: Context window size
            n_gpu_layers: Number of layers to offload to GPU (0 = CPU only)
            device_mode: Device preference ('cpu', 'gpu', 'auto')
            local_dir: Directory for storing downloaded models
            max_tokens: Upper bound on generated tokens per ticket
            temperature: Sampling temperature
            verbose: Enable detailed llama.cpp logging
        """
        validate_helper.validate_model_arguments(model_path, repo_id, filename)
        self.device_mode = self._resolve_device_mode(device_mode, n_gpu_layers)
        self.local_dir = Path(local_dir)
        self.max_tokens = max_tokens
        self.temperature = temperature

        self.model = self._load_model(
            model_path, repo_id, filename, n_ctx, n_gpu_layers, verbose
        )

        logger.info(f"LLM initialized on {self.device_mode} mode")

    def _resolve_device_mode(
        self, device_mode: DeviceMode, n_gpu_layers: int
    ) -> DeviceMode:
        """Resolve device mode based on configuration."""
        if n_gpu_layers == 0:
            return "cpu"
        return device_mode

    def _ensure_local_directory(self) -> None:
        """Ensure the local directory exists for model storage."""
        try:
            os.makedirs(self.local_dir, exist_ok=True)
        except OSError as e:
            if e.errno == errno.EACCES:
                logger.error(
                    f"Permission denied while creating directory: {self.local_dir}"
                )
                raise PermissionError(
                    f"Cannot create local model directory due to permissions: {self.local_dir}"
                ) from e
            logger.error(f"Failed to create local model directory: {self.local_dir} - {e}")
            raise RuntimeError(
                f"Could not create local model directory: {self.local_dir}"
            ) from e

    def _load_model(
        self,
        model_path: Path | str | None,
        repo_id: str | None,
        filename: str | None,
        n_ctx: int,
        n_gpu_layers: int,
        verbose: bool,
    ) -> Llama:
        """Load model using appropriate method."""
        if model_path:
            if not Path(model_path).exists():
                raise FileNotFoundError(f"Model file not found: {model_path}")
            return Llama(
                model_path=str(model_path),
                n_ctx=n_ctx,
                n_gpu_layers=n_gpu_layers,
                verbose=verbose,
            )

        if not filename or not repo_id:
            raise ValueError("Both repo_id and filename are required for HF models")

        self._ensure_local_directory()

        cached_path = os.path.join(self.local_dir, filename)
        if os.path.exists(cached_path):
            logger.info(f"Loading cached model: {cached_path}")
            return Llama(
                model_path=str(cached_path),
                n_ctx=n_ctx,
                n_gpu_layers=n_gpu_layers,
                verbose=verbose,
            )

        logger.info(f"Downloading model {repo_id}/{filename}")
        return Llama.from_pretrained(
            repo_id=repo_id,
            filename=filename,
            local_dir=str(self.local_dir),
            n_ctx=n_ctx,
            n_gpu_layers=n_gpu_layers,
            verbose=verbose,
        )

    async def generate(self, request: models.ExtractionRequest) -> str | None:
        """
        Run one schema-constrained chat completion.

        The model identifier of the request is informational here; the loaded
        GGUF model answers every request.

        Returns:
            Raw message text of the completion, or None if it had no content.

        Raises:
            TransportError: If llama.cpp fails while generating.
        """
        response_format = None
        if request.response_mime_type == models.JSON_MIME_TYPE:
            response_format = {
                "type": "json_object",
                "schema": request.response_schema,
            }

        try:
            response = await asyncio.to_thread(
                self.model.create_chat_completion,
                messages=[
                    {"role": "system", "content": request.system_instruction},
                    {"role": "user", "content": request.prompt},
                ],
                response_format=response_format,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            raise TransportError(f"Local generation failed: {e}") from e

        return llm_helper.extract_message_text(response)
