"""
Tests for the local llama-cpp backend.
"""

import json
import os
import tempfile
from unittest.mock import Mock, patch

import pytest

from ticket_assistant.core import llm_wrapper
from ticket_assistant.core.prompt_builder import build_extraction_request
from ticket_assistant.errors import TransportError

TICKET_JSON = json.dumps(
    {
        "title": "Laptop bootet nicht",
        "category": "Hardware > Laptop",
        "ciType": "Lenovo ThinkPad T14",
        "symptoms": "Schwarzer Bildschirm nach dem Einschalten.",
        "missingInfoQuestions": [],
    }
)


class TestLLMWrapper:
    """Core tests for llm_wrapper.LLMWrapper."""

    @pytest.fixture
    def mock_llama(self):
        """Mock Llama model."""
        mock_model = Mock()
        mock_model.create_chat_completion.return_value = {
            "choices": [{"message": {"role": "assistant", "content": TICKET_JSON}}],
            "usage": {"total_tokens": 120},
        }
        return mock_model

    @pytest.fixture
    def temp_model_file(self):
        """Temporary model file."""
        with tempfile.NamedTemporaryFile(suffix=".gguf", delete=False) as f:
            f.write(b"fake model")
            temp_path = f.name
        yield temp_path
        os.unlink(temp_path)

    @pytest.fixture
    def request_(self):
        return build_extraction_request("Laptop startet nicht mehr", "local")

    def test_init_local_model(self, mock_llama, temp_model_file):
        """Test initialization with local model."""
        with patch("ticket_assistant.core.llm_wrapper.Llama", return_value=mock_llama):
            wrapper = llm_wrapper.LLMWrapper(model_path=temp_model_file)

            assert wrapper.model == mock_llama
            assert wrapper.device_mode == "cpu"  # default with 0 GPU layers

    def test_init_huggingface_model(self, mock_llama):
        """Test initialization with HuggingFace model."""
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama") as mock_llama_class,
            patch("ticket_assistant.core.llm_wrapper.os.makedirs"),
            patch("ticket_assistant.core.llm_wrapper.os.path.exists", return_value=False),
        ):
            mock_llama_class.from_pretrained.return_value = mock_llama

            wrapper = llm_wrapper.LLMWrapper(
                repo_id="test/model", filename="model.gguf"
            )

            assert wrapper.model == mock_llama
            mock_llama_class.from_pretrained.assert_called_once()

    def test_cached_huggingface_model(self, mock_llama):
        """A previously downloaded file is loaded instead of downloading again."""
        with tempfile.TemporaryDirectory() as temp_dir:
            open(os.path.join(temp_dir, "model.gguf"), "wb").close()

            with patch("ticket_assistant.core.llm_wrapper.Llama") as mock_llama_class:
                llm_wrapper.LLMWrapper(
                    repo_id="test/model", filename="model.gguf", local_dir=temp_dir
                )

            mock_llama_class.from_pretrained.assert_not_called()
            mock_llama_class.assert_called_once()

    def test_device_mode_resolution(self):
        """Test device mode is set to CPU when no GPU layers."""
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama"),
            patch("pathlib.Path.exists", return_value=True),
        ):
            wrapper = llm_wrapper.LLMWrapper(
                model_path="fake.gguf", device_mode="gpu", n_gpu_layers=0
            )

            assert wrapper.device_mode == "cpu"

    def test_model_file_not_found(self):
        """Test error when model file doesn't exist."""
        with pytest.raises(FileNotFoundError):
            llm_wrapper.LLMWrapper(model_path="/nonexistent/model.gguf")

    def test_missing_huggingface_params(self):
        """Test error when HF params are incomplete."""
        with pytest.raises(ValueError, match="Incomplete Hugging Face configuration"):
            llm_wrapper.LLMWrapper(repo_id="test/repo")  # missing filename

    @pytest.mark.asyncio
    async def test_generate_success(self, mock_llama, request_):
        """Test successful structured generation."""
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama", return_value=mock_llama),
            patch("pathlib.Path.exists", return_value=True),
        ):
            wrapper = llm_wrapper.LLMWrapper(model_path="fake.gguf")

            result = await wrapper.generate(request_)

            assert result == TICKET_JSON

    @pytest.mark.asyncio
    async def test_generate_sends_schema_and_messages(self, mock_llama, request_):
        """The system policy, prompt and schema reach llama.cpp."""
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama", return_value=mock_llama),
            patch("pathlib.Path.exists", return_value=True),
        ):
            wrapper = llm_wrapper.LLMWrapper(
                model_path="fake.gguf", max_tokens=512, temperature=0.0
            )

            await wrapper.generate(request_)

            mock_llama.create_chat_completion.assert_called_once_with(
                messages=[
                    {"role": "system", "content": request_.system_instruction},
                    {"role": "user", "content": request_.prompt},
                ],
                response_format={
                    "type": "json_object",
                    "schema": request_.response_schema,
                },
                max_tokens=512,
                temperature=0.0,
            )

    @pytest.mark.asyncio
    async def test_plain_text_request_is_unconstrained(self, mock_llama, request_):
        plain = request_.model_copy(update={"response_mime_type": "text/plain"})
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama", return_value=mock_llama),
            patch("pathlib.Path.exists", return_value=True),
        ):
            wrapper = llm_wrapper.LLMWrapper(model_path="fake.gguf")

            await wrapper.generate(plain)

        kwargs = mock_llama.create_chat_completion.call_args.kwargs
        assert kwargs["response_format"] is None

    @pytest.mark.asyncio
    async def test_generate_without_choices(self, mock_llama, request_):
        mock_llama.create_chat_completion.return_value = {"choices": []}
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama", return_value=mock_llama),
            patch("pathlib.Path.exists", return_value=True),
        ):
            wrapper = llm_wrapper.LLMWrapper(model_path="fake.gguf")

            assert await wrapper.generate(request_) is None

    @pytest.mark.asyncio
    async def test_generate_failure_is_transport_error(self, mock_llama, request_):
        mock_llama.create_chat_completion.side_effect = RuntimeError("llama_decode failed")
        with (
            patch("ticket_assistant.core.llm_wrapper.Llama", return_value=mock_llama),
            patch("pathlib.Path.exists", return_value=True),
        ):
            wrapper = llm_wrapper.LLMWrapper(model_path="fake.gguf")

            with pytest.raises(TransportError, match="llama_decode failed"):
                await wrapper.generate(request_)

    def test_ensure_local_directory_directly(self):
        """Test the _ensure_local_directory method directly."""
        with tempfile.TemporaryDirectory() as temp_dir:
            new_dir_path = llm_wrapper.Path(temp_dir) / "models"

            with patch("os.makedirs") as mock_makedirs:
                # Create wrapper without calling __init__
                wrapper = llm_wrapper.LLMWrapper.__new__(llm_wrapper.LLMWrapper)
                wrapper.local_dir = new_dir_path

                wrapper._ensure_local_directory()

                mock_makedirs.assert_called_once_with(new_dir_path, exist_ok=True)

    def test_ensure_local_directory_permission_denied(self):
        wrapper = llm_wrapper.LLMWrapper.__new__(llm_wrapper.LLMWrapper)
        wrapper.local_dir = llm_wrapper.Path("/root/forbidden")

        with patch(
            "os.makedirs", side_effect=OSError(llm_wrapper.errno.EACCES, "denied")
        ):
            with pytest.raises(PermissionError):
                wrapper._ensure_local_directory()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
