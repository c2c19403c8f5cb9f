from pathlib import Path

SUPPORTED_BACKENDS = ("openai", "llama")


def validate_model_arguments(
    model_path: Path | str | None,
    model_repo: str | None,
    model_filename: str | None,
) -> None:
    """
    Validate local model configuration arguments for logical consistency.

    Raises:
        ValueError: If argument combinations are invalid
    """
    # Ensure mutually exclusive model source options
    has_local_path = True if model_path else False
    has_hf_repo = True if (model_repo or model_filename) else False

    if has_local_path and has_hf_repo:
        raise ValueError(
            "Conflicting model sources: use either TICKET_MODEL_PATH OR "
            "TICKET_MODEL_REPO + TICKET_MODEL_FILENAME, not both"
        )

    # Ensure complete Hugging Face configuration
    if bool(model_repo) != bool(model_filename):
        raise ValueError(
            "Incomplete Hugging Face configuration: both TICKET_MODEL_REPO and "
            "TICKET_MODEL_FILENAME are required when using HF models"
        )

    # Ensure at least one model source is specified
    if not has_local_path and not has_hf_repo:
        raise ValueError(
            "No model specified: provide either TICKET_MODEL_PATH or "
            "TICKET_MODEL_REPO + TICKET_MODEL_FILENAME"
        )


def validate_backend(backend: str) -> None:
    """Ensure the generator backend name is one we can build."""
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported backend '{backend}': expected one of "
            f"{', '.join(SUPPORTED_BACKENDS)}"
        )
