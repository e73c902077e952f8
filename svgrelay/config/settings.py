import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from .constants import DEFAULT_UI_URL, MAX_UPLOAD_MB, MODEL_NAME, SVG_ANIMATION_PROMPT
from ..utils.config_utils import load_system_instructions


@dataclass(frozen=True)
class RelayConfig:
    """
    Startup configuration handed to `create_app`.

    Only `gemini_api_key` is required, and it is checked per request so a
    missing key answers with a configuration error instead of stopping the server.
    """
    gemini_api_key: Optional[str] = None
    model_name: str = MODEL_NAME
    ui_url: str = DEFAULT_UI_URL
    max_upload_mb: int = MAX_UPLOAD_MB
    system_prompt: str = SVG_ANIMATION_PROMPT
    log_level: str = "INFO"

    REQUIRED = ("gemini_api_key",)

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """
        Builds the configuration from `.env` and the process environment.
        Returns:
            config (RelayConfig): Values read from `GEMINI_API_KEY`, `GEMINI_MODEL`, `UI_URL`,
            `MAX_UPLOAD_MB`, `SYSTEM_PROMPT_FILE` and `LOG_LEVEL`.
        """
        load_dotenv()

        prompt = SVG_ANIMATION_PROMPT
        prompt_file = os.getenv("SYSTEM_PROMPT_FILE")
        if prompt_file:
            prompt = load_system_instructions(prompt_file) or SVG_ANIMATION_PROMPT

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            model_name=os.getenv("GEMINI_MODEL", MODEL_NAME),
            ui_url=os.getenv("UI_URL", DEFAULT_UI_URL),
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", MAX_UPLOAD_MB)),
            system_prompt=prompt,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED if not getattr(self, name)]

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024
