"""
Runtime settings.

Values come from the environment; a .env file in the working directory is
loaded first (existing environment variables win).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from claimform.ai import DEFAULT_GROQ_MODEL, DEFAULT_OPENAI_MODEL


@dataclass(frozen=True)
class Settings:
    input_pdf: Path = Path("DBLNYC84.pdf")
    data_dir: Path = Path("generated-data")
    output_dir: Path = Path("output")
    ai_provider: str = "groq"
    groq_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    log_level: str = "INFO"
    font_size: float = 10

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        load_dotenv(env_file or Path.cwd() / ".env")
        return cls(
            input_pdf=Path(os.environ.get("CLAIMFORM_INPUT_PDF", "DBLNYC84.pdf")),
            data_dir=Path(os.environ.get("CLAIMFORM_DATA_DIR", "generated-data")),
            output_dir=Path(os.environ.get("CLAIMFORM_OUTPUT_DIR", "output")),
            ai_provider=os.environ.get("CLAIMFORM_AI_PROVIDER", "groq"),
            groq_api_key=os.environ.get("GROQ_API_KEY") or None,
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            groq_model=os.environ.get("CLAIMFORM_GROQ_MODEL", DEFAULT_GROQ_MODEL),
            openai_model=os.environ.get("CLAIMFORM_OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            log_level=os.environ.get("CLAIMFORM_LOG_LEVEL", "INFO").upper(),
            font_size=float(os.environ.get("CLAIMFORM_FONT_SIZE", "10")),
        )

    def has_ai_credentials(self, provider: Optional[str] = None) -> bool:
        name = (provider or self.ai_provider).lower()
        if name == "groq":
            return bool(self.groq_api_key)
        if name == "openai":
            return bool(self.openai_api_key)
        return name == "mock"
