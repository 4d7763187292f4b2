from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "gemini",
    "llm_model": "gemini-2.0-flash",
    "ollama_url": "http://localhost:11434",
    "temperature": 0.7,
    "remote_timeout": 60.0,
    "host": "127.0.0.1",
    "port": 3001,
    "stop_words_file": "",
}

@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    ollama_url: str = DEFAULTS["ollama_url"]
    temperature: float = DEFAULTS["temperature"]
    remote_timeout: float = DEFAULTS["remote_timeout"]  # seconds, 0 disables
    host: str = DEFAULTS["host"]
    port: int = DEFAULTS["port"]
    stop_words_file: str = DEFAULTS["stop_words_file"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def stop_words_path(self) -> Path | None:
        if not self.stop_words_file:
            return None
        return self.project_root / self.stop_words_file

    @property
    def timeout(self) -> float | None:
        return self.remote_timeout if self.remote_timeout > 0 else None

    def to_dict(self) -> dict:
        return {
            "llm_provider": self.llm_provider,
            "llm_model": self.llm_model,
            "ollama_url": self.ollama_url,
            "temperature": self.temperature,
            "remote_timeout": self.remote_timeout,
            "host": self.host,
            "port": self.port,
            "stop_words_file": self.stop_words_file,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()
