from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "data_source": "file",
    "data_dir": "data",
    "data_url": "",
    "analyzer": "offline",
    "llm_model": "qwen3:8b",
    "ollama_url": "http://localhost:11434",
    "default_count": 10,
    "per_word_cap": 2,
}


@dataclass
class Settings:
    data_source: str = DEFAULTS["data_source"]  # file | http
    data_dir: str = DEFAULTS["data_dir"]
    data_url: str = DEFAULTS["data_url"]
    analyzer: str = DEFAULTS["analyzer"]  # offline | ollama | anthropic
    llm_model: str = DEFAULTS["llm_model"]
    ollama_url: str = DEFAULTS["ollama_url"]
    default_count: int = DEFAULTS["default_count"]
    per_word_cap: int = DEFAULTS["per_word_cap"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_full_path(self) -> Path:
        p = Path(self.data_dir)
        if p.is_absolute():
            return p
        return self.project_root / p

    def to_dict(self) -> dict:
        return {
            "data_source": self.data_source,
            "data_dir": self.data_dir,
            "data_url": self.data_url,
            "analyzer": self.analyzer,
            "llm_model": self.llm_model,
            "ollama_url": self.ollama_url,
            "default_count": self.default_count,
            "per_word_cap": self.per_word_cap,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        # Migrate: llm_provider -> analyzer
        if "llm_provider" in raw:
            raw.setdefault("analyzer", raw["llm_provider"])
            del raw["llm_provider"]
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
