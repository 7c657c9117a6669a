# Client for Ollama's chat endpoint; same generate(messages, params) shape as EchoDevClient.

import requests
from typing import List, Tuple, Dict, Any
from ..types import Message, ModelParams


class OllamaClient:
    def __init__(self, model: str = "mistral:7b-instruct", host: str = "http://localhost:11434", timeout: float = 180):
        self.model = model
        self.host = host.rstrip("/")
        self.timeout = timeout

    def set_model(self, model: str):
        self.model = model

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        payload = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "options": {
                "temperature": float(0.3 if params.temperature is None else params.temperature),
                "num_predict": int(1000 if params.max_tokens is None else params.max_tokens),
            },
        }
        resp = requests.post(f"{self.host}/api/chat", json=payload, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        text = (data.get("message") or {}).get("content", "")
        return text.strip(), {"engine": "ollama", "model": self.model}
