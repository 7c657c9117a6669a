# ============================================================
# txtai Thinking FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Persisted augmentation settings (YAML)
#   - Per-session prompt slots + last search result
#   - Host generation pipeline with the augmenter registered
#     as prompt modifier and message-received listener
# ============================================================

from fastapi import FastAPI, HTTPException, Path, Query
from pydantic import BaseModel, Field, ValidationError
from typing import List, Optional, Dict, Any

# --- Local imports ---
from txtai_thinking.settings import settings, SettingsStore
from txtai_thinking.log import configure_logging
from txtai_thinking.augment import (
    AugmentationSession,
    ChatMessage,
    GenerationType,
    ReferenceAugmenter,
    SessionRegistry,
)
from txtai_thinking.generate import ChatGenerator, ChatResponse
from txtai_thinking.generate.clients.echo_dev_client import EchoDevClient

logger = configure_logging(settings.LOG_LEVEL)

# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
if settings.MODEL_BACKEND == "ollama":
    from txtai_thinking.generate.clients.ollama_client import OllamaClient
    model_client = OllamaClient(model=settings.OLLAMA_MODEL, host=settings.OLLAMA_HOST)
else:
    model_client = EchoDevClient()

# ------------------------------------------------------------
# 🧠 Shared wiring
# ------------------------------------------------------------
store = SettingsStore(settings.SETTINGS_PATH)
sessions = SessionRegistry()
augmenter = ReferenceAugmenter()

chat_gen = ChatGenerator(
    model_client=model_client,
    system_prompt=settings.SYSTEM_PROMPT,
    config_path=settings.GENERATOR_CONFIG,
)
chat_gen.register_prompt_modifier(augmenter)
chat_gen.on_message_received(augmenter)

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="txtai Thinking API", version="0.1")

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class ChatTurn(BaseModel):
    role: str
    content: str
    is_system: bool = False
    augmented: bool = False

class ChatRequest(BaseModel):
    session_id: str = "default"
    message: str = ""
    history: Optional[List[ChatTurn]] = None
    kind: GenerationType = GenerationType.NORMAL
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    model: Optional[str] = None
    variables: Optional[Dict[str, str]] = None

class ChatPayload(BaseModel):
    text: str
    history: List[ChatTurn]
    meta: Dict[str, Any]
    notifications: List[Dict[str, str]]

class AugmentRequest(BaseModel):
    session_id: str = "default"
    history: List[ChatTurn] = Field(default_factory=list)
    kind: GenerationType = GenerationType.NORMAL
    context_size: int = 4096
    variables: Optional[Dict[str, str]] = None

class AugmentPayload(BaseModel):
    history: List[ChatTurn]
    prompt: str
    results: Optional[str]
    notifications: List[Dict[str, str]]

class SanitizeRequest(BaseModel):
    session_id: str = "default"
    content: str

class SessionRequest(BaseModel):
    session_id: str = "default"

class ActionPayload(BaseModel):
    ok: bool
    notifications: List[Dict[str, str]]

# ------------------------------------------------------------
# 🔩 Helpers
# ------------------------------------------------------------
async def get_session(session_id: str, variables: Optional[Dict[str, str]] = None) -> AugmentationSession:
    session = await sessions.get(session_id, store.load())
    if variables:
        session.variables.update(variables)
    return session

def to_messages(turns: Optional[List[ChatTurn]]) -> List[ChatMessage]:
    return [ChatMessage(**t.model_dump()) for t in (turns or [])]

def to_turns(messages: List[ChatMessage]) -> List[ChatTurn]:
    return [ChatTurn(role=m.role, content=m.content, is_system=m.is_system, augmented=m.augmented) for m in messages]

# ------------------------------------------------------------
# 💬 Main chat route
# ------------------------------------------------------------
@app.post("/chat", response_model=ChatPayload)
async def chat(req: ChatRequest):
    session = await get_session(req.session_id, req.variables)
    if req.model and hasattr(model_client, "set_model"):
        model_client.set_model(req.model)
    try:
        out: ChatResponse = await chat_gen.chat(
            session=session,
            user_message=req.message,
            history=to_messages(req.history),
            kind=req.kind,
            temperature=req.temperature,
            max_tokens=req.max_tokens,
        )
    except Exception as e:
        logger.exception("txtai Thinking: generation failed")
        raise HTTPException(status_code=500, detail=str(e))

    return ChatPayload(
        text=out.text,
        history=to_turns(out.history),
        meta={
            **out.meta,
            "session_id": session.session_id,
            "engine": getattr(model_client, "__class__", type(model_client)).__name__,
        },
        notifications=session.notifier.drain(),
    )

# ------------------------------------------------------------
# 🔎 Augmentation-only routes
# ------------------------------------------------------------
@app.post("/augment", response_model=AugmentPayload)
async def augment(req: AugmentRequest):
    session = await get_session(req.session_id, req.variables)
    history = await augmenter.on_before_generation(
        to_messages(req.history), req.context_size, None, req.kind, session
    )
    return AugmentPayload(
        history=to_turns(history),
        prompt=session.reference_prompt,
        results=session.current_results.text if session.current_results else None,
        notifications=session.notifier.drain(),
    )

@app.post("/sanitize")
async def sanitize(req: SanitizeRequest):
    session = await get_session(req.session_id)
    message = ChatMessage(role="assistant", content=req.content)
    await augmenter.on_message_received(message, session)
    return {"content": message.content}

@app.post("/search/clear", response_model=ActionPayload)
async def clear_search(req: SessionRequest):
    session = await get_session(req.session_id)
    augmenter.clear_search_results(session)
    return ActionPayload(ok=True, notifications=session.notifier.drain())

@app.post("/search/test", response_model=ActionPayload)
async def test_search_connection(req: SessionRequest):
    session = await get_session(req.session_id)
    ok = await augmenter.test_connection(session)
    return ActionPayload(ok=ok, notifications=session.notifier.drain())

@app.get("/search/current")
async def current_search(session_id: str = Query("default", description="Session id")):
    session = await get_session(session_id)
    current = session.current_results
    return {
        "session_id": session_id,
        "query": current.query if current else None,
        "text": current.text if current else None,
        "prompt": session.reference_prompt,
    }

@app.delete("/sessions/{session_id}")
async def drop_session(session_id: str = Path(..., description="Session id")):
    dropped = await sessions.drop(session_id)
    logger.info("txtai Thinking: session %s %s", session_id, "dropped" if dropped else "not found")
    return {"session_id": session_id, "dropped": dropped}

# ------------------------------------------------------------
# ⚙️ Settings
# ------------------------------------------------------------
@app.get("/settings")
def get_settings():
    return store.load().model_dump()

@app.put("/settings")
def update_settings(patch: Dict[str, Any]):
    known = set(store.load().model_dump())
    unknown = sorted(set(patch) - known)
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown setting(s): {', '.join(unknown)}")
    try:
        updated = store.update(patch)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    return updated.model_dump()

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
    }

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": "txtai Thinking service running."}
