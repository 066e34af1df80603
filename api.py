from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional
import uvicorn

from lexchat.application.assistant import build_assistant
from lexchat.application.suggestions import suggest_questions
from lexchat.config import get_settings
from lexchat.domain.models import Entity
from lexchat.infrastructure.entity_extractor import extract_entities

# ── Configuration ────────────────────────────────────────────────────────────
MAX_DOCUMENT_CHARS = 10 * 1024 * 1024

CHAT_ERROR_RESPONSE = (
    "I apologize, but I encountered an error while processing your question. "
    "Please try rephrasing your question or check if the document was uploaded correctly."
)

# ── API Models ───────────────────────────────────────────────────────────────
class EntitySchema(BaseModel):
    text: str
    label: str
    start: int
    end: int

class ProcessDocumentRequest(BaseModel):
    document_text: Optional[str] = None
    entities: Optional[List[EntitySchema]] = None

class ProcessDocumentResponse(BaseModel):
    summary: str
    model: str
    entities: List[EntitySchema]
    suggested_questions: List[str]
    text_length: int

class ChatRequest(BaseModel):
    message: Optional[str] = None
    document_text: Optional[str] = None

class ChatResponse(BaseModel):
    response: str
    model: str

# ── App Initialization ───────────────────────────────────────────────────────
app = FastAPI(
    title="LexChat API",
    description="Legal document summaries and retrieval-augmented chat.",
    version="1.0.0"
)

# ── CORS Middleware ──────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize the pipeline once (global scope for singleton behavior)
settings = get_settings()
assistant = build_assistant(settings)

configured = [p.name for p in settings.providers if p.enabled]
if configured:
    print(f"[API] Providers configured: {', '.join(configured)}")
else:
    print("[API] WARNING: No provider API keys set. Answers will use local fallbacks.")

# ── Endpoints ────────────────────────────────────────────────────────────────
@app.get("/")
def read_root():
    return {
        "message": "LexChat API is running.",
        "providers": [
            {"name": p.name, "model": p.model, "configured": p.enabled}
            for p in settings.providers
        ],
    }

@app.post("/process-document", response_model=ProcessDocumentResponse)
def process_document(request: ProcessDocumentRequest):
    """Summarize already-extracted document text and list its entities."""
    text = request.document_text
    if not text or not text.strip():
        raise HTTPException(status_code=400, detail="No document text provided")
    if len(text) > MAX_DOCUMENT_CHARS:
        raise HTTPException(status_code=400, detail="Document too large. Maximum size is 10MB of text.")

    print(f"[API] Processing document ({len(text)} characters)...")

    if request.entities is not None:
        entities = [Entity(**e.model_dump()) for e in request.entities]
    else:
        entities = extract_entities(text)
    print(f"[API] {len(entities)} entities")

    result = assistant.summarize(text, entities)

    return ProcessDocumentResponse(
        summary=result.summary,
        model=result.model,
        entities=[EntitySchema(**vars(e)) for e in entities],
        suggested_questions=suggest_questions(text, entities),
        text_length=len(text),
    )

@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest):
    if not request.message or not request.message.strip():
        raise HTTPException(status_code=400, detail="No message provided")
    if not request.document_text or not request.document_text.strip():
        raise HTTPException(status_code=400, detail="No document context available")

    try:
        result = assistant.chat(request.message, request.document_text)
    except Exception as e:
        print(f"[API] Chat failed: {e}")
        return ChatResponse(response=CHAT_ERROR_RESPONSE, model="fallback")

    return ChatResponse(response=result.response, model=result.model)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
