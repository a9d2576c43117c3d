"""
Smart Search Backend - FastAPI Application
Session-scoped endpoints for the chip-based recipe search bar
"""

import logging
import uuid
from collections import OrderedDict
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import CORS_ORIGINS, LOG_LEVEL, SESSION_LIMIT
from smart_search import (
    CATEGORY_STYLES,
    Category,
    RetrievalError,
    SearchSession,
    SpoonacularRetriever,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title="Smart Search API",
    description="Turns free-form text into a structured recipe query",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

retriever = SpoonacularRetriever()

# Live sessions, oldest first
sessions: "OrderedDict[str, SearchSession]" = OrderedDict()


def create_session() -> str:
    session_id = uuid.uuid4().hex
    sessions[session_id] = SearchSession(retriever=retriever)
    while len(sessions) > SESSION_LIMIT:
        evicted, _ = sessions.popitem(last=False)
        logger.info("Evicted search session %s", evicted)
    return session_id


def get_session(session_id: str) -> SearchSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    sessions.move_to_end(session_id)
    return session


# Request/Response Models
class InputRequest(BaseModel):
    text: str


class ConfirmRequest(BaseModel):
    token_index: int
    category: Category
    label: str


class EditChipRequest(BaseModel):
    text: str


class ActiveTokenRequest(BaseModel):
    index: Optional[int] = None


class SessionResponse(BaseModel):
    session_id: str
    state: dict


class SearchResponse(BaseModel):
    recipes: list[dict] = []
    structured_query: dict = {}
    error: Optional[str] = None


def session_response(session_id: str, session: SearchSession) -> SessionResponse:
    return SessionResponse(session_id=session_id, state=session.snapshot())


# API Endpoints
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "sessions": len(sessions)}


@app.get("/categories")
async def list_categories():
    """Presentation descriptor for every category"""
    return {category.value: style.to_dict() for category, style in CATEGORY_STYLES.items()}


@app.post("/sessions", response_model=SessionResponse)
async def new_session():
    session_id = create_session()
    return session_response(session_id, sessions[session_id])


@app.get("/sessions/{session_id}", response_model=SessionResponse)
async def read_session(session_id: str):
    return session_response(session_id, get_session(session_id))


@app.put("/sessions/{session_id}/input", response_model=SessionResponse)
async def update_input(session_id: str, request: InputRequest):
    """Called on every keystroke; re-parses the whole input"""
    session = get_session(session_id)
    session.set_input(request.text)
    return session_response(session_id, session)


@app.post("/sessions/{session_id}/confirm", response_model=SessionResponse)
async def confirm_token(session_id: str, request: ConfirmRequest):
    session = get_session(session_id)
    session.confirm(request.token_index, request.category, request.label)
    return session_response(session_id, session)


@app.post("/sessions/{session_id}/confirm-best", response_model=SessionResponse)
async def confirm_best(session_id: str):
    """Enter key: take the top suggestion for every open token"""
    session = get_session(session_id)
    session.confirm_best()
    return session_response(session_id, session)


@app.put("/sessions/{session_id}/active-token", response_model=SessionResponse)
async def set_active_token(session_id: str, request: ActiveTokenRequest):
    session = get_session(session_id)
    session.set_active_token_index(request.index)
    return session_response(session_id, session)


@app.post("/sessions/{session_id}/dismiss", response_model=SessionResponse)
async def dismiss_suggestions(session_id: str):
    """Escape key or click outside the popover"""
    session = get_session(session_id)
    session.set_show_suggestions(False)
    return session_response(session_id, session)


@app.patch("/sessions/{session_id}/chips/{chip_id}", response_model=SessionResponse)
async def edit_chip(session_id: str, chip_id: str, request: EditChipRequest):
    session = get_session(session_id)
    session.edit_chip(chip_id, request.text)
    return session_response(session_id, session)


@app.delete("/sessions/{session_id}/chips/{chip_id}", response_model=SessionResponse)
async def remove_chip(session_id: str, chip_id: str):
    session = get_session(session_id)
    session.remove_chip(chip_id)
    return session_response(session_id, session)


@app.post("/sessions/{session_id}/clear", response_model=SessionResponse)
async def clear_session(session_id: str):
    session = get_session(session_id)
    session.clear()
    return session_response(session_id, session)


@app.delete("/sessions/{session_id}/history", response_model=SessionResponse)
async def clear_history(session_id: str):
    session = get_session(session_id)
    session.clear_history()
    return session_response(session_id, session)


@app.post("/sessions/{session_id}/search", response_model=SearchResponse)
async def execute_search(session_id: str):
    """Run the session's structured query against the recipe source"""
    session = get_session(session_id)
    structured_query = session.query.to_dict()
    try:
        recipes = await session.execute()
    except RetrievalError as e:
        logger.warning("Search failed for session %s: %s", session_id, e)
        return SearchResponse(structured_query=structured_query, error=str(e))

    return SearchResponse(
        recipes=[recipe.to_dict() for recipe in recipes],
        structured_query=structured_query
    )


@app.on_event("shutdown")
async def shutdown_event():
    await retriever.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
