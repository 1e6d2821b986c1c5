# api/deps.py
from typing import Optional
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from core.config import settings
from core.events import notifier
from core.sa.database import get_db
from core.services import CirculationEngine
from core.session_gate import SessionGate

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

def get_session_gate(api_key: Optional[str] = Security(api_key_header)) -> SessionGate:
    """Per-request gate, signed in when the request carries the admin key"""
    gate = SessionGate(settings.api_key)
    gate.sign_in(api_key)
    return gate

def require_admin(gate: SessionGate = Depends(get_session_gate)) -> SessionGate:
    if not gate.is_authenticated():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Could not validate credentials")
    return gate

def get_circulation_engine(
    db: Session = Depends(get_db),
    gate: SessionGate = Depends(get_session_gate)
) -> CirculationEngine:
    return CirculationEngine(db, notifier=notifier, is_authorized=gate.authorizer())
