"""Activity schemas."""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class WorkshopActivityRequest(BaseModel):
    action: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
