from typing import Optional

from pydantic import BaseModel


class SummaryMetrics(BaseModel):
    role: str
    # admin / hr
    total_employees: Optional[int] = None
    pending_leaves: Optional[int] = None
    total_documents: Optional[int] = None
    chat_rooms: Optional[int] = None
    # employee
    my_documents: Optional[int] = None
    my_pending_leaves: Optional[int] = None
    my_rooms: Optional[int] = None
