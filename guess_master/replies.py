from dataclasses import dataclass
from typing import Optional


@dataclass
class PendingReply:
    text: str
    reason: str = "command"
    lang: str = "en"
    chat_id: Optional[int] = None
