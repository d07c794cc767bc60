from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: the acting user of a request.

    Plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    role: Role
    manager_id: Optional[int] = None
