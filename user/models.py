from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class User:
    id: str
    name: str
    email: str
    password: str = field(default='', repr=False)
    is_active: bool = True
    avatar_url: Optional[str] = None
    refresh_tokens: List[str] = field(default_factory=list, repr=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Lets a store record stand in for request.user in DRF permission checks.
    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        return self.id

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'User':
        return cls(
            id=document['id'],
            name=document.get('name') or '',
            email=document['email'],
            password=document.get('password') or '',
            is_active=bool(document.get('is_active', True)),
            avatar_url=document.get('avatar_url'),
            refresh_tokens=list(document.get('refresh_tokens') or []),
            created_at=document.get('created_at'),
            updated_at=document.get('updated_at'),
        )

    def __str__(self):
        return self.email
