# travel/dtos.py

from typing import Optional

from pydantic import ConfigDict, computed_field

from .models import ApiRecord


class UserDTO(ApiRecord):
    model_config = ConfigDict(frozen=True)

    id: int = 0
    username: str = ''
    email: str = ''
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    is_admin: bool = False

    @computed_field
    @property
    def full_name(self) -> str:
        # Falls back to the account name when no personal name is on file
        if not self.first_name and not self.last_name:
            return self.username
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
