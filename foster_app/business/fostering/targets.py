"""
Target value objects: what a request points at and what a message is tagged with
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from foster_app.business.fostering.errors import ValidationError


@dataclass(frozen=True)
class RequestTarget:
    """Exactly one of animal_id or group_id"""
    animal_id: Optional[str] = None
    group_id: Optional[str] = None

    def __post_init__(self):
        if bool(self.animal_id) == bool(self.group_id):
            raise ValidationError(
                "A foster request targets exactly one animal or one group",
                details={'animal_id': self.animal_id, 'group_id': self.group_id},
            )

    @classmethod
    def animal(cls, animal_id: str) -> RequestTarget:
        return cls(animal_id=animal_id)

    @classmethod
    def group(cls, group_id: str) -> RequestTarget:
        return cls(group_id=group_id)

    @property
    def is_group(self) -> bool:
        return self.group_id is not None

    @property
    def kind(self) -> str:
        return 'group' if self.is_group else 'animal'

    @property
    def target_id(self) -> str:
        return self.group_id or self.animal_id

    def columns(self) -> Dict[str, Optional[str]]:
        return {'animal_id': self.animal_id, 'group_id': self.group_id}


@dataclass(frozen=True)
class MessageTag:
    ANIMAL = 'animal'
    GROUP = 'group'
    FOSTER_PROFILE = 'foster_profile'

    kind: str
    target_id: str

    @classmethod
    def animal(cls, animal_id: str) -> MessageTag:
        return cls(cls.ANIMAL, animal_id)

    @classmethod
    def group(cls, group_id: str) -> MessageTag:
        return cls(cls.GROUP, group_id)

    @classmethod
    def foster_profile(cls, profile_id: str) -> MessageTag:
        return cls(cls.FOSTER_PROFILE, profile_id)

    @classmethod
    def for_request_target(cls, target: RequestTarget) -> MessageTag:
        return cls.group(target.group_id) if target.is_group else cls.animal(target.animal_id)

    def columns(self) -> Dict[str, str]:
        """MessageLink column values for this tag"""
        return {f'{self.kind}_id': self.target_id}
