"""
Staged member updates for group transitions

A batch names exactly the animals it touches and the values each one
receives, so a failed step can be reported and replayed as data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
from foster_app.data.animals.animal import Animal
from foster_app.data.core.organization_scoped_base import utc_now


@dataclass(frozen=True)
class MemberUpdate:
    animal_id: str
    status: str
    foster_visibility: str
    current_foster_id: Optional[str]

    @property
    def values(self) -> Tuple[str, str, Optional[str]]:
        return (self.status, self.foster_visibility, self.current_foster_id)

    def to_dict(self) -> dict:
        return {
            'animal_id': self.animal_id,
            'status': self.status,
            'foster_visibility': self.foster_visibility,
            'current_foster_id': self.current_foster_id,
        }


@dataclass(frozen=True)
class AnimalBatch:
    updates: Tuple[MemberUpdate, ...] = ()

    @classmethod
    def uniform(
        cls,
        animal_ids: Iterable[str],
        status: str,
        foster_visibility: str,
        current_foster_id: Optional[str],
    ) -> AnimalBatch:
        """Same values for every listed animal"""
        return cls(tuple(
            MemberUpdate(animal_id, status, foster_visibility, current_foster_id)
            for animal_id in animal_ids
        ))

    @property
    def animal_ids(self) -> List[str]:
        return [update.animal_id for update in self.updates]

    def __len__(self) -> int:
        return len(self.updates)

    def __bool__(self) -> bool:
        return bool(self.updates)

    def grouped(self) -> Dict[Tuple[str, str, Optional[str]], List[str]]:
        """Animal ids keyed by the value set they receive, in first-seen order"""
        groups: Dict[Tuple[str, str, Optional[str]], List[str]] = {}
        for update in self.updates:
            groups.setdefault(update.values, []).append(update.animal_id)
        return groups

    def apply(self, organization_id: str) -> int:
        """
        Stage one UPDATE per distinct value set. The caller commits.

        Returns the number of rows matched.
        """
        matched = 0
        now = utc_now()
        for (status, visibility, foster_id), ids in self.grouped().items():
            matched += Animal.query.filter(
                Animal.organization_id == organization_id,
                Animal.id.in_(ids),
            ).update(
                {
                    Animal.status: status,
                    Animal.foster_visibility: visibility,
                    Animal.current_foster_id: foster_id,
                    Animal.updated_at: now,
                },
                synchronize_session=False,
            )
        return matched

    def to_dict(self) -> dict:
        return {'updates': [update.to_dict() for update in self.updates]}


@dataclass(frozen=True)
class VisibilityBatch:
    """Visibility-only changes; status and foster are left untouched"""
    updates: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def uniform(cls, animal_ids: Iterable[str], foster_visibility: str) -> VisibilityBatch:
        return cls(tuple((animal_id, foster_visibility) for animal_id in animal_ids))

    @property
    def animal_ids(self) -> List[str]:
        return [animal_id for animal_id, _ in self.updates]

    def __len__(self) -> int:
        return len(self.updates)

    def __bool__(self) -> bool:
        return bool(self.updates)

    def apply(self, organization_id: str) -> int:
        groups: Dict[str, List[str]] = {}
        for animal_id, visibility in self.updates:
            groups.setdefault(visibility, []).append(animal_id)

        matched = 0
        now = utc_now()
        for visibility, ids in groups.items():
            matched += Animal.query.filter(
                Animal.organization_id == organization_id,
                Animal.id.in_(ids),
            ).update(
                {Animal.foster_visibility: visibility, Animal.updated_at: now},
                synchronize_session=False,
            )
        return matched

    def to_dict(self) -> dict:
        return {
            'updates': [
                {'animal_id': animal_id, 'foster_visibility': visibility}
                for animal_id, visibility in self.updates
            ]
        }
