"""
Shelter status to public foster visibility mapping

Status drives visibility, never the reverse. Callers that change an
animal's status re-derive visibility here unless they are deliberately
overriding it during an unassignment.
"""

from typing import Dict
from foster_app.data.animals.animal import AnimalStatus, FosterVisibility
from foster_app.business.fostering.errors import ValidationError


class StatusVisibilityMapper:

    DEFAULTS: Dict[str, str] = {
        AnimalStatus.IN_SHELTER: FosterVisibility.AVAILABLE_NOW,
        AnimalStatus.MEDICAL_HOLD: FosterVisibility.AVAILABLE_FUTURE,
        AnimalStatus.TRANSFERRING: FosterVisibility.AVAILABLE_FUTURE,
        AnimalStatus.IN_FOSTER: FosterVisibility.NOT_VISIBLE,
        AnimalStatus.ADOPTED: FosterVisibility.NOT_VISIBLE,
    }

    @classmethod
    def visibility_for(cls, status: str) -> str:
        """
        Default visibility for a shelter status.

        Raises:
            ValidationError: If status is not a known shelter status
        """
        try:
            return cls.DEFAULTS[status]
        except KeyError:
            raise ValidationError(
                f"Unknown animal status: {status!r}",
                details={'status': status, 'allowed': list(AnimalStatus.ALL)},
            ) from None

    @staticmethod
    def validate_status(status: str) -> None:
        if status not in AnimalStatus.ALL:
            raise ValidationError(
                f"Unknown animal status: {status!r}",
                details={'status': status, 'allowed': list(AnimalStatus.ALL)},
            )

    @staticmethod
    def validate_visibility(visibility: str) -> None:
        if visibility not in FosterVisibility.ALL:
            raise ValidationError(
                f"Unknown foster visibility: {visibility!r}",
                details={'foster_visibility': visibility, 'allowed': list(FosterVisibility.ALL)},
            )
