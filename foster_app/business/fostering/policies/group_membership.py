"""
Group Membership Policy

Grouped animals move with their group. Individual assign and unassign
are refused for them.
"""

from foster_app.business.fostering.errors import GroupMembershipError


class GroupMembershipPolicy:

    @classmethod
    def check(cls, animal, operation: str) -> None:
        """
        Raises:
            GroupMembershipError: If the animal belongs to a group
        """
        if animal.group_id:
            raise GroupMembershipError(
                f"Cannot {operation} {animal.display_name} individually: it belongs to group "
                f"{animal.group_id}. {operation.capitalize()} the group instead.",
                details={'animal_id': animal.id, 'group_id': animal.group_id, 'operation': operation},
            )
