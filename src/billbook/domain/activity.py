"""Activity log domain service."""

from typing import Optional
from billbook.database.base import Database
from billbook.domain.entities import Activity as ActivityEntity, EntityType


class ActivityService:
    """Read access to the append-only audit trail."""

    def __init__(self, db: Database):
        self.db = db

    def list_activities(
        self,
        limit: Optional[int] = None,
        entity_type: Optional[EntityType | str] = None,
        entity_id: Optional[int] = None,
    ) -> list[ActivityEntity]:
        """List activities newest first.

        Args:
            limit: Optional maximum number of records
            entity_type: Only activities about this kind of entity
            entity_id: Only activities about this entity ID
        """
        activities = self.db.list_activities()
        if entity_type is not None:
            wanted = EntityType(entity_type.upper() if isinstance(entity_type, str) else entity_type)
            activities = [a for a in activities if a.entity_type == wanted]
        if entity_id is not None:
            activities = [a for a in activities if a.entity_id == entity_id]
        if limit is not None:
            activities = activities[: max(limit, 0)]
        return activities
