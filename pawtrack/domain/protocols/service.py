"""Protocol service - the business's library of training programs"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...models_records import Protocol
from .repository import ProtocolRepository
from .schemas import ProtocolCreate, ProtocolUpdate

logger = logging.getLogger(__name__)


class ProtocolService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProtocolRepository()

    def get_protocols(
        self, user: User, category: Optional[str] = None, include_inactive: bool = True
    ) -> list[Protocol]:
        return self.repo.get_protocols(self.db, user.business_id, category, include_inactive)

    def get_protocol(self, protocol_id: int, user: User) -> Protocol:
        protocol = self.repo.get_protocol(self.db, protocol_id, user.business_id)
        if not protocol:
            raise HTTPException(status_code=404, detail="Protocol not found")
        return protocol

    def create_protocol(self, data: ProtocolCreate, user: User) -> Protocol:
        protocol = self.repo.create_protocol(
            self.db,
            user.business_id,
            name=data.name,
            category=data.category,
            objectives=data.objectives,
            description=data.description,
            duration=data.duration,
            steps=[step.model_dump() for step in data.steps],
            is_active=data.isActive,
            created_by=user.id,
        )
        logger.info(f"📋 Protocol {protocol.id} '{protocol.name}' created ({len(protocol.steps)} steps)")
        return protocol

    def update_protocol(self, protocol_id: int, data: ProtocolUpdate, user: User) -> Protocol:
        protocol = self.get_protocol(protocol_id, user)
        fields = data.model_dump(exclude_unset=True)
        updates = {}
        for field in ("name", "category", "isActive"):
            if fields.get(field) is not None:
                updates["is_active" if field == "isActive" else field] = fields[field]
        for field in ("objectives", "description", "duration"):
            if field in fields:
                updates[field] = fields[field]
        if fields.get("steps") is not None:
            # model_dump already turned the steps into plain dicts
            updates["steps"] = fields["steps"]
        return self.repo.update_protocol(self.db, protocol, **updates)

    def delete_protocol(self, protocol_id: int, user: User) -> dict:
        protocol = self.get_protocol(protocol_id, user)
        self.repo.delete_protocol(self.db, protocol)
        logger.info(f"🗑️ Protocol {protocol_id} deleted")
        return {"message": "Protocol deleted"}
