from typing import Optional

from sqlalchemy.orm import Session

from ...models_records import Protocol


class ProtocolRepository:
    @staticmethod
    def get_protocols(
        db: Session,
        business_id: int,
        category: Optional[str] = None,
        include_inactive: bool = True,
    ) -> list[Protocol]:
        query = db.query(Protocol).filter(Protocol.business_id == business_id)
        if category:
            query = query.filter(Protocol.category == category)
        if not include_inactive:
            query = query.filter(Protocol.is_active.is_(True))
        return query.order_by(Protocol.name, Protocol.id).all()

    @staticmethod
    def get_protocol(db: Session, protocol_id: int, business_id: int) -> Optional[Protocol]:
        return (
            db.query(Protocol)
            .filter(Protocol.id == protocol_id, Protocol.business_id == business_id)
            .first()
        )

    @staticmethod
    def create_protocol(db: Session, business_id: int, **data) -> Protocol:
        protocol = Protocol(business_id=business_id, **data)
        db.add(protocol)
        db.commit()
        db.refresh(protocol)
        return protocol

    @staticmethod
    def update_protocol(db: Session, protocol: Protocol, **updates) -> Protocol:
        for key, value in updates.items():
            setattr(protocol, key, value)
        db.commit()
        db.refresh(protocol)
        return protocol

    @staticmethod
    def delete_protocol(db: Session, protocol: Protocol) -> None:
        db.delete(protocol)
        db.commit()
