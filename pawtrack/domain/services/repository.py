from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service


class ServiceRepository:
    @staticmethod
    def get_services(db: Session, business_id: int, include_inactive: bool = False) -> list[Service]:
        query = db.query(Service).filter(Service.business_id == business_id)
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name).all()

    @staticmethod
    def get_service(db: Session, service_id: int, business_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business_id)
            .first()
        )

    @staticmethod
    def has_services(db: Session, business_id: int) -> bool:
        return db.query(Service.id).filter(Service.business_id == business_id).first() is not None

    @staticmethod
    def create_service(db: Session, business_id: int, **service_data) -> Service:
        service = Service(business_id=business_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            setattr(service, key, value)
        db.commit()
        db.refresh(service)
        return service
