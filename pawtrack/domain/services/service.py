"""Service catalog - business logic"""

import logging
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service, User
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = [
    {
        "name": "Entrenamiento Básico",
        "type": "training",
        "price": Decimal("50.00"),
        "duration": 60,
        "description": "Sesión de obediencia básica",
    },
    {
        "name": "Guardería Diaria",
        "type": "daycare",
        "price": Decimal("30.00"),
        "duration": 480,
        "description": "Cuidado durante el día",
    },
    {
        "name": "Pensión Nocturna",
        "type": "boarding",
        "price": Decimal("80.00"),
        "duration": 1440,
        "description": "Alojamiento por noche",
    },
    {
        "name": "Consulta de Comportamiento",
        "type": "other",
        "price": Decimal("75.00"),
        "duration": 90,
        "description": "Evaluación de conducta",
    },
]

FIELD_MAP = {
    "name": "name",
    "type": "type",
    "price": "price",
    "description": "description",
    "duration": "duration",
    "isActive": "is_active",
}


def seed_default_services(db: Session, business_id: int) -> int:
    """Add the starter catalog to a business that has no services yet. Does not commit."""
    if ServiceRepository.has_services(db, business_id):
        return 0
    for entry in DEFAULT_SERVICES:
        db.add(Service(business_id=business_id, is_active=True, **entry))
    logger.info(f"🌱 Seeded {len(DEFAULT_SERVICES)} default services for business {business_id}")
    return len(DEFAULT_SERVICES)


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, user: User, include_inactive: bool = False) -> list[Service]:
        return self.repo.get_services(self.db, user.business_id, include_inactive)

    def get_service(self, service_id: int, user: User) -> Service:
        service = self.repo.get_service(self.db, service_id, user.business_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def create_service(self, data: ServiceCreate, user: User) -> Service:
        service = self.repo.create_service(
            self.db,
            user.business_id,
            name=data.name,
            type=data.type,
            price=data.price,
            description=data.description,
            duration=data.duration,
            is_active=data.isActive,
        )
        logger.info(f"✅ Service {service.id} '{service.name}' created")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate, user: User) -> Service:
        service = self.get_service(service_id, user)
        updates = {
            FIELD_MAP[field]: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        return self.repo.update_service(self.db, service, **updates)

    def delete_service(self, service_id: int, user: User) -> dict:
        """Soft delete: past appointments and invoices keep referencing the service"""
        service = self.get_service(service_id, user)
        self.repo.update_service(self.db, service, is_active=False)
        logger.info(f"🗑️ Service {service.id} deactivated")
        return {"message": "Service deactivated"}
