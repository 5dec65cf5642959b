from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Client, Dog, Service
from ...models_billing import Package, PackageSession


class PackageRepository:
    @staticmethod
    def _query(db: Session, business_id: int):
        return (
            db.query(Package)
            .options(
                joinedload(Package.client), joinedload(Package.dog), joinedload(Package.service)
            )
            .filter(Package.business_id == business_id)
        )

    @staticmethod
    def get_packages(
        db: Session,
        business_id: int,
        client_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Package]:
        query = PackageRepository._query(db, business_id)
        if client_id is not None:
            query = query.filter(Package.client_id == client_id)
        if status:
            query = query.filter(Package.status == status)
        return query.order_by(Package.created_at.desc(), Package.id.desc()).all()

    @staticmethod
    def get_package(db: Session, package_id: int, business_id: int) -> Optional[Package]:
        return PackageRepository._query(db, business_id).filter(Package.id == package_id).first()

    @staticmethod
    def get_sessions(db: Session, package_id: int) -> list[PackageSession]:
        return (
            db.query(PackageSession)
            .filter(PackageSession.package_id == package_id)
            .order_by(PackageSession.session_date.desc(), PackageSession.id.desc())
            .all()
        )

    @staticmethod
    def get_client(db: Session, client_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_dog(db: Session, dog_id: int, business_id: int) -> Optional[Dog]:
        return db.query(Dog).filter(Dog.id == dog_id, Dog.business_id == business_id).first()

    @staticmethod
    def get_service(db: Session, service_id: int, business_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business_id)
            .first()
        )

    @staticmethod
    def create_package(db: Session, business_id: int, **data) -> Package:
        package = Package(business_id=business_id, **data)
        db.add(package)
        db.commit()
        return package

    @staticmethod
    def update_package(db: Session, package: Package, **updates) -> Package:
        for key, value in updates.items():
            setattr(package, key, value)
        db.commit()
        return package

    @staticmethod
    def delete_package(db: Session, package: Package) -> None:
        db.delete(package)
        db.commit()
