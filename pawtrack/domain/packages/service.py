"""Package service - prepaid session bundles and their consumption"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...models_billing import Package, PackageSession
from ...shared.validators import utcnow
from .repository import PackageRepository
from .schemas import ConsumeSessionRequest, PackageCreate, PackageUpdate

logger = logging.getLogger(__name__)

# A package is "finishing" once this share of its sessions or less remains
FINISHING_THRESHOLD = 0.2


def package_status(remaining: int, total: int) -> str:
    if remaining <= 0:
        return "completed"
    if remaining <= total * FINISHING_THRESHOLD:
        return "finishing"
    return "active"


class PackageService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PackageRepository()

    def get_packages(
        self, user: User, client_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[Package]:
        return self.repo.get_packages(self.db, user.business_id, client_id, status)

    def get_package(self, package_id: int, user: User) -> Package:
        package = self.repo.get_package(self.db, package_id, user.business_id)
        if not package:
            raise HTTPException(status_code=404, detail="Package not found")
        return package

    def get_sessions(self, package_id: int, user: User) -> list[PackageSession]:
        package = self.get_package(package_id, user)
        return self.repo.get_sessions(self.db, package.id)

    def _check_dog(self, dog_id: Optional[int], client_id: int, business_id: int):
        if dog_id is None:
            return
        dog = self.repo.get_dog(self.db, dog_id, business_id)
        if not dog:
            raise HTTPException(status_code=404, detail="Dog not found")
        if dog.client_id != client_id:
            raise HTTPException(status_code=400, detail="Dog does not belong to the selected client")

    def create_package(self, data: PackageCreate, user: User) -> Package:
        if not self.repo.get_client(self.db, data.clientId, user.business_id):
            raise HTTPException(status_code=404, detail="Client not found")
        self._check_dog(data.dogId, data.clientId, user.business_id)
        if data.serviceId is not None and not self.repo.get_service(
            self.db, data.serviceId, user.business_id
        ):
            raise HTTPException(status_code=404, detail="Service not found")

        package = self.repo.create_package(
            self.db,
            user.business_id,
            client_id=data.clientId,
            dog_id=data.dogId,
            service_id=data.serviceId,
            package_name=data.packageName,
            total_sessions=data.totalSessions,
            used_sessions=0,
            remaining_sessions=data.totalSessions,
            price=data.price,
            purchase_date=data.purchaseDate or utcnow(),
            expiry_date=data.expiryDate,
            status="active",
            notes=data.notes,
        )
        logger.info(
            f"📦 Package {package.id} '{package.package_name}' ({package.total_sessions} sessions) "
            f"sold to client {package.client_id}"
        )
        return self.get_package(package.id, user)

    def update_package(self, package_id: int, data: PackageUpdate, user: User) -> Package:
        package = self.get_package(package_id, user)
        fields = data.model_dump(exclude_unset=True)
        updates = {}

        if fields.get("packageName") is not None:
            updates["package_name"] = fields["packageName"]
        if "price" in fields:
            updates["price"] = fields["price"]
        if "expiryDate" in fields:
            updates["expiry_date"] = fields["expiryDate"]
        if "notes" in fields:
            updates["notes"] = fields["notes"]

        total = fields.get("totalSessions")
        if total is not None and total != package.total_sessions:
            if total < package.used_sessions:
                raise HTTPException(
                    status_code=400,
                    detail=f"Total sessions cannot be lower than the {package.used_sessions} already used",
                )
            updates["total_sessions"] = total
            updates["remaining_sessions"] = total - package.used_sessions
            if package.status != "expired":
                updates["status"] = package_status(updates["remaining_sessions"], total)

        if fields.get("status") is not None:
            updates["status"] = fields["status"]

        self.repo.update_package(self.db, package, **updates)
        return self.get_package(package.id, user)

    def delete_package(self, package_id: int, user: User) -> dict:
        package = self.get_package(package_id, user)
        self.repo.delete_package(self.db, package)
        logger.info(f"🗑️ Package {package_id} deleted")
        return {"message": "Package deleted"}

    def consume_session(
        self, package_id: int, data: ConsumeSessionRequest, user: User
    ) -> tuple[Package, PackageSession]:
        """Record one attended session and update the package counters"""
        package = self.get_package(package_id, user)

        if package.expiry_date and package.expiry_date < utcnow() and package.status != "expired":
            package.status = "expired"
            self.db.commit()
            logger.info(f"⌛ Package {package.id} expired on {package.expiry_date}")

        if package.status == "expired":
            raise HTTPException(status_code=409, detail="Package has expired")
        if package.status == "completed" or package.remaining_sessions <= 0:
            raise HTTPException(status_code=409, detail="No sessions remaining in this package")

        dog_id = data.dogId if data.dogId is not None else package.dog_id
        self._check_dog(dog_id, package.client_id, user.business_id)

        session = PackageSession(
            package_id=package.id,
            client_id=package.client_id,
            dog_id=dog_id,
            session_date=data.sessionDate or utcnow(),
            session_type=data.sessionType,
            status="attended",
            notes=data.notes,
        )
        self.db.add(session)

        package.used_sessions += 1
        package.remaining_sessions -= 1
        package.status = package_status(package.remaining_sessions, package.total_sessions)
        self.db.commit()
        self.db.refresh(session)

        logger.info(
            f"✅ Package {package.id}: session used, {package.remaining_sessions}/"
            f"{package.total_sessions} remaining ({package.status})"
        )
        return self.get_package(package.id, user), session
