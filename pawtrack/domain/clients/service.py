"""Client service - Business logic for client operations"""

import csv
import logging
from io import StringIO
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...models import Client, User
from ...shared.validators import utcnow
from .repository import ClientRepository
from .schemas import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self, user: User, search: Optional[str] = None) -> list[Client]:
        return self.repo.get_clients(self.db, user.business_id, search)

    def get_clients_with_dogs(self, user: User) -> list[Client]:
        return self.repo.get_clients_with_dogs(self.db, user.business_id)

    def get_client(self, client_id: int, user: User) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id, user.business_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate, user: User) -> Client:
        client = self.repo.create_client(
            self.db,
            user.business_id,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone=data.phone,
            address=data.address,
        )
        logger.info(f"✅ Client {client.id} created in business {user.business_id}")
        return client

    def update_client(self, client_id: int, data: ClientUpdate, user: User) -> Client:
        client = self.get_client(client_id, user)
        updates = {
            "first_name": data.firstName,
            "last_name": data.lastName,
            "email": data.email,
            "phone": data.phone,
            "address": data.address,
        }
        return self.repo.update_client(self.db, client, **updates)

    def delete_client(self, client_id: int, user: User) -> dict:
        """Delete a client together with dogs, appointments, invoices, payments and packages"""
        client = self.get_client(client_id, user)
        self.repo.delete_client(self.db, client)
        logger.info(f"🗑️ Client {client_id} deleted from business {user.business_id}")
        return {"message": "Client deleted"}

    def export_clients_csv(self, user: User, search: Optional[str] = None) -> StreamingResponse:
        clients = self.repo.get_clients(self.db, user.business_id, search)
        logger.info(f"📊 CSV export of {len(clients)} clients by user {user.id}")

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            ["ID", "First Name", "Last Name", "Email", "Phone", "Address", "Dogs", "Created At"]
        )
        for client in clients:
            writer.writerow(
                [
                    client.id,
                    client.first_name,
                    client.last_name,
                    client.email,
                    client.phone or "",
                    client.address or "",
                    len(client.dogs),
                    (
                        client.created_at.strftime("%Y-%m-%d %H:%M:%S")
                        if client.created_at
                        else ""
                    ),
                ]
            )

        output.seek(0)
        filename = f"clients_export_{utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
