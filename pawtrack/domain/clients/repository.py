"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Client, Dog


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, business_id: int, search: Optional[str] = None) -> list[Client]:
        """Clients of a business, newest first, optionally filtered by name or e-mail"""
        query = db.query(Client).filter(Client.business_id == business_id)

        if search:
            search_term = f"%{search.strip().lower()}%"
            query = query.filter(
                (Client.first_name.ilike(search_term))
                | (Client.last_name.ilike(search_term))
                | (Client.email.ilike(search_term))
            )

        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()

    @staticmethod
    def get_clients_with_dogs(db: Session, business_id: int) -> list[Client]:
        return (
            db.query(Client)
            .options(selectinload(Client.dogs).joinedload(Dog.pet_type))
            .filter(Client.business_id == business_id)
            .order_by(Client.created_at.desc(), Client.id.desc())
            .all()
        )

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def create_client(db: Session, business_id: int, **client_data) -> Client:
        client = Client(business_id=business_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        db.delete(client)
        db.commit()
