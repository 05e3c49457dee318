"""/v1/admins - staff members assignable as points of contact"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from amc_portal.api.v1.schemas import AdminClientItem, AdminCreate, AdminResponse, AdminUpdate
from amc_portal.api.dependencies import get_request_id, parse_id
from amc_portal.infrastructure.database.session import get_db
from amc_portal.infrastructure.database.models import Admin
from amc_portal.infrastructure.database.repositories import AdminRepository

router = APIRouter()


def to_admin_response(admin_repo: AdminRepository, db_admin: Admin) -> AdminResponse:
    """Serialize an admin with the clients it fronts and its role on each"""
    clients = [
        AdminClientItem(client_id=str(c.id), project_name=c.project_name, role=role)
        for c, role in admin_repo.clients_with_roles(db_admin)
    ]
    return AdminResponse(
        id=db_admin.id,
        name=db_admin.name,
        email=db_admin.email,
        contact_number=db_admin.contact_number,
        client_count=len(clients),
        clients=clients,
    )


def load_admin(admin_repo: AdminRepository, admin_id: str) -> Admin:
    db_admin = admin_repo.get_admin(parse_id(admin_id, "admin"))
    if not db_admin:
        raise HTTPException(status_code=404, detail="Admin not found")
    return db_admin


@router.post("/admins", response_model=AdminResponse, status_code=201)
def create_admin(request_body: AdminCreate, request: Request, db: Session = Depends(get_db)):
    admin_repo = AdminRepository(db)
    try:
        db_admin = admin_repo.create_admin(
            name=request_body.name,
            email=request_body.email,
            contact_number=request_body.contact_number,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logging.warning("Duplicate admin email", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=409, detail="Admin with this email already exists")

    return to_admin_response(admin_repo, db_admin)


@router.get("/admins", response_model=List[AdminResponse])
def list_admins(db: Session = Depends(get_db)):
    admin_repo = AdminRepository(db)
    return [to_admin_response(admin_repo, a) for a in admin_repo.list_admins()]


@router.get("/admins/{admin_id}", response_model=AdminResponse)
def get_admin(admin_id: str, db: Session = Depends(get_db)):
    admin_repo = AdminRepository(db)
    return to_admin_response(admin_repo, load_admin(admin_repo, admin_id))


@router.patch("/admins/{admin_id}", response_model=AdminResponse)
def update_admin(admin_id: str, request_body: AdminUpdate, request: Request, db: Session = Depends(get_db)):
    admin_repo = AdminRepository(db)
    db_admin = load_admin(admin_repo, admin_id)

    try:
        admin_repo.update_admin(db_admin, **request_body.model_dump(exclude_unset=True))
        db.commit()
    except IntegrityError:
        db.rollback()
        logging.warning("Duplicate admin email", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=409, detail="Admin with this email already exists")

    return to_admin_response(admin_repo, db_admin)


@router.delete("/admins/{admin_id}", status_code=204)
def delete_admin(admin_id: str, request: Request, db: Session = Depends(get_db)):
    """Remove an admin; clients it fronted are left without that point of contact"""
    admin_repo = AdminRepository(db)
    db_admin = load_admin(admin_repo, admin_id)

    admin_repo.delete_admin(db_admin)
    db.commit()

    logging.info("Admin deleted", extra={"request_id": get_request_id(request), "admin_id": admin_id})
    return Response(status_code=204)
