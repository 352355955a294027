# foodcourt/api/deps.py
from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from foodcourt.data.database import get_db
from foodcourt.domain.actor import Actor
from foodcourt.services.email_service import EmailService
from foodcourt.services.notification_service import NotificationService
from foodcourt.services.user_service import UserService


def get_actor(
    user_id: int = Query(..., gt=0, description="Calling user"),
    db: Session = Depends(get_db),
) -> Actor:
    return UserService(db).get_actor(user_id)


def get_notifier(request: Request) -> NotificationService:
    #transport and directory live as long as the app, see lifespan in main
    return NotificationService(
        transport=request.app.state.notification_transport,
        directory=request.app.state.connection_directory,
    )


def get_email_service() -> EmailService:
    return EmailService()
