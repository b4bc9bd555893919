from datetime import date

from app.core.security import UserRole, get_password_hash
from app.models.user import User
from app.services.slot_service import SlotService

TEST_DAY = date(2030, 1, 15)
TEST_PASSWORD = "TestPassword123"


def create_user(database, email, role=UserRole.PATIENT, name="Test User", password=TEST_PASSWORD):
    session = database.session()
    try:
        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
        )
        session.add(user)
        session.commit()
        return user.id
    finally:
        session.close()


def create_day_slots(database, day=TEST_DAY):
    session = database.session()
    try:
        return [slot.id for slot in SlotService(session).create_day_slots(day)]
    finally:
        session.close()


def login(client, email, password=TEST_PASSWORD):
    response = client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
