import os
import re
import uuid
from dataclasses import dataclass
from typing import List, Optional

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["OTP_PEPPER"] = "test-pepper"
os.environ["GEMINI_API_KEY"] = ""
os.environ["SUPER_ADMIN_EMAIL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from baronda.core.auth import staff_token, user_token
from baronda.core.database import Base
from baronda.core.deps import get_db
from baronda.core.security import get_password_hash
from baronda.main import app
from baronda.models.staff import Staff, StaffRole, StaffStatus
from baronda.models.user import User
from baronda.services import email as mail
from baronda.services import triage

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_OTP_IN_TEXT = re.compile(r"Kode Anda: (\d{6})")
_CODE_IN_HTML = re.compile(r'letter-spacing: 8px; margin: 0;">([^<]+)</p>')


@dataclass
class SentMail:
    to: str
    subject: str
    html: str
    text: Optional[str]


class Outbox(list):
    def to(self, addr: str) -> List[SentMail]:
        return [m for m in self if m.to == addr]

    def last_otp(self, addr: str) -> str:
        for m in reversed(self.to(addr)):
            match = _OTP_IN_TEXT.search(m.text or "")
            if match:
                return match.group(1)
        raise AssertionError(f"no OTP mailed to {addr}")

    def last_code(self, addr: str) -> str:
        for m in reversed(self.to(addr)):
            match = _CODE_IN_HTML.search(m.html)
            if match:
                return match.group(1)
        raise AssertionError(f"no code mailed to {addr}")


class FakeTriage:
    def __init__(self, reply: str = '{"threatLevel": "high", "reason": "Ada pencurian."}', fail: bool = False):
        self.reply = reply
        self.fail = fail
        self.prompts: List[str] = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise RuntimeError("model unavailable")
        return self.reply


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    sent = Outbox()

    def fake_send_email(to_email, subject, html, text=None, from_name=None):
        sent.append(SentMail(to_email, subject, html, text))
        return True

    monkeypatch.setattr(mail, "send_email", fake_send_email)
    return sent


@pytest.fixture
def failing_mail(monkeypatch):
    monkeypatch.setattr(mail, "send_email", lambda *args, **kwargs: False)


@pytest.fixture
def fake_triage(monkeypatch):
    provider = FakeTriage()
    monkeypatch.setattr(triage, "_provider", provider)
    return provider


def make_staff(
    db,
    *,
    email: str = "petugas@example.com",
    name: str = "Budi Santoso",
    role: StaffRole = StaffRole.petugas,
    status: StaffStatus = StaffStatus.active,
    access_code: Optional[str] = "KODE1234",
    **fields,
) -> Staff:
    staff = Staff(
        id=str(uuid.uuid4()),
        name=name,
        email=email,
        role=role,
        status=status,
        access_code_hash=get_password_hash(access_code) if access_code else None,
        points=0,
        **fields,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def make_user(db, *, email: str = "warga@example.com", password: str = "rahasia123", **fields) -> User:
    user = User(
        id=str(uuid.uuid4()),
        display_name=fields.pop("display_name", "Siti Aminah"),
        email=email,
        hashed_password=get_password_hash(password),
        is_blocked=fields.pop("is_blocked", False),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(principal) -> dict:
    token = staff_token(principal) if isinstance(principal, Staff) else user_token(principal)
    return {"Authorization": f"Bearer {token}"}
