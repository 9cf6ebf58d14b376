"""
Fixtures partagées pour tous les tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Base de données de test en mémoire SQLite
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# Créer un moteur SQLite en mémoire pour les tests
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Importer Base et les modèles après avoir créé le moteur de test
from ..src.models.db import Base
from ..src.models.auth_models import User
from ..src.models_geo import Destination, DestinationImage
from ..src.models_feedback import Feedback, Favorite
from ..src.auth.passwords import hash_password
from ..src.auth.tokens import issue_token


@pytest.fixture(scope="function")
def db():
    """
    Crée une nouvelle base de données pour chaque test.
    La base est créée au début et supprimée à la fin pour garantir l'isolation.
    """
    # Créer toutes les tables
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()  # Annuler toute transaction en cours
        db.close()
        # Nettoyer toutes les tables après le test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db, monkeypatch):
    """
    Crée un client de test FastAPI avec une base de données isolée.
    Remplace SessionLocal et get_db pour utiliser notre base de test.
    """
    from ..src import models
    monkeypatch.setattr(models.db, "SessionLocal", TestingSessionLocal)

    from ..main import app
    from ..src.db import get_db as original_get_db

    def override_get_db():
        """
        Override de get_db qui utilise notre session de test.
        """
        try:
            yield db
        finally:
            # Ne pas fermer la session ici, elle sera fermée dans la fixture db
            pass

    app.dependency_overrides[original_get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Fabrique d'utilisateurs persistés."""
    def _make(username="traveller", role="User", password="secret-pass"):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def auth_headers():
    """En-têtes Authorization pour un utilisateur donné."""
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user.id, user.username, user.role)}"}
    return _headers


@pytest.fixture
def make_destination(db):
    """Fabrique de destinations persistées."""
    def _make(name="Sharm El Sheikh", category="Beach", description="Sunny beach resort",
              slots=5, is_available=None, location="Egypt", cost=100, **extra):
        destination = Destination(
            name=name,
            category=category,
            description=description,
            location=location,
            available_slots=slots,
            capacity=slots,
            is_available=slots > 0 if is_available is None else is_available,
            cost=cost,
            discount=0,
            **extra,
        )
        db.add(destination)
        db.commit()
        db.refresh(destination)
        return destination
    return _make
