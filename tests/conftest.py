import pytest
from sqlalchemy.orm import sessionmaker

from tourneyhub import models
from tourneyhub.core.database import Base, build_engine


@pytest.fixture
def engine(tmp_path):
    # File-backed so several connections (and threads) share one database
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def game(db):
    game = models.Game(name="Valorant", slug="valorant", is_active=True)
    db.add(game)
    db.commit()
    db.refresh(game)
    return game


@pytest.fixture
def make_tournament(db, game):
    def _make(**overrides):
        values = dict(
            title="Weekend Cup",
            game_id=game.id,
            max_players=8,
            current_players=0,
            entry_fee=0,
            prize_pool=0,
            start_date="2025-03-01",
            start_time="18:00",
            status="registration",
            created_at=1000,
            updated_at=1000,
        )
        values.update(overrides)
        tournament = models.Tournament(**values)
        db.add(tournament)
        db.commit()
        db.refresh(tournament)
        return tournament
    return _make


@pytest.fixture
def make_user(db):
    def _make(user_id, username=None, role="user"):
        user = models.User(id=user_id, username=username, role=role, created_at=1000, updated_at=1000)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make
