import pytest
from fastapi.testclient import TestClient

from core import db
from core.config import Settings
from main import create_app
from projects import repository


class FakeConnection:
    """
    In-memory stand-in for an asyncpg connection that understands the
    statements in `projects.repository`.
    """

    def __init__(self) -> None:
        self.rows: dict[int, str] = {}
        self.next_id = 1
        self.statements: list[tuple[str, tuple]] = []

    def seed(self, *names: str) -> list[int]:
        ids = []
        for name in names:
            ids.append(self._insert(name))
        return ids

    def _insert(self, name: str) -> int:
        project_id = self.next_id
        self.next_id += 1
        self.rows[project_id] = name
        return project_id

    def _row(self, project_id: int) -> dict:
        return {"Id": project_id, "Name": self.rows[project_id]}

    async def fetch(self, sql: str, *args):
        self.statements.append((sql, args))
        assert sql == repository.SELECT_ALL
        return [self._row(project_id) for project_id in sorted(self.rows)]

    async def fetchrow(self, sql: str, *args):
        self.statements.append((sql, args))
        assert sql == repository.SELECT_BY_ID
        (project_id,) = args
        return self._row(project_id) if project_id in self.rows else None

    async def fetchval(self, sql: str, *args):
        self.statements.append((sql, args))
        assert sql == repository.INSERT
        (name,) = args
        return self._insert(name)

    async def execute(self, sql: str, *args) -> str:
        self.statements.append((sql, args))
        if sql == repository.UPDATE_NAME:
            name, project_id = args
            if project_id not in self.rows:
                return "UPDATE 0"
            self.rows[project_id] = name
            return "UPDATE 1"
        if sql == repository.DELETE_BY_ID:
            (project_id,) = args
            if self.rows.pop(project_id, None) is None:
                return "DELETE 0"
            return "DELETE 1"
        raise AssertionError(f"unexpected statement: {sql}")


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def client(fake_conn: FakeConnection):
    app = create_app(Settings(connection_string="Host=localhost;Port=5432;Database=test;Username=test"))

    async def _connection():
        yield fake_conn

    app.dependency_overrides[db.connection] = _connection
    return TestClient(app)
