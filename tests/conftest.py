# tests/conftest.py
import json
from typing import Any, Dict, Optional

import pytest
from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.testclient import TestClient

from quizsync.client import ApiClient

ACCESS_KEY = "1222262587654321"
BASE_URL = "http://testserver"


def validate_question(q: Dict[str, Any]) -> list:
    """Roughly what the real backend's schema rejects."""
    errors = []
    if "\n" in (q.get("directions") or ""):
        errors.append({"field": "directions", "error": "must not contain newlines"})
    for key in ("options", "CorrectAns"):
        for i, item in enumerate(q.get(key) or []):
            if not isinstance(item.get("images"), (str, type(None))):
                errors.append({"field": f"{key}.{i}.images", "error": "must be a string"})
    if "questionImages" in q:
        errors.append({"field": "questionImages", "error": "not allowed"})
    return errors


# --- In-memory stand-in for the quiz backend ---
class FakeQuizBackend:
    def __init__(self):
        self.access_keys = {ACCESS_KEY}
        self.healthy = True
        self.health_response = None   # overrides the /health reply when set
        self.broken = False          # create endpoint answers with an HTML error page
        self.reject: Dict[str, str] = {}   # questionText -> rejection message
        self.users: Dict[str, dict] = {}
        self.register_bodies: list = []
        self.questions: list = []
        self.create_calls = 0
        self.app = self._build_app()

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.get("/health")
        def health():
            if self.health_response is not None:
                return self.health_response
            if not self.healthy:
                return JSONResponse(status_code=503, content={"status": "DOWN"})
            return {"status": "OK", "message": "Quiz API is running"}

        @app.post("/api/auth/verify")
        def verify(payload: Dict[str, Any]):
            if payload.get("AccessKey") in self.access_keys:
                return {"success": True}
            return JSONResponse(status_code=401, content={"success": False, "message": "Invalid access key"})

        @app.post("/api/auth/register")
        def register(payload: Dict[str, Any]):
            self.register_bodies.append(payload)
            sid = payload.get("StuID")
            if sid in self.users:
                return JSONResponse(status_code=400, content={"success": False, "message": "User already exists"})
            self.users[sid] = payload
            return JSONResponse(status_code=201, content={"success": True, "message": "User registered"})

        @app.post("/api/quiz/create")
        def create(payload: Dict[str, Any], authorization: Optional[str] = Header(None)):
            self.create_calls += 1
            if self.broken:
                return PlainTextResponse("<html>Bad Gateway</html>", status_code=502)
            scheme, _, key = (authorization or "").partition(" ")
            if scheme != "AccessKey" or key not in self.access_keys:
                return JSONResponse(status_code=401, content={"success": False, "message": "Unauthorized"})
            text = payload.get("questionText")
            if text in self.reject:
                return JSONResponse(status_code=400, content={"success": False, "message": self.reject[text]})
            errors = validate_question(payload)
            if errors:
                return JSONResponse(
                    status_code=400,
                    content={"success": False, "message": "Validation failed", "details": errors},
                )
            self.questions.append(payload)
            return JSONResponse(status_code=201, content={"success": True, "id": len(self.questions)})

        return app


class ExplodingSession:
    """requests-style session whose every call raises `exc`."""
    def __init__(self, exc: BaseException):
        self.exc = exc
        self.headers: Dict[str, str] = {}
        self.calls = 0

    def get(self, *args, **kwargs):
        self.calls += 1
        raise self.exc

    post = request = get

    def close(self):
        pass


def make_question(text: str, **extra) -> dict:
    q = {
        "questionText": text,
        "options": [{"text": "A", "images": None}, {"text": "B", "images": None}],
        "CorrectAns": [{"text": "A", "images": None}],
    }
    q.update(extra)
    return q


@pytest.fixture
def backend():
    return FakeQuizBackend()


@pytest.fixture
def api(backend):
    with TestClient(backend.app) as tc:
        yield ApiClient(BASE_URL, session=tc)


@pytest.fixture
def sleeps():
    """Pass `sleeps.append` wherever a sleep function is expected."""
    return []


@pytest.fixture
def write_json(tmp_path):
    def _write(name: str, data) -> str:
        p = tmp_path / name
        p.write_text(json.dumps(data), encoding="utf-8")
        return str(p)
    return _write


@pytest.fixture
def sample_users():
    return [
        {"NameOfStu": "Suraj Kumar Singh", "StuID": "S001", "AccessKey": ACCESS_KEY, "Class": "12"},
        {"NameOfStu": "Ms. Kashish  Pratap\n", "StuID": "S002", "AccessKey": "9999000011112222"},
    ]


@pytest.fixture
def sample_questions():
    return [
        make_question("What is 2 + 2?"),
        make_question(
            "Which figure completes the series?",
            directions="Study the figures\n\nbelow carefully.\n",
            options=[{"text": "1", "images": ["fig1.png", "fig1b.png"]}, {"text": "2", "images": []}],
            CorrectAns=[{"text": "1", "images": ["fig1.png"]}],
            questionImages=["series.png"],
        ),
        make_question("Capital of France?"),
    ]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell settings out of the tests."""
    for var in ("API_BASE_URL", "ACCESS_KEY", "USERS_PATH", "QUESTIONS_PATH",
                "REQUEST_TIMEOUT", "USER_DELAY", "QUESTION_DELAY", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
