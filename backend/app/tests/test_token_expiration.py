from datetime import datetime, timedelta
import asyncio
import importlib
import pathlib
import sys

from jose import jwt
from httpx import AsyncClient, ASGITransport

# Allow importing the app package
sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))


def test_access_token_expiration_respects_env(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1")
    import app.auth as auth
    importlib.reload(auth)

    token = auth.create_access_token(data={"sub": "admin"})
    decoded = jwt.decode(token, auth.SECRET_KEY, algorithms=[auth.ALGORITHM])
    exp = datetime.utcfromtimestamp(decoded["exp"])
    delta = exp - datetime.utcnow()
    assert 45 <= delta.total_seconds() <= 75

    monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MINUTES", raising=False)
    importlib.reload(auth)
    assert auth.ACCESS_TOKEN_EXPIRE_MINUTES == 60 * 24 * 7


def test_expired_or_forged_session_is_rejected():
    from app.main import app
    from app.auth import ALGORITHM, SESSION_COOKIE_NAME, create_access_token

    expired = create_access_token(data={"sub": "admin"}, expires_delta=timedelta(minutes=-5))
    forged = jwt.encode({"sub": "admin"}, "not-the-secret", algorithm=ALGORITHM)

    async def run():
        transport = ASGITransport(app=app)
        for token in (expired, forged):
            async with AsyncClient(
                transport=transport,
                base_url="http://test",
                cookies={SESSION_COOKIE_NAME: token},
            ) as client:
                resp = await client.get("/auth/session")
                assert resp.json() == {"authenticated": False, "username": None}

    asyncio.run(run())
