from datetime import timedelta
from functools import lru_cache
from typing import AsyncIterator

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from brewbook.app.core.config import get_settings
from brewbook.app.db.session import get_db
from brewbook.app.schemas.auth import CurrentUser
from brewbook.app.services.drink_of_day import DrinkOfDayCache
from brewbook.app.services.generation_service import RecipeGenerationPipeline
from brewbook.app.services.llm_client import LLMClient

security = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    settings = get_settings()
    try:
        payload = jwt.decode(credentials.credentials, settings.auth_secret_key, algorithms=[settings.auth_algorithm])
        sub = payload.get("sub")
        if sub is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
        return CurrentUser(id=str(sub), email=payload.get("email"))
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")


def get_db_session(db: Session = Depends(get_db)) -> Session:
    return db


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    settings = get_settings()
    timeout = httpx.Timeout(settings.scraper_timeout_seconds, connect=5.0)
    async with httpx.AsyncClient(timeout=timeout) as client:
        yield client


def get_llm_client() -> LLMClient:
    return LLMClient(get_settings())


def get_generation_pipeline(
    db: Session = Depends(get_db_session),
    llm: LLMClient = Depends(get_llm_client),
) -> RecipeGenerationPipeline:
    return RecipeGenerationPipeline(db, llm)


@lru_cache
def get_drink_cache() -> DrinkOfDayCache:
    return DrinkOfDayCache(ttl=timedelta(hours=get_settings().drink_of_day_ttl_hours))
