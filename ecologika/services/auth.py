import bcrypt
import uuid
from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.core.config import settings

security = HTTPBearer(auto_error=False)

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=15)
    to_encode.update({"exp": expire, "jti": str(uuid.uuid4())})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)
    return encoded_jwt

def issue_token(profile_id: str) -> dict:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": profile_id}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])

async def revoke_token(db, payload: dict):
    await db.revoked_tokens.insert_one({
        "jti": payload.get("jti"),
        "sub": payload.get("sub"),
        "expires_at": datetime.utcfromtimestamp(payload["exp"]) if payload.get("exp") else None,
        "revoked_at": datetime.utcnow(),
    })

async def _load_profile(db, token: str) -> Optional[Profile]:
    payload = decode_token(token)
    profile_id = payload.get("sub")
    if profile_id is None:
        return None

    if payload.get("jti") and await db.revoked_tokens.find_one({"jti": payload["jti"]}):
        return None

    profile = await db.profiles.find_one({"id": profile_id})
    if profile is None:
        return None
    return Profile(**profile)

async def get_token_payload(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        return decode_token(credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db=Depends(get_db)
):
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        profile = await _load_profile(db, credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    if profile is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")
    return profile

async def get_admin_user(current_user: Profile = Depends(get_current_user)):
    if current_user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
