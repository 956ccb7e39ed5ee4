# 📁 backend/spacetime/services/auth/jwt_utils.py
from fastapi import HTTPException, status


def extract_user_id_from_payload(payload: dict) -> str:
    """
    Extrahiert die User-ID (``sub``) aus dem bereits verifizierten JWT-Payload.
    """
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Subject claim missing in token",
        )
    return str(user_id)
