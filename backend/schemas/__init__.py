from schemas.shared import MessageResponse
from schemas.auth import LoginRequest, LoginResponse
from schemas.prediction import PredictionCreate, PredictionResponse, PredictionCreatedResponse

__all__ = [
    "MessageResponse",
    "LoginRequest", "LoginResponse",
    "PredictionCreate", "PredictionResponse", "PredictionCreatedResponse",
]
