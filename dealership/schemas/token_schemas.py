from pydantic import BaseModel

class TokenSchema(BaseModel):
    access_token: str
    token_type: str = "Bearer"

class TokenPayloadSchema(BaseModel):
    sub: str  # Subject - the user id

class LoginRequestSchema(BaseModel):
    username: str
    password: str
