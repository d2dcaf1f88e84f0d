from pydantic import BaseModel


class LoginAdminRequest(BaseModel):
    username: str
    password: str
