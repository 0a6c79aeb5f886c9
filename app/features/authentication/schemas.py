from pydantic import BaseModel, Field

from app.features.users.schemas import UserOut

# ---------- Inputs ----------

# Champs vides acceptés ici : le service renvoie une ValidationError (400) explicite
class SignUpIn(BaseModel):
    username: str = Field("", max_length=64, examples=["alice"])
    email: str = Field("", max_length=254, examples=["alice@example.com"])
    password: str = Field("", max_length=128)

class LogInIn(BaseModel):
    email: str = Field("", examples=["alice@example.com"])
    password: str = ""


# ---------- Outputs ----------

class AuthOut(BaseModel):
    token: str
    user: UserOut
