from pydantic import BaseModel

from leadhunter.schemas.lead import GroundingSource


class Generation(BaseModel):
    text: str = ""
    sources: list[GroundingSource] = []
