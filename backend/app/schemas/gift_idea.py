from pydantic import BaseModel


class GiftIdeaRead(BaseModel):
    id: int
    age: int
    gender: str
    category: str | None = None
    gift_ideas: list[str]

    model_config = {"from_attributes": True}


class GiftIdeaSuggestion(BaseModel):
    age: int
    gender: str
    category: str | None = None
    gift_ideas: list[str]
