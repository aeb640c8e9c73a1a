from pydantic import BaseModel, ConfigDict, Field


class TranslatableItemSchema(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    attr_one: str = Field(max_length=255)
    attr_two: str | None = Field(default=None, max_length=255)
    attr_three: str | None = Field(default=None, max_length=255)
    model_config = ConfigDict(str_strip_whitespace=True)
