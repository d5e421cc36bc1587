from pydantic import BaseModel, ConfigDict


class FeatureResponse(BaseModel):
    id: int
    title: str
    description: str
    icon: str

    model_config = ConfigDict(from_attributes=True)
