from pydantic import BaseModel as RootBaseModel
from pydantic import ConfigDict


class BaseModel(RootBaseModel):
    """
    The provider's pydantic BaseModel.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)
