from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_SETTINGS = {
    "autoTimer": True,
    "restTimeSeconds": 60,
}


class SettingsSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    autoTimer: bool = True
    restTimeSeconds: int = Field(60, ge=0, le=3600)


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
