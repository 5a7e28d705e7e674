from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class AppMode(str, Enum):
    """Operating context selected in the client"""
    NONE = "None"  # chat only
    DEEP_RESEARCH = "DeepResearch"
    PARALEGAL = "Paralegal"
    CROSS_EXAMINE = "CrossExamine"


# Ordinal order shared with clients that send the mode as an integer
_MODE_BY_ORDINAL = list(AppMode)


class QueryRequest(BaseModel):
    query: Optional[str] = ""
    mode: AppMode = AppMode.NONE
    chat_history: Optional[List[str]] = Field(None, alias="chatHistory")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        if value is None:
            return AppMode.NONE
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(_MODE_BY_ORDINAL):
                return _MODE_BY_ORDINAL[value]
            raise ValueError(f"mode must be between 0 and {len(_MODE_BY_ORDINAL) - 1}")
        if isinstance(value, str):
            for mode in AppMode:
                if value.lower() in (mode.value.lower(), mode.name.lower()):
                    return mode
        return value


class QueryResponse(BaseModel):
    response: str
    canvas_content: str = Field("", alias="canvasContent")
    canvas_title: str = Field("", alias="canvasTitle")

    model_config = ConfigDict(populate_by_name=True)
