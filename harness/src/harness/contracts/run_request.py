from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RunRequest(BaseModel):
    """
    Public run request contract, as read from the request JSON file.

    Only `map` is structurally required. Null rows and non-text map symbols
    are kept so level preparation can report or map them. Business rules
    (non-empty name, parseable endpoint, positive time limit) are checked by
    harness.requests.validation so they can be reported as InvalidInput
    against the attempt's own artifact folder.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    endpoint: str = Field(
        default="",
        alias="socketAddress",
        validation_alias=AliasChoices("socketAddress", "endpoint"),
    )
    time_limit_seconds: float = Field(
        default=0.0,
        alias="levelCompletionLimitSeconds",
        validation_alias=AliasChoices("levelCompletionLimitSeconds", "timeLimitSeconds"),
    )
    start_rotation_degrees: float = Field(default=0.0, alias="startRotationDegrees")
    map: list[list[str | None] | None]

    @field_validator("name", "endpoint", mode="before")
    @classmethod
    def _coerce_missing_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value

    @field_validator("time_limit_seconds", "start_rotation_degrees", mode="before")
    @classmethod
    def _coerce_missing_number(cls, value: Any) -> Any:
        if value is None:
            return 0.0
        return value

    @field_validator("map", mode="before")
    @classmethod
    def _coerce_map_symbols(cls, value: Any) -> Any:
        # Rows and symbols are judged by the level validator; scalars become text.
        if not isinstance(value, list):
            return value
        return [
            [_symbol_text(symbol) for symbol in row] if isinstance(row, list) else row
            for row in value
        ]

    def to_payload(self) -> dict[str, Any]:
        """Serialize using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


def _symbol_text(symbol: Any) -> Any:
    if symbol is None or isinstance(symbol, str):
        return symbol
    if isinstance(symbol, bool | int | float):
        return str(symbol)
    return symbol
