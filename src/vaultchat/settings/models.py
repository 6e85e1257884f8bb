"""Settings data model.

Hides the persisted field names (``apiKey``/``modelName``) behind
snake_case attributes, and keeps values supplied by the environment
out of the persisted object.
"""

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

DEFAULT_MODEL_NAME = "gemini-1.5-flash-002"


class Settings(BaseModel):
    """Process-wide settings: an API key and a model identifier."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
        protected_namespaces=(),
    )

    api_key: str = Field(default="", alias="apiKey", description="Google AI Studio API key")
    model_name: str = Field(
        default=DEFAULT_MODEL_NAME,
        alias="modelName",
        description="Gemini model identifier, without the 'models/' prefix"
    )

    # field name -> (stored value, value taken from the environment)
    _env_fallbacks: dict[str, tuple[str, str]] = PrivateAttr(default_factory=dict)

    def use_env_fallback(self, field_name: str, value: str) -> None:
        """Use an environment value for this run without persisting it.

        The stored value is written back on save for as long as the field
        still holds the environment value; once the user edits the field,
        the edit is saved normally.
        """
        self._env_fallbacks[field_name] = (getattr(self, field_name), value)
        setattr(self, field_name, value)

    def to_storage(self) -> dict[str, str]:
        """Serialize to the persisted two-field object."""
        data = self.model_dump(by_alias=True)
        for field_name, (stored, env_value) in self._env_fallbacks.items():
            if getattr(self, field_name) == env_value:
                data[type(self).model_fields[field_name].alias] = stored
        return data

    def masked_api_key(self) -> str:
        """API key with everything but the last four characters hidden."""
        if not self.api_key:
            return "(not set)"
        if len(self.api_key) <= 4:
            return "*" * len(self.api_key)
        return "*" * (len(self.api_key) - 4) + self.api_key[-4:]


DEFAULT_SETTINGS = Settings()
