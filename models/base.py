# models/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ConfigModel(BaseModel):
    """
    Base for everything read from a configuration document.

    The documents use camelCase keys (``formFields``, ``selectorType``);
    the models expose snake_case attributes.  Unknown keys are ignored and
    the instances are immutable once loaded.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ResultModel(BaseModel):
    """Base for produced data; serialised with camelCase keys for reports."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
