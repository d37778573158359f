import os
from typing import List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from dotenv import load_dotenv

from feednorm.fields import FieldDeclaration


class ConfigError(Exception):
    pass


class CustomFields(BaseModel):
    # Appended after the built-in declarations, so they win on conflicts
    feed: List[FieldDeclaration] = Field(default_factory=list)
    item: List[FieldDeclaration] = Field(default_factory=list)


class ParserOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    custom_fields: CustomFields = Field(default_factory=CustomFields, alias="customFields")
    max_redirects: int = Field(1, ge=0, alias="maxRedirects")

    # HTTP fetch
    timeout: float = Field(30, gt=0)
    user_agent: str = Field("feednorm/1.0", alias="userAgent")


class AppConfig(BaseModel):
    parser: ParserOptions = Field(default_factory=ParserOptions)

    # Attempts per URL in the CLI; 1 means no retry
    fetch_retries: int = Field(1, ge=1)

    log_dir: Optional[str] = None
    log_level: str = "INFO"


def coerce_options(options: Union[ParserOptions, Mapping, None]) -> ParserOptions:
    if options is None:
        return ParserOptions()
    if isinstance(options, ParserOptions):
        return options
    try:
        return ParserOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigError(f"Invalid parser options: {exc}") from exc


def _parse_field_list(raw: str) -> List[FieldDeclaration]:
    # "media:content,dc:subject=subject" -> ["media:content", ("dc:subject", "subject")]
    fields: List[FieldDeclaration] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "=" in entry:
            source, dest = (part.strip() for part in entry.split("=", 1))
            fields.append((source, dest))
        else:
            fields.append(entry)
    return fields


def load_config() -> AppConfig:
    load_dotenv()

    parser = {
        "custom_fields": {
            "feed": _parse_field_list(os.getenv("FEEDNORM_CUSTOM_FEED_FIELDS", "")),
            "item": _parse_field_list(os.getenv("FEEDNORM_CUSTOM_ITEM_FIELDS", "")),
        },
        "max_redirects": os.getenv("FEEDNORM_MAX_REDIRECTS", "1").strip(),
        "timeout": os.getenv("FEEDNORM_TIMEOUT", "30").strip(),
        "user_agent": os.getenv("FEEDNORM_USER_AGENT", "feednorm/1.0").strip(),
    }

    data = {
        "parser": parser,
        "fetch_retries": os.getenv("FEEDNORM_FETCH_RETRIES", "1").strip(),
        "log_dir": os.getenv("LOG_DIR") or None,
        "log_level": os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    }

    try:
        return AppConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}")
