from functools import lru_cache
from pathlib import Path, PurePath
from typing import Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from screenshot_action.console import console
from screenshot_action.models import FormatOptions, ViewportConfig

DEFAULT_SCREENSHOTS = "/=screenshot.webp"
LEGACY_OUTPUT = "screenshot.webp"


def legacy_screenshots(url: str, output: Optional[str] = None) -> str:
    """Zip the older ``url`` and ``output`` comma lists into a mapping.

    Urls without an output are numbered after the last output given, so three
    urls with ``output1.png`` write ``output1.png``, ``output1_2.png`` and
    ``output1_2_3.png``. Extra outputs are ignored.
    """
    urls = [item.strip() for item in url.split(",") if item.strip()]
    outputs = [item.strip() for item in (output or LEGACY_OUTPUT).split(",")]
    outputs = [item for item in outputs if item]
    while len(outputs) < len(urls):
        base = PurePath(outputs[-1] if outputs else LEGACY_OUTPUT)
        outputs.append(
            str(base.with_name(f"{base.stem}_{len(outputs) + 1}{base.suffix}"))
        )
    pairs = zip(urls, outputs)
    return ",".join(f"{source}={destination}" for source, destination in pairs)


class Config(BaseSettings):
    # Targets
    screenshots: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("screenshots", "input_screenshots"),
    )
    workspace: Path = Field(
        default_factory=Path.cwd, validation_alias="github_workspace"
    )

    # Older single purpose inputs, used when screenshots is unset
    url: Optional[str] = None
    output: Optional[str] = None

    # Viewport
    width: int = Field(1280, gt=0)
    height: Optional[int] = Field(None, gt=0)

    # Local server
    host: str = "0.0.0.0"
    port: int = 3000
    server_ready_timeout: float = Field(10.0, gt=0)

    # Navigation
    navigation_timeout: int = Field(30000, gt=0, validation_alias="input_timeout")
    wait_until: str = "load"

    # Encoders, raw json so a bad value can fall back per format
    webp_options: Optional[str] = None
    png_options: Optional[str] = None
    jpeg_options: Optional[str] = None

    # Outputs
    github_output: Optional[Path] = Field(None, validation_alias="github_output")

    # unaliased fields only read INPUT_<NAME>, never the bare name
    model_config = SettingsConfigDict(
        env_prefix="input_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator(
        "screenshots", "url", "output", "height", "github_output", mode="before"
    )
    @classmethod
    def empty_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("wait_until")
    @classmethod
    def check_wait_until(cls, v: str) -> str:
        allowed = ("load", "domcontentloaded", "networkidle", "commit")
        if v not in allowed:
            raise ValueError(f"wait_until must be one of: {', '.join(allowed)}")
        return v

    @model_validator(mode="after")
    def default_screenshots(self) -> "Config":
        if self.screenshots is None:
            if self.url:
                self.screenshots = legacy_screenshots(self.url, self.output)
            else:
                self.screenshots = DEFAULT_SCREENSHOTS
        return self

    @property
    def viewport(self) -> ViewportConfig:
        return ViewportConfig(width=self.width, height=self.height)

    @property
    def format_options(self) -> FormatOptions:
        return FormatOptions(
            webp=self.webp_options, png=self.png_options, jpeg=self.jpeg_options
        )

    @property
    def workspace_root(self) -> Path:
        return self.workspace.expanduser().resolve()

    @property
    def console(self):
        return console


@lru_cache()
def get_config(**overrides) -> Config:
    """Get cached config instance.

    Overrides use the input names (``width``, ``github_workspace``), unset
    ones are dropped so the environment still applies.
    """

    config = Config(**{k: v for k, v in overrides.items() if v is not None})
    config.console.log(config)
    return config
