from pydantic import BaseModel, Field
from typing import Literal


class DigestConfig(BaseModel):
    algorithm: Literal["sha256", "sha512", "sha3_256", "blake2b"] = "sha256"


class ResolveConfig(BaseModel):
    max_depth: int = Field(default=100_000, gt=0)
    max_bytes: int | None = Field(default=None, ge=0)
    memoize: bool = True


class BackingConfig(BaseModel):
    path: str = ".digistructor/store.db"
    timeout: float = Field(default=5.0, gt=0)


class BuilderConfig(BaseModel):
    chunk_size: int = Field(default=64 * 1024, gt=0)


class PluginsConfig(BaseModel):
    backing: str | None = None


class DigistructorConfig(BaseModel):
    digest: DigestConfig = Field(default_factory=DigestConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)
    backing: BackingConfig = Field(default_factory=BackingConfig)
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
