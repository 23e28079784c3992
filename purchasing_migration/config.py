from __future__ import annotations

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


REQUIRED_ENV_VARS = ('OLD_DATABASE_URL', 'NEW_DATABASE_URL', 'OLD_ORG_ID', 'NEW_ORG_ID')


class ConfigurationError(RuntimeError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing env vars: {', '.join(missing)}")


def _normalize_database_url(url: str) -> str:
    url = url.strip()
    if url.startswith('postgres://'):
        return 'postgresql+psycopg://' + url[len('postgres://') :]
    if url.startswith('postgresql://'):
        return 'postgresql+psycopg://' + url[len('postgresql://') :]
    return url


class MigrationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    old_database_url: str
    new_database_url: str
    old_org_id: str
    new_org_id: str

    dry_run: bool = False
    reset_target: bool = False
    print_costs: bool = False
    single_transaction: bool = False
    batch_size: int = 500
    log_level: str = 'INFO'

    @property
    def old_database_url_normalized(self) -> str:
        return _normalize_database_url(self.old_database_url)

    @property
    def new_database_url_normalized(self) -> str:
        return _normalize_database_url(self.new_database_url)

    @property
    def reset_enabled(self) -> bool:
        # A dry run never touches the target, reset included.
        return self.reset_target and not self.dry_run


def load_settings(**overrides) -> MigrationSettings:
    """Build settings from the environment, reporting every missing required variable at once."""
    try:
        settings = MigrationSettings(**overrides)
    except ValidationError as exc:
        missing = [
            str(error['loc'][0]).upper()
            for error in exc.errors()
            if error.get('type') == 'missing' and error.get('loc')
        ]
        if missing:
            raise ConfigurationError(missing) from exc
        raise

    blank = [name for name in REQUIRED_ENV_VARS if not getattr(settings, name.lower()).strip()]
    if blank:
        raise ConfigurationError(blank)
    if settings.batch_size < 1:
        raise ValueError('Batch size must be at least 1')
    return settings
