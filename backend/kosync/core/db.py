# kosync/core/db.py
"""
Tortoise ORM configuration for the users and documents tables.
"""
import os
from tortoise import Tortoise
from dotenv import load_dotenv
from pathlib import Path

ENV_PATH = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

# Any Tortoise URL, e.g. sqlite://data/kosync.sqlite3 or postgres://user:pw@host:5432/kosync
DB_URL = os.getenv("DATABASE_URL", "sqlite://data/kosync.sqlite3")

# Also read by aerich (see [tool.aerich] in pyproject.toml)
TORTOISE_ORM = {
    "connections": {"default": DB_URL},
    "apps": {
        "models": {
            "models": ["kosync.models.user", "kosync.models.document", "aerich.models"],
            "default_connection": "default",
        },
    },
    "use_tz": True,
    "timezone": "UTC",
}


def _ensure_sqlite_dir(url: str) -> None:
    # SQLite will not create missing parent directories of the database file
    if not url.startswith("sqlite://"):
        return
    path = url[len("sqlite://"):].split("?", 1)[0]
    if path and path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)


async def init_db(generate_schemas: bool = True):
    """
    Connect and register the models; missing tables are created unless
    generate_schemas is False (migrations managed by aerich instead).
    """
    url = TORTOISE_ORM["connections"]["default"]
    _ensure_sqlite_dir(url)
    await Tortoise.init(config=TORTOISE_ORM)
    if generate_schemas:
        await Tortoise.generate_schemas(safe=True)


async def close_db():
    await Tortoise.close_connections()
