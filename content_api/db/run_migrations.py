"""
Programmatic Alembic migration runner.

Runs migrations without an alembic.ini: the script location is this package's
migrations directory and the URL comes from content_api.db.config.

Usage examples:
    python -m content_api.db.run_migrations upgrade head
    python -m content_api.db.run_migrations downgrade -1
    python -m content_api.db.run_migrations stamp head
"""

import sys
from pathlib import Path
from typing import List

from alembic import command
from alembic.config import Config

from content_api.db.config import get_settings

_DEFAULT_TARGETS = {"upgrade": "head", "downgrade": "-1", "stamp": "head"}


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Alembic Config pointing at the bundled migrations."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parent / "migrations"))
    # Offline mode reads this; env.py uses the async URL when online.
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run an Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cfg = build_config()
    cmd, other = args[0], args[1:]

    if cmd in _DEFAULT_TARGETS:
        getattr(command, cmd)(cfg, *(other or [_DEFAULT_TARGETS[cmd]]))
    elif cmd in ("history", "current", "heads"):
        getattr(command, cmd)(cfg, *other)
    elif cmd == "show" and other:
        command.show(cfg, other[0])
    else:
        print(f"Unsupported Alembic command: {' '.join(args)}")
        sys.exit(2)


if __name__ == "__main__":
    main()
