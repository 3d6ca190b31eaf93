"""Store an account with an encrypted token and JSON settings in SQLite.

Requires ACCOUNTS_VAULT_KEY (a Fernet key) in the environment.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

sys.path.insert(0, str(Path(__file__).parent))

from models import Account, Base, Note  # noqa: E402

from transformable import from_yaml_coordinator  # noqa: E402
from transformable.core.logging import configure_logging  # noqa: E402
from transformable.integrations.sqlalchemy import SQLAlchemyTransformable  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the accounts example")
    parser.add_argument("--db", default="sqlite://", help="SQLAlchemy database URL")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(level=args.log_level)

    coordinator = from_yaml_coordinator(str(Path(__file__).parent / "transformable.yaml"))
    engine = create_engine(args.db)
    Base.metadata.create_all(engine)
    Session = sessionmaker(engine)
    SQLAlchemyTransformable(coordinator).install(Session, Account)

    with Session() as session:
        account = Account(name="acme", api_token="tok_live_123", settings={"theme": "dark"})
        session.add(account)
        session.commit()

        row = session.execute(
            text("SELECT api_token, settings FROM accounts WHERE id = :id"),
            {"id": account.id},
        ).one()
        print(f"stored:  api_token={row.api_token[:16]}... settings={row.settings}")
        print(f"loaded:  api_token={account.api_token} settings={account.settings}")

    note = Note("lorem ipsum " * 20)
    coordinator.transform_object(note)
    print(f"note:    {len(note.body)} chars compressed")
    coordinator.reverse_transform_object(note)


if __name__ == "__main__":
    main()
