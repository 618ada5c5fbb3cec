"""Utility script to create the first administrator in the database."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from ispmedia.application.use_cases.users import create_user
from ispmedia.infrastructure.database import SessionLocal, initialize_database


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Cria um utilizador inicial para a aplicação ISPMedia.",
    )
    parser.add_argument(
        "--username",
        default="admin",
        help="Nome de utilizador (por omissão: admin)",
    )
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email do utilizador (por omissão: admin@example.com)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Palavra-passe. Se não for indicada será pedida interativamente.",
    )
    parser.add_argument(
        "--no-admin",
        dest="is_admin",
        action="store_false",
        help="Cria um utilizador comum em vez de um administrador.",
    )
    parser.add_argument(
        "--editor",
        dest="is_editor",
        action="store_true",
        help="Concede também privilégios de editor.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args(argv)

    password = args.password or getpass("Introduza a palavra-passe do utilizador: ")
    if not password:
        raise SystemExit("Não foi indicada uma palavra-passe válida.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            username=args.username,
            email=args.email,
            password=password,
            is_editor=args.is_editor,
            is_admin=args.is_admin,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Não foi possível criar o utilizador: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Erro ao guardar o utilizador na base de dados: {exc}") from exc
    else:
        print(
            "Utilizador criado com sucesso:\n"
            f"  ID: {user.id}\n"
            f"  Utilizador: {user.username}\n"
            f"  Email: {user.email}\n"
            f"  Administrador: {'sim' if user.is_admin else 'não'}\n"
            f"  Editor: {'sim' if user.is_editor else 'não'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
