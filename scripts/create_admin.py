"""Create an administrator account, or promote an existing one.

Usage:
  python scripts/create_admin.py --email admin@example.com

The password is read from ADMIN_PASSWORD or prompted for interactively.
"""

import argparse
import getpass
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pymongo import MongoClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from users_service.application.services.admin_service import AdminService
from users_service.infrastructure.persistence.mongo import MongoUserRepository
from users_service.services.credentials import PasswordHasher


def main() -> None:
    load_dotenv()

    parser = argparse.ArgumentParser()
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    args = parser.parse_args()

    email = args.email or input("Administrator e-mail: ").strip()
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Administrator password: ").strip()
    if not email or not password:
        raise RuntimeError("Both an e-mail and a password are required.")

    client = MongoClient(os.getenv("MONGODB_URI", "mongodb://localhost:27017"))
    repository = MongoUserRepository(client, os.getenv("MONGODB_DATABASE", "users-service"))
    try:
        hasher = PasswordHasher(rounds=int(os.getenv("BCRYPT_ROUNDS", "10")))
        user = AdminService(repository, hasher).ensure_default_admin(email, password)
    finally:
        repository.close()

    print("Administrator ready:", user)


if __name__ == "__main__":
    main()
