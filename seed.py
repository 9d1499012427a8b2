import os

from dotenv import load_dotenv

from ledger_admin.database.models.user import User
from ledger_admin.database.store import MySQLDocumentStore
from ledger_admin.utils.permissions import Role

load_dotenv()

# --- Default Super Admin Details ---
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_FIRST_NAME = os.getenv("ADMIN_FIRST_NAME", "Super")
ADMIN_LAST_NAME = os.getenv("ADMIN_LAST_NAME", "Admin")


def seed_super_admin(store):
    """
    Creates the first super_admin if none exists.
    Returns the created user, or None when seeding was not required.
    """
    if User.find_by_role(store, Role.SUPER_ADMIN.value):
        print("A super admin already exists. Seeding not required.")
        return None

    if User.find_by_email(store, ADMIN_EMAIL):
        print(f"ERROR: {ADMIN_EMAIL} exists but is not a super admin. Choose another ADMIN_EMAIL.")
        return None

    if not ADMIN_PASSWORD:
        raise SystemExit("ADMIN_PASSWORD must be set to seed the super admin.")

    print(f"No super admin found. Creating initial super admin: {ADMIN_EMAIL}")
    user = User.create(store, {
        'email': ADMIN_EMAIL,
        'password': ADMIN_PASSWORD,
        'first_name': ADMIN_FIRST_NAME,
        'last_name': ADMIN_LAST_NAME,
        'role': Role.SUPER_ADMIN.value,
    })

    print("=" * 50)
    print("Super admin created successfully!")
    print(f"  Email: {ADMIN_EMAIL}")
    print("=" * 50)
    return user


def initialize_database():
    """Creates the database and collection tables, then seeds the super admin."""
    store = MySQLDocumentStore()
    try:
        store.initialize()
        print("Database schema is ready.")
        seed_super_admin(store)
        print("Database initialization and seeding process completed successfully.")
    except Exception as e:
        print(f"A critical error occurred during database initialization: {e}")
        raise


if __name__ == "__main__":
    initialize_database()
