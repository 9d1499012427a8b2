import os
import sys
from dotenv import load_dotenv
import pymysql

from ledger_admin.database.schema import COLLECTIONS


def check_environment():
    print("🔍 Checking Environment Variables...")
    load_dotenv()

    required_vars = ['JWT_SECRET_KEY']
    if os.getenv('STORE_BACKEND', 'mysql') == 'mysql':
        required_vars += ['DB_HOST', 'DB_USER', 'DB_PASSWORD', 'DB_NAME']

    missing = []
    for var in required_vars:
        value = os.getenv(var)
        if not value:
            missing.append(var)
        else:
            masked = value if var not in ['DB_PASSWORD', 'JWT_SECRET_KEY'] else '********'
            print(f"  ✅ {var}: {masked}")

    if missing:
        print(f"  ❌ Missing variables: {', '.join(missing)}")
        return False
    return True


def check_database():
    print("\n🔍 Checking Database Connection...")
    if os.getenv('STORE_BACKEND', 'mysql') != 'mysql':
        print("  ⏭  STORE_BACKEND is not mysql, skipping.")
        return True
    try:
        conn = pymysql.connect(
            host=os.getenv('DB_HOST'),
            port=int(os.getenv('DB_PORT', '3306')),
            user=os.getenv('DB_USER'),
            password=os.getenv('DB_PASSWORD'),
            database=os.getenv('DB_NAME'),
            connect_timeout=5
        )
        print("  ✅ Connection Successful!")

        with conn.cursor() as cursor:
            cursor.execute("SELECT VERSION()")
            version = cursor.fetchone()
            print(f"  ✅ Database Version: {version[0]}")

            cursor.execute("SHOW TABLES")
            table_names = {t[0] for t in cursor.fetchall()}
            missing = [c for c in COLLECTIONS if c not in table_names]
            if missing:
                print(f"  ❌ Missing collections: {', '.join(missing)} (run seed.py)")
                conn.close()
                return False
            print(f"  ✅ Collections Found: {', '.join(COLLECTIONS)}")

        conn.close()
        return True
    except pymysql.MySQLError as e:
        print(f"  ❌ Database Connection Failed: {e}")
        return False


if __name__ == "__main__":
    print("=== System Diagnostic Tool ===\n")
    env_ok = check_environment()
    db_ok = check_database()

    if env_ok and db_ok:
        print("\n✅ System is ready to run!")
        sys.exit(0)
    else:
        print("\n❌ System has issues. Please fix them before running the app.")
        sys.exit(1)
