#!/usr/bin/env python3
"""
Setup script to create .env file for tablequery.
Run this script and follow the prompts to configure your environment.
"""

from pathlib import Path

def create_env_file():
    """Interactive setup for .env file"""
    env_path = Path(".env")

    if env_path.exists():
        response = input(".env file already exists. Overwrite? (y/N): ")
        if response.lower() != 'y':
            print("Setup cancelled.")
            return

    print("=== tablequery Environment Setup ===\n")

    print("1. DRIVER")
    driver = input("   Driver (sqlite/snowflake) [sqlite]: ").strip().lower() or "sqlite"

    sqlite_path = "tablequery.db"
    snowflake_block = ""
    if driver == "snowflake":
        print("\n2. SNOWFLAKE CONFIGURATION")
        print("   (You can find these in your Snowflake account settings)")
        account = input("   Snowflake Account Name: ").strip()
        warehouse = input("   Snowflake Warehouse: ").strip()
        user = input("   Snowflake Username: ").strip()
        database = input("   Snowflake Database: ").strip()
        schema = input("   Snowflake Schema: ").strip()
        role = input("   Snowflake Default Role (optional): ").strip()
        snowflake_block = f"""
# Snowflake Configuration
SNOWFLAKE_ACCOUNT={account}
SNOWFLAKE_WAREHOUSE={warehouse}
SNOWFLAKE_USER={user}
SNOWFLAKE_PRIVATE_KEY_PATH=./snowflake_private_key.pem
SNOWFLAKE_DATABASE={database}
SNOWFLAKE_SCHEMA={schema}
SNOWFLAKE_DEFAULT_ROLE={role}
"""
    else:
        print("\n2. SQLITE CONFIGURATION")
        sqlite_path = input("   Database file [tablequery.db]: ").strip() or "tablequery.db"

    print("\n3. OPTIONAL SETTINGS")
    tables_file = input("   Table definitions file [config/tables.yaml]: ").strip() or "config/tables.yaml"
    charset = input("   CREATE TABLE charset/collation suffix []: ").strip()
    auto_create = input("   Create configured tables on first use? (y/N): ").strip().lower() == "y"
    log_level = input("   Log level [WARNING]: ").strip().upper() or "WARNING"

    env_content = f"""# tablequery
TABLEQUERY_DRIVER={driver}
TABLEQUERY_SQLITE_PATH={sqlite_path}
TABLEQUERY_TABLES_FILE={tables_file}
TABLEQUERY_CHARSET_COLLATE={charset}
TABLEQUERY_AUTO_CREATE={"true" if auto_create else "false"}
TABLEQUERY_LOG_LEVEL={log_level}
{snowflake_block}"""

    with open(env_path, 'w') as f:
        f.write(env_content)

    print(f"\n✅ .env file created successfully!")
    print(f"📁 Location: {env_path.absolute()}")

if __name__ == "__main__":
    create_env_file()
