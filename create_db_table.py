"""Database setup script - creates the invoices table."""

import asyncio

from dotenv import load_dotenv

from extraction.database.manager import create_database_manager_from_settings


async def setup_database():
    """Connect to PostgreSQL, create the invoices table and print a summary."""
    async with create_database_manager_from_settings() as db_manager:
        print("✅ Connected successfully!")

        print("\n📋 Creating table 'invoices' and indexes...")
        await db_manager.ensure_schema()
        print("✅ Schema ready!")

        pool = await db_manager.get_pool()
        async with pool.acquire() as conn:
            columns = await conn.fetch("""
                SELECT column_name, data_type
                FROM information_schema.columns
                WHERE table_name = 'invoices'
                ORDER BY ordinal_position
            """)
            count = await conn.fetchval("SELECT COUNT(*) FROM invoices")

        print(f"\n📊 Table has {len(columns)} columns:")
        for col in columns:
            print(f"  - {col['column_name']}: {col['data_type']}")
        print(f"\n📈 Current records: {count}")
        print("\n🎉 Database setup complete!")


if __name__ == "__main__":
    load_dotenv()
    asyncio.run(setup_database())
