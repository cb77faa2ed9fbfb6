"""
Check the database connection and list tables with row counts.
Run with: python -m clinical_ingest.scripts.check_db
"""
from sqlalchemy.exc import SQLAlchemyError
from clinical_ingest.core.db import get_engine, table_counts

def main(database_url=None):
    try:
        engine = get_engine(database_url)
        counts = table_counts(engine)

        print("Database Connection: SUCCESS\n")
        print("Tables in database:")
        if counts:
            for table, count in counts.items():
                print(f"  - {table}: {count} rows")
        else:
            print("  No tables found")
        return 0

    except (SQLAlchemyError, ValueError) as e:
        print("Database Connection: FAILED")
        print(f"Error: {e}")
        return 1

if __name__ == "__main__":
    raise SystemExit(main())
