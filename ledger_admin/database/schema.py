# Collections known to the application. Each one maps to a MySQL table
# holding the document as JSON next to its primary key.
COLLECTIONS = (
    'users',
    'centers',
    'services',
    'clients',
    'costs',
    'transactions',
)


def collection_ddl(name):
    return f"""
        CREATE TABLE IF NOT EXISTS `{name}` (
            id CHAR(36) PRIMARY KEY,
            doc JSON NOT NULL,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME NULL ON UPDATE CURRENT_TIMESTAMP
        )
    """


def create_schema_statements():
    return [collection_ddl(name) for name in COLLECTIONS]
