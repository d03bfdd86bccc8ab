from trivia.core.db import Base
from trivia.models.account import Account
from trivia.models.schema_migration import SchemaMigration

__all__ = [
    "Base",
    "Account",
    "SchemaMigration",
]
