"""
Port interfaces (ABCs) for the records bounded context.

The query engine needs one thing from the outside world: somewhere to run
a built statement under the statement's role and user.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.records.entities import BuiltQuery


class RecordStore(ABC):
    """Port for executing role-scoped record statements."""

    @abstractmethod
    def fetch_json(self, query: BuiltQuery) -> Optional[str]:
        """Run a JSON-shaped statement and return its single text value.

        Returns:
            The JSON text, or None when the statement produced no row or a
            SQL NULL (nothing matched).

        Raises:
            DatabaseError: When the database rejects the statement.
        """
        raise NotImplementedError

    @abstractmethod
    def execute(self, query: BuiltQuery) -> int:
        """Run a statement and return the number of affected rows.

        Raises:
            DatabaseError: When the database rejects the statement.
        """
        raise NotImplementedError
