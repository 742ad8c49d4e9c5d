"""Interface for presenting command results to the user.

Defines the contract for displaying values, information, warnings, errors
and tables, allowing different UI implementations (e.g., console, tests).
"""

import abc
from typing import Any, Iterable, Sequence


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a command result (e.g. a cached value) to the user.

        Args:
            output: The value to display. Strings are printed verbatim.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_table(self, title: str, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
        """Displays tabular data.

        Args:
            title: Table title.
            columns: Column headers.
            rows: Row values, one sequence per row.
        """
        pass
