"""
Base serializer interface.

Defines the contract for cell serializers: each one claims a set of data
types and turns values of those types into text.
"""

from abc import ABC, abstractmethod
from typing import Any, Tuple

from ..model import DataType


class TypeSerializer(ABC):
    """
    Abstract base class for cell serializers.

    Subclasses list the data types they handle in ``data_types``; the
    registry uses that list to dispatch and to check that every type is
    covered.
    """

    data_types: Tuple[DataType, ...] = ()

    @abstractmethod
    def serialize(self, value: Any) -> str:
        """
        Serialize a cell value to text.

        Args:
            value: The decoded value of a cell this serializer handles

        Returns:
            Canonical text form of the value
        """
        pass

    def can_handle(self, data_type: DataType) -> bool:
        """
        Check if this serializer handles the given data type.

        Args:
            data_type: The column data type

        Returns:
            True if this serializer is responsible for the type
        """
        return data_type in self.data_types

    def __repr__(self) -> str:
        """String representation of the serializer."""
        return f"{self.__class__.__name__}()"
