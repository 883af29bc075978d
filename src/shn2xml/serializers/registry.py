"""
Serializer registry for cell serializers.

Provides a central registry mapping each data type to exactly one
serializer and handles serialization dispatch for cells.
"""

from typing import Dict, List, Optional

from ..exceptions import SerializerRegistryError
from ..model import Cell, DataType
from .base import TypeSerializer
from .basic_types import FloatSerializer, IntegerSerializer, StringSerializer


class SerializerRegistry:
    """
    Registry for cell serializers.

    Manages serializer lookup by data type and refuses to dispatch until
    every DataType member has a serializer.
    """

    def __init__(self) -> None:
        """Initialize the registry with an empty serializer list."""
        self._serializers: List[TypeSerializer] = []
        self._type_cache: Dict[DataType, TypeSerializer] = {}

    def register(self, serializer: TypeSerializer) -> None:
        """
        Register a cell serializer.

        Args:
            serializer: The serializer to register

        Raises:
            SerializerRegistryError: If one of its types is already claimed
        """
        for data_type in serializer.data_types:
            existing = self.find_serializer(data_type)
            if existing is not None:
                raise SerializerRegistryError(
                    f"{data_type.name} is already handled by {existing!r}"
                )
        self._serializers.append(serializer)
        self._type_cache.clear()

    def find_serializer(self, data_type: DataType) -> Optional[TypeSerializer]:
        """
        Find the serializer for a data type.

        Args:
            data_type: Column data type

        Returns:
            The serializer or None if no serializer claims the type
        """
        if data_type in self._type_cache:
            return self._type_cache[data_type]

        for serializer in self._serializers:
            if serializer.can_handle(data_type):
                self._type_cache[data_type] = serializer
                return serializer

        return None

    def missing_types(self) -> List[DataType]:
        """Return the data types no registered serializer handles."""
        return [data_type for data_type in DataType if self.find_serializer(data_type) is None]

    def check_complete(self) -> None:
        """
        Verify that every data type has a serializer.

        Raises:
            SerializerRegistryError: Listing the uncovered data types
        """
        missing = self.missing_types()
        if missing:
            names = ", ".join(data_type.name for data_type in missing)
            raise SerializerRegistryError(f"No serializer registered for: {names}")

    def serialize(self, cell: Cell) -> str:
        """
        Serialize a cell using the serializer for its data type.

        Args:
            cell: The cell to serialize

        Returns:
            Canonical text form of the cell value

        Raises:
            SerializerRegistryError: If no serializer handles the cell type
        """
        serializer = self.find_serializer(cell.data_type)
        if serializer is None:
            raise SerializerRegistryError(f"No serializer registered for {cell.data_type.name}")
        return serializer.serialize(cell.value)


def get_default_registry() -> SerializerRegistry:
    """
    Get a registry with all built-in serializers registered.

    Returns:
        Registry covering every DataType

    Raises:
        SerializerRegistryError: If the built-in serializers leave a type uncovered
    """
    registry = SerializerRegistry()
    registry.register(StringSerializer())
    registry.register(IntegerSerializer())
    registry.register(FloatSerializer())
    registry.check_complete()
    return registry


# Global default registry
_default_registry = None


def get_global_registry() -> SerializerRegistry:
    """
    Get the global default registry (singleton).

    Returns:
        The global registry instance
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = get_default_registry()
    return _default_registry


def reset_global_registry() -> None:
    """Reset the global registry (mainly for testing)."""
    global _default_registry
    _default_registry = None


def format_cell(cell: Cell) -> str:
    """Format a cell with the global registry."""
    return get_global_registry().serialize(cell)
