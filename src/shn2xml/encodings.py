"""
Encoding registry for SHN string columns.

Maps the encoding labels accepted on the command line to Python codecs.
Lookup is by exact, case-sensitive label; there is no alias matching.
"""

import codecs
import logging
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import ShnDecodeError, UnknownEncodingError

logger = logging.getLogger(__name__)

# Label used when no encoding name is given.
DEFAULT_ENCODING = "ascii"

# (label, Python codec) pairs in registration order.
KNOWN_ENCODINGS = [
    ("ascii", "ascii"),
    ("utf-8", "utf-8"),
    ("utf-16le", "utf-16-le"),
    ("utf-16be", "utf-16-be"),
    ("ibm866", "cp866"),
    ("iso-8859-1", "latin-1"),
    ("iso-8859-2", "iso8859_2"),
    ("iso-8859-3", "iso8859_3"),
    ("iso-8859-4", "iso8859_4"),
    ("iso-8859-5", "iso8859_5"),
    ("iso-8859-6", "iso8859_6"),
    ("iso-8859-7", "iso8859_7"),
    ("iso-8859-8", "iso8859_8"),
    ("iso-8859-10", "iso8859_10"),
    ("iso-8859-13", "iso8859_13"),
    ("iso-8859-14", "iso8859_14"),
    ("iso-8859-15", "iso8859_15"),
    ("iso-8859-16", "iso8859_16"),
    ("koi8-r", "koi8_r"),
    ("koi8-u", "koi8_u"),
    ("mac-roman", "mac_roman"),
    ("mac-cyrillic", "mac_cyrillic"),
    ("windows-874", "cp874"),
    ("windows-1250", "cp1250"),
    ("windows-1251", "cp1251"),
    ("windows-1252", "cp1252"),
    ("windows-1253", "cp1253"),
    ("windows-1254", "cp1254"),
    ("windows-1255", "cp1255"),
    ("windows-1256", "cp1256"),
    ("windows-1257", "cp1257"),
    ("windows-1258", "cp1258"),
    ("windows-949", "cp949"),
    ("windows-31j", "cp932"),
    ("euc-jp", "euc_jp"),
    ("iso-2022-jp", "iso2022_jp"),
    ("gbk", "gbk"),
    ("gb18030", "gb18030"),
    ("hz", "hz"),
    ("big5-2003", "big5"),
]


@dataclass(frozen=True)
class EncodingStrategy:
    """
    A named text decoder for string cells.

    Attributes:
        name: Label the strategy is registered under
        codec: Python codec used for decoding
        errors: Codec error policy ('replace' or 'strict')
    """

    name: str
    codec: str
    errors: str = "replace"

    def decode(self, raw: bytes) -> str:
        """
        Decode raw bytes with this strategy's codec.

        Raises:
            ShnDecodeError: If the bytes are invalid and errors is 'strict'
        """
        try:
            return codecs.decode(raw, self.codec, self.errors)
        except UnicodeDecodeError as e:
            raise ShnDecodeError(f"Cannot decode {raw!r} as {self.name}: {e.reason}") from e

    def with_errors(self, errors: str) -> "EncodingStrategy":
        """Return a copy of this strategy using another error policy."""
        return EncodingStrategy(self.name, self.codec, errors)


class EncodingRegistry:
    """Ordered collection of encoding strategies looked up by label."""

    def __init__(self) -> None:
        self._strategies: List[EncodingStrategy] = []

    def register(self, strategy: EncodingStrategy) -> None:
        """
        Register an encoding strategy.

        Args:
            strategy: The strategy to register; its codec must exist
        """
        codecs.lookup(strategy.codec)
        self._strategies.append(strategy)

    @property
    def names(self) -> List[str]:
        return [strategy.name for strategy in self._strategies]

    def find(self, name: str) -> Optional[EncodingStrategy]:
        """Return the first strategy registered under exactly this name."""
        for strategy in self._strategies:
            if strategy.name == name:
                return strategy
        return None

    def resolve(self, name: str, default: str = DEFAULT_ENCODING) -> EncodingStrategy:
        """
        Resolve an encoding label to a strategy.

        Args:
            name: Encoding label; an empty string selects ``default``
            default: Label substituted for an empty name

        Returns:
            The matching strategy

        Raises:
            UnknownEncodingError: If no strategy has the resolved label
        """
        if name == "":
            name = default

        strategy = self.find(name)
        if strategy is None:
            raise UnknownEncodingError(name)

        logger.debug("Resolved encoding %r to codec %r", name, strategy.codec)
        return strategy


def get_default_registry() -> EncodingRegistry:
    """
    Get a registry with all known encodings registered.

    Returns:
        Registry populated from KNOWN_ENCODINGS
    """
    registry = EncodingRegistry()
    for name, codec in KNOWN_ENCODINGS:
        registry.register(EncodingStrategy(name, codec))
    return registry


_default_registry = None


def get_global_registry() -> EncodingRegistry:
    """Get the shared default registry (singleton)."""
    global _default_registry
    if _default_registry is None:
        _default_registry = get_default_registry()
    return _default_registry


def resolve(name: str, default: str = DEFAULT_ENCODING) -> EncodingStrategy:
    """Resolve ``name`` against the shared default registry."""
    return get_global_registry().resolve(name, default)
