"""
Field name normalization module.

Maps column names onto names that fit a writer's length budget (10 characters
for shapefiles) without ever letting two columns share a name.
"""

import logging
from typing import Dict, Iterable, Optional

from ..core import constants
from ..core.exceptions import FieldNameCollisionError


class FieldNameNormalizer:
    """Deterministic, collision-free field name shortening."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize field name normalizer.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def normalize_field_names(
        self,
        names: Iterable[str],
        max_length: int = constants.SHAPEFILE_MAX_FIELD_LENGTH,
        allow_suffix: bool = True
    ) -> Dict[str, str]:
        """
        Map each name to a unique name of at most max_length characters.

        Names that already fit keep themselves, in input order, unless they
        clash with an earlier name. The rest are truncated; a truncated name
        that clashes has its tail replaced by the smallest free number
        (a second ``soilTemper`` becomes ``soilTempe1``). Names are compared
        case-insensitively, as dBASE field names are.

        Args:
            names: Original field names
            max_length: Maximum length of a normalized name
            allow_suffix: Resolve clashes with numeric suffixes; when False a
                clash raises instead

        Returns:
            Mapping of original name to normalized name, in input order

        Raises:
            FieldNameCollisionError: If a name cannot be made unique within max_length
            ValueError: If a name is empty or max_length is below 1
        """
        if max_length < 1:
            raise ValueError(f"max_length must be at least 1, got {max_length}")

        ordered = list(dict.fromkeys(names))
        for name in ordered:
            if not name:
                raise ValueError("Field names must not be empty")

        taken: Dict[str, str] = {}  # casefolded normalized name -> original name
        mapping: Dict[str, str] = {}

        # Names that already fit claim themselves first
        pending = []
        for name in ordered:
            if len(name) <= max_length and name.casefold() not in taken:
                taken[name.casefold()] = name
                mapping[name] = name
            else:
                pending.append(name)

        for name in pending:
            mapping[name] = self._shorten(name, max_length, taken, allow_suffix)
            taken[mapping[name].casefold()] = name

        renamed = {original: new for original, new in mapping.items() if original != new}
        if renamed:
            self.logger.debug(f"Normalized field names: {renamed}")

        return {name: mapping[name] for name in ordered}

    @staticmethod
    def _shorten(
        name: str,
        max_length: int,
        taken: Dict[str, str],
        allow_suffix: bool
    ) -> str:
        truncated = name[:max_length]
        if truncated.casefold() not in taken:
            return truncated
        clash = taken[truncated.casefold()]
        if not allow_suffix:
            raise FieldNameCollisionError(name, max_length, clash)

        number = 1
        while True:
            suffix = str(number)
            if len(suffix) >= max_length:
                raise FieldNameCollisionError(name, max_length, clash)
            candidate = name[:max_length - len(suffix)] + suffix
            if candidate.casefold() not in taken:
                return candidate
            number += 1


def normalize_field_names(
    names: Iterable[str],
    max_length: int = constants.SHAPEFILE_MAX_FIELD_LENGTH,
    allow_suffix: bool = True
) -> Dict[str, str]:
    """Module-level shortcut for FieldNameNormalizer.normalize_field_names."""
    return FieldNameNormalizer().normalize_field_names(names, max_length, allow_suffix)
