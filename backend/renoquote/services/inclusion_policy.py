"""
Whether an item category is billable for a design.

Precedence, first match wins:
  1. explicit design_config.included_items[category]
  2. universal config row for the bathroom type (only an explicit False excludes)
  3. True

Every inclusion decision in the service goes through should_include.
"""

from typing import Optional

from renoquote.models.schemas import DesignConfiguration, UniversalBathConfig
from renoquote.services.universal_config import find_bathroom_type


def should_include(
    category: str,
    design_config: DesignConfiguration,
    universal_config: Optional[UniversalBathConfig] = None,
) -> bool:
    explicit = design_config.included_items or {}
    if explicit.get(category) is not None:
        return bool(explicit[category])

    row = find_bathroom_type(universal_config, design_config.bathroom_type)
    if row is not None:
        return row.included_items.get(category) is not False

    return True
