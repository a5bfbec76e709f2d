from dataclasses import dataclass

@dataclass(slots=True)
class GemTypeRegistry:
    """Empty tag component marking the single entity that stores canonical gem type definitions.

    The same entity also has a GemTypes component containing the mapping of type_name -> color.
    """
    pass
