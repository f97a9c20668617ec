"""Project ID value object"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectId:
    """Catalog project identifier value object"""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Project ID must be a non-empty string")
        if len(self.value) > 64:
            raise ValueError("Project ID must be at most 64 characters")
        object.__setattr__(self, "value", self.value.strip())

    def __str__(self) -> str:
        return self.value
