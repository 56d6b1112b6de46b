"""Generating unique names."""


class UniqueNamer:
    """Hands out names that it has never handed out before."""

    def __init__(self) -> None:
        self._taken: set[str] = set()

    def get_fresh_name(self, desired_name: str) -> str:
        """Return ``desired_name``, or it with the smallest free numeric suffix."""
        chosen = desired_name
        suffix = 1
        while chosen in self._taken:
            chosen = f"{desired_name}{suffix}"
            suffix += 1
        self._taken.add(chosen)
        return chosen