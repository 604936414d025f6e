"""
Shadow paths - explicit descents through nested shadow roots.
"""

from dataclasses import dataclass
from typing import Tuple

SEPARATOR = ">>"


@dataclass(frozen=True)
class ShadowPath:
    """
    A descent through one or more shadow-root boundaries.

    ``hosts[0]`` is queried in the light DOM; every later host, and finally
    ``target``, is queried inside the previous host's shadow root.

    Example:
        >>> path = ShadowPath.parse("nestedshadow-form >> shadow-form >> #fname")
        >>> path.depth
        2
    """
    hosts: Tuple[str, ...]
    target: str

    def __post_init__(self):
        if isinstance(self.hosts, str):
            object.__setattr__(self, "hosts", (self.hosts,))
        else:
            object.__setattr__(self, "hosts", tuple(self.hosts))
        if not self.hosts:
            raise ValueError("ShadowPath needs at least one shadow host")
        if any(not h.strip() for h in self.hosts) or not self.target.strip():
            raise ValueError(f"ShadowPath steps must be non-empty selectors: {self}")

    @property
    def depth(self) -> int:
        """Number of shadow roots crossed to reach the target."""
        return len(self.hosts)

    @classmethod
    def parse(cls, text: str) -> "ShadowPath":
        """Parse 'host >> inner-host >> target'."""
        steps = [s.strip() for s in text.split(SEPARATOR)]
        if len(steps) < 2:
            raise ValueError(
                f"Shadow path '{text}' needs a host and a target separated by '{SEPARATOR}'"
            )
        return cls(hosts=tuple(steps[:-1]), target=steps[-1])

    def __str__(self) -> str:
        return f" {SEPARATOR} ".join(self.hosts + (self.target,))
