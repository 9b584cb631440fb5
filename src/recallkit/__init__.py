"""recallkit: spaced-repetition scheduling for a fixed vocabulary catalog."""

from recallkit.consts import VERSION

__version__ = VERSION
