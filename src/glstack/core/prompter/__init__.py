"""Interactive input subpackage."""

from glstack.core.prompter.abc import Prompter
from glstack.core.prompter.fake import FakePrompter
from glstack.core.prompter.real import RealPrompter

__all__ = ["FakePrompter", "Prompter", "RealPrompter"]
